"""Dependency container.

Created once in ``create_app`` and stored on the Flask app via
``app.extensions["container"]``. Blueprints reach services with
:func:`get_container`.
"""
from __future__ import annotations

from flask import current_app

from models.repositories import ActivityRepository, UserRepository
from services import ActivityService, AuthService, UserService
from services.limits import parse_row_limit
from utils.security import SecretHasher, build_token_services


class Container:
    """Repositories and services sharing one DBStorage."""

    def __init__(self, config, storage):
        self.storage = storage
        self.users = UserRepository(storage)
        self.activities = ActivityRepository(storage)

        self.hasher = SecretHasher(
            time_cost=config.get("ARGON2_TIME_COST"),
            memory_cost=config.get("ARGON2_MEMORY_COST"),
            parallelism=config.get("ARGON2_PARALLELISM"),
        )
        # Raises ConfigurationError when a signing secret is absent or shared
        self.token_issuer, self.access_verifier, self.refresh_verifier = build_token_services(config)

        self.auth_service = AuthService(
            self.users,
            self.hasher,
            self.token_issuer,
            self.access_verifier,
            self.refresh_verifier,
            max_users=parse_row_limit(config.get("MAX_ROWS_USERS"), "MAX_ROWS_USERS"),
        )
        self.activity_service = ActivityService(
            self.activities,
            max_activities=parse_row_limit(config.get("MAX_ROWS_ACTIVITIES"), "MAX_ROWS_ACTIVITIES"),
        )
        self.user_service = UserService(self.users, self.activity_service)


def get_container() -> Container:
    return current_app.extensions["container"]
