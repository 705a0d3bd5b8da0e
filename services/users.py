"""Profile reads and updates for the authenticated user."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from services.auth import AccountContext
from services.errors import ConflictError, InternalError, NotFoundError

log = logging.getLogger(__name__)


class UserService:
    def __init__(self, users, activity_service):
        self._users = users
        self._activities = activity_service

    def get_profile(self, user_id: str) -> AccountContext:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f'User with ID "{user_id}" not found')
        return AccountContext.from_user(user)

    def update_profile(self, user_id: str, username: str | None = None) -> AccountContext:
        """
        Change the username. The user row and the contributor names on the
        user's activities are committed together or not at all.
        """
        user = self._users.find_by_id(user_id)
        if user is None:
            log.warning("Attempted to update non-existent user with ID: %s", user_id)
            raise NotFoundError(f'User with ID "{user_id}" not found')

        if username is None or username == user.username:
            return AccountContext.from_user(user)

        existing = self._users.find_by_username(username)
        if existing is not None and existing.id != user_id:
            log.warning("User %s attempted to take username %r which is already taken.", user_id, username)
            raise ConflictError("Username already taken.")

        old_username = user.username
        user.username = username
        try:
            self._activities.update_contributor_name_for_user(user_id, username, commit=False)
            self._users.commit()
        except IntegrityError:
            self._users.rollback()
            raise ConflictError("Username already taken.")
        except (InternalError, SQLAlchemyError):
            self._users.rollback()
            log.exception("Error processing update for user %s", user_id)
            raise InternalError("Failed to update user profile due to an internal error.")

        log.info('Username changed for user %s from "%s" to "%s"', user_id, old_username, username)
        return AccountContext.from_user(user)
