"""Authentication service: registration, login, refresh-token rotation, logout.

Session state is a single ``refresh_fingerprint`` per user:
``hash(sha256(refresh_token))``. A successful refresh replaces it, logout
clears it, and presenting a refresh token that does not match it clears it
too, so a stale or stolen token poisons the whole session and forces a new
login.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from argon2.exceptions import HashingError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from services.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    UnauthorizedError,
)
from utils.security import (
    SecretHasher,
    TokenError,
    TokenIssuer,
    TokenPair,
    TokenVerifier,
    generate_jti,
    token_digest,
)

log = logging.getLogger(__name__)

# Callers never learn which check failed; the log does.
INVALID_CREDENTIALS = "Invalid credentials."
INVALID_SESSION = "Invalid or expired session."


@dataclass(frozen=True)
class AccountContext:
    """Sanitized view of a user: no password hash, no fingerprint."""

    id: str
    email: str
    username: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "AccountContext":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True)
class LoginResult:
    tokens: TokenPair
    user: AccountContext


class AuthService:
    def __init__(self, users, hasher: SecretHasher, issuer: TokenIssuer,
                 access_verifier: TokenVerifier, refresh_verifier: TokenVerifier,
                 max_users: int | None = None):
        self._users = users
        self._hasher = hasher
        self._issuer = issuer
        self._access = access_verifier
        self._refresh = refresh_verifier
        self._max_users = max_users
        self._dummy_hash = None

    # -- registration -----------------------------------------------------

    def register(self, email: str, password: str, username: str | None = None) -> AccountContext:
        if not password:
            raise BadRequestError("Password is required.")

        if self._users.find_by_email(email):
            log.warning("Registration rejected: email already registered")
            raise ConflictError("User with this email already exists.")
        if username and self._users.find_by_username(username):
            log.warning("Registration rejected: username %r already taken", username)
            raise ConflictError("User with this username already exists.")

        if self._max_users is not None:
            current = self._users.count()
            if current >= self._max_users:
                log.warning("User registration limit reached. Current: %d, Max: %d", current, self._max_users)
                raise ConflictError(
                    "User registration limit reached. Cannot create new users at this time.",
                    reason="capacity",
                )

        try:
            password_hash = self._hasher.hash(password)
        except HashingError:
            log.exception("Password hashing failed")
            raise InternalError("Could not process registration.")

        try:
            user = self._users.create(email=email, password_hash=password_hash, username=username or None)
        except IntegrityError:
            # Lost a race with a concurrent registration
            raise ConflictError("Email or username already exists.")
        except SQLAlchemyError:
            log.exception("User creation failed")
            raise InternalError("Could not create user due to an unexpected issue with user persistence.")

        log.info("User %s registered", user.id)
        return AccountContext.from_user(user)

    # -- login ------------------------------------------------------------

    def login(self, email: str, password: str) -> LoginResult:
        user = self._users.find_by_email_with_secret(email)
        if user is None:
            # Burn comparable time so a missing account is not observable
            self._hasher.verify(password, self._get_dummy_hash())
            log.warning("Login rejected: user not found")
            raise UnauthorizedError(INVALID_CREDENTIALS, detail="user not found")
        if not user.password_hash:
            log.error("Password hash missing for user %s", user.id)
            raise InternalError("Authentication process failed.")
        if not self._hasher.verify(password, user.password_hash):
            log.warning("Login rejected for user %s: password mismatch", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS, detail="password mismatch")

        tokens = self._issue(user)
        try:
            self._users.update(user.id, refresh_fingerprint=self._fingerprint(tokens.refresh_token))
        except (HashingError, SQLAlchemyError):
            log.exception("Storing refresh fingerprint failed for user %s", user.id)
            raise InternalError("Authentication process failed.")

        log.info("User %s logged in", user.id)
        return LoginResult(tokens=tokens, user=AccountContext.from_user(user))

    # -- refresh ----------------------------------------------------------

    def resolve_refresh_subject(self, refresh_token: str) -> str:
        """Check a refresh token's signature and expiry and return its subject.

        Never reads or writes the stored fingerprint.
        """
        try:
            claims = self._refresh.verify(refresh_token)
        except TokenError as exc:
            log.warning("Refresh token rejected: %s", exc)
            raise UnauthorizedError(INVALID_SESSION, detail=str(exc))
        return claims["sub"]

    def refresh(self, user_id: str, refresh_token: str) -> TokenPair:
        user = self._users.find_by_id_with_fingerprint(user_id)
        if user is None or not user.refresh_fingerprint:
            log.warning("Refresh rejected for user %s: session not found", user_id)
            raise UnauthorizedError(INVALID_SESSION, detail="session not found")

        stored = user.refresh_fingerprint
        if not self._hasher.verify(token_digest(refresh_token), stored):
            log.warning("Refresh token mismatch for user %s; revoking session", user_id)
            self._clear_fingerprint(user_id)
            raise UnauthorizedError(INVALID_SESSION, detail="token mismatch")

        tokens = self._issue(user)
        try:
            swapped = self._users.compare_and_set_fingerprint(
                user.id, stored, self._fingerprint(tokens.refresh_token)
            )
        except (HashingError, SQLAlchemyError):
            log.exception("Storing rotated refresh fingerprint failed for user %s", user_id)
            raise InternalError("Failed to complete token refresh process.")
        if not swapped:
            log.warning("Refresh for user %s lost a race with a concurrent rotation", user_id)
            raise UnauthorizedError(INVALID_SESSION, detail="session changed concurrently")

        log.debug("Tokens refreshed for user %s", user_id)
        return tokens

    # -- logout -----------------------------------------------------------

    def logout(self, user_id: str) -> dict:
        self._clear_fingerprint(user_id, failure_message="Logout failed due to a server error.")
        log.debug("User %s logged out", user_id)
        return {"message": "Logout successful."}

    # -- access -----------------------------------------------------------

    def verify_access(self, token: str) -> AccountContext:
        try:
            claims = self._access.verify(token)
        except TokenError as exc:
            raise UnauthorizedError(INVALID_SESSION, detail=str(exc))
        user = self._users.find_by_id(claims["sub"])
        if user is None:
            raise UnauthorizedError(INVALID_SESSION, detail="user no longer exists")
        return AccountContext.from_user(user)

    # -- helpers ----------------------------------------------------------

    def _issue(self, user) -> TokenPair:
        try:
            return self._issuer.issue_pair(user.id, user.email)
        except Exception:
            log.exception("Signing tokens failed for user %s", user.id)
            raise InternalError("Failed to generate tokens.")

    def _fingerprint(self, refresh_token: str) -> str:
        return self._hasher.hash(token_digest(refresh_token))

    def _clear_fingerprint(self, user_id: str, failure_message: str = "Failed to revoke session."):
        try:
            self._users.update(user_id, refresh_fingerprint=None)
        except SQLAlchemyError:
            log.exception("Clearing refresh fingerprint failed for user %s", user_id)
            raise InternalError(failure_message)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(generate_jti())
        return self._dummy_hash
