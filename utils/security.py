"""
security helpers:
- Argon2 secret hashing via argon2-cffi (passwords and refresh-token fingerprints)
- Deterministic SHA-256 digest used before hashing refresh tokens
- JWT creation/verification via PyJWT, one policy per token class
- JTI generation for token identifiers
"""
from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

log = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class ConfigurationError(RuntimeError):
    """Signing configuration is missing or unsafe."""


class SecretHasher:
    """Slow, salted one-way hashing with a fixed argon2 cost."""

    def __init__(self, time_cost: int | None = None, memory_cost: int | None = None,
                 parallelism: int | None = None):
        params = {}
        if time_cost:
            params["time_cost"] = time_cost
        if memory_cost:
            params["memory_cost"] = memory_cost
        if parallelism:
            params["parallelism"] = parallelism
        self._ph = PasswordHasher(**params)

    def hash(self, secret: str) -> str:
        """Hash a plaintext secret. Raises argon2.exceptions.HashingError on failure."""
        return self._ph.hash(secret)

    def verify(self, secret: str, secret_hash: str) -> bool:
        """Verify a plaintext secret against a stored argon2 hash."""
        try:
            return self._ph.verify(secret_hash, secret)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError):
            log.warning("Stored hash could not be verified; treating as mismatch")
            return False


def token_digest(token: str) -> str:
    """Deterministic keyless digest of a token (hex SHA-256)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID)."""
    return secrets.token_hex(16)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TokenError(Exception):
    """Raised when a token fails signature, expiry, issuer or type checks."""


@dataclass(frozen=True)
class TokenPolicy:
    token_type: str
    secret: str
    ttl: timedelta


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int


class TokenIssuer:
    """Mints signed access and refresh tokens, each with a fresh jti."""

    def __init__(self, access: TokenPolicy, refresh: TokenPolicy,
                 algorithm: str = "HS256", issuer: str = "boredom-busters-api"):
        _check_policies(access, refresh)
        self.access = access
        self.refresh = refresh
        self.algorithm = algorithm
        self.issuer = issuer

    def issue(self, subject: str, email: str, policy: TokenPolicy) -> str:
        now = _now()
        payload = {
            "iss": self.issuer,
            "sub": str(subject),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + policy.ttl).timestamp()),
            "type": policy.token_type,
            "jti": generate_jti(),
        }
        return jwt.encode(payload, policy.secret, algorithm=self.algorithm)

    def issue_pair(self, subject: str, email: str) -> TokenPair:
        return TokenPair(
            access_token=self.issue(subject, email, self.access),
            refresh_token=self.issue(subject, email, self.refresh),
            expires_in=int(self.access.ttl.total_seconds()),
        )


class TokenVerifier:
    """Stateless signature/expiry check for a single token class."""

    def __init__(self, policy: TokenPolicy, algorithm: str = "HS256",
                 issuer: str = "boredom-busters-api"):
        if not policy.secret:
            raise ConfigurationError(f"No signing secret configured for {policy.token_type} tokens")
        self.policy = policy
        self.algorithm = algorithm
        self.issuer = issuer

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT. Raises TokenError on invalid signature,
        expiry, issuer or token type.
        """
        try:
            decoded = jwt.decode(
                token,
                self.policy.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenError(f"Invalid token: {exc}")

        if decoded.get("type") != self.policy.token_type:
            raise TokenError("Wrong token type")
        return decoded


def _check_policies(access: TokenPolicy, refresh: TokenPolicy) -> None:
    if not access.secret:
        raise ConfigurationError("JWT_ACCESS_SECRET is not defined")
    if not refresh.secret:
        raise ConfigurationError("JWT_REFRESH_SECRET is not defined")
    if access.secret == refresh.secret:
        raise ConfigurationError("Access and refresh tokens must be signed with distinct secrets")


def build_token_services(config) -> Tuple[TokenIssuer, TokenVerifier, TokenVerifier]:
    """Build the issuer and the per-class verifiers from app config.

    Fails fast with ConfigurationError when a secret is missing or shared.
    """
    access = TokenPolicy(ACCESS, config.get("JWT_ACCESS_SECRET") or "", config["JWT_ACCESS_TOKEN_EXPIRES"])
    refresh = TokenPolicy(REFRESH, config.get("JWT_REFRESH_SECRET") or "", config["JWT_REFRESH_TOKEN_EXPIRES"])
    algorithm = config.get("JWT_ALGORITHM", "HS256")
    issuer_name = config.get("JWT_ISSUER", "boredom-busters-api")

    issuer = TokenIssuer(access, refresh, algorithm=algorithm, issuer=issuer_name)
    return (
        issuer,
        TokenVerifier(access, algorithm=algorithm, issuer=issuer_name),
        TokenVerifier(refresh, algorithm=algorithm, issuer=issuer_name),
    )
