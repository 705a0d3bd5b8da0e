"""Typed error kinds raised by the service layer.

Services never build HTTP responses; ``api.errors`` maps each ``kind``
onto the uniform error envelope. ``message`` is what a caller may see,
``detail`` is for operators and only ever reaches the log.
"""
from __future__ import annotations


class ServiceError(Exception):
    kind = "internal"

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class BadRequestError(ServiceError):
    kind = "bad_request"


class ConflictError(ServiceError):
    """Duplicate email/username (``duplicate``) or a row cap reached (``capacity``)."""

    kind = "conflict"

    def __init__(self, message: str, reason: str = "duplicate", detail: str | None = None):
        super().__init__(message, detail=detail)
        self.reason = reason


class UnauthorizedError(ServiceError):
    kind = "unauthorized"


class ForbiddenError(ServiceError):
    kind = "forbidden"


class NotFoundError(ServiceError):
    kind = "not_found"


class InternalError(ServiceError):
    kind = "internal"
