"""Service layer: business rules over the repositories, free of Flask request state."""
from services.activities import ActivityService
from services.auth import AccountContext, AuthService, LoginResult
from services.users import UserService

__all__ = [
    "AccountContext",
    "ActivityService",
    "AuthService",
    "LoginResult",
    "UserService",
]
