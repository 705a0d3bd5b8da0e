from __future__ import annotations
from functools import wraps
from flask import request, g, abort

from api.context import get_container


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        abort(401, description="Missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        abort(401, description="Missing or invalid Authorization header")
    return token


def jwt_required():
    """Require a valid access token; exposes the caller as ``g.current_user``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            # Raises UnauthorizedError on bad signature, expiry or unknown user
            g.current_user = get_container().auth_service.verify_access(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
