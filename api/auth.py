"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me
- GET  /auth/status

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, distinct secrets)
- Stores only a hash of the SHA-256 of the current refresh token on the user row,
  rotating it on every refresh and wiping it on mismatch or logout
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.context import get_container
from models.schemas.user import (
    RefreshTokenSchema,
    UserCreateSchema,
    UserLoginSchema,
    UserOutSchema,
)
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__)

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshTokenSchema()
user_out_schema = UserOutSchema()


def token_response(tokens) -> dict:
    return {
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
        "token_type": "bearer",
        "expires_in": tokens.expires_in,
    }


@bp.post("/auth/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string, maxLength: 255 }
            password: { type: string, minLength: 8, maxLength: 100 }
            username: { type: string, minLength: 3, maxLength: 100, description: "Optional; an empty string registers without a username" }
    responses:
      201:
        description: Created
      409:
        description: Email or username taken, or registration limit reached
      422:
        description: Validation error
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})
    user = get_container().auth_service.register(data["email"], data["password"], data.get("username"))
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.post("/auth/login")
def login():
    """
    Login: return access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens and the user)
      401:
        description: Unauthorized
    """
    data = user_login_schema.load(request.get_json(silent=True) or {})
    result = get_container().auth_service.login(data["email"], data["password"])
    body = token_response(result.tokens)
    body["user"] = user_out_schema.dump(result.user)
    return jsonify(body), 200


@bp.post("/auth/refresh")
def refresh():
    """
    Exchange a refresh token for a new access/refresh pair (rotation).
    Presenting a stale refresh token revokes the session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refresh_token]
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns the new pair)
      401:
        description: Invalid, expired or revoked refresh token
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    auth = get_container().auth_service
    user_id = auth.resolve_refresh_subject(data["refresh_token"])
    tokens = auth.refresh(user_id, data["refresh_token"])
    return jsonify(token_response(tokens)), 200


@bp.post("/auth/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the current refresh session
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    return jsonify(get_container().auth_service.logout(g.current_user.id)), 200


@bp.get("/auth/me")
@jwt_required()
def me():
    """
    Get the authenticated user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": user_out_schema.dump(g.current_user)}), 200


@bp.get("/auth/status")
@jwt_required()
def status():
    """
    Check that the access token is accepted
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Authenticated
      401:
        description: Unauthorized
    """
    return jsonify({"status": "OK", "message": "You are authenticated!"}), 200
