from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.context import get_container
from models.schemas.activity import ActivityOutSchema
from models.schemas.common import ActivityQuerySchema
from models.schemas.user import UserOutSchema, UserUpdateSchema
from utils.decorators import jwt_required

bp = Blueprint("users", __name__)

user_out_schema = UserOutSchema()
user_update_schema = UserUpdateSchema()
activity_query_schema = ActivityQuerySchema()
activity_list_out_schema = ActivityOutSchema(many=True)


@bp.get("/users/me")
@jwt_required()
def get_profile():
    """
    Get the authenticated user's profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = get_container().user_service.get_profile(g.current_user.id)
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.patch("/users/me")
@jwt_required()
def update_profile():
    """
    Update the authenticated user's profile. A new username is also
    applied to the contributor name of the user's activities.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string, minLength: 3, maxLength: 30, pattern: "^[a-zA-Z0-9_]+$" }
    responses:
      200:
        description: Updated
      401:
        description: Unauthorized
      409:
        description: Username already taken
      422:
        description: Validation error
    """
    data = user_update_schema.load(request.get_json(silent=True) or {})
    user = get_container().user_service.update_profile(g.current_user.id, data.get("username"))
    return jsonify({"data": user_out_schema.dump(user)}), 200


@bp.get("/users/me/activities")
@jwt_required()
def my_activities():
    """
    List the authenticated user's activities
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - { in: query, name: type, type: string }
      - { in: query, name: sort_by, type: string, enum: [created_at, title], default: created_at }
      - { in: query, name: sort_order, type: string, enum: [ASC, DESC], default: DESC }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    params = activity_query_schema.load(request.args)
    page = get_container().activity_service.find_all_by_user(g.current_user.id, params)
    return jsonify({"data": activity_list_out_schema.dump(page["data"]), "meta": page["meta"]}), 200
