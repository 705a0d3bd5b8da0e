from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.context import get_container
from models.schemas.activity import ActivityCreateSchema, ActivityOutSchema, ActivityUpdateSchema
from models.schemas.common import ActivityQuerySchema
from utils.decorators import jwt_required

bp = Blueprint("activities", __name__)

# Schemas
activity_create_schema = ActivityCreateSchema()
activity_update_schema = ActivityUpdateSchema()
activity_out_schema = ActivityOutSchema()
activities_out_schema = ActivityOutSchema(many=True)
activity_query_schema = ActivityQuerySchema()


@bp.post("/activities")
@jwt_required()
def create_activity():
    """
    Create a new activity (requires a username on the profile)
    ---
    tags:
      - Activities
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, description, type]
          properties:
            title: { type: string, minLength: 3, maxLength: 255 }
            description: { type: string, minLength: 10 }
            type: { type: string, maxLength: 100 }
            participants_min: { type: integer, minimum: 1 }
            participants_max: { type: integer, minimum: 1 }
            cost_level: { type: string, enum: [free, low, medium, high] }
            duration_min: { type: integer, minimum: 1 }
            duration_max: { type: integer, minimum: 1 }
    responses:
      201:
        description: Created
      400:
        description: Username missing
      409:
        description: Activity limit reached
      422:
        description: Validation error
    """
    data = activity_create_schema.load(request.get_json(silent=True) or {})
    activity = get_container().activity_service.create(data, g.current_user)
    return jsonify({"data": activity_out_schema.dump(activity)}), 201


@bp.get("/activities")
def list_activities():
    """
    List activities with pagination, sorting and type filtering
    ---
    tags:
      - Activities
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - in: query
        name: type
        type: string
        description: "Case-insensitive substring match on the activity type"
      - { in: query, name: sort_by, type: string, enum: [created_at, title], default: created_at }
      - { in: query, name: sort_order, type: string, enum: [ASC, DESC], default: DESC }
    responses:
      200:
        description: List of activities
    """
    params = activity_query_schema.load(request.args)
    page = get_container().activity_service.find_all(params)
    return jsonify({"data": activities_out_schema.dump(page["data"]), "meta": page["meta"]})


@bp.get("/activities/random")
def random_activity():
    """
    Get a random activity, optionally filtered by type
    ---
    tags:
      - Activities
    parameters:
      - { in: query, name: type, type: string }
    responses:
      200:
        description: An activity
      404:
        description: No activity matches
    """
    activity = get_container().activity_service.find_random(request.args.get("type") or None)
    return jsonify({"data": activity_out_schema.dump(activity)})


@bp.get("/activities/types")
def activity_types():
    """
    List the distinct activity types, sorted
    ---
    tags:
      - Activities
    responses:
      200:
        description: Types
    """
    return jsonify({"data": get_container().activity_service.find_unique_types()})


@bp.get("/activities/<activity_id>")
def get_activity(activity_id: str):
    """
    Get a single activity by id
    ---
    tags:
      - Activities
    parameters:
      - in: path
        name: activity_id
        type: string
        required: true
    responses:
      200:
        description: Activity found
      404:
        description: Not found
    """
    activity = get_container().activity_service.find_one(activity_id)
    return jsonify({"data": activity_out_schema.dump(activity)})


@bp.patch("/activities/<activity_id>")
@jwt_required()
def update_activity(activity_id: str):
    """
    Update an activity (partial, owner only)
    ---
    tags:
      - Activities
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: activity_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not the owner
      404:
        description: Not found
      422:
        description: Validation error
    """
    data = activity_update_schema.load(request.get_json(silent=True) or {})
    activity = get_container().activity_service.update(activity_id, data, g.current_user.id)
    return jsonify({"data": activity_out_schema.dump(activity)})


@bp.delete("/activities/<activity_id>")
@jwt_required()
def delete_activity(activity_id: str):
    """
    Delete an activity (owner only)
    ---
    tags:
      - Activities
    security:
      - Bearer: []
    parameters:
      - in: path
        name: activity_id
        type: string
        required: true
    responses:
      204:
        description: Deleted
      403:
        description: Not the owner
      404:
        description: Not found
    """
    get_container().activity_service.remove(activity_id, g.current_user.id)
    return ("", 204)
