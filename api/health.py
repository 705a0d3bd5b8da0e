import logging

from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError

from models import storage

log = logging.getLogger(__name__)

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check, including a database round-trip
    ---
    tags:
      - Health
    responses:
      200:
        description: API and database are reachable
        schema:
          type: object
          properties:
            status: { type: string, example: ok }
            database: { type: string, example: connected }
            version: { type: string, example: 1.0.0 }
      503:
        description: Database unreachable (status is "degraded")
    """
    result = {"status": "ok", "version": current_app.config.get("API_VERSION")}
    try:
        storage.ping()
        result["database"] = "connected"
    except SQLAlchemyError:
        log.exception("Health check: database unreachable")
        result["database"] = "disconnected"
        result["status"] = "degraded"
    return result, 200 if result["status"] == "ok" else 503


@bp.get("/ping")
def ping():
    """
    Liveness probe
    ---
    tags:
      - Health
    responses:
      200:
        description: pong
    """
    return {"message": "pong"}, 200
