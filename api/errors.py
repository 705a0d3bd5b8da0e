from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from models import storage
from services.errors import ServiceError

log = logging.getLogger(__name__)

# ServiceError.kind -> (error code, HTTP status)
SERVICE_ERRORS = {
    "bad_request": ("BAD_REQUEST", 400),
    "unauthorized": ("UNAUTHORIZED", 401),
    "forbidden": ("FORBIDDEN", 403),
    "not_found": ("NOT_FOUND", 404),
    "conflict": ("CONFLICT", 409),
    "internal": ("INTERNAL_ERROR", 500),
}

HTTP_ERRORS = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "VALIDATION_ERROR",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Typed service errors: the message is safe to show, the detail is not
    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        error, status = SERVICE_ERRORS.get(err.kind, ("INTERNAL_ERROR", 500))
        if err.detail:
            log.info("%s: %s (%s)", error, err.message, err.detail)
        return error_response(error, err.message, status)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Integrity errors that slipped past service-level checks (unique constraints, FK violations)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        log.warning("Integrity error: %s", message)
        details = {"db_error": message} if current_app.debug else None
        if "unique" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409, details=details)
        if "foreign key" in lower_msg:
            return error_response("BAD_REQUEST", "Foreign key constraint failed.", 400, details=details)
        return error_response("BAD_REQUEST", "Integrity error.", 400, details=details)

    # Werkzeug HTTPExceptions (abort(...)) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        return error_response(HTTP_ERRORS.get(status, "HTTP_ERROR"), err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        log.exception("Unhandled exception", exc_info=err)
        storage.rollback()
        details = None
        # In dev, include exception details to speed up debugging
        if current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
