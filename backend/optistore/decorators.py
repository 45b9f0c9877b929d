# Overview: Per-request service wiring and error translation for API routes.

from datetime import timedelta
from functools import wraps

from flask import current_app, g, jsonify, session

from .services.data_service import DataService
from .services.errors import (
    AccessDenied,
    DuplicateError,
    NotFound,
    ReferentialConflictError,
    ServiceError,
    SessionExpired,
    StorageError,
    ValidationError,
)
from .services.session_service import SessionStore


def get_data_service() -> DataService:
    """
    The DataService for the current request.

    Sessions live in Flask's signed cookie session; one SessionStore and one
    DataService are built per request and cached on g.
    """
    if "data_service" not in g:
        config = current_app.config
        sessions = SessionStore(
            session,
            store_timeout=timedelta(hours=config["STORE_SESSION_HOURS"]),
            super_admin_timeout=timedelta(hours=config["SUPER_ADMIN_SESSION_HOURS"]),
        )
        g.data_service = DataService(
            sessions,
            super_admin_username=config["SUPER_ADMIN_USERNAME"],
            super_admin_password_hash=config["SUPER_ADMIN_PASSWORD_HASH"],
            bcrypt_rounds=config["BCRYPT_ROUNDS"],
        )
    return g.data_service


def error_response(exc: ServiceError):
    """Translate a service error into a JSON response and status code."""
    body = {"error": exc.message}

    # SessionExpired is an AccessDenied; it must be matched first
    if isinstance(exc, SessionExpired):
        body["session_expired"] = True
        return jsonify(body), 401
    if isinstance(exc, AccessDenied):
        return jsonify(body), 403
    if isinstance(exc, ValidationError):
        if exc.field:
            body["field"] = exc.field
        return jsonify(body), 400
    if isinstance(exc, NotFound):
        return jsonify(body), 404
    if isinstance(exc, DuplicateError):
        body["existing"] = exc.existing
        return jsonify(body), 409
    if isinstance(exc, ReferentialConflictError):
        body["count"] = exc.count
        body["blockers"] = exc.blockers
        return jsonify(body), 409
    if isinstance(exc, StorageError):
        current_app.logger.error("Storage error: %s", exc.message, exc_info=exc.__cause__)
        return jsonify({"error": "Storage error"}), 500
    return jsonify(body), 400


def api_errors(action: str):
    """
    Wrap a route so service errors become JSON responses.

    Anything that is not a ServiceError is logged with its traceback and
    answered with a generic 500.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ServiceError as exc:
                return error_response(exc)
            except Exception:
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"error": "Internal server error"}), 500

        return decorated_function

    return decorator
