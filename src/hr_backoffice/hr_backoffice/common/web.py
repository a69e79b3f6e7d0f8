"""Shared Flask helpers: session identity, role guards and error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    StorageError,
)
from .identity import CallerIdentity

logger = logging.getLogger(__name__)

# Most specific first; InvalidState answers 400 like other rejected requests.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (BadRequestError, 400),
    (InvalidStateError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def current_caller() -> CallerIdentity:
    return CallerIdentity(user_id=int(session["user_id"]), role=Role(session["role"]))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Not authorized, please log in"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {Role(r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"message": "Not authorized, please log in"}), 401
            if Role(session.get("role")) not in allowed:
                return jsonify({"message": f"Role {session.get('role')} is not authorized to access this route"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return data


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"Valid {field_name} is required")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error, exc_info=error)
            return jsonify({"message": "Server error"}), status
        return jsonify({"message": str(error)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": "Server error"}), 500
