from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.constants import SLOW_REQUEST_MS
from ..core.exceptions import AuthenticationError, DomainError, ValidationError

logger = logging.getLogger(__name__)


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be Bearer token")
    return token.strip()


def token_required(container):
    """Resolve the acting teacher from the bearer token into ``g.teacher``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.teacher = container.auth_service.current_teacher(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_teacher_id() -> str:
    return g.teacher.teacher_id


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def pick(data: dict, *names: str, default: Any = None) -> Any:
    """First present key among ``names`` (accepts camelCase and snake_case)."""
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def ok(http_status: int = 200, **payload):
    return jsonify({"success": True, **payload}), http_status


def _error(kind: str, message: str, status: int):
    return jsonify({"success": False, "error": {"kind": kind, "message": message}}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.http_status >= 500:
            logger.error("%s %s failed - %s: %s", request.method, request.path, e.kind, e.message)
        return _error(e.kind, e.message, e.http_status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        kind = "NotFound" if e.code == 404 else "HttpError"
        message = "Route not found" if e.code == 404 else (e.description or e.name)
        return _error(kind, message, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error("InternalError", "Internal Server Error", 500)


def register_request_logging(app: Flask, *, slow_ms: Optional[int] = None) -> None:
    threshold = SLOW_REQUEST_MS if slow_ms is None else slow_ms

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_response(response):
        started = g.get("request_started")
        if started is None:
            return response
        duration = (time.perf_counter() - started) * 1000
        if duration > threshold:
            logger.warning("Slow API request: %s %s took %.0fms", request.method, request.path, duration)
        else:
            logger.info("%s %s - %s - %.0fms", request.method, request.path, response.status_code, duration)
        return response
