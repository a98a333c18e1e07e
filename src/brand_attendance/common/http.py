from __future__ import annotations

from typing import Any

from flask import jsonify

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackupError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

_STATUS = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (BackupError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS:
        if isinstance(error, cls):
            return status
    return 400


def error_response(error: DomainError):
    body: dict[str, Any] = {"error": str(error)}
    if isinstance(error, ValidationError) and error.errors:
        body["errors"] = error.errors
    return jsonify(body), status_for(error)


def query_flag(value: Any) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes"}
