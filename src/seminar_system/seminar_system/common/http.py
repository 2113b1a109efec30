from __future__ import annotations

import logging
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CapacityExceededError,
    ConflictError,
    DomainError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases.
STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (DuplicateRegistrationError, 409),
    (ConflictError, 400),
    (NotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (CapacityExceededError, 400),
    (InvalidStateError, 400),
    (ValidationError, 400),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def error_response(exc: DomainError, **extra: Any):
    body = {"message": str(exc)}
    body.update(extra)
    return jsonify(body), status_for(exc)


def server_error(context: str):
    logger.exception("%s error", context)
    return jsonify({"message": "Server error"}), 500


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
