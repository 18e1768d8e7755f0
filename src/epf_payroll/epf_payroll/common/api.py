from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Mapping

from flask import jsonify, request, session

from ..core.context import RequestContext
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "not_purchased": 402,
    "not_found": 404,
    "conflict": 409,
    "missing_data": 422,
    "lookup": 502,
    "timeout": 504,
}


def error_response(error: DomainError):
    return jsonify(error.to_dict()), STATUS_BY_KIND.get(error.kind, 400)


def json_endpoint(view):
    """Session check plus DomainError -> ``{message, kind}`` with its HTTP status."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "User ID is required", "kind": "unauthorized"}), 401
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return error_response(e)
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return jsonify({"message": "An unexpected error occurred", "kind": "internal"}), 500

    return wrapper


def json_body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def require_field(body: Mapping[str, Any], key: str) -> Any:
    value = body.get(key)
    if value in (None, ""):
        raise ValidationError(f"{key} is required")
    return value


def current_context() -> RequestContext:
    return RequestContext.from_session(session)
