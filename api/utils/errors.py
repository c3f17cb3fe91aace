# api/utils/errors.py
"""
Standardized API error responses.

All errors follow the format: {"error": "error_code", "detail": "optional message"}

Error codes are snake_case and machine-parseable. Search endpoints do not
use these for backend failures: they answer 200 with an empty result and a
"notice" the client shows to the user.
"""

from flask import jsonify
from typing import Optional


def error_response(
    code: str,
    status: int = 400,
    detail: Optional[str] = None,
    **extra
):
    """
    Create a standardized error response.

    Args:
        code: Machine-readable error code (snake_case)
        status: HTTP status code
        detail: Human-readable explanation (optional)
        **extra: Additional fields to include in response

    Returns:
        Tuple of (jsonify response, status code)
    """
    payload = {"error": code}
    if detail:
        payload["detail"] = detail
    payload.update(extra)
    return jsonify(payload), status


# 401
def not_authenticated(detail: str = None):
    return error_response("not_authenticated", 401, detail)


def invalid_credentials():
    return error_response("invalid_credentials", 401, "Wrong username or password")


# 404
def not_found(resource: str = "resource", detail: str = None):
    """Requested book, chapter, verse, entry or marking does not exist."""
    return error_response("not_found", 404, detail or f"{resource} not found")


# 400
def missing_field(field: str):
    return error_response(f"{field}_required", 400, f"Missing required field: {field}")


def invalid_field(field: str, detail: str = None):
    return error_response(f"invalid_{field}", 400, detail)


# 409
def conflict(code: str, detail: str = None, **extra):
    return error_response(code, 409, detail, **extra)


# 503
def backend_unavailable(detail: str = None, **extra):
    """The Bible database could not be queried."""
    return error_response("backend_unavailable", 503, detail, **extra)
