"""Standardised API response envelopes.

Every endpoint answers with one of two shapes::

    {"success": true,  "data": ...}
    {"success": false, "error": {"code": "...", "message": ...}}

Usage
-----
    from app.utils.errors import api_error, api_ok, E

    return api_ok(project.to_dict(), status=201)
    return api_error(E.NOT_FOUND, "Project not found")
    return api_error(E.VALIDATION, "Invalid input", details={"title": ["required"]})
"""

from __future__ import annotations

from flask import jsonify


# ── Error code constants ──────────────────────────────────────────────
class E:
    """Machine-readable error code constants."""

    # Validation – HTTP 400
    VALIDATION = "VALIDATION_ERROR"
    INVALID_EMAIL_DOMAIN = "INVALID_EMAIL_DOMAIN"

    # Authentication – HTTP 401
    UNAUTHORIZED = "UNAUTHORIZED"

    # Permissions – HTTP 403
    FORBIDDEN = "FORBIDDEN"

    # Not-found – HTTP 404
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Conflict / duplicate – HTTP 409
    CONFLICT = "CONFLICT"
    USER_EXISTS = "USER_EXISTS"
    ALREADY_OWNER = "ALREADY_OWNER"
    ALREADY_MEMBER = "ALREADY_MEMBER"

    # Request guards
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    RATE_LIMITED = "RATE_LIMITED"

    # Server – HTTP 500
    CONFIG = "CONFIG_ERROR"
    GENERATION = "GENERATION_ERROR"
    DATABASE = "DATABASE_ERROR"
    INTERNAL = "INTERNAL_ERROR"


# ── Default HTTP status mapping ───────────────────────────────────────
_DEFAULT_STATUS: dict[str, int] = {
    E.VALIDATION: 400,
    E.INVALID_EMAIL_DOMAIN: 400,
    E.UNAUTHORIZED: 401,
    E.FORBIDDEN: 403,
    E.NOT_FOUND: 404,
    E.METHOD_NOT_ALLOWED: 405,
    E.CONFLICT: 409,
    E.USER_EXISTS: 409,
    E.ALREADY_OWNER: 409,
    E.ALREADY_MEMBER: 409,
    E.PAYLOAD_TOO_LARGE: 413,
    E.UNSUPPORTED_MEDIA_TYPE: 415,
    E.RATE_LIMITED: 429,
    E.CONFIG: 500,
    E.GENERATION: 500,
    E.DATABASE: 500,
    E.INTERNAL: 500,
}


def api_error(
    code: str,
    message,
    *,
    status: int | None = None,
    details: dict | None = None,
):
    """Return a standard JSON error response.

    Parameters
    ----------
    code : str
        Machine-readable error code (use ``E.*`` constants).
    message : str
        Human-readable explanation for developers / UI.
    status : int, optional
        HTTP status override.  Falls back to ``_DEFAULT_STATUS[code]``,
        then to ``400``.
    details : dict, optional
        Field-level validation errors.

    Returns
    -------
    tuple[Response, int]
        ``(jsonify(body), http_status)`` – drop-in for Flask views.
    """

    http_status = status or _DEFAULT_STATUS.get(code, 400)

    error: dict = {
        "code": code,
        "message": message,
    }
    if details:
        error["details"] = details

    return jsonify({"success": False, "error": error}), http_status


def api_ok(data, *, status: int = 200):
    """Return a standard JSON success response."""
    return jsonify({"success": True, "data": data}), status
