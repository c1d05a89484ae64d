"""Shared request-parsing helpers used by the service layer.

parse_date:      returns None on empty input, raises ValueError on bad input
is_valid_url:    http(s) URL shape check
field_errors:    accumulator for per-field validation messages
json_body:       request body as a dict, 400 for any other JSON shape
"""
import logging
import re
from datetime import date, datetime
from urllib.parse import urlparse

from flask import request

from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def parse_date(value):
    """Parse a date string (ISO date or ISO datetime) to a date object.

    Returns None for empty input. Raises ValueError for anything else that
    cannot be parsed.
    """
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except (ValueError, TypeError) as exc:
        raise ValueError("Invalid date format. Use YYYY-MM-DD.") from exc


def is_valid_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


_PASSWORD_RE = re.compile(r"^(?=.*[a-zA-Z])(?=.*\d)")


def is_strong_password(value: str) -> bool:
    """At least 8 characters with at least one letter and one digit."""
    return isinstance(value, str) and len(value) >= 8 and bool(_PASSWORD_RE.match(value))


class FieldErrors:
    """Collects field-level messages and raises one ValidationError at the end.

    Usage::

        errors = FieldErrors()
        if not title:
            errors.add("title", "title is required")
        errors.raise_if_any()
    """

    def __init__(self):
        self.details: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self.details.setdefault(field, []).append(message)

    def __bool__(self):
        return bool(self.details)

    def raise_if_any(self, message: str = "Invalid request body") -> None:
        if self.details:
            logger.debug("Validation failed: %s", self.details)
            raise ValidationError(message, details=self.details)


def string_field(data: dict, key: str, *, strip: bool = True):
    """Return ``data[key]`` as a stripped string, None when absent or null.

    Non-string values raise ValidationError so callers never persist
    numbers or objects into text columns.
    """
    if key not in data or data[key] is None:
        return None
    value = data[key]
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string", details={key: ["must be a string"]})
    return value.strip() if strip else value


# Upper bound of a 32-bit INTEGER column
_MAX_INT = 2**31 - 1


def int_field(value, key: str) -> int:
    """Coerce a path/query/body id to int or raise ValidationError.

    Values outside the INTEGER column range are rejected as well.
    """
    invalid = ValidationError(f"{key} must be an integer", details={key: ["must be an integer"]})
    if isinstance(value, bool):
        raise invalid
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise invalid
    if abs(number) > _MAX_INT:
        raise ValidationError(f"{key} is out of range", details={key: ["out of range"]})
    return number


def json_body() -> dict:
    """JSON object sent with the current request; ``{}`` when there is none."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(
            "Request body must be a JSON object", details={"body": ["must be a JSON object"]},
        )
    return data
