"""
Logging setup for QA Scenario Hub.

Every record written while a request is active is stamped with the
``request_id`` (from the timing middleware) and the caller's ``user_id``
(from the JWT middleware), so service and generator log lines can be tied
back to the request that produced them.

Output format:
    LOG_FORMAT=json   one JSON object per line (default outside DEBUG/TESTING)
    LOG_FORMAT=text   colored single-line output (default in DEBUG/TESTING)
Level: LOG_LEVEL, default DEBUG in development/testing and INFO otherwise.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

# Set via `extra=` on the per-request line in app.middleware.timing
REQUEST_LINE_FIELDS = ("method", "path", "status", "duration_ms", "remote_addr")

_QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine", "anthropic", "httpx", "httpcore", "urllib3")


class RequestContextFilter(logging.Filter):
    """Attach request_id / user_id from ``flask.g`` to records emitted inside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            if getattr(record, "request_id", None) is None:
                record.request_id = g.get("request_id")
            if getattr(record, "user_id", None) is None:
                record.user_id = g.get("jwt_user_id")
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("request_id", "user_id", *REQUEST_LINE_FIELDS):
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = round(value, 1) if key == "duration_ms" else value
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL [request_id user=N] logger: message``"""

    _LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    _RESET = "\033[0m"

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.color:
            level = f"{self._LEVEL_COLORS.get(record.levelno, '')}{level:<7}{self._RESET}"
        context = " ".join(
            part for part in (
                getattr(record, "request_id", None),
                f"user={record.user_id}" if getattr(record, "user_id", None) else None,
            ) if part
        )
        line = (
            f"{datetime.fromtimestamp(record.created).strftime('%H:%M:%S')} {level} "
            f"{f'[{context}] ' if context else ''}{record.name}: {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(app):
    """Install one stderr handler on the root logger for this app's settings."""
    local = app.config.get("DEBUG", False) or app.config.get("TESTING", False)
    fmt = os.getenv("LOG_FORMAT", "text" if local else "json").lower()
    level_name = os.getenv("LOG_LEVEL", "DEBUG" if local else "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter(color=sys.stderr.isatty()))
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    # create_app runs more than once in a process (tests), keep a single handler
    for existing in [h for h in root.handlers if getattr(h, "_qa_hub", False)]:
        root.removeHandler(existing)
    handler._qa_hub = True
    root.addHandler(handler)
    root.setLevel(level)
    app.logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    app.logger.debug("Logging configured: level=%s format=%s", level_name, fmt)
