"""
QA Scenario Hub
Tests — log record context and formatters.
"""

import json
import logging
import sys

from flask import g

from app.middleware.logging_config import JSONFormatter, RequestContextFilter, TextFormatter


def _record(msg="Scenario 4 status → PASS by user 7", **extra):
    record = logging.LogRecord("app.services.scenario_service", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContextFilter:
    def test_stamps_request_and_user(self, app):
        with app.test_request_context("/api/v1/projects"):
            g.request_id = "abc123"
            g.jwt_user_id = 7
            record = _record()
            assert RequestContextFilter().filter(record) is True
        assert record.request_id == "abc123"
        assert record.user_id == 7

    def test_outside_request_leaves_record_alone(self):
        record = _record()
        RequestContextFilter().filter(record)
        assert not hasattr(record, "request_id")

    def test_explicit_extra_wins(self, app):
        with app.test_request_context("/"):
            g.request_id = "from-g"
            record = _record(request_id="from-extra")
            RequestContextFilter().filter(record)
        assert record.request_id == "from-extra"


class TestFormatters:
    def test_json_line_carries_context_and_request_fields(self):
        line = JSONFormatter().format(_record(
            "Request: GET /api/v1/projects 200 (12ms)",
            request_id="abc123", user_id=7, method="GET", status=200, duration_ms=12.345,
        ))
        entry = json.loads(line)
        assert entry["msg"] == "Request: GET /api/v1/projects 200 (12ms)"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "abc123"
        assert entry["user_id"] == 7
        assert entry["duration_ms"] == 12.3
        assert "remote_addr" not in entry

    def test_json_includes_traceback(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed")
            record.exc_info = sys.exc_info()
        assert "RuntimeError: boom" in json.loads(JSONFormatter().format(record))["exc"]

    def test_text_line_without_color(self):
        line = TextFormatter(color=False).format(_record("hello", request_id="abc123", user_id=7))
        assert "INFO" in line
        assert "[abc123 user=7] app.services.scenario_service: hello" in line
        assert "\033[" not in line

    def test_text_line_without_context(self):
        line = TextFormatter(color=False).format(_record("hello"))
        assert line.endswith("app.services.scenario_service: hello")
        assert "[" not in line


class TestRequestIdHeader:
    def test_incoming_request_id_is_echoed(self, client):
        res = client.get("/api/v1/health/ready", headers={"X-Request-ID": "trace-42"})
        assert res.headers["X-Request-ID"] == "trace-42"
