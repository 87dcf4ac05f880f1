"""
Tests for the structured logging module.
"""

import json
import logging

from supabase_admin_api.logging import (
    JSONFormatter,
    LogContext,
    StructuredLogger,
    Timer,
    generate_request_id,
    redact_api_key,
    timed,
)


class TestLogContext:
    """Test LogContext dataclass."""

    def test_to_dict_drops_empty_fields(self):
        ctx = LogContext(request_id="r1", route="/api/test-db", extra={"custom": "value"})

        d = ctx.to_dict()

        assert d == {"request_id": "r1", "route": "/api/test-db", "custom": "value"}

    def test_with_update_merges_extra(self):
        ctx = LogContext(method="GET", extra={"a": 1})

        updated = ctx.with_update(route="/", extra={"b": 2})

        assert updated.method == "GET"
        assert updated.route == "/"
        assert updated.extra == {"a": 1, "b": 2}
        assert ctx.route is None


class TestStructuredLogger:
    """Test StructuredLogger."""

    def test_bind_is_scoped(self, caplog):
        logger = StructuredLogger("supabase_admin_api.tests.bind")

        with caplog.at_level(logging.INFO, logger="supabase_admin_api.tests.bind"):
            with logger.bind(probe="database"):
                logger.info("inside")
            logger.info("outside")

        inside, outside = [r.getMessage() for r in caplog.records]
        assert "probe=database" in inside
        assert "probe=" not in outside

    def test_request_context_yields_request_id(self, caplog):
        logger = StructuredLogger("supabase_admin_api.tests.request")

        with caplog.at_level(logging.INFO, logger="supabase_admin_api.tests.request"):
            with logger.request_context("GET", "/api/admin/users") as request_id:
                logger.info("request handled", status=200)

        message = caplog.records[0].getMessage()
        assert request_id.startswith("req_")
        assert f"request_id={request_id}" in message
        assert "route=/api/admin/users" in message
        assert "status=200" in message

    def test_json_output_is_parseable(self, caplog):
        logger = StructuredLogger("supabase_admin_api.tests.json", json_output=True)

        with caplog.at_level(logging.INFO, logger="supabase_admin_api.tests.json"):
            logger.log_error("supabase connection failed", RuntimeError("boom"), duration_ms=1.5)

        data = json.loads(caplog.records[0].getMessage())
        assert data["message"] == "supabase connection failed"
        assert data["event_type"] == "error"
        assert data["error_type"] == "RuntimeError"
        assert data["duration_ms"] == 1.5


class TestFormatters:
    def test_json_formatter_merges_payload(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, json.dumps({"message": "hi", "k": 1}), None, None)

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["message"] == "hi"
        assert data["k"] == 1

    def test_json_formatter_plain_message(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain text", None, None)

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "plain text"


class TestUtilities:
    def test_request_ids_unique(self):
        assert generate_request_id() != generate_request_id()

    def test_redact_api_key(self):
        assert redact_api_key(None) == "<not set>"
        assert redact_api_key("short") == "***"
        assert redact_api_key("eyJhbGciOiJIUzI1NiJ9.secret") == "eyJh...cret"

    def test_timer(self):
        timer = Timer()
        elapsed = timer.stop()
        assert elapsed >= 0
        assert timer.end_time is not None

    def test_timed_stops_on_exit(self):
        with timed() as timer:
            pass
        assert timer.end_time is not None
