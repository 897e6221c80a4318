"""
Tests for leaddesk/utils/logging.py - JSON formatter and request context binding.
"""
import json
import logging
import sys

from leaddesk.utils.logging import (
    JsonLogFormatter,
    bind_request,
    configure_structured_logging,
    current_request,
    new_request_id,
    unbind_request,
)


def _record(msg="hello", level=logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("leaddesk.test", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _format(record: logging.LogRecord) -> dict:
    return json.loads(JsonLogFormatter().format(record))


class TestFormatter:
    def test_basic_fields(self):
        entry = _format(_record())
        assert entry["level"] == "INFO"
        assert entry["logger"] == "leaddesk.test"
        assert entry["msg"] == "hello"

    def test_timestamp_from_record_with_millis(self):
        record = _record()
        record.created = 1769940000.0
        record.msecs = 123.9
        assert _format(record)["ts"] == "2026-02-01T10:00:00.123Z"

    def test_whitelisted_extras_included(self):
        entry = _format(_record(lead_id=7, source="email", status=201, duration_ms=3.4))
        assert entry["lead_id"] == 7
        assert entry["source"] == "email"
        assert entry["status"] == 201
        assert entry["duration_ms"] == 3.4

    def test_unknown_extras_dropped(self):
        assert "password" not in _format(_record(password="secret"))

    def test_exception_rendered(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()
        assert "ValueError: bad" in _format(record)["exc"]

    def test_no_request_fields_outside_request(self):
        entry = _format(_record())
        assert "request_id" not in entry
        assert "path" not in entry


class TestRequestContext:
    def test_bound_request_tags_lines(self):
        token = bind_request("req-1", "POST", "/api/leads")
        try:
            entry = _format(_record())
        finally:
            unbind_request(token)

        assert entry["request_id"] == "req-1"
        assert entry["method"] == "POST"
        assert entry["path"] == "/api/leads"

    def test_unbind_restores_previous(self):
        token = bind_request("req-2", "GET", "/health")
        assert current_request().request_id == "req-2"
        unbind_request(token)
        assert current_request() is None

    def test_new_request_id_is_unique_hex(self):
        a, b = new_request_id(), new_request_id()
        assert a != b
        assert len(a) == 32
        int(a, 16)


class TestConfigure:
    def test_single_json_handler_and_level(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_structured_logging("debug")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonLogFormatter)
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
