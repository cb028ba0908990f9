"""Tests for structured logging context."""

import json
import logging

import structlog

from series_lounge.logging import (
    add_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_context,
)


class TestRequestContext:
    """Tests for ContextVar injection into log events."""

    def teardown_method(self):
        clear_request_context()

    def test_context_added_to_event(self):
        set_request_context("req-1", path="/health", method="GET")

        event = add_request_context(None, "info", {"event": "x"})

        assert event == {"event": "x", "request_id": "req-1", "path": "/health", "method": "GET"}

    def test_explicit_fields_not_overwritten(self):
        set_request_context("req-1", path="/health")

        event = add_request_context(None, "info", {"event": "x", "path": "/other"})

        assert event["path"] == "/other"

    def test_cleared_context_adds_nothing(self):
        set_request_context("req-1", path="/health")
        clear_request_context()

        assert add_request_context(None, "info", {"event": "x"}) == {"event": "x"}
        assert get_request_id() is None


class TestConfigureLogging:
    def teardown_method(self):
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    def test_json_output(self, capsys):
        configure_logging(json_format=True, level="INFO")
        set_request_context("req-9")
        try:
            get_logger("series_lounge.test").info("app_running", url="http://127.0.0.1:5100")
        finally:
            clear_request_context()

        line = capsys.readouterr().out.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "app_running"
        assert entry["url"] == "http://127.0.0.1:5100"
        assert entry["request_id"] == "req-9"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_level_applied(self):
        configure_logging(json_format=False, level="WARNING")

        assert logging.getLogger().level == logging.WARNING
