"""Tests for structured logging configuration and request context."""

import logging

import pytest
import structlog

from servekit.logging import (
    add_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_context,
)
from tests.helpers import build_client, failing_router, session_headers


class TestContextVars:
    """Tests for request-scoped ContextVars."""

    def setup_method(self):
        clear_request_context()

    def teardown_method(self):
        clear_request_context()

    def test_all_fields_injected(self):
        set_request_context("req-1", user_id="7", path="/me", method="GET")

        event_dict = add_request_context(None, "info", {})

        assert event_dict == {"request_id": "req-1", "user_id": "7", "path": "/me", "method": "GET"}

    def test_event_fields_win(self):
        set_request_context("req-1", path="/me")

        event_dict = add_request_context(None, "info", {"path": "/explicit"})

        assert event_dict["path"] == "/explicit"

    def test_none_values_not_injected(self):
        set_request_context("req-1")

        event_dict = add_request_context(None, "info", {})

        assert event_dict == {"request_id": "req-1"}

    def test_clear_clears_all(self):
        set_request_context("req-1", user_id="7", path="/me", method="GET")
        clear_request_context()

        assert add_request_context(None, "info", {}) == {}
        assert get_request_id() is None


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        original_config = structlog.get_config()
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        structlog.configure(**original_config)

    def test_json_output(self, capsys):
        configure_logging(json_format=True)

        structlog.get_logger("tests.json").warning("json_event", code="x")

        out = capsys.readouterr().out
        assert '"event": "json_event"' in out
        assert '"code": "x"' in out
        assert '"level": "warning"' in out

    def test_console_output(self, capsys):
        configure_logging(json_format=False)

        structlog.get_logger("tests.console").info("console_event")

        out = capsys.readouterr().out
        assert "console_event" in out
        assert '"event"' not in out

    def test_level_applied(self):
        configure_logging(level="WARNING")

        assert logging.getLogger().level == logging.WARNING


class TestSessionUserInLogs:
    """Tests that accepted sessions tie later log entries to the caller."""

    @pytest.fixture
    def context_sink(self):
        events: list[dict] = []
        original_config = structlog.get_config()

        def capture_processor(logger, method_name, event_dict):
            events.append(event_dict)
            raise structlog.DropEvent

        structlog.configure(
            processors=[add_request_context, capture_processor],
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        clear_request_context()

        yield events

        clear_request_context()
        structlog.configure(**original_config)

    def test_failure_log_carries_user_id(self, context_sink):
        client = build_client(failing_router, log=get_logger("tests.logging"))

        client.get("/fail/declared", headers=session_headers({"userId": 42}))

        [event] = [e for e in context_sink if e["event"] == "request_failed"]
        assert event["code"] == "user-not-found"
        assert event["user_id"] == "42"
        assert event["request_id"]

    def test_rejected_session_has_no_user_id(self, context_sink):
        client = build_client(log=get_logger("tests.logging"))

        client.get("/me", headers=session_headers({"userId": 0}))

        [event] = [e for e in context_sink if e["event"] == "request_failed"]
        assert event["code"] == "session-header-has-no-userId"
        assert "user_id" not in event
