"""Unit tests for structured logging utilities in ``observability``.

Validates the null handler, trace binding, and event construction behaviour
that log consumers rely on.
"""

from __future__ import annotations

import logging

import pytest

from lib_live_config import bind_trace_id, get_logger
from lib_live_config.observability import TRACE_ID, log_error, log_info, log_warning, make_event, trace_scope


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert logger.name == "lib_live_config"
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_live_config")
    bind_trace_id("trace-123")
    try:
        log_info("reload_applied", layer="watch", path=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert record.getMessage() == "reload_applied"
    assert getattr(record, "context") == {"trace_id": "trace-123", "layer": "watch", "path": None}


def test_warning_and_error_levels(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_live_config")
    log_warning("reload_abandoned", layer="watch", path=None, failures=2)
    log_error("watch_error", layer="watch", path=None, error="boom")
    levels = [record.levelno for record in caplog.records[-2:]]
    assert levels == [logging.WARNING, logging.ERROR]
    assert getattr(caplog.records[-2], "context")["failures"] == 2


def test_bind_trace_id_clears_context() -> None:
    """Clearing the trace ID should reset the context variable to None."""

    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_trace_scope_binds_fresh_identifier_and_restores_previous() -> None:
    bind_trace_id("outer")
    try:
        with trace_scope() as first:
            assert TRACE_ID.get() == first
            assert len(first) == 32
        with pytest.raises(RuntimeError):
            with trace_scope("inner"):
                raise RuntimeError("boom")
        assert TRACE_ID.get() == "outer"
    finally:
        bind_trace_id(None)


def test_make_event_merges_optional_payload() -> None:
    """make_event should merge optional metadata without mutating base keys."""

    event = make_event("env", None, {"keys": 3})
    assert event == {"layer": "env", "path": None, "keys": 3}
    assert make_event("file", "a.json") == {"layer": "file", "path": "a.json"}
