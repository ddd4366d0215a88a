"""Structured logging helpers, formatter and error events."""

from __future__ import annotations

import json
import logging

from llm_dispatch.base.errors import AuthError, StreamIOError
from llm_dispatch.base.log_support import JsonFormatter
from llm_dispatch.base.session import QueryEvent
from llm_dispatch.base.logging import (
    BASE_LOGGER_NAME,
    LogContext,
    configure_logger,
    get_logger,
    log_error,
    log_event,
)


def test_get_logger_prefixes_child_names():
    assert get_logger("render").name == "dispatch.render"  # nosec B101
    assert get_logger("dispatch.stream").name == "dispatch.stream"  # nosec B101
    assert get_logger().name == BASE_LOGGER_NAME  # nosec B101


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("DISPATCH_LOG_LEVEL", "ERROR")
    try:
        assert get_logger().level == logging.ERROR  # nosec B101
    finally:
        monkeypatch.delenv("DISPATCH_LOG_LEVEL")
        assert get_logger().level == logging.INFO  # nosec B101


def test_log_event_drops_none_and_merges_context(log_events):
    logger = get_logger("dispatch.test")
    log_event(logger, "query.started", LogContext(provider="openai", query_id="q1"), reasoning=None, payload_file="/tmp/x")
    (event,) = log_events("query.started")
    assert event == {"event": "query.started", "provider": "openai", "query_id": "q1", "payload_file": "/tmp/x"}  # nosec B101


def test_context_for_query_carries_lifecycle_state(make_query):
    query = make_query("q7")
    assert LogContext.for_query(query).to_dict() == {  # nosec B101
        "provider": "openai",
        "model": "gpt-4o",
        "query_id": "q7",
        "state": "pending",
    }
    query.apply(QueryEvent.BYTES_RECEIVED)
    assert LogContext.for_query(query).state == "streaming"  # nosec B101


def test_log_event_respects_level(caplog):
    caplog.set_level(logging.INFO, logger="dispatch")
    log_event(get_logger("dispatch.test"), "render.flush", level=logging.DEBUG)
    assert caplog.records == []  # nosec B101


def test_log_error_normalizes_taxonomy_fields(log_events):
    err = StreamIOError("pipe closed", provider="openai", query_id="q9", raw=OSError("boom"))
    log_error(get_logger("dispatch.test"), err)
    (event,) = log_events("dispatch.error")
    assert event["error_code"] == "stream_io"  # nosec B101
    assert event["error_type"] == "StreamIOError"  # nosec B101
    assert event["provider"] == "openai" and event["query_id"] == "q9"  # nosec B101
    assert "boom" in event["raw"]  # nosec B101


def test_log_error_level_is_configurable(caplog):
    caplog.set_level(logging.DEBUG, logger="dispatch")
    log_error(get_logger("dispatch.test"), AuthError("missing", provider="pplx"), level=logging.WARNING)
    assert caplog.records[-1].levelno == logging.WARNING  # nosec B101


def test_json_formatter_hoists_json_message():
    formatter = JsonFormatter()
    record = logging.LogRecord("dispatch.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    data = json.loads(formatter.format(record))
    assert data["event"] == "e" and data["n"] == 1  # nosec B101
    assert "msg" not in data  # nosec B101
    assert data["level"] == "INFO" and data["logger"] == "dispatch.x"  # nosec B101


def test_json_formatter_keeps_plain_messages():
    record = logging.LogRecord("dispatch.x", logging.WARNING, __file__, 1, "plain %s", ("text",), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["msg"] == "plain text"  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "dispatch.log"
    logger = configure_logger(file_path=str(path))
    try:
        log_event(get_logger("dispatch.test"), "files.pruned", deleted=3)
        for handler in logger.handlers:
            handler.flush()
        lines = path.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["deleted"] == 3  # nosec B101
    finally:
        configure_logger(file_path=None)
    assert not any(getattr(h, "baseFilename", None) == str(path) for h in logger.handlers)  # nosec B101
