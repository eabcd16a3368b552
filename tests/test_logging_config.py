"""Tests for the structured logging configuration."""

from __future__ import annotations

import json
import logging
import sys

from daybreak.logging_config import (
    JSONFormatter,
    _AnalysisContextFilter,
    bind_token,
    generate_request_id,
    request_id_ctx,
    setup_logging,
    token_ctx,
)


def _record(msg: str = "hi", level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="daybreak.test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestGenerateRequestId:

    def test_length_and_charset(self):
        rid = generate_request_id()
        assert len(rid) == 12
        assert all(c in "0123456789abcdef" for c in rid)

    def test_unique(self):
        assert len({generate_request_id() for _ in range(100)}) == 100


class TestAnalysisContextFilter:

    def test_injects_request_id_and_token(self):
        rid_token = request_id_ctx.set("abc123")
        tok_token = token_ctx.set("-")
        try:
            bind_token("ethereum", "0x" + "1" * 40)
            record = _record()
            assert _AnalysisContextFilter().filter(record) is True
        finally:
            request_id_ctx.reset(rid_token)
            token_ctx.reset(tok_token)
        assert record.request_id == "abc123"  # type: ignore[attr-defined]
        assert record.token == "ethereum:0x" + "1" * 40  # type: ignore[attr-defined]

    def test_defaults_dash(self):
        rid_token = request_id_ctx.set("-")
        tok_token = token_ctx.set("-")
        try:
            record = _record()
            _AnalysisContextFilter().filter(record)
        finally:
            request_id_ctx.reset(rid_token)
            token_ctx.reset(tok_token)
        assert record.request_id == "-"  # type: ignore[attr-defined]
        assert record.token == "-"  # type: ignore[attr-defined]


class TestJSONFormatter:

    def test_basic_output(self):
        rid_token = request_id_ctx.set("test999")
        tok_token = token_ctx.set("base:0xabc")
        try:
            data = json.loads(JSONFormatter().format(_record("analysis done", logging.WARNING)))
        finally:
            request_id_ctx.reset(rid_token)
            token_ctx.reset(tok_token)
        assert data["level"] == "WARNING"
        assert data["logger"] == "daybreak.test"
        assert data["msg"] == "analysis done"
        assert data["request_id"] == "test999"
        assert data["token"] == "base:0xabc"

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("fail", logging.ERROR, exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError" in data["exception"]


class TestSetupLogging:

    def test_text_format(self):
        setup_logging(level="debug", fmt="text")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        assert "%(token)s" in root.handlers[0].formatter._fmt

    def test_json_format(self):
        setup_logging(level="WARNING", fmt="json")
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO
