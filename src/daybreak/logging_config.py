"""
Logging configuration for the Daybreak analyzer.

Every record carries two correlation fields:
- ``request_id``: the API request or CLI run it belongs to
- ``token``: ``<chain>:<address>`` of the analysis in progress

Formats (``LOG_FORMAT``): ``text`` (default) or ``json`` (one object per line).
Level: ``LOG_LEVEL`` (default INFO).  Both can be overridden per call.
"""

from __future__ import annotations

import json as json_mod
import logging
import sys
import uuid
from contextvars import ContextVar

from config import LOG_FORMAT, LOG_LEVEL

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")
token_ctx: ContextVar[str] = ContextVar("token", default="-")

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(request_id)s %(token)s) %(message)s"


def bind_token(chain: str, address: str) -> None:
    """Tag log records of the current task with the token being analysed."""
    token_ctx.set(f"{chain}:{address}")


class JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": request_id_ctx.get(),
            "token": token_ctx.get(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json_mod.dumps(entry, default=str)


class _AnalysisContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()  # type: ignore[attr-defined]
        record.token = token_ctx.get()  # type: ignore[attr-defined]
        return True


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route the root logger to stderr with the analysis context attached."""
    level = (level or LOG_LEVEL).upper()
    fmt = fmt or LOG_FORMAT

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(_TEXT_FORMAT, defaults={"request_id": "-", "token": "-"})
        )
    handler.addFilter(_AnalysisContextFilter())
    root.addHandler(handler)


def generate_request_id() -> str:
    """Create a short unique correlation ID."""
    return uuid.uuid4().hex[:12]
