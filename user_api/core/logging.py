"""Logging setup for the user API.

Every record leaving the root handler is JSON and carries the id of the
HTTP request it was emitted under (``request_id``), plus the OpenTelemetry
trace/span ids when a span is active.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import Any, Optional

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

NOISY_LOGGERS = {"pymongo": "WARNING", "uvicorn.error": "INFO"}


def bind_request_id(request_id: str) -> Token:
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id.get()


class RequestContextFilter(logging.Filter):
    """Stamp the active request id onto each record ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = current_request_id() or "-"
        return True


class UserApiJSONFormatter(jsonlogger.JsonFormatter):
    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record.setdefault("request_id", getattr(record, "request_id", "-"))

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = trace.format_trace_id(span_context.trace_id)
            log_record["span_id"] = trace.format_span_id(span_context.span_id)


def build_handler(stream=None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        UserApiJSONFormatter(
            "%(asctime)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "name": "logger"},
        )
    )
    return handler


def setup_logging(level: str = "INFO") -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(build_handler())

    # RequestLoggingMiddleware writes the access log
    logging.getLogger("uvicorn.access").disabled = True
    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)
