"""Logging formatters with trace correlation."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

# LogRecord attributes that are not forwarded as extra fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    },
)


class JSONFormatter(logging.Formatter):
    """JSON Lines formatter with UTC timestamps.

    Every record becomes a single-line JSON object carrying the level, the
    logger name, the message, any ``extra={...}`` fields passed at the call
    site (``cache_key``, ``field``, ``tags``...) and, when a span is active,
    the OpenTelemetry ``trace_id``/``span_id``.

    Example output:
        ```json
        {"timestamp": "2025-01-01T00:00:00.123Z", "level": "DEBUG", "logger": "graph_cache_service.features.graphql.caching.interceptor", "message": "Field cache hit", "cache_key": "user:1:name"}
        ```
    """

    def __init__(self, static: dict[str, Any] | None = None) -> None:
        """Initialize JSON formatter.

        Args:
            static: Fields included in every record (e.g., {"service": "api"}).
        """
        super().__init__()
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        span = trace.get_current_span()
        if span and span.get_span_context().is_valid:
            ctx = span.get_span_context()
            data["trace_id"] = format(ctx.trace_id, "032x")
            data["span_id"] = format(ctx.span_id, "016x")

        # Keep one record per line
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            data["stack_trace"] = record.stack_info.replace("\n", "\\n")

        data.update(self.static)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in data:
                data[key] = value

        return json.dumps(data, ensure_ascii=False, default=str)
