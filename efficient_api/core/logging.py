from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

from ddtrace.trace import tracer
from pythonjsonlogger import jsonlogger

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Set by the request middleware; empty on records logged outside a request.
REQUEST_FIELDS = ("path", "method", "status_code", "latency_ms", "client_ip")
LOG_FIELDS = (
    "timestamp",
    "levelname",
    "name",
    "message",
    "request_id",
    "dd_trace_id",
    "dd_span_id",
    *REQUEST_FIELDS,
)


class ContextFilter(logging.Filter):
    """Stamps the current request id and Datadog trace ids onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        record.timestamp = datetime.now(timezone.utc).isoformat()
        for name in REQUEST_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)

        span = tracer.current_span()
        record.dd_trace_id = span.trace_id if span is not None else None
        record.dd_span_id = span.span_id if span is not None else None
        return True


def setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(" ".join(f"%({f})s" for f in LOG_FIELDS)))
    handler.addFilter(ContextFilter())

    root.handlers.clear()
    root.addHandler(handler)
