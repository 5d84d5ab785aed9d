from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace

from mop.api.middleware.request_id import get_request_id

_LOGGING_CONFIGURED = False

# Structured fields callers pass through ``extra=``.
_EXTRA_KEYS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "order_id",
    "cart_id",
    "rider_id",
    "from_status",
    "to_status",
    "code",
    "reason",
    "channel",
    "event",
    "order_store",
    "cart_store",
    "catalog_items",
)

# The access middleware already logs every request.
_QUIET_LOGGERS = ("uvicorn.access",)


def _span_ids() -> tuple[str | None, str | None]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None, None
    return format(span_context.trace_id, "032x"), format(span_context.span_id, "016x")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, correlated by request and trace id."""

    def __init__(self, service: str | None = None, environment: str | None = None) -> None:
        super().__init__()
        self._service = service or os.getenv("OTEL_SERVICE_NAME", "mop-backend")
        self._environment = environment or os.getenv("APP_ENV", "dev")

    def format(self, record: logging.LogRecord) -> str:
        trace_id, span_id = _span_ids()
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "env": self._environment,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": get_request_id(),
            "trace_id": trace_id,
            "span_id": span_id,
        }
        payload.update(
            {key: getattr(record, key) for key in _EXTRA_KEYS if getattr(record, key, None) is not None}
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_formatter() -> logging.Formatter:
    if os.getenv("LOG_FORMAT", "json").lower() == "text":
        return logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    return JsonFormatter()


def configure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
