# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
JSON log output for stdlib logging and structlog.

Both paths end up on the root handler so that registry/config messages and
structlog events share one format and carry the active trace/span ids.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

import structlog
from opentelemetry.trace import get_current_span


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
        }
        # Attach trace/span ids if present
        ctx = get_current_span().get_span_context()
        if ctx.is_valid:
            base["trace_id"] = f"{ctx.trace_id:032x}"
            base["span_id"] = f"{ctx.span_id:016x}"
        return json.dumps(base, ensure_ascii=False, default=str)


def configure_logging(level: str = "info", json_logs: bool = True) -> None:
    """Route stdlib logging and structlog through one root handler."""
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    if json_logs:
        handler.setFormatter(JsonLogFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(level.upper())

    # structlog renders the event dict into the message; the formatter wraps it
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
