"""JSON console logging with per-request context."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_for_logging, sanitize_text

# Attributes callers may attach through ``extra=`` to tie a line to one request.
CONTEXT_FIELDS = ("provider", "request_id", "query")


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per record, credentials scrubbed."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                event[field] = sanitize_for_logging(getattr(record, field))
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "weather_glance", level: int | str = logging.INFO
) -> logging.Logger:
    """Return the process logger, attaching the JSON handler once.

    Calling again only adjusts the level, so the CLI can start at INFO and
    switch to the configured ``LOG_LEVEL`` once settings have loaded.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
