# src/httplog/infrastructure/logging/logger.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Diagnostic JSON logging.

Access lines never pass through here; they are written straight to a sink.
This module formats httplog's own diagnostics (settings, sink setup,
extraction fallbacks, service startup and shutdown) as one JSON object per
record.

Keys:
    ``ts``, ``level``, ``logger``, ``message``; ``exc_type`` / ``exc_message``
    when the record carries an exception; the ``extra={"extra": {...}}`` dict
    merged at the top level.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import IO, Any

__all__ = ["JsonFormatter", "configure_root_logging", "get_json_logger"]


class JsonFormatter(logging.Formatter):
    """Render a record as a compact JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        error = record.exc_info[1] if record.exc_info else None
        if error is not None:
            payload["exc_type"] = type(error).__name__
            payload["exc_message"] = str(error)
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            payload.update(fields)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def _resolve_level(level: str | int | None) -> str | int:
    if level is None:
        level = os.getenv("LOG_LEVEL") or "INFO"
    return level.upper() if isinstance(level, str) else level


def configure_root_logging(level: str | int | None = None, stream: IO[str] | None = None) -> None:
    """Set the root level and attach the JSON handler once.

    Args:
        level: Level or level name; ``LOG_LEVEL`` (default ``INFO``) when omitted.
        stream: Handler stream; ``sys.stderr`` when omitted.
    """
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return the module logger ``name``; records propagate to the JSON root handler."""
    return logging.getLogger(name)
