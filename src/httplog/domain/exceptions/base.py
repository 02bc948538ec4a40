# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Canonical base class for httplog exceptions. Extraction and rendering never
    raise; these exist for the configuration seams (sinks, settings).

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any


class HttpLogError(Exception):
    """Base class for all httplog exceptions."""

    code: str = "HTTPLOG_ERROR"

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class SinkConfigurationError(HttpLogError):
    """Raised when a sink target cannot be resolved or opened."""

    code = "SINK_CONFIGURATION_ERROR"


__all__ = ["HttpLogError", "SinkConfigurationError"]
