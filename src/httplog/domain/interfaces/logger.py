# src/httplog/domain/interfaces/logger.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Logger interface.

Purpose:
- Describe the access logger contract so middleware and callers can accept any
  implementation (the concrete one lives in the application layer).

Layer: domain
"""

from __future__ import annotations

from typing import Protocol

from httplog.domain.entities.raw_request import RawRequest


class Logger(Protocol):
    """Access logger contract.

    ``log`` renders every configured field and writes one line to the sink.
    ``set_request_info`` fills the request fields, ``set_status`` the response
    status, and ``add`` registers extra ``key=value`` pairs.
    """

    def log(self) -> None:
        """Write one access line for the current state."""

    def set_status(self, status: int) -> None:
        """Overwrite the response status."""

    def set_request_info(self, request: RawRequest) -> None:
        """Overwrite ip, method, path, user agent and params from ``request``."""

    def add(self, key: str, value: object) -> None:
        """Insert or overwrite the extra field ``key``."""
