# src/httplog/domain/interfaces/sink.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Sink interface.

Purpose:
- Define the write-only destination that receives finished access lines.

Layer: domain

Notes:
- The logger performs exactly one ``write`` per line and never opens, flushes
  or closes the sink. Lifecycle belongs to whoever created it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """Protocol for byte sinks (binary files, ``sys.stdout.buffer``, sockets)."""

    def write(self, data: bytes, /) -> object:
        """Write ``data`` to the destination.

        Errors are raised to the caller unchanged.
        """
