# src/httplog/application/http_logger.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""HTTP access logger.

Summary:
    Concrete :class:`~httplog.domain.interfaces.logger.Logger` bound to one
    sink. It keeps the current request/response fields plus caller-supplied
    extras and writes one ``key=value`` line per :meth:`HttpLogger.log` call.

Design:
    * State persists between ``log`` calls; setters overwrite, nothing resets.
    * Exactly one ``sink.write`` per line, newline included. Sink errors
      propagate to the caller.
    * :meth:`HttpLogger.child` hands out a logger with its own state on the
      same sink, which is how the middleware keeps concurrent requests apart.

Usage:
    log = new(sys.stdout.buffer)
    log.add("uid", 1234)
    log.set_status(200)
    log.log()
    # => level=I time=... status=200 params= uid=1234
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from httplog.domain.entities.raw_request import RawRequest
from httplog.domain.interfaces.sink import Sink
from httplog.domain.services.log_entry import LogState, render_entry
from httplog.domain.services.request_info_extractor import extract_request_info


class HttpLogger:
    """Access logger writing to ``sink``."""

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._state = LogState()

    @property
    def sink(self) -> Sink:
        return self._sink

    @property
    def state(self) -> LogState:
        """Current logger state (live object, not a copy)."""
        return self._state

    def log(self) -> None:
        """Render the current state and write it to the sink as one line."""
        self._sink.write(self.build_entry().encode("utf-8") + b"\n")

    def build_entry(self, now: datetime | None = None) -> str:
        """Return the access line for the current state, without newline."""
        return render_entry(self._state, now)

    def add(self, key: str, value: object) -> None:
        """Add an extra field rendered as ``<key>=<value>``."""
        self._state.extras[key] = value

    def set_status(self, status: int) -> None:
        self._state.status = status

    def set_request_info(self, request: RawRequest) -> None:
        """Set ip, method, path, user agent and params from ``request``.

        Args:
            request: Raw request; fields are re-derived on every call.
        """
        info = extract_request_info(request)
        self._state.ip = info.ip
        self._state.method = info.method
        self._state.path = info.path
        self._state.user_agent = info.user_agent
        self._state.params = info.params

    def child(self) -> HttpLogger:
        """Return a logger on the same sink with a copy of the current state."""
        clone = HttpLogger(self._sink)
        clone._state = replace(self._state, extras=dict(self._state.extras))
        return clone


def new(sink: Sink) -> HttpLogger:
    """Return an :class:`HttpLogger` configured with ``sink``."""
    return HttpLogger(sink)


__all__ = ["HttpLogger", "new"]
