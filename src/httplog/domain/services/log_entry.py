# src/httplog/domain/services/log_entry.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Access line rendering.

Summary:
    Holds the mutable per-logger state and renders it as a single
    ``key=value`` access line.

Line format:
    ``level=I time=<ts> ip=<ip> method=<m> path=<p> ua=<ua> status=<n>
    params=<params>`` followed by `` <key>=<value>`` for every extra, in
    insertion order. Values are written as-is; nothing is quoted or escaped,
    so a value containing a space or ``=`` runs into its neighbours.

Value rendering (extras):
    * ``str``: verbatim.
    * ``bool``: ``true`` / ``false``.
    * ``int``: plain decimal.
    * ``bytes``: UTF-8 decoded, undecodable bytes replaced.
    * ``None``: ``<nil>``.
    * anything else: ``str(value)``.

Layer:
    domain/services
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

LEVEL_MARKER: Final[str] = "I"
TIME_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S%Z"


@dataclass(slots=True)
class LogState:
    """Current fields of a logger; overwritten by setters, never reset."""

    ip: str = ""
    method: str = ""
    path: str = ""
    user_agent: str = ""
    params: str = ""
    status: int = 0
    extras: dict[str, object] = field(default_factory=dict)


def format_timestamp(now: datetime | None = None) -> str:
    """Format ``now`` (default: current time) as ``YYYY-MM-DDTHH:MM:SSUTC``."""
    moment = (now or datetime.now(tz=UTC)).astimezone(UTC)
    return moment.strftime(TIME_FORMAT)


def render_value(value: object) -> str:
    """Render an extra value for the access line."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", errors="replace")
    if value is None:
        return "<nil>"
    return str(value)


def render_entry(state: LogState, now: datetime | None = None) -> str:
    """Render ``state`` as one access line without a trailing newline.

    Args:
        state: Logger state to render.
        now: Timestamp override; defaults to the current UTC time.

    Returns:
        str: The formatted line.
    """
    parts = [
        f"level={LEVEL_MARKER}",
        f"time={format_timestamp(now)}",
        f"ip={state.ip}",
        f"method={state.method}",
        f"path={state.path}",
        f"ua={state.user_agent}",
        f"status={state.status}",
        f"params={state.params}",
    ]
    parts.extend(f"{key}={render_value(value)}" for key, value in state.extras.items())
    return " ".join(parts)


__all__ = ["LEVEL_MARKER", "LogState", "format_timestamp", "render_entry", "render_value"]
