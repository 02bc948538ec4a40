# src/httplog/infrastructure/sinks/stream.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Stream sinks.

Summary:
    Byte sinks for access lines backed by binary streams (stdout, stderr,
    append-mode files).

Design:
    * :class:`StreamSink` performs one ``write`` (and optionally one
      ``flush``) under a lock, so lines from concurrent requests never
      interleave.
    * stdout and stderr sinks are never closed. File sinks returned by
      :func:`open_sink` own their stream and close it in :meth:`StreamSink.close`.
    * Write errors propagate unchanged.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import BinaryIO, Final

from httplog.domain.exceptions.base import SinkConfigurationError
from httplog.infrastructure.logging.logger import get_json_logger

_logger = get_json_logger(__name__)

STDOUT_TARGETS: Final[frozenset[str]] = frozenset({"stdout", "-"})
STDERR_TARGETS: Final[frozenset[str]] = frozenset({"stderr"})


class StreamSink:
    """Lock-guarded sink over a binary stream.

    Args:
        stream: Binary stream to write to.
        flush: Flush after every write.
        owned: Whether :meth:`close` should close ``stream``.
    """

    def __init__(self, stream: BinaryIO, *, flush: bool = True, owned: bool = False) -> None:
        self._stream = stream
        self._flush = flush
        self._owned = owned
        self._lock = threading.Lock()

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    def write(self, data: bytes, /) -> int:
        """Write ``data`` in one call and return the number of bytes written."""
        with self._lock:
            written = self._stream.write(data)
            if self._flush:
                self._stream.flush()
        return len(data) if written is None else written

    def close(self) -> None:
        """Close the underlying stream if this sink opened it."""
        if self._owned:
            self._stream.close()


def open_sink(target: str) -> StreamSink:
    """Resolve a sink target string.

    Args:
        target: ``stdout`` (or ``-``), ``stderr``, or a file path opened in
            append mode. Parent directories are created for file targets.

    Returns:
        StreamSink: Sink over the resolved stream.

    Raises:
        SinkConfigurationError: If the target is empty or the file cannot be opened.
    """
    value = target.strip()
    if not value:
        raise SinkConfigurationError("sink target must not be empty")
    if value.lower() in STDOUT_TARGETS:
        return StreamSink(sys.stdout.buffer)
    if value.lower() in STDERR_TARGETS:
        return StreamSink(sys.stderr.buffer)

    path = Path(value).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = path.open("ab")
    except OSError as exc:
        raise SinkConfigurationError(
            f"cannot open sink file {str(path)!r}",
            details={"path": str(path), "error": str(exc)},
        ) from exc

    _logger.info("sink_opened", extra={"extra": {"target": str(path)}})
    return StreamSink(stream, owned=True)


__all__ = ["StreamSink", "open_sink"]
