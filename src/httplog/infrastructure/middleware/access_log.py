# src/httplog/infrastructure/middleware/access_log.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Access Log Middleware.

Summary:
    ASGI middleware that writes one access line per HTTP request through an
    :class:`~httplog.application.http_logger.HttpLogger`.

Design:
    * The request body is buffered up front so the request dump includes it,
      then replayed unchanged to the downstream app.
    * If the client disconnects mid-body, the partial body is replayed with
      ``more_body`` set and followed by the disconnect message.
    * Each request gets its own logger state via ``HttpLogger.child()``; the
      sink is shared. Loggers without ``child`` are used directly.
    * The first ``http.response.start`` status is remembered while every
      message is forwarded untouched. Requests that never start a response
      are logged with ``status=0``.
    * The line is written in a ``finally`` block after the downstream app
      returns or raises; exceptions are re-raised.
    * The per-request logger is exposed on ``request.state.http_logger`` so
      handlers can ``add()`` extras for their request.

Usage:
    app.add_middleware(AccessLogMiddleware, logger=new(sys.stdout.buffer))
    # or
    wrapped = with_logging(app, new(sys.stdout.buffer))
"""

from __future__ import annotations

from typing import Final

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from httplog.application.http_logger import HttpLogger
from httplog.domain.entities.raw_request import RawRequest
from httplog.domain.interfaces.logger import Logger
from httplog.infrastructure.logging.logger import get_json_logger

_logger = get_json_logger(__name__)

REQUEST_LOGGER_STATE_KEY: Final[str] = "http_logger"


async def _read_body(receive: Receive) -> tuple[bytes, Message | None]:
    """Drain the request body; return it plus a pending disconnect message, if any."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.request":
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                return b"".join(chunks), None
        else:
            return b"".join(chunks), message


def _replay(body: bytes, receive: Receive, pending: Message | None) -> Receive:
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": pending is not None}
        if pending is not None:
            return pending
        return await receive()

    return replay


class AccessLogMiddleware:
    """Pure ASGI access logging middleware.

    Args:
        app: Downstream ASGI application.
        logger: Pre-configured logger bound to the output sink.
    """

    def __init__(self, app: ASGIApp, logger: Logger) -> None:
        self.app = app
        self.logger = logger

    def _request_logger(self) -> Logger:
        if isinstance(self.logger, HttpLogger):
            return self.logger.child()
        return self.logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        body, pending = await _read_body(receive)
        if pending is not None:
            _logger.debug(
                "request_body_incomplete",
                extra={"extra": {"received_bytes": len(body), "message": pending["type"]}},
            )

        request_logger = self._request_logger()
        request_logger.set_request_info(RawRequest.from_scope(scope, body))
        scope.setdefault("state", {})[REQUEST_LOGGER_STATE_KEY] = request_logger

        status = 0

        async def send_with_status(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start" and not status:
                status = int(message["status"])
            await send(message)

        try:
            await self.app(scope, _replay(body, receive, pending), send_with_status)
        finally:
            request_logger.set_status(status)
            request_logger.log()


def with_logging(app: ASGIApp, logger: Logger) -> AccessLogMiddleware:
    """Wrap ``app`` so every HTTP request is written to ``logger``."""
    return AccessLogMiddleware(app, logger)


def get_request_logger(request: Request) -> Logger | None:
    """Return the logger bound to ``request`` by the middleware, if any."""
    return getattr(request.state, REQUEST_LOGGER_STATE_KEY, None)


__all__ = [
    "REQUEST_LOGGER_STATE_KEY",
    "AccessLogMiddleware",
    "get_request_logger",
    "with_logging",
]
