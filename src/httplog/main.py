# src/httplog/main.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Demo Service Entry

Synopsis:
    Small FastAPI service wrapped in the access log middleware. Useful for
    trying the line format locally (``httplog serve``) and as the integration
    surface for tests.

Routes:
    GET  /healthz  Liveness payload.
    GET  /logs     Echoes query parameters.
    POST /logs     Echoes the JSON body.

Design:
    • Diagnostic JSON logging configured at app creation.
    • File sinks opened here are closed when the app shuts down.
    • Access lines go to ``settings.sink``; ``settings.static_extras`` are added
      to every line.
    • ``/logs`` tags its own lines with ``handler=logs`` via the request logger.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from httplog.application.http_logger import HttpLogger, new
from httplog.config.settings import Settings, get_settings
from httplog.domain.interfaces.sink import Sink
from httplog.infrastructure.logging.logger import configure_root_logging, get_json_logger
from httplog.infrastructure.middleware.access_log import AccessLogMiddleware, get_request_logger
from httplog.infrastructure.sinks.stream import StreamSink, open_sink

logger = get_json_logger(__name__)


def build_logger(settings: Settings, sink: Sink | None = None) -> HttpLogger:
    """Create the shared access logger for the service.

    Args:
        settings: Runtime settings (sink target, static extras).
        sink: Explicit sink; overrides ``settings.sink`` when given.

    Returns:
        HttpLogger: Logger with static extras pre-added.
    """
    access_logger = new(sink if sink is not None else open_sink(settings.sink))
    for key, value in settings.static_extras.items():
        access_logger.add(key, value)
    return access_logger


def _tag_handler(request: Request, name: str) -> None:
    request_logger = get_request_logger(request)
    if request_logger is not None:
        request_logger.add("handler", name)


@asynccontextmanager
async def access_log_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Close the access line sink on shutdown.

    Only sinks opened from ``settings.sink`` are closed; stdout, stderr and
    injected sinks are left alone.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to FastAPI to serve requests.
    """
    try:
        yield
    finally:
        sink = app.state.access_logger.sink
        if isinstance(sink, StreamSink):
            sink.close()
        logger.info("service_shutdown", extra={"extra": {"sink": type(sink).__name__}})


def create_app(settings: Settings | None = None, sink: Sink | None = None) -> FastAPI:
    """Create and configure the demo FastAPI application.

    Args:
        settings: Settings to use; ``get_settings()`` when omitted.
        sink: Optional sink override (tests pass an in-memory sink).

    Returns:
        FastAPI: Configured application.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)

    app = FastAPI(
        title="httplog demo",
        version=settings.service_version,
        description="Echo service wrapped in the httplog access log middleware.",
        lifespan=access_log_lifespan,
    )

    @app.get("/healthz")
    async def healthz() -> JSONResponse:
        """Lightweight health endpoint."""
        return JSONResponse({"status": "ok"})

    @app.get("/logs")
    async def echo_query(request: Request) -> JSONResponse:
        """Echo query parameters back to the caller."""
        _tag_handler(request, "logs")
        return JSONResponse(dict(request.query_params))

    @app.post("/logs")
    async def echo_body(request: Request) -> JSONResponse:
        """Echo the JSON body back to the caller (``{}`` when empty)."""
        _tag_handler(request, "logs")
        raw = await request.body()
        if not raw:
            return JSONResponse({})
        try:
            payload: Any = json.loads(raw)
        except ValueError:
            return JSONResponse({"detail": "body is not valid JSON"}, status_code=400)
        return JSONResponse(payload)

    app.state.access_logger = build_logger(settings, sink)
    app.add_middleware(AccessLogMiddleware, logger=app.state.access_logger)

    logger.info(
        "service_startup",
        extra={
            "extra": {
                "env": settings.environment.value,
                "version": settings.service_version,
                "sink": settings.sink if sink is None else type(sink).__name__,
            }
        },
    )
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "httplog.main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
    )
