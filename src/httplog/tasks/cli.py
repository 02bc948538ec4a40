# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""httplog CLI: render access lines and run the demo service.

Commands:
    render   Turn a raw HTTP request dump (file or stdin) into an access line.
    serve    Run the demo echo service behind the access log middleware.

Environment:
    HTTPLOG_SINK     Access line destination for ``serve`` (stdout/stderr/path).
    HTTPLOG_EXTRAS   Static extras for ``serve`` (``k=v,k2=v2``).
    HTTPLOG_HOST     Bind host for ``serve``.
    HTTPLOG_PORT     Bind port for ``serve``.
    LOG_LEVEL        Diagnostic log level.
"""

from __future__ import annotations

import typer

from httplog.application.http_logger import new
from httplog.config.settings import get_settings, parse_extra
from httplog.domain.entities.raw_request import RawRequest
from httplog.domain.exceptions.base import SinkConfigurationError
from httplog.infrastructure.logging.logger import configure_root_logging, get_json_logger
from httplog.infrastructure.sinks.stream import open_sink

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("render")
def render(
    source: typer.FileBinaryRead = typer.Argument(  # noqa: B008
        "-", help="File holding a raw HTTP request; '-' reads stdin."
    ),
    status: int = typer.Option(0, help="Response status to report."),  # noqa: B008
    peer: str = typer.Option(
        "", help="Peer address (host:port) used when no X-Forwarded-For header is present."
    ),  # noqa: B008
    extra: list[str] = typer.Option(  # noqa: B008
        [], "--extra", "-e", help="Extra field as key=value; repeatable."
    ),
) -> None:
    """Print the access line for a raw request dump.

    The dump is parsed as request line, headers, blank line and body, then
    fed through the same extraction and rendering as the middleware.
    """
    try:
        extras = dict(parse_extra(entry) for entry in extra)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--extra") from exc

    data = source.read()
    access_logger = new(open_sink("stdout"))
    access_logger.set_request_info(RawRequest.from_wire(data, remote_addr=peer))
    access_logger.set_status(status)
    for key, value in extras.items():
        access_logger.add(key, value)
    access_logger.log()


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind host (default: HTTPLOG_HOST)."),  # noqa: B008
    port: int | None = typer.Option(None, help="Bind port (default: HTTPLOG_PORT)."),  # noqa: B008
    sink: str | None = typer.Option(
        None, help="Access line sink (default: HTTPLOG_SINK)."
    ),  # noqa: B008
) -> None:
    """Run the demo echo service with access logging enabled."""
    import uvicorn

    from httplog.main import create_app

    overrides = {
        k: v for k, v in {"host": host, "port": port, "sink": sink}.items() if v is not None
    }
    settings = get_settings().model_copy(update=overrides)

    try:
        application = create_app(settings)
    except SinkConfigurationError as exc:
        log.error("serve.sink_unavailable", extra={"extra": exc.details})
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    log.info("serve.starting", extra={"extra": {"host": settings.host, "port": settings.port}})
    uvicorn.run(application, host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    app()
