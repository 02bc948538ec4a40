# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""httplog: one-line-per-request HTTP access logging.

The logger writes a small set of default fields plus caller-supplied extras,
space separated, as ``key=value`` pairs:

    level=I time=2017-07-08T17:08:12UTC ip=193.92.20.19 method=GET path=/logs ua=Mozilla/5.0 status=200 params={}

Standalone:
    log = httplog.new(sys.stdout.buffer)
    log.add("uid", 1234)
    log.log()

Middleware (any ASGI app):
    app.add_middleware(httplog.AccessLogMiddleware, logger=httplog.new(sys.stdout.buffer))
"""

from __future__ import annotations

from httplog.application.http_logger import HttpLogger, new
from httplog.domain.entities.raw_request import RawRequest
from httplog.domain.entities.request_info import RequestInfo
from httplog.domain.exceptions.base import HttpLogError, SinkConfigurationError
from httplog.domain.interfaces.logger import Logger
from httplog.domain.interfaces.sink import Sink
from httplog.domain.services.request_info_extractor import extract_request_info, query_to_json
from httplog.infrastructure.middleware.access_log import (
    AccessLogMiddleware,
    get_request_logger,
    with_logging,
)
from httplog.infrastructure.sinks.stream import StreamSink, open_sink

__all__ = [
    "AccessLogMiddleware",
    "HttpLogError",
    "HttpLogger",
    "Logger",
    "RawRequest",
    "RequestInfo",
    "Sink",
    "SinkConfigurationError",
    "StreamSink",
    "extract_request_info",
    "get_request_logger",
    "new",
    "open_sink",
    "query_to_json",
    "with_logging",
]
