# src/httplog/domain/services/request_info_extractor.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Request info extraction.

Summary:
    Derives the access-line request fields (ip, method, path, user agent,
    params) from a :class:`RawRequest`.

Design:
    * The client IP comes from ``X-Forwarded-For`` when present (verbatim, no
      list splitting), otherwise from the peer address with the port dropped.
    * Method, path, user agent and params come from a single line-by-line scan
      of the request's wire dump. The request line yields method and target;
      a query string on the target is turned into a JSON-shaped string; the
      ``User-Agent`` header line yields the user agent.
    * When no query string was seen, params fall back to the last scanned
      line, which is the body for requests that carry one and ``""`` when the
      dump ends at the header terminator.
    * Extraction never raises. A request that cannot be dumped is scanned as
      an empty dump.

Layer:
    domain/services
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Final

from httplog.domain.entities.raw_request import RawRequest, split_host_port
from httplog.domain.entities.request_info import RequestInfo

logger = logging.getLogger(__name__)

FORWARDED_FOR_HEADER: Final[str] = "X-Forwarded-For"

_REQUEST_LINE_RE: Final[re.Pattern[str]] = re.compile(r"(.+)\s(.+)\sHTTP")
_USER_AGENT_RE: Final[re.Pattern[str]] = re.compile(r"User-Agent:\s(.+)")
_QUERY_RE: Final[re.Pattern[str]] = re.compile(r"(.+)\?(.+)")


def query_to_json(query: str) -> str:
    """Convert a raw query string into a JSON-object-shaped string.

    This is a textual transform: ``=`` becomes ``": "`` and ``&`` becomes
    ``", "``, wrapped in ``{"`` and ``"}``. Percent-escapes are not decoded and
    values containing ``=``, ``&`` or ``"`` produce invalid JSON.

    Example:
        ``a=1&b=2`` becomes ``{"a": "1", "b": "2"}``.
    """
    return '{"' + query.replace("=", '": "').replace("&", '", "') + '"}'


def client_ip(request: RawRequest) -> str:
    """Return the forwarded client address or the peer host."""
    forwarded = request.header(FORWARDED_FOR_HEADER)
    if forwarded:
        return forwarded
    return split_host_port(request.remote_addr)


def dump_request(request: RawRequest) -> str:
    """Return the request dump as text, or ``""`` if it cannot be produced."""
    try:
        raw = request.dump()
    except (AttributeError, TypeError, ValueError) as exc:
        logger.debug("request_dump_failed", extra={"extra": {"error": str(exc)}})
        return ""
    return raw.decode("utf-8", errors="replace")


def _split_lines(text: str) -> list[str]:
    # One trailing terminator does not start a new line; CR before LF is dropped.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def scan_dump(text: str) -> RequestInfo:
    """Scan a request dump for method, path, user agent and params.

    Args:
        text: Wire-format request dump.

    Returns:
        RequestInfo: Scanned fields; ``ip`` is always empty here.
    """
    method = path = user_agent = params = ""
    line = ""
    for line in _split_lines(text):
        request_line = _REQUEST_LINE_RE.search(line)
        if request_line:
            method, target = request_line.group(1), request_line.group(2)
            path = target
            query = _QUERY_RE.search(target)
            if query:
                path = query.group(1)
                params = query_to_json(query.group(2))

        ua = _USER_AGENT_RE.search(line)
        if ua:
            user_agent = ua.group(1)

    if not params:
        params = line

    return RequestInfo(method=method, path=path, user_agent=user_agent, params=params)


def extract_request_info(request: RawRequest) -> RequestInfo:
    """Derive every access-line request field from ``request``.

    Args:
        request: Raw request to inspect.

    Returns:
        RequestInfo: Freshly computed fields.
    """
    scanned = scan_dump(dump_request(request))
    return replace(scanned, ip=client_ip(request))


__all__ = [
    "FORWARDED_FOR_HEADER",
    "client_ip",
    "dump_request",
    "extract_request_info",
    "query_to_json",
    "scan_dump",
]
