# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Request Info Entity

Purpose:
    Immutable bundle of the request fields an access line reports. Produced
    fresh by the extractor for every request.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestInfo:
    """Fields derived from a single request.

    Args:
        ip: Client address (forwarded header value or peer host).
        method: HTTP verb from the request line.
        path: Request target without its query string.
        user_agent: ``User-Agent`` header value.
        params: JSON-object-shaped parameter string, or the trailing body line.
    """

    ip: str = ""
    method: str = ""
    path: str = ""
    user_agent: str = ""
    params: str = ""
