# src/httplog/domain/entities/raw_request.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""
Raw Request Entity

Purpose:
    Immutable, transport-neutral view of an incoming HTTP request: the request
    line, the header list, the body and the peer address. It can be built from
    an ASGI scope or parsed from a wire-format dump, and it can serialize
    itself back into a dump for text-scanning extraction.

Layer: domain/entities

Notes:
    * ``target`` is the request target exactly as it appears on the request
      line, so both origin-form (``/path?q=1``) and absolute-form
      (``https://host/path?q=1``) are preserved.
    * Header names keep the casing they were supplied with; lookups are
      case-insensitive and :meth:`RawRequest.dump` canonicalizes them.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Final

_REQUEST_LINE_RE: Final[re.Pattern[str]] = re.compile(r"^(\S+)\s+(\S+)\s+HTTP/(\S+)$")


def canonical_header_key(name: str) -> str:
    """Return the canonical MIME form of a header name.

    Example:
        ``x-forwarded-for`` becomes ``X-Forwarded-For``.
    """
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def join_host_port(host: str, port: int | str) -> str:
    """Combine host and port into a peer address, bracketing IPv6 hosts."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def split_host_port(addr: str) -> str:
    """Drop the port from a peer address.

    ``[::1]:8080`` yields ``::1`` and ``10.0.0.1:8080`` yields ``10.0.0.1``.
    Addresses without a splittable port (``10.0.0.1``, a bare ``::1``,
    unix socket paths) are returned verbatim.

    Args:
        addr: Peer address as reported by the server.

    Returns:
        The host portion, or ``addr`` unchanged.
    """
    if addr.startswith("["):
        end = addr.find("]:")
        if end > 0:
            return addr[1:end]
        return addr
    host, sep, _port = addr.rpartition(":")
    if not sep or ":" in host:
        return addr
    return host


def _coerce_headers(headers: Any) -> tuple[tuple[str, str], ...]:
    if isinstance(headers, Mapping):
        items: Iterable[tuple[Any, Any]] = headers.items()
    else:
        items = headers
    return tuple((str(k), str(v)) for k, v in items)


@dataclass(frozen=True, slots=True)
class RawRequest:
    """A raw HTTP request as seen on the wire.

    Args:
        method: HTTP verb (``GET``, ``POST`` ...).
        target: Request target from the request line, query string included.
        http_version: Protocol version without the ``HTTP/`` prefix.
        headers: Header pairs; a mapping is accepted and converted to pairs.
        body: Raw request body.
        remote_addr: Peer address, usually ``host:port``.
    """

    method: str = ""
    target: str = ""
    http_version: str = "1.1"
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    remote_addr: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, "headers", _coerce_headers(self.headers))

    def header(self, name: str) -> str:
        """Return the first value of header ``name`` (case-insensitive) or ``""``."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return ""

    def dump(self) -> bytes:
        """Serialize the request in HTTP/1.x wire format.

        The request line comes first, followed by ``Host`` (when present), the
        remaining headers sorted by canonical name, a blank line and the body.

        Returns:
            The request dump as bytes.
        """
        lines = [f"{self.method} {self.target} HTTP/{self.http_version}"]
        host = self.header("host")
        if host:
            lines.append(f"Host: {host}")
        rest = sorted(
            ((canonical_header_key(k), v) for k, v in self.headers if k.lower() != "host"),
            key=lambda kv: kv[0],
        )
        lines.extend(f"{k}: {v}" for k, v in rest)
        head = "\r\n".join(lines) + "\r\n\r\n"
        return head.encode("utf-8") + self.body

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any], body: bytes = b"") -> RawRequest:
        """Build a request from an ASGI HTTP connection scope.

        Args:
            scope: ASGI scope of type ``http``.
            body: Fully buffered request body.

        Returns:
            RawRequest: Request with an origin-form target.
        """
        raw_path = scope.get("raw_path")
        if raw_path:
            target = bytes(raw_path).decode("latin-1")
        else:
            target = str(scope.get("path", ""))
        query = scope.get("query_string") or b""
        if query:
            target = f"{target}?{bytes(query).decode('latin-1')}"

        headers = tuple(
            (bytes(k).decode("latin-1"), bytes(v).decode("latin-1"))
            for k, v in scope.get("headers", [])
        )

        client = scope.get("client")
        remote_addr = join_host_port(str(client[0]), client[1]) if client else ""

        return cls(
            method=str(scope.get("method", "")),
            target=target,
            http_version=str(scope.get("http_version", "1.1")),
            headers=headers,
            body=body,
            remote_addr=remote_addr,
        )

    @classmethod
    def from_wire(cls, data: bytes, remote_addr: str = "") -> RawRequest:
        """Parse a wire-format request dump (best effort, never raises).

        Anything that cannot be recognized is left empty: a missing or odd
        request line leaves ``method``/``target`` blank, header lines without
        a colon are skipped, and data without a blank-line separator has no
        body.

        Args:
            data: Request bytes (request line, headers, blank line, body).
            remote_addr: Peer address to attach.

        Returns:
            RawRequest: Parsed request.
        """
        head, body = data, b""
        for separator in (b"\r\n\r\n", b"\n\n"):
            idx = data.find(separator)
            if idx >= 0:
                head, body = data[:idx], data[idx + len(separator) :]
                break

        lines = [line.rstrip("\r") for line in head.decode("latin-1").split("\n")]
        method = target = ""
        version = "1.1"
        if lines:
            match = _REQUEST_LINE_RE.match(lines[0])
            if match:
                method, target, version = match.groups()
                lines = lines[1:]

        headers: list[tuple[str, str]] = []
        for line in lines:
            name, sep, value = line.partition(":")
            if sep and name.strip():
                headers.append((name.strip(), value.strip()))

        return cls(
            method=method,
            target=target,
            http_version=version,
            headers=tuple(headers),
            body=body,
            remote_addr=remote_addr,
        )


__all__ = ["RawRequest", "canonical_header_key", "join_host_port", "split_host_port"]
