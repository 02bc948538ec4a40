# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Unit tests for HttpLogger (standalone usage)."""

from __future__ import annotations

import re

import pytest

from httplog.application.http_logger import HttpLogger, new
from httplog.domain.entities.raw_request import RawRequest

_DEFAULT_KEYS = ["level=I", "time=", "ip=", "method=", "path=", "ua=", "status=", "params=", "\n"]
_TIME_RE = re.compile(r"time=\S+")


def test_new_returns_logger_bound_to_sink(sink) -> None:
    logger = new(sink)

    assert isinstance(logger, HttpLogger)
    assert logger.sink is sink


def test_log_writes_each_default_field_once_then_appends(sink) -> None:
    logger = new(sink)
    logger.log()

    for want in _DEFAULT_KEYS:
        assert sink.text.count(want) == 1, f"{want!r} in {sink.text!r}"

    logger.log()
    for want in _DEFAULT_KEYS:
        assert sink.text.count(want) == 2, f"{want!r} in {sink.text!r}"


def test_log_performs_exactly_one_write_per_call(sink) -> None:
    logger = new(sink)
    logger.add("uid", 1)

    logger.log()

    assert len(sink.writes) == 1
    assert sink.writes[0].endswith(b"\n")
    assert not sink.writes[0].endswith(b"\n\n")
    assert not sink.writes[0].endswith(b" \n")


def test_repeated_log_lines_differ_only_in_time(sink) -> None:
    logger = new(sink)
    logger.set_request_info(RawRequest(method="GET", target="/a?x=1", remote_addr="10.0.0.1:5"))
    logger.set_status(204)
    logger.add("meta", "new-request")

    logger.log()
    logger.log()

    first, second = sink.lines
    assert _TIME_RE.sub("time=", first) == _TIME_RE.sub("time=", second)


def test_set_status(sink) -> None:
    logger = new(sink)
    logger.set_status(200)
    logger.log()

    assert "status=200" in sink.text


def test_set_request_info_post_then_forwarded_get(sink) -> None:
    logger = new(sink)
    post = RawRequest(
        method="POST",
        target="https://example.com/resources",
        headers={"Host": "example.com", "User-Agent": "request-ua"},
        body=b'{"foo": "bar"}',
        remote_addr="192.0.2.1:1234",
    )
    logger.set_request_info(post)
    logger.log()

    for want in [
        "ip=192.0.2.1 ",
        "method=POST",
        "path=https://example.com/resources",
        "ua=request-ua",
        'params={"foo": "bar"}',
    ]:
        assert want in sink.text

    sink.reset()
    get = RawRequest(
        method="GET",
        target="https://example.com/resources?foo=bar",
        headers={"User-Agent": "request-ua", "X-Forwarded-For": "127.0.0.1"},
        remote_addr="192.0.2.1:1234",
    )
    logger.set_request_info(get)
    logger.log()

    for want in [
        "ip=127.0.0.1",
        "method=GET",
        "path=https://example.com/resources ",
        "ua=request-ua",
        'params={"foo": "bar"}',
    ]:
        assert want in sink.text


def test_log_extras(sink) -> None:
    logger = new(sink)
    logger.add("uid", 1234)
    logger.add("secret", "shhh!")
    logger.log()

    for want in [*_DEFAULT_KEYS, "uid=1234", "secret=shhh!"]:
        assert sink.text.count(want) == 1, f"{want!r} in {sink.text!r}"


def test_add_overwrites_existing_key(sink) -> None:
    logger = new(sink)
    logger.add("uid", 1)
    logger.add("uid", 2)
    logger.log()

    assert "uid=2" in sink.text
    assert "uid=1" not in sink.text


def test_state_survives_status_and_extras_between_requests(sink) -> None:
    logger = new(sink)
    logger.set_status(500)
    logger.add("uid", 9)
    logger.set_request_info(RawRequest(method="GET", target="/next"))
    logger.log()

    assert "status=500" in sink.text
    assert "uid=9" in sink.text
    assert "path=/next" in sink.text


def test_child_copies_state_without_sharing_it(sink) -> None:
    parent = new(sink)
    parent.add("service", "api")

    child = parent.child()
    child.add("uid", 7)
    child.set_status(201)

    assert child.sink is sink
    assert child.state.extras == {"service": "api", "uid": 7}
    assert parent.state.extras == {"service": "api"}
    assert parent.state.status == 0


def test_sink_errors_propagate() -> None:
    class _FailingSink:
        def write(self, data: bytes, /) -> int:
            raise OSError("disk full")

    logger = new(_FailingSink())

    with pytest.raises(OSError, match="disk full"):
        logger.log()
