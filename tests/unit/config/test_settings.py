# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""Unit tests for Settings parsing and the cached accessor."""

from __future__ import annotations

import pytest

from httplog.config.settings import (
    Environment,
    Settings,
    get_settings,
    parse_extra,
    parse_extras,
)


def test_defaults_when_unset_are_sane() -> None:
    s = get_settings()

    assert s.environment is Environment.DEVELOPMENT
    assert s.sink == "stdout"
    assert s.static_extras == {}
    assert s.port == 8080
    assert s.log_level == "INFO"


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("HTTPLOG_SINK", "/var/log/httplog/access.log")
    monkeypatch.setenv("HTTPLOG_EXTRAS", "service=api, env = prod")
    monkeypatch.setenv("HTTPLOG_PORT", "9090")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = get_settings()

    assert s.environment is Environment.TEST
    assert s.sink == "/var/log/httplog/access.log"
    assert s.static_extras == {"service": "api", "env": "prod"}
    assert s.port == 9090
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("HTTPLOG_EXTRAS", "broken"),
        ("HTTPLOG_EXTRAS", "=value"),
        ("HTTPLOG_PORT", "0"),
        ("HTTPLOG_SINK", ""),
    ],
)
def test_invalid_env_raises_runtime_error(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()


def test_settings_accept_field_names() -> None:
    s = Settings(sink="stderr", static_extras_raw="a=1")

    assert s.sink == "stderr"
    assert s.static_extras == {"a": "1"}


def test_parse_extras_keeps_order_and_allows_empty_values() -> None:
    assert parse_extras("b=2,a=1,empty=") == {"b": "2", "a": "1", "empty": ""}
    assert parse_extras(None) == {}
    assert parse_extras(" , ") == {}


def test_parse_extra_splits_on_first_equals_only() -> None:
    assert parse_extra("note=a,b") == ("note", "a,b")
    assert parse_extra(" q = x=1 ") == ("q", "x=1")
    with pytest.raises(ValueError, match="expected key=value"):
        parse_extra("novalue")
