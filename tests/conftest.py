# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest

from httplog.config.settings import get_settings

_SETTINGS_ENV = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "HTTPLOG_SINK",
    "HTTPLOG_EXTRAS",
    "HTTPLOG_HOST",
    "HTTPLOG_PORT",
    "SERVICE_VERSION",
)


class BufferSink:
    """In-memory sink recording every write call."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []

    def write(self, data: bytes, /) -> int:
        self.writes.append(data)
        return len(data)

    @property
    def text(self) -> str:
        return b"".join(self.writes).decode("utf-8")

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    def reset(self) -> None:
        self.writes.clear()


@pytest.fixture
def sink() -> BufferSink:
    """Fresh in-memory sink."""
    return BufferSink()


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from ambient httplog env and the settings cache."""
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
