# src/httplog/config/settings.py
# Copyright (c) Httplog.
# SPDX-License-Identifier: MIT
"""httplog Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the demo service and CLI: where access
    lines go, which static extras every line carries, diagnostic log level and
    the bind address for ``httplog serve``.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown env.
    - Explicit env names via `validation_alias`.
    - `HTTPLOG_EXTRAS` is parsed into `static_extras` in a model validator.
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


def parse_extra(entry: str) -> tuple[str, str]:
    """Split one ``key=value`` entry; the value may contain ``=`` or ``,``.

    Raises:
        ValueError: If the entry has no ``=`` or an empty key.
    """
    key, sep, value = entry.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"invalid extra {entry!r}; expected key=value")
    return key, value.strip()


def parse_extras(raw: str | None) -> dict[str, str]:
    """Parse ``k=v,k2=v2`` into a dict.

    Args:
        raw: Comma-separated ``key=value`` pairs; blanks are ignored.

    Returns:
        dict[str, str]: Parsed pairs in input order.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key.
    """
    extras: dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, value = parse_extra(entry)
        extras[key] = value
    return extras


class Settings(BaseSettings):
    """Typed configuration for httplog."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )

    log_level: str = Field(
        default="INFO",
        description="Level for httplog's own diagnostic logs (not access lines).",
        validation_alias="LOG_LEVEL",
    )

    sink: str = Field(
        default="stdout",
        min_length=1,
        description="Access line destination: 'stdout', 'stderr' or a file path.",
        validation_alias="HTTPLOG_SINK",
    )

    static_extras_raw: str | None = Field(
        default=None,
        description="Extras added to every line, as comma-separated key=value pairs.",
        validation_alias="HTTPLOG_EXTRAS",
    )

    static_extras: dict[str, str] = Field(
        default_factory=dict,
        description="Parsed HTTPLOG_EXTRAS.",
    )

    host: str = Field(
        default="127.0.0.1",
        description="Bind host for the demo service.",
        validation_alias="HTTPLOG_HOST",
    )

    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Bind port for the demo service.",
        validation_alias="HTTPLOG_PORT",
    )

    service_version: str = Field(
        default="0.1.0",
        description="Version reported by the demo service.",
        validation_alias="SERVICE_VERSION",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _compute_static_extras(self) -> Settings:
        """Parse `static_extras_raw` into `static_extras`.

        Returns:
            Settings: The validated settings instance.

        Raises:
            ValueError: If an extras entry is malformed.
        """
        if self.static_extras_raw is not None:
            self.static_extras = parse_extras(self.static_extras_raw)
        self.log_level = self.log_level.upper()
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid httplog configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "extra": {
                "environment": settings.environment.value,
                "sink": settings.sink,
                "static_extras": sorted(settings.static_extras),
                "log_level": settings.log_level,
            }
        },
    )
    return settings
