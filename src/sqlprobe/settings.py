"""
Settings for sqlprobe.

Manifesto:
    The harness never hard-codes endpoints or credentials. Every connection
    option, the statement cache threshold and the scenario selection come
    from ``SQLPROBE_*`` environment variables or a ``.env`` file, validated
    once at startup.

Features:
    - **ProbeSettings:** driver, endpoint, credentials, threshold, scenario
    - **.env file support:** Automatic loading via pydantic-settings
    - **Extra ignore:** Unknown env vars don't cause startup failures
    - **get_settings():** cached instance, ``reset_settings()`` for tests

Examples:
    >>> import os
    >>> os.environ["SQLPROBE_HOST"] = "db.internal"
    >>> get_settings().host
    'db.internal'

Tags:
    settings, configuration, pydantic, environment, sqlprobe

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProbeSettings(BaseSettings):
    """Connection and run configuration for the harness.

    Fields
    ──────
    driver                    : Adapter name (``postgresql`` or ``sqlite``)
    host / port               : Database endpoint
    database                  : Database name
    user / password           : Credentials
    sqlite_path               : Database file for the sqlite driver
    connect_timeout           : Seconds before a connect attempt is abandoned
    statement_cache_threshold : Executions before the driver server-prepares
                                a statement (None keeps the driver default)
    scenario                  : Named scenario to run
    steps                     : Explicit step list, overrides ``scenario``
    log_level / log_format    : structlog configuration
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLPROBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Endpoint ─────────────────────────────────────────────────
    driver: str = Field(default="postgresql")
    host: str = Field(default="localhost")
    port: int = Field(default=5432, ge=1, le=65535)
    database: str = Field(default="postgres")
    sqlite_path: str = Field(default=":memory:")
    connect_timeout: int = Field(default=10, ge=0)

    # ── Credentials ──────────────────────────────────────────────
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr(""))

    # ── Driver tuning ────────────────────────────────────────────
    statement_cache_threshold: int | None = Field(default=1, ge=0)

    # ── Scenario selection ───────────────────────────────────────
    scenario: str = Field(default="default")
    steps: list[str] = Field(default_factory=list)

    # ── Logging ──────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "console"] = "console"

    @field_validator("driver")
    @classmethod
    def _normalize_driver(cls, value: str) -> str:
        return value.strip().lower()


_settings: ProbeSettings | None = None


def get_settings() -> ProbeSettings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = ProbeSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


__all__ = [
    "ProbeSettings",
    "get_settings",
    "reset_settings",
]
