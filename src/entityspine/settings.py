"""Centralized settings for entityspine.

One validated, cached settings object read from ``ENTITYSPINE_*``
environment variables and an optional ``.env`` file.

Fields
──────
dialect           : SQL dialect used when none is passed explicitly
default_timezone  : Zone attached to naive datetimes read from the store
database          : SQLite database path used by the CLI
log_level         : structlog log level
log_format        : ``console`` or ``json``

Examples:
    >>> from entityspine.settings import get_settings
    >>> get_settings().dialect
    'sqlite'

Tags:
    settings, configuration, pydantic, environment, entityspine
"""

from __future__ import annotations

from datetime import UTC, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from entityspine.dialect import get_dialect


class EntitySpineSettings(BaseSettings):
    """entityspine configuration.

    All fields can be set via ``ENTITYSPINE_*`` environment variables (e.g.
    ``ENTITYSPINE_DEFAULT_TIMEZONE=Europe/Paris``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITYSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── SQL ──────────────────────────────────────────────────────
    dialect: str = Field(default="sqlite")
    default_timezone: str = Field(default="UTC")

    # ── CLI ──────────────────────────────────────────────────────
    database: str = Field(default="entityspine.db")

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        get_dialect(value)
        return value.lower()

    @field_validator("default_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value.upper() != "UTC":
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone '{value}'") from e
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return value

    # ── Derived properties ───────────────────────────────────────

    @property
    def tzinfo(self) -> tzinfo:
        if self.default_timezone.upper() == "UTC":
            return UTC
        return ZoneInfo(self.default_timezone)


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, EntitySpineSettings] = {}


def get_settings(*, reload: bool = False) -> EntitySpineSettings:
    """Load, validate, and cache an :class:`EntitySpineSettings` instance."""
    if reload or "default" not in _settings_cache:
        _settings_cache["default"] = EntitySpineSettings()
    return _settings_cache["default"]


__all__ = ["EntitySpineSettings", "get_settings"]
