"""Configuration management using pydantic-settings.

Provides validated configuration with support for:
- JSON config file (config.json)
- Environment overrides (DISCORD_LOGGER_ prefix, ``__`` for nesting)
- Type coercion and validation
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiConfig(BaseModel):
    """Configuration for the HTTP query API."""

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    cors_origins: list[str] = ["*"]


class AppSettings(BaseSettings):
    """Application settings with validation.

    Settings are loaded from a JSON config file (config.json). Any field
    missing from the file may be supplied through the environment, e.g.
    ``DISCORD_LOGGER_DISCORD_TOKEN`` or ``DISCORD_LOGGER_API__PORT``.
    """

    database_url: str = ""
    discord_token: str = ""
    # Guilds to sync slash commands to. Empty means a global sync.
    command_guilds: list[str] = []
    api: ApiConfig = ApiConfig()

    model_config = SettingsConfigDict(
        env_prefix="DISCORD_LOGGER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("command_guilds", mode="before")
    @classmethod
    def ensure_string_list(cls, v: Any) -> list[str]:
        """Ensure guilds are strings (for snowflake IDs)."""
        if isinstance(v, list):
            return [str(g) for g in v]
        return v

    @classmethod
    def from_json(cls, path: str | Path = "config.json") -> "AppSettings":
        """Load settings from a JSON config file.

        Args:
            path: Path to the JSON config file

        Returns:
            AppSettings instance with validated configuration
        """
        config_path = Path(path)
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        return cls()


@lru_cache
def get_settings(config_path: str = "config.json") -> AppSettings:
    """Get cached application settings.

    Args:
        config_path: Path to JSON config file (default: config.json)

    Returns:
        Cached AppSettings instance
    """
    return AppSettings.from_json(config_path)


def load_config(path: str | Path = "config.json") -> AppSettings:
    """Load configuration from file, bypassing the settings cache."""
    get_settings.cache_clear()
    return AppSettings.from_json(path)
