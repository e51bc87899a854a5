"""Configuration management with pydantic-settings."""

from .settings import (
    CalmlogSettings,
    LoggingSettings,
    QuerySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CalmlogSettings",
    "LoggingSettings",
    "QuerySettings",
    "clear_settings_cache",
    "get_settings",
]
