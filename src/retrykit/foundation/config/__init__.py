"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    RetrykitSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "RetrySettings",
    "RetrykitSettings",
    "clear_settings_cache",
    "get_settings",
]
