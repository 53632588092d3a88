"""Environment-based configuration using pydantic-settings.

Example:
    >>> from retrykit.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_attempts
    3

    # Or with environment variables:
    # RETRYKIT_RETRY_MAX_ATTEMPTS=5
    # RETRYKIT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry policy and jitter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_RETRY_",
        extra="ignore",
    )

    max_attempts: PositiveInt = Field(default=3, description="Total attempts including the first")
    initial_delay: NonNegativeFloat = Field(default=1.0, description="Delay before the first retry, in seconds")
    max_delay: NonNegativeFloat = Field(default=10.0, description="Delay cap in seconds")
    multiplier: Annotated[float, Field(ge=1.0)] = 2.0
    jitter_low: NonNegativeFloat = 0.8
    jitter_high: NonNegativeFloat = 1.2
    log_attempts: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> RetrySettings:
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        if self.jitter_high < self.jitter_low:
            raise ValueError("jitter_high must be >= jitter_low")
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class RetrykitSettings(BaseSettings):
    """Root settings for retrykit.

    Loads configuration from environment variables with RETRYKIT_ prefix.

    Example environment variables:
        RETRYKIT_RETRY_MAX_ATTEMPTS=5
        RETRYKIT_RETRY_INITIAL_DELAY=0.5
        RETRYKIT_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetrykitSettings:
    """Get the process-wide settings instance (cached)."""
    return RetrykitSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
