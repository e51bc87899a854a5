"""Environment-based configuration using pydantic-settings.

The core never reads the environment; these settings supply the
environment-sensitive defaults (pretty, colourful output with stack traces
and query logging in development, plain output in production).

Example:
    >>> from calmlog.foundation.config import get_settings
    >>> settings = get_settings()
    >>> log = Logger(settings.logger_config())

    # Or with environment variables:
    # CALMLOG_ENVIRONMENT=production
    # CALMLOG_LOG_LEVEL=warn
    # CALMLOG_LOG_LOG_TO_FILE=true
    # CALMLOG_QUERY_SLOW_QUERY_THRESHOLD=250
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, PositiveInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calmlog.core.config import LoggerConfig
from calmlog.core.levels import LogLevel
from calmlog.core.query import QueryLoggerConfig

LevelName = Literal["debug", "info", "warn", "error", "fatal"]


class LoggingSettings(BaseSettings):
    """Logger options. ``None`` means "decide from the environment"."""

    model_config = SettingsConfigDict(
        env_prefix="CALMLOG_LOG_",
        extra="ignore",
    )

    level: LevelName = "info"
    pretty_print: bool | None = None
    colorize: bool = True
    include_stack_trace: bool | None = None
    log_to_file: bool = False
    log_file_path: str = Field(default="./app.log", min_length=1)
    use_24_hour_format: bool = True
    include_correlation_id: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: object) -> object:
        """Accept any spelling LogLevel.parse accepts (``WARNING`` -> ``warn``)."""
        return LogLevel.parse(v).value if isinstance(v, str) else v


class QuerySettings(BaseSettings):
    """Query logger options."""

    model_config = SettingsConfigDict(
        env_prefix="CALMLOG_QUERY_",
        extra="ignore",
    )

    enabled: bool | None = None
    slow_query_threshold: NonNegativeFloat = Field(default=100.0, description="Slow query threshold in ms")
    max_logs: PositiveInt = Field(default=1000, description="Query history capacity")
    log_debug_queries: bool = False


class CalmlogSettings(BaseSettings):
    """Root settings, loaded from ``CALMLOG_`` variables and an optional ``.env`` file.

    Example environment variables:
        CALMLOG_ENVIRONMENT=production
        CALMLOG_LOG_LEVEL=debug
        CALMLOG_LOG_LOG_FILE_PATH=/var/log/app/app.log
        CALMLOG_QUERY_LOG_DEBUG_QUERIES=true
    """

    model_config = SettingsConfigDict(
        env_prefix="CALMLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    environment: Literal["development", "staging", "production"] = "development"
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def logger_config(self) -> LoggerConfig:
        """LoggerConfig with unset options resolved from the environment."""
        log, dev = self.logging, not self.is_production
        return LoggerConfig(
            level=LogLevel.parse(log.level),
            pretty_print=dev if log.pretty_print is None else log.pretty_print,
            colorize=log.colorize,
            include_stack_trace=dev if log.include_stack_trace is None else log.include_stack_trace,
            log_to_file=log.log_to_file,
            log_file_path=log.log_file_path,
            use_24_hour_format=log.use_24_hour_format,
            include_correlation_id=log.include_correlation_id,
        )

    def query_config(self) -> QueryLoggerConfig:
        """QueryLoggerConfig; query logging is on outside production unless set explicitly."""
        q = self.query
        return QueryLoggerConfig(
            enabled=not self.is_production if q.enabled is None else q.enabled,
            slow_query_threshold=q.slow_query_threshold,
            max_logs=q.max_logs,
            log_debug_queries=q.log_debug_queries,
        )


@lru_cache(maxsize=1)
def get_settings() -> CalmlogSettings:
    """Cached settings instance; call clear_settings_cache() after changing the environment."""
    return CalmlogSettings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
