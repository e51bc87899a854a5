"""Core: levels, configuration, correlation context, the Logger dispatcher and the query logger."""

from .levels import DEFAULT_LEVEL_COLORS, DEFAULT_LEVEL_ICONS, LogLevel
from .utils import format_date, format_error, iso_timestamp
from .context import (
    UNKNOWN_ID,
    CorrelationStore,
    correlation_scope,
    generate_id,
    get_current_id,
    get_current_start_time,
    get_store,
    run_with_context,
)
from .config import TRANSPORT_FIELDS, LoggerConfig
from .logger import SENSITIVE_PREFIX, Logger
from .query import DatabaseStats, QueryLogEntry, QueryLogger, QueryLoggerConfig, QueryStats

__all__ = [
    "LogLevel", "DEFAULT_LEVEL_COLORS", "DEFAULT_LEVEL_ICONS",
    "format_date", "format_error", "iso_timestamp",
    "CorrelationStore", "UNKNOWN_ID", "correlation_scope", "generate_id",
    "get_current_id", "get_current_start_time", "get_store", "run_with_context",
    "LoggerConfig", "TRANSPORT_FIELDS",
    "Logger", "SENSITIVE_PREFIX",
    "QueryLogger", "QueryLoggerConfig", "QueryLogEntry", "QueryStats", "DatabaseStats",
]
