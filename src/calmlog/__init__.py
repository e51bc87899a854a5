"""calmlog - structured logging with correlation ids and sensitive-data protection.

Entries fan out to pluggable transports (pretty console, queued file),
credentials are redacted before any transport sees them, and every entry
logged inside a correlation scope carries that scope's id.

Quick Start:
    >>> from calmlog import Logger
    >>> log = Logger(level="debug")
    >>> log.info("user signed in", user_id=42)
    >>> log.error("payment failed", {"order": "A-17"}, error=exc)

Correlation:
    >>> from calmlog import run_with_context, get_current_id
    >>> run_with_context(lambda: log.info("handled"), "req-42")   # correlation_id="req-42"

Sensitive Data:
    >>> from calmlog import SensitiveValue, SensitiveLoggingApproval
    >>> log.info("login", password=SensitiveValue.of("hunter2"))   # password: [REDACTED]
    >>> approval = SensitiveLoggingApproval(reason="incident 311", approved_by="oncall")
    >>> log.info_with_sensitive_data("token refresh", {"token": SensitiveValue.of(tok)}, approval)

File Output:
    >>> with Logger(log_to_file=True, log_file_path="logs/app.log") as log:
    ...     log.warn("disk almost full", free_mb=120)

Query Performance:
    >>> from calmlog import QueryLogger
    >>> queries = QueryLogger(log, slow_query_threshold=100)
    >>> queries.log_query("SELECT * FROM users", None, 150, database="postgres")

Environment Settings:
    >>> log = Logger.from_settings()   # CALMLOG_ENVIRONMENT, CALMLOG_LOG_LEVEL, ...
"""

from .core import (
    DEFAULT_LEVEL_COLORS,
    DEFAULT_LEVEL_ICONS,
    SENSITIVE_PREFIX,
    UNKNOWN_ID,
    CorrelationStore,
    DatabaseStats,
    Logger,
    LoggerConfig,
    LogLevel,
    QueryLogEntry,
    QueryLogger,
    QueryLoggerConfig,
    QueryStats,
    correlation_scope,
    format_date,
    format_error,
    generate_id,
    get_current_id,
    get_current_start_time,
    get_store,
    iso_timestamp,
    run_with_context,
)
from .foundation.errors import ErrorCode, InvalidLevelError, LogFailure
from .formatters import Formatter, JsonFormatter, PrettyFormatter, TextFormatter
from .sensitive import (
    SENSITIVE_PATTERNS,
    Redactor,
    SensitiveLoggingApproval,
    SensitiveValue,
    contains_sensitive_data,
    redact_sensitive_data,
    safe_stringify,
    sanitize,
)
from .transports import ConsoleTransport, FileTransport, Transport
from .adapters import run_with_generic_context

__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Core
    "Logger", "LoggerConfig", "LogLevel", "DEFAULT_LEVEL_COLORS", "DEFAULT_LEVEL_ICONS", "SENSITIVE_PREFIX",
    # Correlation
    "CorrelationStore", "UNKNOWN_ID", "run_with_context", "correlation_scope", "generate_id",
    "get_store", "get_current_id", "get_current_start_time",
    # Query logging
    "QueryLogger", "QueryLoggerConfig", "QueryLogEntry", "QueryStats", "DatabaseStats",
    # Transports & formatters
    "Transport", "ConsoleTransport", "FileTransport",
    "Formatter", "JsonFormatter", "TextFormatter", "PrettyFormatter",
    # Sensitive data
    "SensitiveValue", "SensitiveLoggingApproval", "Redactor", "SENSITIVE_PATTERNS",
    "contains_sensitive_data", "redact_sensitive_data", "sanitize", "safe_stringify",
    # Errors
    "ErrorCode", "LogFailure", "InvalidLevelError",
    # Utilities
    "format_date", "format_error", "iso_timestamp",
    # Adapters
    "run_with_generic_context",
]
