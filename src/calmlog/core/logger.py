"""The dispatcher: level gate, context processing, fan-out to transports.

Quick Start:
    >>> from calmlog import Logger
    >>> log = Logger(level="debug")
    >>> log.info("user signed in", user_id=42)
    >>> log.error("payment failed", {"order": "A-17"}, error=exc)

    # File output next to the console; flush before exit
    >>> with Logger(log_to_file=True, log_file_path="logs/app.log") as log:
    ...     log.warn("disk almost full", free_mb=120)

Every entry passes the redaction pass before any transport sees it, and
inside a correlation scope the scope's id is attached as ``correlation_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from calmlog.foundation.errors import ErrorCode, InvalidLevelError, JsonDict, LogContext
from calmlog.formatters import TextFormatter
from calmlog.sensitive import DEFAULT_REDACTOR, Redactor, SensitiveLoggingApproval, unwrap_sensitive
from calmlog.transports import (
    ConsoleTransport,
    FileTransport,
    Transport,
    cleanup_transport,
    initialize_transport,
)

from .config import LoggerConfig
from .context import get_store
from .levels import LogLevel
from .utils import format_error, iso_timestamp

if TYPE_CHECKING:
    from types import TracebackType

    from calmlog.foundation.config import CalmlogSettings

_diag = logging.getLogger("calmlog.logger")

SENSITIVE_PREFIX = "[SENSITIVE DATA] "
_REJECTION_MESSAGES = {
    ErrorCode.APPROVAL_MISSING: "Attempted to log sensitive data without proper approval",
    ErrorCode.APPROVAL_EXPIRED: "Attempted to log sensitive data with expired approval",
}


class Logger:
    """Structured logger owning an ordered list of transports.

    Args:
        config: Base configuration (LoggerConfig defaults when None)
        **options: LoggerConfig fields overriding ``config``

    Example:
        >>> log = Logger(level="warn", transports=[my_transport])
        >>> log.info("ignored")      # below threshold, no work at all
        >>> log.warn("delivered")
    """

    __slots__ = ("_config", "_transports")

    def __init__(self, config: LoggerConfig | None = None, **options: Any) -> None:
        self._config = (config or LoggerConfig()).merged(**options)
        self._transports: list[Transport] = self._build_transports()

    @classmethod
    def from_settings(cls, settings: CalmlogSettings | None = None, **options: Any) -> Self:
        """Build a logger from environment settings (``get_settings()`` when None)."""
        from calmlog.foundation.config import get_settings
        return cls((settings or get_settings()).logger_config(), **options)

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def transports(self) -> tuple[Transport, ...]:
        return tuple(self._transports)

    @property
    def redactor(self) -> Redactor:
        return self._config.redactor or DEFAULT_REDACTOR

    # ─────────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────────

    def log(self, level: LogLevel | str, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        """Emit one entry to every transport, in registration order.

        Nothing at all happens when ``level`` is below the configured minimum.
        An unknown level name and transport failures are reported as
        diagnostics and never raised; the entry is dropped in the former case.
        """
        if (lvl := self._enabled_level(level)) is None:
            return
        ctx = self._process_context({**context, **fields} if context else fields)
        timestamp = iso_timestamp()
        for transport in tuple(self._transports):
            try:
                transport.log(lvl, message, timestamp, ctx)
            except Exception as e:  # noqa: BLE001
                _diag.warning("[%s] Transport '%s' failed: %s",
                              ErrorCode.TRANSPORT_FAILED, getattr(transport, "name", "?"), e)

    def debug(self, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, message, context, **fields)

    def info(self, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.INFO, message, context, **fields)

    def warn(self, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.WARN, message, context, **fields)

    warning = warn

    def error(self, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.ERROR, message, context, **fields)

    def fatal(self, message: str, context: LogContext | None = None, /, **fields: Any) -> None:
        self.log(LogLevel.FATAL, message, context, **fields)

    def log_error(self, message: str, error: BaseException, context: LogContext | None = None, /, **fields: Any) -> None:
        """Log an exception at error level under the ``error`` key."""
        self.log(LogLevel.ERROR, message, {**(context or {}), **fields, "error": error})

    def _enabled_level(self, level: LogLevel | str) -> LogLevel | None:
        """Parsed level when it passes the gate, None otherwise."""
        try:
            lvl = LogLevel.parse(level)
        except InvalidLevelError as e:
            _diag.warning("[%s] %s; entry dropped", e.code, e)
            return None
        return lvl if lvl.enabled(self._config.level) else None

    def _process_context(self, context: Mapping[str, Any]) -> JsonDict:
        ctx: dict[str, Any] = {
            k: format_error(v, self._config.include_stack_trace) if isinstance(v, BaseException) else v
            for k, v in context.items()
        }
        if self._config.include_correlation_id and (store := get_store()) is not None:
            ctx.setdefault("correlation_id", store.id)
        return self.redactor.sanitize(ctx)  # type: ignore[return-value]

    # ─────────────────────────────────────────────────────────────────────
    # Sensitive data
    # ─────────────────────────────────────────────────────────────────────

    def log_with_sensitive_data(
        self,
        level: LogLevel | str,
        message: str,
        data: LogContext,
        approval: SensitiveLoggingApproval,
    ) -> None:
        """Log ``data`` with SensitiveValue wrappers removed, given a valid approval.

        Without one (blank reason or approver, or an expiry not in the future)
        a warning audit entry is logged instead and ``data`` is dropped: the
        audit entry never contains any part of it.
        Below the configured minimum the approval is not even checked.
        """
        if (lvl := self._enabled_level(level)) is None:
            return
        if (code := approval.check()) is not None:
            audit = {"attempted_level": lvl.value, "reason_code": code.value,
                     "approved_by": approval.approved_by, "approval_reason": approval.reason}
            self.warn(_REJECTION_MESSAGES[code], {k: v for k, v in audit.items() if v})
            return
        self.log(lvl, SENSITIVE_PREFIX + message, {**unwrap_sensitive(data), "sensitive_approval": approval.as_context()})

    def debug_with_sensitive_data(self, message: str, data: LogContext, approval: SensitiveLoggingApproval) -> None:
        self.log_with_sensitive_data(LogLevel.DEBUG, message, data, approval)

    def info_with_sensitive_data(self, message: str, data: LogContext, approval: SensitiveLoggingApproval) -> None:
        self.log_with_sensitive_data(LogLevel.INFO, message, data, approval)

    def warn_with_sensitive_data(self, message: str, data: LogContext, approval: SensitiveLoggingApproval) -> None:
        self.log_with_sensitive_data(LogLevel.WARN, message, data, approval)

    def error_with_sensitive_data(self, message: str, data: LogContext, approval: SensitiveLoggingApproval) -> None:
        self.log_with_sensitive_data(LogLevel.ERROR, message, data, approval)

    # ─────────────────────────────────────────────────────────────────────
    # Configuration & lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def configure(self, **options: Any) -> None:
        """Merge options into the live config; rebuild transports if any transport option changed."""
        old, self._config = self._config, self._config.merged(**options)
        if self._config.transports_differ(old):
            self._teardown()
            self._transports = self._build_transports()

    def set_level(self, level: LogLevel | str) -> None:
        self.configure(level=level)

    def add_transport(self, transport: Transport) -> bool:
        """Initialize and append a transport. Returns the initialize() result; it is added either way."""
        ok = initialize_transport(transport)
        self._transports.append(transport)
        return ok

    def remove_transport(self, name: str) -> bool:
        """Remove the most recently added transport called ``name``. Its cleanup is the caller's job."""
        for i in range(len(self._transports) - 1, -1, -1):
            if getattr(self._transports[i], "name", None) == name:
                del self._transports[i]
                return True
        return False

    def cleanup(self) -> None:
        """Flush and close every transport, then empty the list. Call before exit when logging to files."""
        self._teardown()
        self._transports = []

    async def flush(self) -> None:
        """Wait for transports with asynchronous queues to hand off everything queued so far."""
        for transport in tuple(self._transports):
            if callable(flush := getattr(transport, "flush", None)):
                await flush()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        self.cleanup()

    def _teardown(self) -> None:
        for transport in self._transports:
            try:
                cleanup_transport(transport)
            except Exception as e:  # noqa: BLE001
                _diag.warning("Cleanup of transport '%s' failed: %s", getattr(transport, "name", "?"), e)

    def _build_transports(self) -> list[Transport]:
        cfg = self._config
        if cfg.transports is not None:
            explicit = list(cfg.transports)
            for t in explicit:
                if not initialize_transport(t):
                    _diag.warning("Transport '%s' failed to initialize", getattr(t, "name", "?"))
            return explicit

        transports: list[Transport] = [ConsoleTransport(
            formatter=cfg.formatter, colorize=cfg.colorize, pretty_print=cfg.pretty_print,
            use_24_hour_format=cfg.use_24_hour_format, level_colors=cfg.level_colors,
            level_icons=cfg.level_icons, redactor=self.redactor,
        )]
        if cfg.log_to_file:
            file = FileTransport(cfg.log_file_path, cfg.formatter or TextFormatter(self.redactor))
            if file.initialize():
                transports.append(file)
            else:
                _diag.warning("File logging to '%s' disabled, continuing with console only", cfg.log_file_path)
        return transports

    def __repr__(self) -> str:
        names = ", ".join(getattr(t, "name", "?") for t in self._transports)
        return f"Logger(level={self._config.level.value}, transports=[{names}])"
