"""Log levels with priorities, colours and icons."""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from calmlog.foundation.errors import InvalidLevelError


class LogLevel(StrEnum):
    """Ordered severity levels. A call is emitted iff its priority >= the configured minimum."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]

    @property
    def label(self) -> str:
        """Upper-case display name (``WARN``)."""
        return self.value.upper()

    def enabled(self, minimum: LogLevel) -> bool:
        return _PRIORITY[self] >= _PRIORITY[minimum]

    @classmethod
    def parse(cls, value: LogLevel | str) -> Self:
        """Parse a level name case-insensitively. Accepts ``warning`` and ``critical`` aliases."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            try:
                return cls(_ALIASES.get(name, name))
            except ValueError:
                pass
        raise InvalidLevelError(value)


_PRIORITY: dict[LogLevel, int] = {level: i for i, level in enumerate(LogLevel)}
_ALIASES = {"warning": "warn", "critical": "fatal", "err": "error"}

# ANSI colour codes, same scheme as the console renderer
COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m", "green": "\033[32m",
          "yellow": "\033[33m", "blue": "\033[34m", "magenta": "\033[35m", "cyan": "\033[36m",
          "gray": "\033[90m", "bright_white": "\033[97m"}

DEFAULT_LEVEL_COLORS: dict[LogLevel, str] = {
    LogLevel.DEBUG: COLORS["blue"],
    LogLevel.INFO: COLORS["green"],
    LogLevel.WARN: COLORS["yellow"],
    LogLevel.ERROR: COLORS["red"],
    LogLevel.FATAL: COLORS["magenta"],
}

DEFAULT_LEVEL_ICONS: dict[LogLevel, str] = {
    LogLevel.DEBUG: "🔍",
    LogLevel.INFO: "🟢",
    LogLevel.WARN: "🟡",
    LogLevel.ERROR: "🔴",
    LogLevel.FATAL: "💀",
}
