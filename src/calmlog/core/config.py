"""Logger configuration record.

Defaults here are fixed; environment-sensitive defaults (pretty output in
development, plain in production) come from ``calmlog.foundation.config``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .levels import LogLevel

if TYPE_CHECKING:
    from calmlog.formatters import Formatter
    from calmlog.sensitive import Redactor
    from calmlog.transports import Transport


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Immutable logger options. ``merged()`` returns an updated copy.

    Attributes:
        level: Minimum level emitted
        pretty_print: Human-readable console timestamps instead of ISO
        colorize: ANSI colours on the console
        include_stack_trace: Keep ``stack`` when rendering exceptions
        log_to_file / log_file_path: Add a FileTransport
        use_24_hour_format: Console clock style
        include_correlation_id: Add ``correlation_id`` to context inside a correlation scope
        transports: Explicit transport list, replaces console/file construction
        formatter: Formatter used by the built-in transports
        level_colors / level_icons: Per-level console overrides
        redactor: Redaction rules (DEFAULT_REDACTOR when None)
    """

    level: LogLevel = LogLevel.INFO
    pretty_print: bool = True
    colorize: bool = True
    include_stack_trace: bool = True
    log_to_file: bool = False
    log_file_path: str = "./app.log"
    use_24_hour_format: bool = True
    include_correlation_id: bool = True
    transports: Sequence[Transport] | None = None
    formatter: Formatter | None = None
    level_colors: Mapping[LogLevel, str] = field(default_factory=dict)
    level_icons: Mapping[LogLevel, str] = field(default_factory=dict)
    redactor: Redactor | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", LogLevel.parse(self.level))

    def merged(self, **options: Any) -> LoggerConfig:
        """Copy with ``options`` applied. Unknown option names raise TypeError."""
        return dataclasses.replace(self, **options) if options else self

    def transports_differ(self, other: LoggerConfig) -> bool:
        """Whether switching from ``other`` to this config requires rebuilding transports."""
        return any(
            getattr(self, name) is not getattr(other, name) if name in _IDENTITY_FIELDS
            else getattr(self, name) != getattr(other, name)
            for name in TRANSPORT_FIELDS
        )


TRANSPORT_FIELDS: tuple[str, ...] = (
    "log_to_file", "log_file_path", "transports", "formatter", "pretty_print", "colorize",
    "use_24_hour_format", "level_colors", "level_icons", "redactor",
)
_IDENTITY_FIELDS = frozenset({"transports", "formatter"})
