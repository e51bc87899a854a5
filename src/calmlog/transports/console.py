"""Synchronous console transport."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TextIO

from calmlog.core.levels import LogLevel
from calmlog.formatters import Formatter, PrettyFormatter
from calmlog.sensitive import DEFAULT_REDACTOR, Redactor


@dataclass(slots=True)
class ConsoleTransport:
    """Render each entry immediately and print it.

    Uses its own PrettyFormatter built from the options below unless an
    explicit ``formatter`` is given.

    Args:
        output: Stream to write to (stdout when None, resolved per call so capture works)
        formatter: Replaces the pretty block renderer
        colorize, pretty_print, use_24_hour_format, level_colors, level_icons: PrettyFormatter options
    """

    name: str = "console"
    formatter: Formatter | None = None
    output: TextIO | None = None
    colorize: bool = True
    pretty_print: bool = True
    use_24_hour_format: bool = True
    level_colors: Mapping[LogLevel, str] = field(default_factory=dict)
    level_icons: Mapping[LogLevel, str] = field(default_factory=dict)
    redactor: Redactor = DEFAULT_REDACTOR

    def __post_init__(self) -> None:
        if self.formatter is None:
            self.formatter = PrettyFormatter(
                colorize=self.colorize, pretty_print=self.pretty_print, use_24_hour_format=self.use_24_hour_format,
                level_colors=self.level_colors, level_icons=self.level_icons, redactor=self.redactor,
            )

    def log(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> None:
        assert self.formatter is not None  # set in __post_init__
        print(self.formatter.format(level, message, timestamp, context), file=self.output or sys.stdout)
