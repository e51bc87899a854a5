"""Human-friendly multi-line console block.

    🟢  INFO  Jan 3, 10:30:45.123
      ➤ user signed in
        • user_id: 42
        • roles: [
      "admin"
    ]
    ────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from calmlog.core.levels import COLORS, DEFAULT_LEVEL_COLORS, DEFAULT_LEVEL_ICONS, LogLevel
from calmlog.core.utils import format_date, parse_timestamp
from calmlog.sensitive import DEFAULT_REDACTOR, Redactor

DIVIDER = "─" * 36
_NO_COLORS = {k: "" for k in COLORS}


@dataclass(slots=True)
class PrettyFormatter:
    """Console block renderer. Colours and icons are per-instance, never global.

    Args:
        colorize: Emit ANSI colour codes
        pretty_print: Human timestamp (``Jan 3, 10:30:45.123``) instead of ISO
        use_24_hour_format: 24-hour clock, otherwise 12-hour with AM/PM
        level_colors: ANSI code overrides per level
        level_icons: Icon overrides per level
    """

    colorize: bool = True
    pretty_print: bool = True
    use_24_hour_format: bool = True
    level_colors: Mapping[LogLevel, str] = field(default_factory=dict)
    level_icons: Mapping[LogLevel, str] = field(default_factory=dict)
    redactor: Redactor = DEFAULT_REDACTOR
    _colors: dict[LogLevel, str] = field(init=False, repr=False)
    _icons: dict[LogLevel, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._colors = {**DEFAULT_LEVEL_COLORS, **{LogLevel.parse(k): v for k, v in self.level_colors.items()}}
        self._icons = {**DEFAULT_LEVEL_ICONS, **{LogLevel.parse(k): v for k, v in self.level_icons.items()}}

    def format(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> str:
        c = COLORS if self.colorize else _NO_COLORS
        lvl = LogLevel.parse(level)
        level_color = self._colors[lvl] if self.colorize else ""
        lines = [
            "",
            f"{self._icons[lvl]}  {level_color}{lvl.label}{c['reset']}  {c['gray']}{self._display_time(timestamp)}{c['reset']}",
            f"  ➤ {c['bright_white']}{message}{c['reset']}",
        ]
        lines += [f"    • {c['gray']}{k}{c['reset']}: {c['cyan']}{self._format_value(v)}{c['reset']}"
                  for k, v in context.items()]
        lines.append(f"{c['dim']}{DIVIDER}{c['reset']}")
        return "\n".join(lines)

    def _display_time(self, timestamp: str) -> str:
        if not self.pretty_print or (dt := parse_timestamp(timestamp)) is None:
            return timestamp
        return format_date(dt, self.use_24_hour_format)

    def _format_value(self, value: object) -> str:
        safe = self.redactor.sanitize(value)
        return safe if isinstance(safe, str) else self.redactor.stringify(safe, indent=True)
