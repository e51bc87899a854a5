"""Machine-readable formatters: JSON lines and single-line text."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import orjson

from calmlog.sensitive import DEFAULT_REDACTOR, Redactor

_ONE_LINE = str.maketrans({"\n": "\\n", "\r": "\\r"})


@dataclass(slots=True)
class JsonFormatter:
    """One JSON object per entry: ``{"level", "message", "timestamp", **context}``.

    Context keys that collide with the three fixed keys override them, the
    same way a spread would.
    """

    redactor: Redactor = DEFAULT_REDACTOR

    def format(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> str:
        ctx = self.redactor.sanitize(context) if context else {}
        return orjson.dumps({"level": str(level), "message": message, "timestamp": timestamp, **ctx}).decode()


@dataclass(slots=True)
class TextFormatter:
    """``[<timestamp>] <LEVEL>: <message>`` with ``| <json context>`` when context is non-empty."""

    redactor: Redactor = DEFAULT_REDACTOR

    def format(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> str:
        line = f"[{timestamp}] {str(level).upper()}: {message.translate(_ONE_LINE)}"
        return f"{line} | {self.redactor.stringify(context)}" if context else line
