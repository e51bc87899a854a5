"""Formatter protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Formatter(Protocol):
    """Renders one entry to a string. Implementations must route context through a Redactor."""

    def format(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> str: ...
