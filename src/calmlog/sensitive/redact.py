"""Redaction pass used by every formatter.

``Redactor.sanitize`` walks a context value once and returns a JSON-safe copy
in which wrapped sensitive values and pattern-matching strings are replaced
by the placeholder. Repeated container references become the circular
marker, so no input can make the walk recurse forever.

Example:
    >>> from calmlog.sensitive import SensitiveValue, sanitize
    >>> sanitize({"user": "ada", "token": SensitiveValue.of("abc", "[HIDDEN]")})
    {'user': 'ada', 'token': '[HIDDEN]'}
    >>> sanitize({"note": 'password="hunter22"'})
    {'note': '[REDACTED]'}
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping, Set
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from pathlib import PurePath
from typing import Any

import orjson
from pydantic import BaseModel

from calmlog.foundation.errors import JsonValue

from .patterns import SENSITIVE_PATTERNS
from .value import DEFAULT_PLACEHOLDER, SensitiveValue

CIRCULAR_MARKER = "[Circular]"
UNSERIALIZABLE_MARKER = "[Unserializable]"

_INT64_MIN, _UINT64_MAX = -(2**63), 2**64 - 1


@dataclass(frozen=True, slots=True)
class Redactor:
    """Pattern list and placeholder used to make context values safe to render.

    Args:
        patterns: Ordered regular expressions; a string matching any of them is replaced whole
        placeholder: Replacement text for pattern matches
        detect_patterns: Disable to only honour SensitiveValue wrappers
        circular_marker: Rendered in place of a container seen earlier in the same pass
    """

    patterns: tuple[re.Pattern[str], ...] = tuple(SENSITIVE_PATTERNS.values())
    placeholder: str = DEFAULT_PLACEHOLDER
    detect_patterns: bool = True
    circular_marker: str = CIRCULAR_MARKER

    def with_patterns(self, *extra: str | re.Pattern[str]) -> Redactor:
        """Return a redactor with additional patterns appended."""
        compiled = tuple(p if isinstance(p, re.Pattern) else re.compile(p) for p in extra)
        return dataclasses.replace(self, patterns=self.patterns + compiled)

    def is_sensitive(self, text: str) -> bool:
        return self.detect_patterns and any(p.search(text) for p in self.patterns)

    def sanitize(self, value: object) -> JsonValue:
        """Return a JSON-safe, redacted copy of ``value``."""
        return self._walk(value, set())

    def stringify(self, value: object, *, indent: bool = False) -> str:
        """Sanitize then serialize with orjson. Never raises."""
        option = orjson.OPT_NON_STR_KEYS | (orjson.OPT_INDENT_2 if indent else 0)
        try:
            return orjson.dumps(self.sanitize(value), option=option).decode()
        except (orjson.JSONEncodeError, TypeError):
            return f'"{UNSERIALIZABLE_MARKER}"'

    def _walk(self, value: object, seen: set[int]) -> JsonValue:
        match value:
            case SensitiveValue():
                return value.redacted
            case str():
                return self.placeholder if self.is_sensitive(value) else value
            case bool() | None | float():
                return value
            case int():
                return value if _INT64_MIN <= value <= _UINT64_MAX else str(value)
            case Enum():
                return self._walk(value.value, seen)
            case datetime() | date() | time():
                return value.isoformat()
            case timedelta():
                return value.total_seconds()
            case PurePath():
                return str(value)
            case bytes() | bytearray():
                return self._walk(bytes(value).decode("utf-8", "replace"), seen)
            case BaseException():
                return {"message": self._walk(str(value), seen)}

        if id(value) in seen:
            return self.circular_marker
        seen.add(id(value))

        match value:
            case Mapping():
                return {_key(k): self._walk(v, seen) for k, v in value.items()}
            case list() | tuple() | Set():
                return [self._walk(v, seen) for v in value]
            case BaseModel():
                return {k: self._walk(getattr(value, k), seen) for k in type(value).model_fields}
            case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
                return {f.name: self._walk(getattr(value, f.name), seen) for f in dataclasses.fields(value)}
        try:
            return self._walk(str(value), seen)
        except Exception:  # noqa: BLE001
            return UNSERIALIZABLE_MARKER


def _key(k: object) -> str:
    return k if isinstance(k, str) else str(k)


DEFAULT_REDACTOR = Redactor()


def sanitize(value: object, redactor: Redactor = DEFAULT_REDACTOR) -> JsonValue:
    """Module-level shortcut for ``DEFAULT_REDACTOR.sanitize``."""
    return redactor.sanitize(value)


def safe_stringify(value: object, *, indent: bool = True, redactor: Redactor = DEFAULT_REDACTOR) -> str:
    """JSON-render ``value`` through the redaction pass (indented by default)."""
    return redactor.stringify(value, indent=indent)


def unwrap_sensitive(value: Any) -> Any:
    """Replace SensitiveValue wrappers with their contents, recursively. Used only on approved paths."""
    return _unwrap(value, set())


def _unwrap(value: Any, seen: set[int]) -> Any:
    match value:
        case SensitiveValue():
            return value.get_value()
        case str() | bytes() | int() | float() | bool() | None:
            return value
    if id(value) in seen:
        return value
    seen.add(id(value))
    match value:
        case Mapping():
            return {k: _unwrap(v, seen) for k, v in value.items()}
        case list() | tuple():
            return [_unwrap(v, seen) for v in value]
    return value
