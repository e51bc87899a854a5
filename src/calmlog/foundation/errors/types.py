"""Type aliases shared across calmlog.

Context values form a closed sum: primitives, sensitive wrappers, nested
mappings and sequences. Anything outside it is still accepted at runtime and
rendered through ``str()`` by the redactor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeAlias, Union

if TYPE_CHECKING:
    from calmlog.sensitive.value import SensitiveValue

JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]  # Any for recursive slots
JsonDict = dict[str, Any]

ContextValue: TypeAlias = Union[
    JsonPrimitive,
    "SensitiveValue[Any]",
    BaseException,
    Mapping[str, Any],
    Sequence[Any],
]
LogContext: TypeAlias = Mapping[str, ContextValue]
