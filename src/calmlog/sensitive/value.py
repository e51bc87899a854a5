"""Typed wrapper that keeps a value out of every rendered log line."""

from __future__ import annotations

from typing import Generic, NoReturn, TypeVar

T = TypeVar("T")

DEFAULT_PLACEHOLDER = "[REDACTED]"


class SensitiveValue(Generic[T]):
    """Holds one sensitive value; every textual form of it is the placeholder.

    ``str()``, ``repr()``, f-strings and JSON conversion all yield the
    placeholder. Only ``get_value()`` returns the wrapped value. Instances are
    immutable.

    Example:
        >>> token = SensitiveValue.of("s3cr3t", "[HIDDEN]")
        >>> f"token={token}"
        'token=[HIDDEN]'
        >>> token.get_value()
        's3cr3t'
    """

    __slots__ = ("_value", "_placeholder")

    _value: T
    _placeholder: str

    def __init__(self, value: T, placeholder: str = DEFAULT_PLACEHOLDER) -> None:
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_placeholder", placeholder)

    @classmethod
    def of(cls, value: T, placeholder: str | None = None) -> SensitiveValue[T]:
        """Factory mirroring the constructor, placeholder defaults to ``[REDACTED]``."""
        return cls(value, placeholder or DEFAULT_PLACEHOLDER)

    def get_value(self) -> T:
        """Return the wrapped value. Only call this where the real value is needed."""
        return self._value

    @property
    def redacted(self) -> str:
        return self._placeholder

    def __str__(self) -> str:
        return self._placeholder

    def __repr__(self) -> str:
        return self._placeholder

    def __format__(self, format_spec: str) -> str:
        return format(self._placeholder, format_spec)

    def __json__(self) -> str:
        return self._placeholder

    def __setattr__(self, name: str, value: object) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self) -> SensitiveValue[T]:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> SensitiveValue[T]:
        return self

    def __reduce__(self) -> NoReturn:
        raise TypeError(f"{type(self).__name__} cannot be pickled")
