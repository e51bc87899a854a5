"""Transport protocol: a named sink that delivers one rendered entry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Destination for log entries.

    Optional lifecycle hooks are looked up with ``getattr``:
    ``initialize() -> bool`` (False means unusable) and ``cleanup()`` (flush and close).
    """

    name: str

    def log(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> None: ...


def initialize_transport(transport: Transport) -> bool:
    """Run the optional ``initialize`` hook. Only an explicit False counts as failure."""
    hook = getattr(transport, "initialize", None)
    return not callable(hook) or hook() is not False


def cleanup_transport(transport: Transport) -> None:
    """Run the optional ``cleanup`` hook."""
    if callable(hook := getattr(transport, "cleanup", None)):
        hook()
