"""Correlation context: a per-operation id and start time visible to everything the operation calls.

Backed by a ContextVar, so the store follows the logical call graph: it
survives ``await`` points, every asyncio task copies the store active when it
was created, and sibling tasks never see each other's store. Nested scopes
shadow the outer one for their extent only.

Example:
    >>> def handler():
    ...     return get_current_id()
    >>> run_with_context(handler, "req-42")
    'req-42'
    >>> get_current_id()
    'unknown'

    >>> async def job():
    ...     await asyncio.sleep(0)
    ...     log.info("still correlated", request=get_current_id())
    >>> await run_with_context(job)
"""

from __future__ import annotations

import inspect
import time
import uuid
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TypeVar, overload

T = TypeVar("T")

UNKNOWN_ID = "unknown"

_store: ContextVar[CorrelationStore | None] = ContextVar("calmlog_correlation", default=None)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_id() -> str:
    """New unique correlation id (uuid4)."""
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class CorrelationStore:
    """Id and start time (ms since epoch) of one logical operation."""

    id: str
    start_time: int

    @classmethod
    def new(cls, existing_id: str | None = None) -> CorrelationStore:
        return cls(id=existing_id or generate_id(), start_time=_now_ms())

    def elapsed_ms(self) -> int:
        return _now_ms() - self.start_time


@overload
def run_with_context(fn: Callable[[], Awaitable[T]], existing_id: str | None = None) -> Awaitable[T]: ...
@overload
def run_with_context(fn: Callable[[], T], existing_id: str | None = None) -> T: ...


def run_with_context(fn: Callable[[], T] | Callable[[], Awaitable[T]], existing_id: str | None = None) -> T | Awaitable[T]:
    """Run ``fn`` inside a fresh correlation scope.

    The id is ``existing_id`` when given (e.g. an inbound ``x-request-id``),
    otherwise a new uuid. When ``fn`` returns an awaitable (coroutine
    functions, ``lambda: handler(req)``, objects with ``async __call__``) an
    awaitable is returned that keeps the scope active across every
    suspension inside it.
    """
    store = CorrelationStore.new(existing_id)
    token = _store.set(store)
    try:
        result = fn()
    finally:
        _store.reset(token)
    if inspect.isawaitable(result):
        return _run_async(store, result)
    return result  # type: ignore[return-value]


async def _run_async(store: CorrelationStore, awaitable: Awaitable[T]) -> T:
    token = _store.set(store)
    try:
        return await awaitable
    finally:
        _store.reset(token)


@contextmanager
def correlation_scope(existing_id: str | None = None) -> Iterator[CorrelationStore]:
    """Context-manager form of run_with_context, usable in sync and async code.

    Example:
        >>> with correlation_scope(request.headers.get("x-request-id")) as store:
        ...     response.headers["x-request-id"] = store.id
    """
    token = _store.set(store := CorrelationStore.new(existing_id))
    try:
        yield store
    finally:
        _store.reset(token)


def get_store() -> CorrelationStore | None:
    """Active store, or None outside any scope."""
    return _store.get()


def get_current_id() -> str:
    """Active correlation id, ``"unknown"`` outside any scope."""
    return store.id if (store := _store.get()) else UNKNOWN_ID


def get_current_start_time() -> int:
    """Start time of the active scope in ms, the current time outside any scope."""
    return store.start_time if (store := _store.get()) else _now_ms()
