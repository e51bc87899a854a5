"""Correlated logging for work outside a request cycle: jobs, scripts, queue consumers.

Example:
    >>> async def nightly_report():
    ...     log.info("collecting rows")          # carries the job's correlation_id
    ...     return 42
    >>> await run_with_generic_context(nightly_report, logger=log, context_name="NightlyReport")
    # ▶ Starting NightlyReport
    # collecting rows
    # ◀ Finished NightlyReport  (duration: "12ms")
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from calmlog.core.context import correlation_scope
from calmlog.core.logger import Logger

T = TypeVar("T")


async def run_with_generic_context(
    fn: Callable[[], Awaitable[T] | T],
    *,
    logger: Logger | None = None,
    correlation_id: str | None = None,
    context_name: str = "GenericContext",
    log_start_end: bool = True,
    **logger_options: Any,
) -> T:
    """Run ``fn`` (sync or async) in its own correlation scope.

    Args:
        fn: Zero-argument callable; coroutine results are awaited
        logger: Logger to use; a new one built from ``logger_options`` when None
        correlation_id: Reuse this id instead of generating one
        context_name: Name used in the start, finish and error messages
        log_start_end: Log the start and finish entries

    Errors are logged at error level with the elapsed duration and re-raised.
    """
    log = logger or Logger(**logger_options)
    with correlation_scope(correlation_id) as store:
        base = {"context_name": context_name, "correlation_id": store.id}
        try:
            if log_start_end:
                log.info(f"▶ Starting {context_name}", base)
            result = fn()
            if inspect.isawaitable(result):
                result = await result
            if log_start_end:
                log.info(f"◀ Finished {context_name}", base, duration=f"{store.elapsed_ms()}ms")
            return result  # type: ignore[return-value]
        except Exception as e:
            log.error(f"💥 Error in {context_name}", base, duration=f"{store.elapsed_ms()}ms", error=e)
            raise
