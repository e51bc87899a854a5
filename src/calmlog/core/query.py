"""Query performance logging: slow-query warnings, a bounded history and aggregate stats.

Example:
    >>> queries = QueryLogger(log, slow_query_threshold=100)
    >>> queries.log_query("SELECT * FROM users WHERE id = $1", [42], 150, database="postgres")
    # => warning "Slow query detected"
    >>> with queries.timed_query("SELECT 1", database="sqlite"):
    ...     cursor.execute("SELECT 1")
    >>> queries.get_stats().slow_queries
    1
"""

from __future__ import annotations

import dataclasses
import time
from collections import deque
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from .context import get_store
from .utils import iso_timestamp

if TYPE_CHECKING:
    from calmlog.foundation.config import CalmlogSettings

    from .logger import Logger

UNKNOWN_DATABASE = "unknown"


@dataclass(frozen=True, slots=True)
class QueryLoggerConfig:
    """Query logger options.

    Attributes:
        enabled: When False, log_query() does nothing at all
        slow_query_threshold: Duration in ms at or above which a query is slow
        max_logs: Capacity of the history ring buffer
        log_debug_queries: Also emit every query at debug level
    """

    enabled: bool = True
    slow_query_threshold: float = 100
    max_logs: int = 1000
    log_debug_queries: bool = False

    def __post_init__(self) -> None:
        if self.max_logs < 1:
            raise ValueError(f"max_logs must be positive, got {self.max_logs}")


@dataclass(frozen=True, slots=True)
class QueryLogEntry:
    query: str
    params: Sequence[Any] | None
    duration: float
    timestamp: str
    database: str | None = None
    correlation_id: str | None = None


@dataclass(frozen=True, slots=True)
class DatabaseStats:
    count: int
    average_duration: float


@dataclass(frozen=True, slots=True)
class QueryStats:
    total_queries: int = 0
    slow_queries: int = 0
    average_duration: float = 0.0
    max_duration: float = 0.0
    by_database: dict[str, DatabaseStats] = field(default_factory=dict)


class QueryLogger:
    """Records query executions into a ring buffer and reports slow ones through a Logger.

    Args:
        logger: Destination for slow-query warnings and verbose debug entries
        config: Base options (QueryLoggerConfig defaults when None)
        **options: QueryLoggerConfig fields overriding ``config``
    """

    __slots__ = ("_logger", "_config", "_logs")

    def __init__(self, logger: Logger, config: QueryLoggerConfig | None = None, **options: Any) -> None:
        self._logger = logger
        self._config = dataclasses.replace(config or QueryLoggerConfig(), **options)
        self._logs: deque[QueryLogEntry] = deque(maxlen=self._config.max_logs)

    @classmethod
    def from_settings(cls, logger: Logger, settings: CalmlogSettings | None = None, **options: Any) -> Self:
        from calmlog.foundation.config import get_settings
        return cls(logger, (settings or get_settings()).query_config(), **options)

    @property
    def config(self) -> QueryLoggerConfig:
        return self._config

    def log_query(
        self,
        query: str,
        params: Sequence[Any] | None,
        duration_ms: float,
        database: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        """Record one execution. Slow-query warning and verbose debug emission are independent."""
        if not self._config.enabled:
            return
        if correlation_id is None and (store := get_store()) is not None:
            correlation_id = store.id
        self._logs.append(QueryLogEntry(query, params, duration_ms, iso_timestamp(), database, correlation_id))

        ctx = {"duration": f"{duration_ms}ms", "query": query, "params": params,
               "database": database, "correlation_id": correlation_id}
        ctx = {k: v for k, v in ctx.items() if v is not None}
        if duration_ms >= self._config.slow_query_threshold:
            self._logger.warn("Slow query detected", ctx)
        if self._config.log_debug_queries:
            self._logger.debug("Database query executed", ctx)

    @contextmanager
    def timed_query(self, query: str, params: Sequence[Any] | None = None, database: str | None = None) -> Iterator[None]:
        """Measure the wrapped block and log it as one query, also when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.log_query(query, params, round((time.perf_counter() - start) * 1000, 2), database)

    def get_logs(self) -> list[QueryLogEntry]:
        return list(self._logs)

    def get_slow_queries(self, threshold: float | None = None) -> list[QueryLogEntry]:
        limit = self._config.slow_query_threshold if threshold is None else threshold
        return [e for e in self._logs if e.duration >= limit]

    def clear_logs(self) -> None:
        self._logs.clear()

    def configure(self, **options: Any) -> None:
        """Update options. Shrinking max_logs keeps the newest entries."""
        self._config = dataclasses.replace(self._config, **options)
        if self._logs.maxlen != self._config.max_logs:
            self._logs = deque(self._logs, maxlen=self._config.max_logs)

    def get_stats(self) -> QueryStats:
        """Count, slow count, mean and max duration, and per-database count/mean, in one pass."""
        if not self._logs:
            return QueryStats()
        threshold = self._config.slow_query_threshold
        total = slow = 0
        total_duration = max_duration = 0.0
        per_db: dict[str, list[float]] = {}  # name -> [count, total duration]
        for entry in self._logs:
            total += 1
            total_duration += entry.duration
            max_duration = max(max_duration, entry.duration)
            slow += entry.duration >= threshold
            acc = per_db.setdefault(entry.database or UNKNOWN_DATABASE, [0, 0.0])
            acc[0] += 1
            acc[1] += entry.duration
        return QueryStats(
            total_queries=total,
            slow_queries=slow,
            average_duration=total_duration / total,
            max_duration=max_duration,
            by_database={db: DatabaseStats(int(n), d / n) for db, (n, d) in per_db.items()},
        )
