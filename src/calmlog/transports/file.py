"""Durable file transport with a FIFO write queue and backpressure.

``log()`` never writes directly: it formats the entry, appends it to a queue
and schedules draining. One drain loop runs at a time. When the stream
reports that its buffer is full, the loop suspends until the stream drains
and then resumes, so the queue may grow while the sink is slow but no entry
is dropped. The stream is flushed each time the queue empties.

Drain states:

    IDLE ──log()──▶ DRAINING ──write() is False──▶ WAITING_FOR_DRAIN
      ▲                 │  ▲                               │
      └──queue empty────┘  └──────────wait_drain()─────────┘

Inside a running asyncio loop draining is a task; elsewhere the queue drains
on the calling thread and a blocking ``flush()`` stands in for the drain
signal.

Example:
    >>> transport = FileTransport("logs/app.log")
    >>> transport.initialize()
    True
    >>> transport.log("info", "started", iso_timestamp(), {})
    >>> transport.cleanup()  # flushes anything still queued
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol, TextIO, runtime_checkable

from calmlog.foundation.errors import ErrorCode, LogFailure
from calmlog.formatters import Formatter, TextFormatter

logger = logging.getLogger("calmlog.transports.file")


class DrainState(StrEnum):
    IDLE = "idle"
    DRAINING = "draining"
    WAITING_FOR_DRAIN = "waiting_for_drain"


@runtime_checkable
class WriteStream(Protocol):
    """Append-only sink with a backpressure signal.

    ``write`` returns False once the stream's buffer is over its high-water
    mark; the writer should then wait for ``wait_drain`` before writing more.
    """

    def write(self, data: str) -> bool: ...
    def flush(self) -> None: ...
    async def wait_drain(self) -> None: ...
    def end(self) -> None: ...


@dataclass(slots=True)
class AppendFileStream:
    """Text file opened in append mode, signalling backpressure past ``high_water_mark`` buffered chars."""

    path: Path
    high_water_mark: int = 16 * 1024
    _fh: TextIO = field(init=False, repr=False)
    _buffered: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._fh = open(self.path, "a", encoding="utf-8")  # noqa: SIM115 - closed in end()

    @classmethod
    def open(cls, path: Path) -> AppendFileStream:
        return cls(path)

    def write(self, data: str) -> bool:
        self._fh.write(data)
        self._buffered += len(data)
        return self._buffered < self.high_water_mark

    def flush(self) -> None:
        self._fh.flush()
        self._buffered = 0

    async def wait_drain(self) -> None:
        self.flush()
        await asyncio.sleep(0)

    def end(self) -> None:
        if not self._fh.closed:
            self._fh.flush()
            self._fh.close()


@dataclass(slots=True)
class FileTransport:
    """Queue-backed transport writing single-line entries to a file.

    Args:
        file_path: Target file; parent directories are created on initialize()
        formatter: Line renderer (TextFormatter: ``[ts] LEVEL: msg | {json}``)
        stream_factory: Opens the WriteStream for a path
        name: Transport name used by Logger.remove_transport()
    """

    file_path: str | Path
    formatter: Formatter = field(default_factory=TextFormatter)
    stream_factory: Callable[[Path], WriteStream] = AppendFileStream.open
    name: str = "file"
    last_error: LogFailure | None = field(default=None, init=False)
    _queue: deque[str] = field(default_factory=deque, init=False, repr=False)
    _state: DrainState = field(default=DrainState.IDLE, init=False, repr=False)
    _stream: WriteStream | None = field(default=None, init=False, repr=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def path(self) -> Path:
        return Path(self.file_path)

    @property
    def ready(self) -> bool:
        """Whether a usable stream is open."""
        return self._stream is not None

    @property
    def pending(self) -> int:
        """Entries queued but not yet handed to the stream."""
        return len(self._queue)

    @property
    def state(self) -> DrainState:
        return self._state

    def initialize(self) -> bool:
        """Create the directory and open the stream. Returns False (and records last_error) on failure."""
        if self._stream is not None:
            self._close_stream()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self.stream_factory(self.path)
        except Exception as e:  # noqa: BLE001 - reported, transport stays unusable
            self._fail(ErrorCode.TRANSPORT_INIT, e)
            logger.warning("Failed to initialize file transport for '%s': %s", self.path, e)
            return False
        self.last_error = None
        self._schedule_drain()
        return True

    def log(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> None:
        self._queue.append(self.formatter.format(level, message, timestamp, context) + "\n")
        self._schedule_drain()

    async def flush(self) -> None:
        """Wait until the active drain loop has handed every queued entry to the stream."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    def cleanup(self) -> None:
        """Write everything still queued synchronously, then close the stream."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if (stream := self._stream) is None:
            if self._queue:
                logger.warning("File transport '%s' closed with %d undelivered entries", self.path, len(self._queue))
                self._queue.clear()
            return
        self._stream = None
        try:
            while self._queue:
                stream.write(self._queue[0])
                self._queue.popleft()
            stream.end()
        except Exception as e:  # noqa: BLE001
            self._fail(ErrorCode.WRITE_FAILED, e)
            logger.error("Error flushing log file '%s' on cleanup: %s", self.path, e)

    # ─────────────────────────────────────────────────────────────────────
    # Drain loop
    # ─────────────────────────────────────────────────────────────────────

    def _schedule_drain(self) -> None:
        if self._state is not DrainState.IDLE or self._stream is None or not self._queue:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._drain_blocking()
            return
        self._state = DrainState.DRAINING
        self._task = loop.create_task(self._drain(), name=f"calmlog-drain:{self.name}")

    async def _drain(self) -> None:
        try:
            while self._queue and (stream := self._stream) is not None:
                if not self._write_head(stream):
                    self._state = DrainState.WAITING_FOR_DRAIN
                    await stream.wait_drain()
                    self._state = DrainState.DRAINING
            self._flush_stream()
        except Exception as e:  # noqa: BLE001
            self._write_failed(e)
        finally:
            self._state = DrainState.IDLE

    def _drain_blocking(self) -> None:
        self._state = DrainState.DRAINING
        try:
            while self._queue and (stream := self._stream) is not None:
                if not self._write_head(stream):
                    self._state = DrainState.WAITING_FOR_DRAIN
                    stream.flush()
                    self._state = DrainState.DRAINING
            self._flush_stream()
        except Exception as e:  # noqa: BLE001
            self._write_failed(e)
        finally:
            self._state = DrainState.IDLE

    def _flush_stream(self) -> None:
        # queue empty: push buffered entries to the file
        if not self._queue and (stream := self._stream) is not None:
            stream.flush()

    def _write_head(self, stream: WriteStream) -> bool:
        # the entry leaves the queue only once the stream accepted it
        ok = stream.write(self._queue[0])
        self._queue.popleft()
        return ok

    def _write_failed(self, exc: Exception) -> None:
        self._fail(ErrorCode.WRITE_FAILED, exc)
        logger.error("Error writing to log file '%s': %s (%d entries held until re-initialized)",
                     self.path, exc, len(self._queue))
        self._close_stream()

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.end()
            except Exception as e:  # noqa: BLE001
                logger.debug("Ignoring error while closing '%s': %s", self.path, e)

    def _fail(self, code: ErrorCode, exc: BaseException) -> None:
        self.last_error = LogFailure.from_exception(code, self.name, exc)
