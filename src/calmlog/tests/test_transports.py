"""Tests for console and file transports, including the file drain queue."""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path

import pytest

from calmlog import ConsoleTransport, ErrorCode, FileTransport, JsonFormatter, Transport
from calmlog.transports import AppendFileStream, DrainState, WriteStream, cleanup_transport, initialize_transport

TS = "2024-01-03T10:30:45.123Z"


class FakeStream:
    """WriteStream double recording writes; can signal backpressure or fail."""

    def __init__(self, *, accept: bool = True, fail_on: int | None = None, block: bool = False) -> None:
        self.accept = accept
        self.fail_on = fail_on
        self.written: list[str] = []
        self.drain_waits = 0
        self.ended = False
        self._calls = 0
        self._release = asyncio.Event() if block else None

    def write(self, data: str) -> bool:
        self._calls += 1
        if self.fail_on is not None and self._calls == self.fail_on:
            raise OSError("disk full")
        self.written.append(data)
        return self.accept

    def flush(self) -> None:
        pass

    async def wait_drain(self) -> None:
        self.drain_waits += 1
        if self._release is not None:
            await self._release.wait()
        await asyncio.sleep(0)

    def end(self) -> None:
        self.ended = True


def _file_transport(tmp_path: Path, stream: FakeStream) -> FileTransport:
    return FileTransport(tmp_path / "app.log", formatter=JsonFormatter(), stream_factory=lambda _path: stream)


def _lines(stream: FakeStream) -> list[str]:
    return [line.split('"message":"')[1].split('"')[0] for line in stream.written]


# ═════════════════════════════════════════════════════════════════════════════
# Protocol & lifecycle helpers
# ═════════════════════════════════════════════════════════════════════════════


def test_builtin_transports_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(ConsoleTransport(), Transport)
    assert isinstance(FileTransport(tmp_path / "a.log"), Transport)
    assert isinstance(FakeStream(), WriteStream)


def test_lifecycle_hooks_are_optional() -> None:
    class Bare:
        name = "bare"

        def log(self, level: str, message: str, timestamp: str, context: object) -> None:
            pass

    assert initialize_transport(Bare()) is True  # type: ignore[arg-type]
    cleanup_transport(Bare())  # type: ignore[arg-type]


def test_initialize_only_false_is_failure() -> None:
    class NoneInit:
        name = "n"

        def log(self, *args: object) -> None:
            pass

        def initialize(self) -> None:
            return None

    assert initialize_transport(NoneInit()) is True  # type: ignore[arg-type]


# ═════════════════════════════════════════════════════════════════════════════
# ConsoleTransport
# ═════════════════════════════════════════════════════════════════════════════


def test_console_prints_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    ConsoleTransport(colorize=False, pretty_print=False).log("info", "hello", TS, {"k": "v"})
    out = capsys.readouterr().out
    assert f"🟢  INFO  {TS}" in out
    assert "  ➤ hello" in out
    assert "    • k: v" in out


def test_console_explicit_formatter_and_output() -> None:
    buf = io.StringIO()
    ConsoleTransport(formatter=JsonFormatter(), output=buf).log("warn", "w", TS, {})
    assert buf.getvalue() == f'{{"level":"warn","message":"w","timestamp":"{TS}"}}\n'


# ═════════════════════════════════════════════════════════════════════════════
# FileTransport - synchronous callers
# ═════════════════════════════════════════════════════════════════════════════


def test_file_creates_directories_and_writes(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "app.log"
    transport = FileTransport(path)
    assert transport.initialize() is True
    assert transport.ready
    transport.log("info", "first", TS, {})
    transport.log("error", "second", TS, {"code": 7})
    transport.cleanup()

    assert path.read_text(encoding="utf-8").splitlines() == [
        f"[{TS}] INFO: first",
        f'[{TS}] ERROR: second | {{"code":7}}',
    ]
    assert not transport.ready


def test_file_appends_to_existing(tmp_path: Path) -> None:
    path = tmp_path / "app.log"
    path.write_text("old\n", encoding="utf-8")
    transport = FileTransport(path)
    transport.initialize()
    transport.log("info", "new", TS, {})
    transport.cleanup()
    assert path.read_text(encoding="utf-8") == f"old\n[{TS}] INFO: new\n"


def test_file_initialize_failure_reported(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    transport = FileTransport(blocker / "app.log")

    with caplog.at_level(logging.WARNING, logger="calmlog.transports.file"):
        assert transport.initialize() is False
    assert not transport.ready
    assert transport.last_error is not None
    assert transport.last_error.code is ErrorCode.TRANSPORT_INIT
    assert "Failed to initialize file transport" in caplog.text

    # unusable, but log() never raises
    transport.log("info", "dropped", TS, {})
    assert transport.pending == 1
    transport.cleanup()
    assert transport.pending == 0


def test_file_write_failure_holds_entries_until_reinitialized(tmp_path: Path) -> None:
    broken = FakeStream(fail_on=2)
    transport = _file_transport(tmp_path, broken)
    transport.initialize()

    transport.log("info", "one", TS, {})
    transport.log("info", "two", TS, {})
    transport.log("info", "three", TS, {})

    assert _lines(broken) == ["one"]
    assert broken.ended
    assert transport.last_error is not None and transport.last_error.code is ErrorCode.WRITE_FAILED
    assert transport.pending == 2

    healthy = FakeStream()
    transport.stream_factory = lambda _path: healthy
    assert transport.initialize() is True
    assert transport.last_error is None
    assert _lines(healthy) == ["two", "three"]
    assert transport.pending == 0


def test_file_blocking_drain_under_backpressure(tmp_path: Path) -> None:
    stream = FakeStream(accept=False)
    transport = _file_transport(tmp_path, stream)
    transport.initialize()
    for i in range(5):
        transport.log("info", f"m{i}", TS, {})
    assert _lines(stream) == [f"m{i}" for i in range(5)]
    assert transport.state is DrainState.IDLE


# ═════════════════════════════════════════════════════════════════════════════
# FileTransport - inside an event loop
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_log_does_not_write_synchronously(tmp_path: Path) -> None:
    stream = FakeStream()
    transport = _file_transport(tmp_path, stream)
    transport.initialize()
    transport.log("info", "queued", TS, {})
    assert stream.written == []
    assert transport.pending == 1
    await transport.flush()
    assert _lines(stream) == ["queued"]


@pytest.mark.asyncio
async def test_backpressure_delivers_all_entries_in_order(tmp_path: Path) -> None:
    stream = FakeStream(accept=False)
    transport = _file_transport(tmp_path, stream)
    transport.initialize()

    n = 50
    for i in range(n):
        transport.log("info", f"m{i}", TS, {})
    assert transport.state is DrainState.DRAINING

    await transport.flush()
    assert _lines(stream) == [f"m{i}" for i in range(n)]
    assert stream.drain_waits == n
    assert transport.pending == 0
    assert transport.state is DrainState.IDLE


@pytest.mark.asyncio
async def test_single_drain_loop_while_waiting(tmp_path: Path) -> None:
    stream = FakeStream(accept=False, block=True)
    transport = _file_transport(tmp_path, stream)
    transport.initialize()
    transport.log("info", "a", TS, {})
    await asyncio.sleep(0)
    assert transport.state is DrainState.WAITING_FOR_DRAIN

    transport.log("info", "b", TS, {})
    transport.log("info", "c", TS, {})
    assert _lines(stream) == ["a"]
    assert transport.pending == 2

    transport.cleanup()
    await asyncio.sleep(0)
    assert _lines(stream) == ["a", "b", "c"]
    assert stream.ended
    assert transport.state is DrainState.IDLE


@pytest.mark.asyncio
async def test_real_file_in_event_loop(tmp_path: Path) -> None:
    path = tmp_path / "async.log"
    transport = FileTransport(path, stream_factory=lambda p: AppendFileStream(p, high_water_mark=64))
    transport.initialize()
    for i in range(20):
        transport.log("debug", f"entry {i}", TS, {"i": i})
    await transport.flush()
    transport.cleanup()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [f'[{TS}] DEBUG: entry {i} | {{"i":{i}}}' for i in range(20)]


@pytest.mark.asyncio
async def test_drained_entries_on_disk_before_cleanup(tmp_path: Path) -> None:
    path = tmp_path / "live.log"
    transport = FileTransport(path)
    transport.initialize()
    transport.log("info", "visible", TS, {})
    await transport.flush()
    assert path.read_text(encoding="utf-8") == f"[{TS}] INFO: visible\n"
    transport.cleanup()


def test_synchronous_entries_on_disk_before_cleanup(tmp_path: Path) -> None:
    path = tmp_path / "live.log"
    transport = FileTransport(path)
    transport.initialize()
    transport.log("warn", "first", TS, {})
    assert path.read_text(encoding="utf-8") == f"[{TS}] WARN: first\n"
    transport.log("warn", "second", TS, {})
    assert path.read_text(encoding="utf-8").splitlines()[-1] == f"[{TS}] WARN: second"
    transport.cleanup()
