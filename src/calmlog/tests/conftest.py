"""Shared fixtures: a recording transport and loggers wired to it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from calmlog import Logger
from calmlog.foundation.config import clear_settings_cache


@dataclass
class Entry:
    level: str
    message: str
    timestamp: str
    context: dict[str, Any]


@dataclass
class RecordingTransport:
    """In-memory transport capturing every entry it receives."""

    name: str = "recorder"
    entries: list[Entry] = field(default_factory=list)
    initialized: int = 0
    cleaned_up: int = 0

    def initialize(self) -> bool:
        self.initialized += 1
        return True

    def log(self, level: str, message: str, timestamp: str, context: Mapping[str, Any]) -> None:
        self.entries.append(Entry(str(level), message, timestamp, dict(context)))

    def cleanup(self) -> None:
        self.cleaned_up += 1

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.entries]


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def log(recorder: RecordingTransport) -> Logger:
    """Debug-level logger whose only transport is ``recorder``."""
    return Logger(level="debug", transports=[recorder])


@pytest.fixture(autouse=True)
def clean_settings() -> object:
    """Reset cached settings around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_recorder() -> type[RecordingTransport]:
    """The RecordingTransport class, for tests needing several."""
    return RecordingTransport
