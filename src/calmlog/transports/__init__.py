"""Transports deliver rendered entries to a sink: console (sync) or file (queued)."""

from .base import Transport, cleanup_transport, initialize_transport
from .console import ConsoleTransport
from .file import AppendFileStream, DrainState, FileTransport, WriteStream

__all__ = [
    "Transport", "initialize_transport", "cleanup_transport",
    "ConsoleTransport",
    "FileTransport", "AppendFileStream", "WriteStream", "DrainState",
]
