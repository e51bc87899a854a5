"""Timestamp and exception helpers shared by formatters and the logger."""

from __future__ import annotations

import traceback
from datetime import UTC, datetime

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def iso_timestamp(dt: datetime | None = None) -> str:
    """UTC ISO-8601 with millisecond precision and ``Z`` suffix (``2024-01-03T10:30:45.123Z``)."""
    dt = (dt or datetime.now(UTC)).astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO timestamp produced by ``iso_timestamp``; None when it is not one."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


def format_date(dt: datetime, use_24_hour_format: bool = True) -> str:
    """Human-readable local time: ``Jan 3, 14:05:09.042`` or ``Jan 3, 2:05:09.042 PM``."""
    local = dt.astimezone()
    ms = f"{local.microsecond // 1000:03d}"
    head = f"{_MONTHS[local.month - 1]} {local.day}"
    if use_24_hour_format:
        return f"{head}, {local.hour:02d}:{local.minute:02d}:{local.second:02d}.{ms}"
    hour12 = local.hour % 12 or 12
    return f"{head}, {hour12}:{local.minute:02d}:{local.second:02d}.{ms} {'PM' if local.hour >= 12 else 'AM'}"


def format_error(exc: BaseException, include_stack_trace: bool = True) -> dict[str, str]:
    """Structured ``{message, stack?}`` view of an exception.

    The stack is only present when requested and the exception was raised
    (has a traceback). Frames are trimmed and joined one per line.
    """
    ctx = {"message": str(exc) or type(exc).__name__}
    if include_stack_trace and exc.__traceback__ is not None:
        frames = "".join(traceback.format_tb(exc.__traceback__)).splitlines()
        ctx["stack"] = "\n".join(line.strip() for line in frames if line.strip())
    return ctx
