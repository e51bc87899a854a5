"""Error codes and structured failure records.

Logging calls never raise for operational problems. Failures are reported as
diagnostics and recorded as ``LogFailure`` values that callers may inspect
(``FileTransport.last_error``) when durability matters to them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(StrEnum):
    """Classification of logging failures."""

    TRANSPORT_INIT = "TRANSPORT_INIT"      # directory or stream could not be created
    WRITE_FAILED = "WRITE_FAILED"          # stream reported an error while draining
    TRANSPORT_FAILED = "TRANSPORT_FAILED"  # a transport raised from log()
    APPROVAL_MISSING = "APPROVAL_MISSING"
    APPROVAL_EXPIRED = "APPROVAL_EXPIRED"
    INVALID_LEVEL = "INVALID_LEVEL"


class LogFailure(BaseModel):
    """A degraded-operation record.

    Attributes:
        code: Machine-readable classification
        message: Human-readable description
        source: Name of the component that failed (transport name, "logger")
        details: Optional extra information (exception type, path)
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, validate_default=True)

    code: ErrorCode
    message: Annotated[str, Field(min_length=1)]
    source: str = "logger"
    details: str | None = Field(default=None, repr=False)

    @classmethod
    def from_exception(cls, code: ErrorCode, source: str, exc: BaseException) -> Self:
        """Build a failure record from a caught exception."""
        return cls(code=code, message=str(exc) or type(exc).__name__, source=source, details=type(exc).__name__)

    def __str__(self) -> str:
        return f"[{self.code}] {self.source}: {self.message}"


class InvalidLevelError(ValueError):
    """Raised when a level name does not match any LogLevel."""

    __slots__ = ("value",)

    code = ErrorCode.INVALID_LEVEL

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unknown log level: {value!r}. Use debug, info, warn, error or fatal")
