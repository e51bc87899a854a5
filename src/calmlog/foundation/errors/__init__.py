"""Error handling for calmlog.

- ErrorCode: classification of degraded operation
- LogFailure: structured failure record exposed by transports
- InvalidLevelError: unknown level name
- JSON and context type aliases
"""

from .errors import ErrorCode, InvalidLevelError, LogFailure
from .types import ContextValue, JsonDict, JsonPrimitive, JsonValue, LogContext

__all__ = [
    "ErrorCode", "InvalidLevelError", "LogFailure",
    "ContextValue", "JsonDict", "JsonPrimitive", "JsonValue", "LogContext",
]
