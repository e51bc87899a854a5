"""Sensitive-data protection: typed wrapper, credential patterns, redaction pass, approvals."""

from .approval import SensitiveLoggingApproval
from .patterns import SENSITIVE_PATTERNS, contains_sensitive_data, redact_sensitive_data
from .redact import (
    CIRCULAR_MARKER,
    DEFAULT_REDACTOR,
    UNSERIALIZABLE_MARKER,
    Redactor,
    safe_stringify,
    sanitize,
    unwrap_sensitive,
)
from .value import DEFAULT_PLACEHOLDER, SensitiveValue

__all__ = [
    "SensitiveValue", "DEFAULT_PLACEHOLDER",
    "SENSITIVE_PATTERNS", "contains_sensitive_data", "redact_sensitive_data",
    "Redactor", "DEFAULT_REDACTOR", "CIRCULAR_MARKER", "UNSERIALIZABLE_MARKER",
    "sanitize", "safe_stringify", "unwrap_sensitive",
    "SensitiveLoggingApproval",
]
