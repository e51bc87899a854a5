"""Regular expressions for common credential shapes.

Order matters only for ``redact_sensitive_data``; detection is any-match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from .value import DEFAULT_PLACEHOLDER

SENSITIVE_PATTERNS: Mapping[str, re.Pattern[str]] = {
    "api_key": re.compile(r"(?:api[_-]?key|apikey|access[_-]?key|auth[_-]?key)[:=]\s*[\"']?([a-zA-Z0-9]{16,})[\"']?", re.I),
    "jwt": re.compile(r"eyJ[a-zA-Z0-9_-]+\.eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+"),
    "oauth_token": re.compile(r"(?:access[_-]?token|oauth[_-]?token|bearer[_-]?token)[:=]\s*[\"']?([a-zA-Z0-9]{10,})[\"']?", re.I),
    "bearer_header": re.compile(r"\bBearer\s+[a-zA-Z0-9._~+/-]{10,}=*", re.I),
    "password": re.compile(r"(?:password|passwd|pwd)[:=]\s*[\"']?([^\"'\s]{3,})[\"']?", re.I),
    "credit_card": re.compile(r"\b(?:\d{4}[-\s]?){3}\d{4}\b"),
    "ssn": re.compile(r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b"),
    "aws_access_key": re.compile(r"\bAKIA[0-9A-Z]{16}\b"),
    "private_key": re.compile(r"-----BEGIN (?:RSA |DSA |EC |OPENSSH )?PRIVATE KEY-----"),
}


def contains_sensitive_data(text: str, patterns: Iterable[re.Pattern[str]] | None = None) -> bool:
    """Whether ``text`` matches any sensitive pattern."""
    if not isinstance(text, str):
        return False
    return any(p.search(text) for p in (SENSITIVE_PATTERNS.values() if patterns is None else patterns))


def redact_sensitive_data(
    text: str,
    placeholder: str = DEFAULT_PLACEHOLDER,
    patterns: Iterable[re.Pattern[str]] | None = None,
) -> str:
    """Replace each matching substring with ``placeholder``, leaving the rest of the text intact."""
    if not isinstance(text, str):
        return text
    for p in SENSITIVE_PATTERNS.values() if patterns is None else patterns:
        text = p.sub(placeholder, text)
    return text
