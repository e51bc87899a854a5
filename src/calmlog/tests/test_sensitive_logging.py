"""Tests for the approval-gated sensitive data path."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import orjson
import pytest

from calmlog import ErrorCode, JsonFormatter, Logger, SensitiveLoggingApproval, SensitiveValue
from calmlog.core.logger import SENSITIVE_PREFIX

if TYPE_CHECKING:
    from .conftest import RecordingTransport

TS = "2024-01-03T10:30:45.123Z"


def _approval(**overrides: object) -> SensitiveLoggingApproval:
    fields: dict[str, object] = {"reason": "incident 311", "approved_by": "oncall"}
    return SensitiveLoggingApproval(**{**fields, **overrides})


# ═════════════════════════════════════════════════════════════════════════════
# Approval checks
# ═════════════════════════════════════════════════════════════════════════════


def test_valid_approval() -> None:
    assert _approval().check() is None
    assert _approval(expires_at=datetime.now(UTC) + timedelta(hours=1)).check() is None


@pytest.mark.parametrize("overrides", [{"reason": ""}, {"approved_by": ""}, {"reason": "   "}])
def test_missing_fields(overrides: dict[str, object]) -> None:
    assert _approval(**overrides).check() is ErrorCode.APPROVAL_MISSING


def test_expired() -> None:
    now = datetime(2024, 1, 3, tzinfo=UTC)
    assert _approval(expires_at=now).check(now) is ErrorCode.APPROVAL_EXPIRED
    assert _approval(expires_at=now - timedelta(seconds=1)).check(now) is ErrorCode.APPROVAL_EXPIRED


def test_naive_expiry_read_as_local_time() -> None:
    approval = _approval(expires_at=datetime.now() + timedelta(minutes=5))
    assert approval.expires_at is not None and approval.expires_at.tzinfo is not None
    assert approval.check() is None


def test_approval_is_frozen() -> None:
    with pytest.raises(ValueError):
        _approval().reason = "changed"  # type: ignore[misc]


# ═════════════════════════════════════════════════════════════════════════════
# Logger path
# ═════════════════════════════════════════════════════════════════════════════


def test_approved_logs_unwrapped_data_with_metadata(log: Logger, recorder: RecordingTransport) -> None:
    log.info_with_sensitive_data("token refresh", {"user": "ada", "token": SensitiveValue.of("t0k3n")}, _approval())
    (entry,) = recorder.entries
    assert entry.level == "info"
    assert entry.message == f"{SENSITIVE_PREFIX}token refresh"
    assert entry.context["token"] == "t0k3n"
    assert entry.context["sensitive_approval"] == {"reason": "incident 311", "approved_by": "oncall"}


def test_approved_still_applies_pattern_redaction(log: Logger, recorder: RecordingTransport) -> None:
    log.debug_with_sensitive_data("m", {"header": "password=hunter22"}, _approval())
    assert recorder.entries[0].context["header"] == "[REDACTED]"


def test_approved_respects_level_gate(recorder: RecordingTransport) -> None:
    log = Logger(level="error", transports=[recorder])
    log.warn_with_sensitive_data("m", {"k": SensitiveValue.of("v")}, _approval())
    assert recorder.entries == []


def test_approval_expiry_in_context(log: Logger, recorder: RecordingTransport) -> None:
    expires = datetime.now(UTC) + timedelta(days=1)
    log.error_with_sensitive_data("m", {}, _approval(expires_at=expires))
    assert recorder.entries[0].context["sensitive_approval"]["expires_at"] == expires.isoformat()


@pytest.mark.parametrize(("approval", "code", "message"), [
    (SensitiveLoggingApproval(), ErrorCode.APPROVAL_MISSING, "Attempted to log sensitive data without proper approval"),
    (SensitiveLoggingApproval(reason="r", approved_by="b", expires_at=datetime(2020, 1, 1, tzinfo=UTC)),
     ErrorCode.APPROVAL_EXPIRED, "Attempted to log sensitive data with expired approval"),
])
def test_rejected_emits_audit_without_data(
    log: Logger, recorder: RecordingTransport,
    approval: SensitiveLoggingApproval, code: ErrorCode, message: str,
) -> None:
    secret = "4111 1111 1111 1111"
    log.log_with_sensitive_data("info", "card charge", {"card": SensitiveValue.of(secret), "raw": secret}, approval)

    (entry,) = recorder.entries
    assert entry.level == "warn"
    assert entry.message == message
    assert entry.context["attempted_level"] == "info"
    assert entry.context["reason_code"] == code.value
    assert secret not in repr(entry.context)
    assert "card" not in entry.context and "raw" not in entry.context


def test_rejected_rendered_output_never_contains_payload(recorder: RecordingTransport) -> None:
    log = Logger(transports=[recorder])
    expired = _approval(expires_at=datetime.now(UTC) - timedelta(minutes=1))
    log.log_with_sensitive_data("error", "dump", {"password": "hunter22", "ssn": SensitiveValue.of("123-45-6789")}, expired)

    (entry,) = recorder.entries
    rendered = JsonFormatter().format(entry.level, entry.message, TS, entry.context)
    assert "hunter22" not in rendered and "123-45-6789" not in rendered
    assert orjson.loads(rendered)["approved_by"] == "oncall"


def test_suppressed_level_skips_approval_check(recorder: RecordingTransport) -> None:
    log = Logger(level="error", transports=[recorder])
    approval = MagicMock(spec=SensitiveLoggingApproval)
    log.info_with_sensitive_data("m", {"k": SensitiveValue.of("v")}, approval)
    approval.check.assert_not_called()
    assert recorder.entries == []


def test_suppressed_level_emits_no_audit(recorder: RecordingTransport) -> None:
    log = Logger(level="error", transports=[recorder])
    log.debug_with_sensitive_data("m", {"k": "v"}, SensitiveLoggingApproval())
    assert recorder.entries == []
