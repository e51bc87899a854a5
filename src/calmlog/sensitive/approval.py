"""Approval record required to deliberately log sensitive data."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator

from calmlog.foundation.errors import ErrorCode, JsonDict


class SensitiveLoggingApproval(BaseModel):
    """Who approved logging sensitive data, why, and until when.

    Attributes:
        reason: Why the data must be logged
        approved_by: Person or team accountable for the exception
        expires_at: Optional deadline; naive datetimes are read as local time
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    reason: str = ""
    approved_by: str = ""
    expires_at: datetime | None = None

    @field_validator("expires_at")
    @classmethod
    def _aware(cls, v: datetime | None) -> datetime | None:
        return v.astimezone() if v is not None and v.tzinfo is None else v

    def check(self, now: datetime | None = None) -> ErrorCode | None:
        """Return why the approval is unusable, or None when it is valid."""
        if not self.reason or not self.approved_by:
            return ErrorCode.APPROVAL_MISSING
        if self.expires_at is not None and self.expires_at <= (now or datetime.now(UTC)):
            return ErrorCode.APPROVAL_EXPIRED
        return None

    def as_context(self) -> JsonDict:
        """Approval metadata attached to the approved entry."""
        ctx: JsonDict = {"reason": self.reason, "approved_by": self.approved_by}
        if self.expires_at is not None:
            ctx["expires_at"] = self.expires_at.isoformat()
        return ctx
