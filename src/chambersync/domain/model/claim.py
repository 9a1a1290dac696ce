"""Ownership claim on a member record.

State machine: ``pending -> approved`` and ``pending -> denied``. Both targets
are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chambersync.domain.errors import ClaimNotPendingError, DenialReasonRequiredError

from .entity import Entity, utc_now
from .enums import ClaimStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class ClaimSubmission:
    """Input of a visitor claiming a member record."""

    chamber_id: UUID
    member_id: UUID
    contact_name: str
    contact_email: str
    contact_phone: str | None = None
    message: str | None = None


@dataclass(eq=False, kw_only=True)
class ClaimRequest(Entity):
    chamber_id: UUID
    member_id: UUID
    requested_by: UUID

    contact_name: str
    contact_email: str
    contact_phone: str | None = None
    message: str | None = None

    status: ClaimStatus = ClaimStatus.PENDING
    resolved_by: UUID | None = None
    resolved_at: datetime | None = None
    denial_reason: str | None = None

    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def submit(cls, requested_by: UUID, submission: ClaimSubmission) -> ClaimRequest:
        return cls(
            chamber_id=submission.chamber_id,
            member_id=submission.member_id,
            requested_by=requested_by,
            contact_name=submission.contact_name,
            contact_email=submission.contact_email,
            contact_phone=submission.contact_phone,
            message=submission.message,
        )

    @property
    def is_pending(self) -> bool:
        return self.status == ClaimStatus.PENDING

    def ensure_pending(self) -> None:
        if not self.is_pending:
            raise ClaimNotPendingError

    def approve(self, approver_id: UUID, *, at: datetime) -> None:
        self.ensure_pending()
        self._resolve(ClaimStatus.APPROVED, approver_id, at)

    def deny(self, denier_id: UUID, reason: str, *, at: datetime) -> None:
        self.ensure_pending()
        cleaned = reason.strip()
        if not cleaned:
            raise DenialReasonRequiredError
        self.denial_reason = cleaned
        self._resolve(ClaimStatus.DENIED, denier_id, at)

    def _resolve(self, status: ClaimStatus, resolver_id: UUID, at: datetime) -> None:
        self.status = status
        self.resolved_by = resolver_id
        self.resolved_at = at
        self.updated_at = at
