"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class DirectoryStatusCode(IntEnum):
    """Membership status codes used by the ChamberMaster directory."""

    PROSPECTIVE = 1
    ACTIVE = 2
    COURTESY = 4
    NON_MEMBER = 8
    INACTIVE = 16
    DELETED = 32


class MemberStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECTIVE = "prospective"


class SyncType(StrEnum):
    CHAMBERMASTER = "chambermaster"


class SyncRunStatus(StrEnum):
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


class ClaimStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class MerchantStatus(StrEnum):
    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"


class UserRole(StrEnum):
    CHAMBER_ADMIN = "chamber_admin"
    MERCHANT = "merchant"
    VISITOR = "visitor"


class NotificationType(StrEnum):
    CLAIM_APPROVED = "claim_approved"
    CLAIM_DENIED = "claim_denied"
