"""Public domain model surface."""

from __future__ import annotations

from chambersync.domain.model.chamber import Chamber, DirectoryCredentials
from chambersync.domain.model.claim import ClaimRequest, ClaimSubmission
from chambersync.domain.model.directory import (
    DetailedDirectoryMember,
    DirectoryMember,
    ListedDirectoryMember,
    MappedMember,
    map_status_code,
    normalize_member,
)
from chambersync.domain.model.entity import Entity, new_id, utc_now
from chambersync.domain.model.enums import (
    ClaimStatus,
    DirectoryStatusCode,
    MemberStatus,
    MerchantStatus,
    NotificationType,
    SyncRunStatus,
    SyncType,
    UserRole,
)
from chambersync.domain.model.member import ChamberMember
from chambersync.domain.model.merchant import Merchant
from chambersync.domain.model.notification import Notification
from chambersync.domain.model.sync_run import SyncRun
from chambersync.domain.model.user import Principal, Profile

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utc_now",
    # tenants and users
    "Chamber",
    "DirectoryCredentials",
    "Profile",
    "Principal",
    # directory
    "DirectoryMember",
    "ListedDirectoryMember",
    "DetailedDirectoryMember",
    "MappedMember",
    "map_status_code",
    "normalize_member",
    # persisted records
    "ChamberMember",
    "SyncRun",
    "ClaimRequest",
    "ClaimSubmission",
    "Merchant",
    "Notification",
    # enums
    "ClaimStatus",
    "DirectoryStatusCode",
    "MemberStatus",
    "MerchantStatus",
    "NotificationType",
    "SyncRunStatus",
    "SyncType",
    "UserRole",
]
