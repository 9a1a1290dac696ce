"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import MemberDirectory
from .notifications import ClaimNotifier
from .persistence import (
    ChamberMemberRepository,
    ChamberRepository,
    ClaimRepository,
    ClaimWithMember,
    MerchantRepository,
    NotificationRepository,
    ProfileRepository,
    Repository,
    SyncRunRepository,
)
from .unit_of_work import (
    ClaimRepositories,
    ClaimUnitOfWork,
    MemberSyncRepositories,
    MemberSyncUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ChamberMemberRepository",
    "ChamberRepository",
    "ClaimNotifier",
    "ClaimRepositories",
    "ClaimRepository",
    "ClaimUnitOfWork",
    "ClaimWithMember",
    "MemberDirectory",
    "MemberSyncRepositories",
    "MemberSyncUnitOfWork",
    "MerchantRepository",
    "NotificationRepository",
    "ProfileRepository",
    "Repository",
    "RepositoryCollection",
    "SyncRunRepository",
    "UnitOfWork",
]
