"""Ports for persisting domain aggregates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from chambersync.domain.model import (
    Chamber,
    ChamberMember,
    ClaimRequest,
    Merchant,
    Notification,
    Profile,
    SyncRun,
)

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from chambersync.domain.model import ClaimStatus, MemberStatus, SyncType

DEFAULT_MEMBER_PAGE_SIZE = 50


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ChamberRepository(Repository[Chamber], Protocol):
    """Persistence contract for chambers."""


@runtime_checkable
class ProfileRepository(Repository[Profile], Protocol):
    """Persistence contract for user profiles."""


@dataclass(frozen=True, slots=True)
class MemberFilter:
    """Roster filters; ``search`` matches business names case-insensitively."""

    status: MemberStatus | None = None
    is_claimed: bool | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class MemberPage:
    """One page of a chamber's roster together with the unpaged total."""

    members: list[ChamberMember]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.limit))


@runtime_checkable
class ChamberMemberRepository(Repository[ChamberMember], Protocol):
    """Persistence contract for member records."""

    def get_by_external_id(
        self, chamber_id: UUID, external_member_id: str
    ) -> ChamberMember | None: ...

    def get_for_update(self, member_id: UUID) -> ChamberMember | None:
        """Load a member with a row lock held until the unit of work ends."""
        ...

    def list_for_chamber(
        self,
        chamber_id: UUID,
        member_filter: MemberFilter | None = None,
    ) -> list[ChamberMember]:
        """Members of a chamber ordered by business name."""
        ...

    def page_for_chamber(
        self,
        chamber_id: UUID,
        member_filter: MemberFilter | None = None,
        *,
        page: int = 1,
        limit: int = DEFAULT_MEMBER_PAGE_SIZE,
    ) -> MemberPage:
        """One 1-based page of ``list_for_chamber`` plus the matching total."""
        ...


@runtime_checkable
class SyncRunRepository(Repository[SyncRun], Protocol):
    """Persistence contract for sync run audit rows."""

    def latest_for_chamber(self, chamber_id: UUID, sync_type: SyncType) -> SyncRun | None: ...

    def list_started_before(self, cutoff: datetime) -> list[SyncRun]: ...


@dataclass(frozen=True, slots=True)
class ClaimWithMember:
    """A claim joined with the member record it targets."""

    claim: ClaimRequest
    member: ChamberMember


@runtime_checkable
class ClaimRepository(Repository[ClaimRequest], Protocol):
    """Persistence contract for claim requests."""

    def get_pending_for_user(self, user_id: UUID) -> ClaimRequest | None: ...

    def list_for_chamber(
        self,
        chamber_id: UUID,
        status: ClaimStatus | None = None,
    ) -> list[ClaimWithMember]:
        """Claims of a chamber, newest first."""
        ...


@runtime_checkable
class MerchantRepository(Repository[Merchant], Protocol):
    """Persistence contract for merchants.

    ``add`` makes the row visible to later statements of the same unit of work.
    """

    def slug_exists(self, slug: str) -> bool: ...


@runtime_checkable
class NotificationRepository(Protocol):
    def add(self, entity: Notification) -> None: ...
