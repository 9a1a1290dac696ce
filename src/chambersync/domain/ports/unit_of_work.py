"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from chambersync.domain.ports.persistence import (
        ChamberMemberRepository,
        ChamberRepository,
        ClaimRepository,
        MerchantRepository,
        NotificationRepository,
        ProfileRepository,
        SyncRunRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    One unit of work is one database transaction: ``commit`` makes every
    pending write durable, ``rollback`` discards all of them.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class MemberSyncRepositories(RepositoryCollection):
    """Repositories required to reconcile directory members."""

    chambers: ChamberRepository
    members: ChamberMemberRepository
    sync_runs: SyncRunRepository


@dataclass(slots=True)
class ClaimRepositories(RepositoryCollection):
    """Repositories touched by the claim lifecycle."""

    chambers: ChamberRepository
    profiles: ProfileRepository
    members: ChamberMemberRepository
    claims: ClaimRepository
    merchants: MerchantRepository
    notifications: NotificationRepository


type MemberSyncUnitOfWork = UnitOfWork[MemberSyncRepositories]
type ClaimUnitOfWork = UnitOfWork[ClaimRepositories]
