"""Application services for reconciling directory members into member records."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from chambersync.domain.errors import ChamberNotFoundError, DirectoryRequestError
from chambersync.domain.model import (
    ChamberMember,
    DirectoryStatusCode,
    SyncRun,
    SyncType,
    normalize_member,
    utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime, timedelta
    from uuid import UUID

    from chambersync.domain.model import DirectoryMember, MappedMember
    from chambersync.domain.ports.fetching import MemberDirectory
    from chambersync.domain.ports.unit_of_work import MemberSyncUnitOfWork

log = getLogger(__name__)

SYNC_LOG_CREATE_FAILED = "Failed to create sync log"
UNKNOWN_SYNC_ERROR = "Unknown error during sync"


@dataclass(slots=True)
class SyncResult:
    """Outcome of one reconciliation run."""

    success: bool
    added: int = 0
    updated: int = 0
    deactivated: int = 0
    error_message: str | None = None
    sync_run_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class SyncStatus:
    last_sync_at: datetime | None
    last_sync_run: SyncRun | None


def reconcile_members(
    chamber_id: UUID,
    account_id: str,
    *,
    directory: MemberDirectory,
    unit_of_work_factory: Callable[[], MemberSyncUnitOfWork],
    clock: Callable[[], datetime] = utc_now,
) -> SyncResult:
    """Upsert the directory's members for ``chamber_id`` and audit the run.

    An unknown chamber fails the call before anything is written. Otherwise
    the sync run row is committed before any member is written, so an
    interrupted run stays visible as ``started``. Members are written and
    committed one at a time; a failing member is skipped.
    """

    result = SyncResult(success=False)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        chamber = repositories.chambers.get(chamber_id)
        if chamber is None:
            log.warning("Refusing member sync for unknown chamber %s", chamber_id)
            result.error_message = str(ChamberNotFoundError())
            return result

        run = SyncRun(chamber_id=chamber_id, sync_type=SyncType.CHAMBERMASTER, started_at=clock())
        try:
            repositories.sync_runs.add(run)
            uow.commit()
        except Exception:
            log.exception("Failed to create sync log for chamber %s", chamber_id)
            uow.rollback()
            result.error_message = SYNC_LOG_CREATE_FAILED
            return result
        result.sync_run_id = run.id
        log.info("Started member sync %s for chamber %s", run.id, chamber_id)

        try:
            records = _fetch_members(directory, account_id)
            synced_at = clock()
            for record in records:
                _upsert_member(uow, chamber_id, normalize_member(record), synced_at, result)

            chamber.record_sync(clock())
            run.complete(
                added=result.added,
                updated=result.updated,
                deactivated=result.deactivated,
                at=clock(),
            )
            uow.commit()
        except Exception as exc:
            uow.rollback()
            result.error_message = str(exc) or UNKNOWN_SYNC_ERROR
            log.exception("Member sync %s failed", result.sync_run_id)
            _mark_failed(uow, run, result.error_message, clock())
            return result

    result.success = True
    log.info(
        "Member sync %s completed: added=%s, updated=%s, deactivated=%s",
        result.sync_run_id,
        result.added,
        result.updated,
        result.deactivated,
    )
    return result


def _fetch_members(directory: MemberDirectory, account_id: str) -> list[DirectoryMember]:
    try:
        members = directory.fetch_detailed(account_id)
    except DirectoryRequestError:
        log.info("Details endpoint failed, falling back to list format with active filter")
        members = directory.fetch_list(account_id, DirectoryStatusCode.ACTIVE)
    else:
        log.info("Fetched %s members in details format", len(members))
    return members


def _upsert_member(
    uow: MemberSyncUnitOfWork,
    chamber_id: UUID,
    mapped: MappedMember,
    synced_at: datetime,
    result: SyncResult,
) -> None:
    members = uow.repositories.members
    try:
        existing = members.get_by_external_id(chamber_id, mapped.external_member_id)
        if existing is None:
            members.add(ChamberMember.from_directory(chamber_id, mapped, synced_at=synced_at))
            uow.commit()
            result.added += 1
            return
        deactivated = existing.apply_directory_update(mapped, synced_at=synced_at)
        uow.commit()
    except Exception:
        uow.rollback()
        log.exception("Failed to upsert member %s, skipping", mapped.external_member_id)
        return
    result.updated += 1
    if deactivated:
        result.deactivated += 1


def _mark_failed(uow: MemberSyncUnitOfWork, run: SyncRun, message: str, at: datetime) -> None:
    try:
        run.fail(message, at=at)
        uow.commit()
    except Exception:
        uow.rollback()
        log.exception("Failed to record failure of sync run %s", run.id)


def get_sync_status(
    chamber_id: UUID,
    *,
    unit_of_work_factory: Callable[[], MemberSyncUnitOfWork],
) -> SyncStatus:
    """Return the chamber's last sync timestamp and its most recent sync run."""

    with unit_of_work_factory() as uow:
        chamber = uow.repositories.chambers.get(chamber_id)
        if chamber is None:
            raise ChamberNotFoundError
        latest = uow.repositories.sync_runs.latest_for_chamber(
            chamber_id, SyncType.CHAMBERMASTER
        )
        return SyncStatus(last_sync_at=chamber.chambermaster_last_sync_at, last_sync_run=latest)


def find_stuck_sync_runs(
    *,
    older_than: timedelta,
    unit_of_work_factory: Callable[[], MemberSyncUnitOfWork],
    clock: Callable[[], datetime] = utc_now,
) -> list[SyncRun]:
    """Runs still ``started`` after ``older_than``; reported for alerting only."""

    now = clock()
    with unit_of_work_factory() as uow:
        candidates = uow.repositories.sync_runs.list_started_before(now - older_than)
        stuck = [run for run in candidates if run.is_stuck(now, older_than)]
    if stuck:
        log.warning("Found %s stuck sync runs", len(stuck))
    return stuck
