"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from chambersync.adapters.chambermaster import build_member_directory
from chambersync.adapters.notifications import LoggingClaimNotifier
from chambersync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    SqlAlchemyMemberSyncUnitOfWork,
    is_started,
    startup,
)
from chambersync.config import get_sync_config
from chambersync.domain import claims, member_sync
from chambersync.domain.errors import (
    ChamberNotFoundError,
    InvalidPageError,
    PermissionDeniedError,
    ProfileNotFoundError,
)
from chambersync.domain.model import Chamber, Profile, UserRole
from chambersync.domain.ports.persistence import DEFAULT_MEMBER_PAGE_SIZE
from chambersync.domain.ports.unit_of_work import ClaimUnitOfWork, MemberSyncUnitOfWork
from chambersync.domain.slugs import slugify

if TYPE_CHECKING:
    from datetime import timedelta
    from uuid import UUID

    from chambersync.config import ChamberMasterConfig
    from chambersync.domain.member_sync import SyncResult, SyncStatus
    from chambersync.domain.model import (
        ClaimRequest,
        ClaimStatus,
        ClaimSubmission,
        Merchant,
        Principal,
        SyncRun,
    )
    from chambersync.domain.ports.fetching import MemberDirectory
    from chambersync.domain.ports.notifications import ClaimNotifier
    from chambersync.domain.ports.persistence import ClaimWithMember, MemberFilter, MemberPage

MemberSyncUnitOfWorkFactory = Callable[[], MemberSyncUnitOfWork]
ClaimUnitOfWorkFactory = Callable[[], ClaimUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _member_sync_uow(factory: MemberSyncUnitOfWorkFactory | None) -> MemberSyncUnitOfWorkFactory:
    if factory is not None:
        return factory
    _ensure_started()
    return SqlAlchemyMemberSyncUnitOfWork


def _claim_uow(factory: ClaimUnitOfWorkFactory | None) -> ClaimUnitOfWorkFactory:
    if factory is not None:
        return factory
    _ensure_started()
    return SqlAlchemyClaimUnitOfWork


def _require_admin(principal: Principal, chamber_id: UUID | None = None) -> UUID:
    """Return the chamber the principal administers, or raise."""

    if principal.role != UserRole.CHAMBER_ADMIN or principal.chamber_id is None:
        raise PermissionDeniedError
    if chamber_id is not None and not principal.administers(chamber_id):
        raise PermissionDeniedError
    return principal.chamber_id


# Directory sync ---------------------------------------------------------------


def reconcile(
    chamber_id: UUID,
    account_id: str,
    api_key: str,
    base_url: str | None = None,
    *,
    directory: MemberDirectory | None = None,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
    config: ChamberMasterConfig | None = None,
) -> SyncResult:
    """Reconcile one chamber's directory account into its member records."""

    effective_directory = directory or build_member_directory(
        api_key=api_key, base_url=base_url, config=config
    )
    log.info("Starting ChamberMaster sync for chamber %s (account %s)", chamber_id, account_id)
    result = member_sync.reconcile_members(
        chamber_id,
        account_id,
        directory=effective_directory,
        unit_of_work_factory=_member_sync_uow(unit_of_work_factory),
    )
    if not result.success:
        log.warning(
            "ChamberMaster sync for chamber %s failed: %s", chamber_id, result.error_message
        )
    return result


def sync_chamber(
    chamber_id: UUID,
    *,
    principal: Principal,
    directory: MemberDirectory | None = None,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
    config: ChamberMasterConfig | None = None,
) -> SyncResult:
    """Run a sync for a chamber using the credentials stored on it."""

    _require_admin(principal, chamber_id)
    effective_uow = _member_sync_uow(unit_of_work_factory)
    with effective_uow() as uow:
        chamber = uow.repositories.chambers.get(chamber_id)
        if chamber is None:
            raise ChamberNotFoundError
        credentials = chamber.directory_credentials()

    return reconcile(
        chamber_id,
        credentials.account_id,
        credentials.api_key,
        credentials.base_url,
        directory=directory,
        unit_of_work_factory=effective_uow,
        config=config,
    )


def get_sync_status(
    chamber_id: UUID,
    *,
    principal: Principal,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
) -> SyncStatus:
    _require_admin(principal, chamber_id)
    return member_sync.get_sync_status(
        chamber_id,
        unit_of_work_factory=_member_sync_uow(unit_of_work_factory),
    )


def find_stuck_sync_runs(
    *,
    older_than: timedelta | None = None,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
) -> list[SyncRun]:
    return member_sync.find_stuck_sync_runs(
        older_than=older_than or get_sync_config().stuck_after,
        unit_of_work_factory=_member_sync_uow(unit_of_work_factory),
    )


# Claims -----------------------------------------------------------------------


def create_claim(
    principal: Principal,
    submission: ClaimSubmission,
    *,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
) -> ClaimRequest:
    return claims.create_claim(
        principal.user_id,
        submission,
        unit_of_work_factory=_claim_uow(unit_of_work_factory),
    )


def list_claims(
    chamber_id: UUID,
    status: ClaimStatus | None = None,
    *,
    principal: Principal,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
) -> list[ClaimWithMember]:
    _require_admin(principal, chamber_id)
    return claims.list_claims(
        chamber_id,
        status,
        unit_of_work_factory=_claim_uow(unit_of_work_factory),
    )


def approve_claim(
    claim_id: UUID,
    *,
    principal: Principal,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
    notifier: ClaimNotifier | None = None,
) -> Merchant:
    """Approve a claim in the principal's chamber and provision its merchant."""

    chamber_id = _require_admin(principal)
    return claims.approve_claim(
        claim_id,
        principal.user_id,
        unit_of_work_factory=_claim_uow(unit_of_work_factory),
        notifier=notifier or LoggingClaimNotifier(),
        chamber_id=chamber_id,
    )


def deny_claim(
    claim_id: UUID,
    reason: str,
    *,
    principal: Principal,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
    notifier: ClaimNotifier | None = None,
) -> None:
    chamber_id = _require_admin(principal)
    claims.deny_claim(
        claim_id,
        principal.user_id,
        reason,
        unit_of_work_factory=_claim_uow(unit_of_work_factory),
        notifier=notifier or LoggingClaimNotifier(),
        chamber_id=chamber_id,
    )


# Bootstrap --------------------------------------------------------------------


def load_principal(
    user_id: UUID,
    *,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
) -> Principal:
    """Build the principal for ``user_id`` from its stored profile."""

    effective_uow = _claim_uow(unit_of_work_factory)
    with effective_uow() as uow:
        profile = uow.repositories.profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError
        return profile.principal()


def create_chamber(
    name: str,
    *,
    slug: str | None = None,
    association_id: str | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
    sync_enabled: bool = False,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
) -> Chamber:
    chamber = Chamber(
        name=name,
        slug=slug or slugify(name),
        chambermaster_association_id=association_id,
        chambermaster_api_key=api_key,
        chambermaster_base_url=base_url,
        chambermaster_sync_enabled=sync_enabled,
    )
    effective_uow = _member_sync_uow(unit_of_work_factory)
    with effective_uow() as uow:
        uow.repositories.chambers.add(chamber)
        uow.commit()
    log.info("Created chamber %s (%s)", chamber.id, chamber.slug)
    return chamber


def create_profile(
    email: str,
    *,
    role: UserRole = UserRole.VISITOR,
    chamber_id: UUID | None = None,
    user_id: UUID | None = None,
    unit_of_work_factory: ClaimUnitOfWorkFactory | None = None,
) -> Profile:
    profile = Profile(email=email, role=role, chamber_id=chamber_id)
    if user_id is not None:
        profile.id = user_id
    effective_uow = _claim_uow(unit_of_work_factory)
    with effective_uow() as uow:
        if chamber_id is not None and uow.repositories.chambers.get(chamber_id) is None:
            raise ChamberNotFoundError
        uow.repositories.profiles.add(profile)
        uow.commit()
    log.info("Created %s profile %s", profile.role, profile.id)
    return profile


def list_members(
    chamber_id: UUID,
    member_filter: MemberFilter | None = None,
    *,
    principal: Principal,
    page: int = 1,
    limit: int = DEFAULT_MEMBER_PAGE_SIZE,
    unit_of_work_factory: MemberSyncUnitOfWorkFactory | None = None,
) -> MemberPage:
    """Return one page of the chamber's member roster."""

    _require_admin(principal, chamber_id)
    if page < 1 or limit < 1:
        raise InvalidPageError
    effective_uow = _member_sync_uow(unit_of_work_factory)
    with effective_uow() as uow:
        if uow.repositories.chambers.get(chamber_id) is None:
            raise ChamberNotFoundError
        return uow.repositories.members.page_for_chamber(
            chamber_id, member_filter, page=page, limit=limit
        )
