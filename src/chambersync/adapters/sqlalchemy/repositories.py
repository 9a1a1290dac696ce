"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select

from chambersync.adapters.sqlalchemy.mappings import (
    chamber_member_table,
    claim_request_table,
    merchant_table,
    sync_run_table,
)
from chambersync.domain.model import (
    Chamber,
    ChamberMember,
    ClaimRequest,
    ClaimStatus,
    Merchant,
    Notification,
    Profile,
    SyncRun,
    SyncRunStatus,
)
from chambersync.domain.ports.persistence import (
    DEFAULT_MEMBER_PAGE_SIZE,
    ClaimWithMember,
    MemberFilter,
    MemberPage,
)

if TYPE_CHECKING:
    import uuid
    from datetime import datetime

    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from chambersync.domain.model import SyncType


class SqlAlchemyRepository[TEntity]:
    """Shared ``add``/``get`` for repositories keyed by the entity id."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: uuid.UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyChamberRepository(SqlAlchemyRepository[Chamber]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Chamber)


class SqlAlchemyProfileRepository(SqlAlchemyRepository[Profile]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Profile)


class SqlAlchemyChamberMemberRepository(SqlAlchemyRepository[ChamberMember]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ChamberMember)

    def get_by_external_id(
        self, chamber_id: uuid.UUID, external_member_id: str
    ) -> ChamberMember | None:
        stmt = (
            select(ChamberMember)
            .where(chamber_member_table.c.chamber_id == chamber_id)
            .where(chamber_member_table.c.external_member_id == external_member_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_for_update(self, member_id: uuid.UUID) -> ChamberMember | None:
        return self.session.get(ChamberMember, member_id, with_for_update=True)

    def list_for_chamber(
        self,
        chamber_id: uuid.UUID,
        member_filter: MemberFilter | None = None,
    ) -> list[ChamberMember]:
        stmt = (
            select(ChamberMember)
            .where(*_member_conditions(chamber_id, member_filter or MemberFilter()))
            .order_by(chamber_member_table.c.business_name, chamber_member_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def page_for_chamber(
        self,
        chamber_id: uuid.UUID,
        member_filter: MemberFilter | None = None,
        *,
        page: int = 1,
        limit: int = DEFAULT_MEMBER_PAGE_SIZE,
    ) -> MemberPage:
        conditions = _member_conditions(chamber_id, member_filter or MemberFilter())
        total = self.session.execute(
            select(func.count()).select_from(chamber_member_table).where(*conditions)
        ).scalar_one()
        stmt = (
            select(ChamberMember)
            .where(*conditions)
            .order_by(chamber_member_table.c.business_name, chamber_member_table.c.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        members = list(self.session.execute(stmt).scalars())
        return MemberPage(members=members, total=total, page=page, limit=limit)


def _member_conditions(
    chamber_id: uuid.UUID, member_filter: MemberFilter
) -> list[ColumnElement[bool]]:
    columns = chamber_member_table.c
    conditions: list[ColumnElement[bool]] = [columns.chamber_id == chamber_id]
    if member_filter.status is not None:
        conditions.append(columns.member_status == member_filter.status)
    if member_filter.is_claimed is not None:
        conditions.append(columns.is_claimed == member_filter.is_claimed)
    if member_filter.search:
        pattern = _escape_like(member_filter.search.strip())
        conditions.append(columns.business_name.ilike(f"%{pattern}%", escape="\\"))
    return conditions


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlAlchemySyncRunRepository(SqlAlchemyRepository[SyncRun]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, SyncRun)

    def latest_for_chamber(self, chamber_id: uuid.UUID, sync_type: SyncType) -> SyncRun | None:
        stmt = (
            select(SyncRun)
            .where(sync_run_table.c.chamber_id == chamber_id)
            .where(sync_run_table.c.sync_type == sync_type)
            .order_by(sync_run_table.c.started_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_started_before(self, cutoff: datetime) -> list[SyncRun]:
        stmt = (
            select(SyncRun)
            .where(sync_run_table.c.status == SyncRunStatus.STARTED)
            .where(sync_run_table.c.started_at < cutoff)
            .order_by(sync_run_table.c.started_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyClaimRepository(SqlAlchemyRepository[ClaimRequest]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ClaimRequest)

    def get_pending_for_user(self, user_id: uuid.UUID) -> ClaimRequest | None:
        stmt = (
            select(ClaimRequest)
            .where(claim_request_table.c.requested_by == user_id)
            .where(claim_request_table.c.status == ClaimStatus.PENDING)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_chamber(
        self,
        chamber_id: uuid.UUID,
        status: ClaimStatus | None = None,
    ) -> list[ClaimWithMember]:
        stmt = (
            select(ClaimRequest, ChamberMember)
            .join(
                chamber_member_table,
                chamber_member_table.c.id == claim_request_table.c.member_id,
            )
            .where(claim_request_table.c.chamber_id == chamber_id)
            .order_by(claim_request_table.c.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(claim_request_table.c.status == status)
        rows = self.session.execute(stmt).tuples()
        return [ClaimWithMember(claim=claim, member=member) for claim, member in rows]


class SqlAlchemyMerchantRepository(SqlAlchemyRepository[Merchant]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Merchant)

    def add(self, entity: Merchant) -> None:
        self.session.add(entity)
        self.session.flush()

    def slug_exists(self, slug: str) -> bool:
        stmt = select(merchant_table.c.id).where(merchant_table.c.slug == slug).limit(1)
        return self.session.execute(stmt).first() is not None


class SqlAlchemyNotificationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Notification) -> None:
        self.session.add(entity)


if TYPE_CHECKING:
    from chambersync.domain.ports.persistence import (
        ChamberMemberRepository,
        ChamberRepository,
        ClaimRepository,
        MerchantRepository,
        NotificationRepository,
        ProfileRepository,
        SyncRunRepository,
    )

    _session_stub = cast("Session", object())
    _chamber_repo: ChamberRepository = SqlAlchemyChamberRepository(_session_stub)
    _profile_repo: ProfileRepository = SqlAlchemyProfileRepository(_session_stub)
    _member_repo: ChamberMemberRepository = SqlAlchemyChamberMemberRepository(_session_stub)
    _sync_run_repo: SyncRunRepository = SqlAlchemySyncRunRepository(_session_stub)
    _claim_repo: ClaimRepository = SqlAlchemyClaimRepository(_session_stub)
    _merchant_repo: MerchantRepository = SqlAlchemyMerchantRepository(_session_stub)
    _notification_repo: NotificationRepository = SqlAlchemyNotificationRepository(_session_stub)
