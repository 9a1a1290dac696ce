from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from chambersync.adapters.sqlalchemy.mappings import merchant_table, notification_table
from chambersync.domain.claims import approve_claim, create_claim, deny_claim
from chambersync.domain.errors import MemberAlreadyClaimedError, MerchantAlreadyLinkedError
from chambersync.domain.model import ClaimStatus, Merchant, UserRole
from tests.helpers.chambers import (
    RecordingNotifier,
    make_chamber,
    make_member,
    make_profile,
    make_submission,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import Table
    from sqlalchemy.engine import Engine

    from chambersync.adapters.sqlalchemy import SqlAlchemyClaimUnitOfWork
    from chambersync.domain.model import Chamber, ChamberMember, ClaimRequest, Profile

    ClaimUowFactory = Callable[[], SqlAlchemyClaimUnitOfWork]


def _seed(
    claim_uow: ClaimUowFactory,
) -> tuple[Chamber, ChamberMember, Profile, Profile]:
    chamber = make_chamber()
    member = make_member(chamber.id)
    visitor = make_profile(chamber_id=chamber.id)
    admin = make_profile("admin@example.com", role=UserRole.CHAMBER_ADMIN, chamber_id=chamber.id)
    with claim_uow() as uow:
        uow.repositories.chambers.add(chamber)
        uow.repositories.members.add(member)
        uow.repositories.profiles.add(visitor)
        uow.repositories.profiles.add(admin)
        uow.commit()
    return chamber, member, visitor, admin


def _submit(
    claim_uow: ClaimUowFactory,
    chamber: Chamber,
    member: ChamberMember,
    visitor: Profile,
) -> ClaimRequest:
    return create_claim(
        visitor.id,
        make_submission(chamber.id, member.id),
        unit_of_work_factory=claim_uow,
    )


def _count(engine: Engine, table: Table) -> int:
    with engine.connect() as connection:
        return connection.execute(select(func.count()).select_from(table)).scalar_one()


def test_approval_commits_every_write(claim_uow: ClaimUowFactory, adapter_started: Engine) -> None:
    chamber, member, visitor, admin = _seed(claim_uow)
    claim = _submit(claim_uow, chamber, member, visitor)
    notifier = RecordingNotifier()

    merchant = approve_claim(
        claim.id,
        admin.id,
        unit_of_work_factory=claim_uow,
        notifier=notifier,
        chamber_id=chamber.id,
    )

    with claim_uow() as uow:
        repositories = uow.repositories
        stored_claim = repositories.claims.get(claim.id)
        stored_member = repositories.members.get(member.id)
        stored_profile = repositories.profiles.get(visitor.id)
        assert stored_claim is not None
        assert stored_member is not None
        assert stored_profile is not None
        assert stored_claim.status is ClaimStatus.APPROVED
        assert stored_member.is_claimed
        assert stored_member.claimed_by == visitor.id
        assert stored_profile.merchant_id == merchant.id
        assert stored_profile.role is UserRole.MERCHANT
        assert repositories.merchants.slug_exists("acme-hardware")
    assert _count(adapter_started, notification_table) == 1
    assert len(notifier.approved) == 1


def test_failed_approval_leaves_no_merchant_behind(
    claim_uow: ClaimUowFactory, adapter_started: Engine
) -> None:
    chamber, member, visitor, admin = _seed(claim_uow)
    claim = _submit(claim_uow, chamber, member, visitor)
    existing = Merchant(
        chamber_id=chamber.id,
        member_id=None,
        business_name="Visitor's Other Shop",
        slug="visitors-other-shop",
        contact_email="visitor@example.com",
    )
    with claim_uow() as uow:
        uow.repositories.merchants.add(existing)
        profile = uow.repositories.profiles.get(visitor.id)
        assert profile is not None
        profile.merchant_id = existing.id
        uow.commit()

    with pytest.raises(MerchantAlreadyLinkedError):
        approve_claim(claim.id, admin.id, unit_of_work_factory=claim_uow)

    assert _count(adapter_started, merchant_table) == 1
    assert _count(adapter_started, notification_table) == 0
    with claim_uow() as uow:
        stored_claim = uow.repositories.claims.get(claim.id)
        stored_member = uow.repositories.members.get(member.id)
        assert stored_claim is not None
        assert stored_member is not None
        assert stored_claim.is_pending
        assert not stored_member.is_claimed
        assert not uow.repositories.merchants.slug_exists("acme-hardware")


def test_second_claim_on_claimed_member_is_rejected(claim_uow: ClaimUowFactory) -> None:
    chamber, member, visitor, admin = _seed(claim_uow)
    claim = _submit(claim_uow, chamber, member, visitor)
    approve_claim(claim.id, admin.id, unit_of_work_factory=claim_uow)
    latecomer = make_profile("late@example.com", chamber_id=chamber.id)
    with claim_uow() as uow:
        uow.repositories.profiles.add(latecomer)
        uow.commit()

    with pytest.raises(MemberAlreadyClaimedError):
        _submit(claim_uow, chamber, member, latecomer)


def test_slug_collision_across_chambers(claim_uow: ClaimUowFactory) -> None:
    chamber, member, visitor, admin = _seed(claim_uow)
    other_chamber = make_chamber("Shelbyville Chamber")
    other_member = make_member(other_chamber.id)
    other_visitor = make_profile("shelby@example.com", chamber_id=other_chamber.id)
    with claim_uow() as uow:
        uow.repositories.chambers.add(other_chamber)
        uow.repositories.members.add(other_member)
        uow.repositories.profiles.add(other_visitor)
        uow.commit()

    first = approve_claim(
        _submit(claim_uow, chamber, member, visitor).id,
        admin.id,
        unit_of_work_factory=claim_uow,
    )
    second = approve_claim(
        _submit(claim_uow, other_chamber, other_member, other_visitor).id,
        admin.id,
        unit_of_work_factory=claim_uow,
    )

    assert first.slug == "acme-hardware"
    assert second.slug == "acme-hardware-1"


def test_denial_is_persisted(claim_uow: ClaimUowFactory, adapter_started: Engine) -> None:
    chamber, member, visitor, admin = _seed(claim_uow)
    claim = _submit(claim_uow, chamber, member, visitor)

    deny_claim(claim.id, admin.id, "Not an owner", unit_of_work_factory=claim_uow)

    with claim_uow() as uow:
        stored = uow.repositories.claims.get(claim.id)
        assert stored is not None
        assert stored.status is ClaimStatus.DENIED
        assert stored.denial_reason == "Not an owner"
        assert uow.repositories.claims.get_pending_for_user(visitor.id) is None
    assert _count(adapter_started, merchant_table) == 0
    assert _count(adapter_started, notification_table) == 1
