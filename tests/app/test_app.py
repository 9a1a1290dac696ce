from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from chambersync import app
from chambersync.config import ChamberMasterConfig
from chambersync.domain.errors import (
    ChamberNotFoundError,
    ClaimNotFoundError,
    DirectoryNotConfiguredError,
    InvalidPageError,
    PermissionDeniedError,
    ProfileNotFoundError,
)
from chambersync.domain.model import ClaimStatus, MemberStatus, SyncRun, UserRole
from chambersync.domain.ports.persistence import MemberFilter
from tests.helpers.chambers import (
    FIXED_NOW,
    FakeClaimUnitOfWork,
    FakeDirectory,
    FakeMemberSyncUnitOfWork,
    FakeStore,
    RecordingNotifier,
    detailed,
    make_chamber,
    make_member,
    make_profile,
    make_submission,
)

if TYPE_CHECKING:
    from pathlib import Path

    from chambersync.domain.model import Chamber, Principal


def _sync_uow(store: FakeStore) -> app.MemberSyncUnitOfWorkFactory:
    return lambda: FakeMemberSyncUnitOfWork(store)


def _claim_uow(store: FakeStore) -> app.ClaimUnitOfWorkFactory:
    return lambda: FakeClaimUnitOfWork(store)


def _admin_of(store: FakeStore, chamber: Chamber) -> Principal:
    profile = make_profile(
        "admin@example.com", role=UserRole.CHAMBER_ADMIN, chamber_id=chamber.id
    )
    return store.add_profile(profile).principal()


def test_sync_chamber_uses_stored_credentials(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber(chambermaster_association_id="5678"))
    directory = FakeDirectory(detailed=[detailed("1001", "Acme Hardware")])

    result = app.sync_chamber(
        chamber.id,
        principal=_admin_of(store, chamber),
        directory=directory,
        unit_of_work_factory=_sync_uow(store),
    )

    assert result.success
    assert result.added == 1
    assert directory.calls == [("detailed", "5678", None)]


@pytest.mark.parametrize("role", [UserRole.VISITOR, UserRole.MERCHANT])
def test_sync_chamber_requires_admin(store: FakeStore, role: UserRole) -> None:
    chamber = store.add_chamber(make_chamber())
    principal = make_profile(role=role, chamber_id=chamber.id).principal()

    with pytest.raises(PermissionDeniedError):
        app.sync_chamber(
            chamber.id,
            principal=principal,
            directory=FakeDirectory(),
            unit_of_work_factory=_sync_uow(store),
        )


def test_sync_chamber_rejects_admin_of_other_chamber(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    other = store.add_chamber(make_chamber("Shelbyville Chamber"))
    directory = FakeDirectory()

    with pytest.raises(PermissionDeniedError):
        app.sync_chamber(
            chamber.id,
            principal=_admin_of(store, other),
            directory=directory,
            unit_of_work_factory=_sync_uow(store),
        )
    assert directory.calls == []
    assert store.sync_runs == {}


def test_sync_chamber_requires_directory_credentials(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber(chambermaster_api_key=None))

    with pytest.raises(DirectoryNotConfiguredError):
        app.sync_chamber(
            chamber.id,
            principal=_admin_of(store, chamber),
            directory=FakeDirectory(),
            unit_of_work_factory=_sync_uow(store),
        )
    assert store.sync_runs == {}


def test_reconcile_builds_mock_directory_from_config(
    store: FakeStore, mock_directory_path: Path
) -> None:
    chamber = store.add_chamber(make_chamber())

    result = app.reconcile(
        chamber.id,
        "1234",
        "secret",
        unit_of_work_factory=_sync_uow(store),
        config=ChamberMasterConfig(mock=True, mock_path=mock_directory_path),
    )

    assert result.success
    assert result.added == 3


def test_reconcile_reports_missing_mock_file(store: FakeStore, tmp_path: Path) -> None:
    chamber = store.add_chamber(make_chamber())

    result = app.reconcile(
        chamber.id,
        "1234",
        "secret",
        unit_of_work_factory=_sync_uow(store),
        config=ChamberMasterConfig(mock=True, mock_path=tmp_path / "missing.json"),
    )

    assert not result.success
    assert result.error_message == "Mock data file not found or invalid"


def test_find_stuck_sync_runs_defaults_to_configured_threshold(
    store: FakeStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CHAMBERSYNC_STUCK_AFTER_MINUTES", "30")
    chamber = store.add_chamber(make_chamber())
    stuck = SyncRun(chamber_id=chamber.id)
    stuck.started_at -= timedelta(minutes=45)
    fresh = SyncRun(chamber_id=chamber.id)
    fresh.started_at -= timedelta(minutes=10)
    store.sync_runs.update({stuck.id: stuck, fresh.id: fresh})

    result = app.find_stuck_sync_runs(unit_of_work_factory=_sync_uow(store))

    assert result == [stuck]


def test_claim_review_is_scoped_to_admin_chamber(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    other = store.add_chamber(make_chamber("Shelbyville Chamber"))
    member = store.add_member(make_member(chamber.id))
    visitor = store.add_profile(make_profile(chamber_id=chamber.id))
    claim = app.create_claim(
        visitor.principal(),
        make_submission(chamber.id, member.id),
        unit_of_work_factory=_claim_uow(store),
    )
    outsider = _admin_of(store, other)

    with pytest.raises(ClaimNotFoundError):
        app.approve_claim(claim.id, principal=outsider, unit_of_work_factory=_claim_uow(store))
    with pytest.raises(PermissionDeniedError):
        app.list_claims(chamber.id, principal=outsider, unit_of_work_factory=_claim_uow(store))
    with pytest.raises(PermissionDeniedError):
        app.deny_claim(
            claim.id,
            "No",
            principal=visitor.principal(),
            unit_of_work_factory=_claim_uow(store),
        )
    assert claim.is_pending


def test_claim_approval_through_app(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    member = store.add_member(make_member(chamber.id))
    visitor = store.add_profile(make_profile(chamber_id=chamber.id))
    admin = _admin_of(store, chamber)
    notifier = RecordingNotifier()
    claim = app.create_claim(
        visitor.principal(),
        make_submission(chamber.id, member.id),
        unit_of_work_factory=_claim_uow(store),
    )

    listed = app.list_claims(
        chamber.id, ClaimStatus.PENDING, principal=admin, unit_of_work_factory=_claim_uow(store)
    )
    merchant = app.approve_claim(
        claim.id, principal=admin, unit_of_work_factory=_claim_uow(store), notifier=notifier
    )

    assert [entry.claim.id for entry in listed] == [claim.id]
    assert merchant.chamber_id == chamber.id
    assert claim.resolved_by == admin.user_id
    assert notifier.approved == [(claim, merchant)]


def test_load_principal(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    profile = store.add_profile(
        make_profile(role=UserRole.CHAMBER_ADMIN, chamber_id=chamber.id)
    )

    principal = app.load_principal(profile.id, unit_of_work_factory=_claim_uow(store))

    assert principal.user_id == profile.id
    assert principal.administers(chamber.id)
    with pytest.raises(ProfileNotFoundError):
        app.load_principal(uuid4(), unit_of_work_factory=_claim_uow(store))


def test_bootstrap_helpers(store: FakeStore) -> None:
    chamber = app.create_chamber(
        "Springfield Area Chamber",
        association_id="1234",
        api_key="secret",
        unit_of_work_factory=_sync_uow(store),
    )
    profile = app.create_profile(
        "admin@example.com",
        role=UserRole.CHAMBER_ADMIN,
        chamber_id=chamber.id,
        unit_of_work_factory=_claim_uow(store),
    )
    store.add_member(make_member(chamber.id))

    assert chamber.slug == "springfield-area-chamber"
    assert store.chambers[chamber.id] is chamber
    assert store.profiles[profile.id] is profile
    roster = app.list_members(
        chamber.id, principal=profile.principal(), unit_of_work_factory=_sync_uow(store)
    )
    assert [member.business_name for member in roster.members] == ["Acme Hardware"]
    with pytest.raises(ChamberNotFoundError):
        app.create_profile(
            "ghost@example.com", chamber_id=uuid4(), unit_of_work_factory=_claim_uow(store)
        )
    ghost_admin = make_profile(role=UserRole.CHAMBER_ADMIN, chamber_id=uuid4()).principal()
    with pytest.raises(ChamberNotFoundError):
        app.get_sync_status(
            ghost_admin.chamber_id,  # pyright: ignore[reportArgumentType]
            principal=ghost_admin,
            unit_of_work_factory=_sync_uow(store),
        )


def test_list_members_filters_and_pages(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    other = store.add_chamber(make_chamber("Shelbyville Chamber"))
    for external_id, name in [("1", "Acme Hardware"), ("2", "Ace Bakery"), ("3", "Zeta Cafe")]:
        store.add_member(make_member(chamber.id, external_id, business_name=name))
    store.add_member(
        make_member(chamber.id, "4", business_name="Acme Books", status=MemberStatus.INACTIVE)
    )
    claimed = store.add_member(make_member(chamber.id, "5", business_name="Bolt Acme Supply"))
    claimed.mark_claimed(uuid4(), at=FIXED_NOW)
    store.add_member(make_member(other.id, "6", business_name="Acme Elsewhere"))
    admin = _admin_of(store, chamber)

    def roster(member_filter: MemberFilter | None = None, **paging: int) -> list[str]:
        page = app.list_members(
            chamber.id,
            member_filter,
            principal=admin,
            unit_of_work_factory=_sync_uow(store),
            **paging,
        )
        return [member.business_name for member in page.members]

    assert roster(MemberFilter(search="  acme ")) == [
        "Acme Books",
        "Acme Hardware",
        "Bolt Acme Supply",
    ]
    assert roster(MemberFilter(status=MemberStatus.INACTIVE)) == ["Acme Books"]
    assert roster(MemberFilter(is_claimed=True)) == ["Bolt Acme Supply"]
    assert roster(MemberFilter(search="acme", is_claimed=False)) == [
        "Acme Books",
        "Acme Hardware",
    ]
    assert roster(page=2, limit=2) == ["Acme Hardware", "Bolt Acme Supply"]

    last = app.list_members(
        chamber.id, principal=admin, page=3, limit=2, unit_of_work_factory=_sync_uow(store)
    )
    assert [member.business_name for member in last.members] == ["Zeta Cafe"]
    assert (last.total, last.page, last.limit, last.total_pages) == (5, 3, 2, 3)


def test_list_members_rejects_non_positive_paging(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    admin = _admin_of(store, chamber)

    with pytest.raises(InvalidPageError):
        app.list_members(chamber.id, principal=admin, page=0, unit_of_work_factory=_sync_uow(store))
    with pytest.raises(InvalidPageError):
        app.list_members(
            chamber.id, principal=admin, limit=0, unit_of_work_factory=_sync_uow(store)
        )


@pytest.mark.parametrize("role", [UserRole.VISITOR, UserRole.MERCHANT])
def test_roster_and_sync_status_require_admin(store: FakeStore, role: UserRole) -> None:
    chamber = store.add_chamber(make_chamber())
    store.add_member(make_member(chamber.id))
    principal = make_profile(role=role, chamber_id=chamber.id).principal()

    with pytest.raises(PermissionDeniedError):
        app.list_members(chamber.id, principal=principal, unit_of_work_factory=_sync_uow(store))
    with pytest.raises(PermissionDeniedError):
        app.get_sync_status(chamber.id, principal=principal, unit_of_work_factory=_sync_uow(store))


def test_roster_and_sync_status_reject_admin_of_other_chamber(store: FakeStore) -> None:
    chamber = store.add_chamber(make_chamber())
    other = store.add_chamber(make_chamber("Shelbyville Chamber"))
    outsider = _admin_of(store, other)

    with pytest.raises(PermissionDeniedError):
        app.list_members(chamber.id, principal=outsider, unit_of_work_factory=_sync_uow(store))
    with pytest.raises(PermissionDeniedError):
        app.get_sync_status(chamber.id, principal=outsider, unit_of_work_factory=_sync_uow(store))

    status = app.get_sync_status(
        chamber.id, principal=_admin_of(store, chamber), unit_of_work_factory=_sync_uow(store)
    )
    assert status.last_sync_run is None
