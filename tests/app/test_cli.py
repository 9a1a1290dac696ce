from __future__ import annotations

from datetime import timedelta
from uuid import UUID

import pytest

from chambersync import app as app_module
from chambersync.domain.errors import PermissionDeniedError
from chambersync.domain.member_sync import SyncResult
from chambersync.domain.model import (
    ClaimRequest,
    ClaimStatus,
    MemberStatus,
    Principal,
    UserRole,
)
from chambersync.domain.ports.persistence import ClaimWithMember, MemberFilter, MemberPage
from chambersync.ui import cli
from tests.helpers.chambers import make_member, make_profile, make_submission

CHAMBER_ID = UUID("00000000-0000-0000-0000-00000000c0de")
USER_ID = UUID("00000000-0000-0000-0000-0000000000ad")
RUN_ID = UUID("00000000-0000-0000-0000-000000000042")


@pytest.fixture
def principal(monkeypatch: pytest.MonkeyPatch) -> Principal:
    admin = make_profile("admin@example.com", role=UserRole.CHAMBER_ADMIN, chamber_id=CHAMBER_ID)
    admin.id = USER_ID
    resolved = admin.principal()

    def fake_load_principal(user_id: UUID) -> Principal:
        assert user_id == USER_ID
        return resolved

    monkeypatch.setattr(app_module, "load_principal", fake_load_principal)
    return resolved


def test_sync_command_reports_counts(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    principal: Principal,
) -> None:
    captured: dict[str, object] = {}

    def fake_sync(chamber_id: UUID, **kwargs: object) -> SyncResult:
        captured["chamber_id"] = chamber_id
        captured.update(kwargs)
        return SyncResult(success=True, added=2, updated=5, deactivated=1, sync_run_id=RUN_ID)

    monkeypatch.setattr(app_module, "sync_chamber", fake_sync)

    cli.main(["sync", "--chamber-id", str(CHAMBER_ID), "--as-user", str(USER_ID)])

    assert captured == {"chamber_id": CHAMBER_ID, "principal": principal}
    out = capsys.readouterr().out
    assert f"Sync {RUN_ID} completed: added=2, updated=5, deactivated=1" in out


def test_sync_command_failure_exits_non_zero(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    principal: Principal,
) -> None:
    _ = principal

    def fake_sync(_chamber_id: UUID, **_kwargs: object) -> SyncResult:
        return SyncResult(success=False, error_message="ChamberMaster API request failed")

    monkeypatch.setattr(app_module, "sync_chamber", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync", "--chamber-id", str(CHAMBER_ID), "--as-user", str(USER_ID)])

    assert excinfo.value.code == 1
    assert "Error: Sync failed: ChamberMaster API request failed" in capsys.readouterr().err


def test_domain_errors_are_reported_without_traceback(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    def fake_load_principal(_user_id: UUID) -> Principal:
        raise PermissionDeniedError

    monkeypatch.setattr(app_module, "load_principal", fake_load_principal)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["claims", "approve", "--as-user", str(USER_ID), "--claim-id", str(RUN_ID)])

    assert excinfo.value.code == 1
    assert capsys.readouterr().err.strip() == "Error: Insufficient permissions"


def test_unexpected_errors_exit_non_zero(
    monkeypatch: pytest.MonkeyPatch, principal: Principal
) -> None:
    _ = principal

    def fake_status(_chamber_id: UUID, **_kwargs: object) -> None:
        raise RuntimeError("database is on fire")

    monkeypatch.setattr(app_module, "get_sync_status", fake_status)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync-status", "--chamber-id", str(CHAMBER_ID), "--as-user", str(USER_ID)])

    assert excinfo.value.code == 1


def test_invalid_uuid_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync-status", "--chamber-id", "not-a-uuid", "--as-user", str(USER_ID)])

    assert excinfo.value.code == 2


def test_deny_requires_reason() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["claims", "deny", "--as-user", str(USER_ID), "--claim-id", str(RUN_ID)])

    assert excinfo.value.code == 2


def test_claims_list_passes_status_filter(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    principal: Principal,
) -> None:
    member = make_member(CHAMBER_ID)
    claim = ClaimRequest.submit(USER_ID, make_submission(CHAMBER_ID, member.id))
    captured: dict[str, object] = {}

    def fake_list(
        chamber_id: UUID, status: ClaimStatus | None, **kwargs: object
    ) -> list[ClaimWithMember]:
        captured.update(chamber_id=chamber_id, status=status, **kwargs)
        return [ClaimWithMember(claim=claim, member=member)]

    monkeypatch.setattr(app_module, "list_claims", fake_list)

    cli.main(
        [
            "claims",
            "list",
            "--as-user",
            str(USER_ID),
            "--chamber-id",
            str(CHAMBER_ID),
            "--status",
            "pending",
        ]
    )

    assert captured == {
        "chamber_id": CHAMBER_ID,
        "status": ClaimStatus.PENDING,
        "principal": principal,
    }
    out = capsys.readouterr().out
    assert str(claim.id) in out
    assert "Acme Hardware" in out
    assert "owner@acme.example" in out


def test_claims_deny_forwards_reason(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    principal: Principal,
) -> None:
    captured: dict[str, object] = {}

    def fake_deny(claim_id: UUID, reason: str, **kwargs: object) -> None:
        captured.update(claim_id=claim_id, reason=reason, **kwargs)

    monkeypatch.setattr(app_module, "deny_claim", fake_deny)

    cli.main(
        [
            "claims",
            "deny",
            "--as-user",
            str(USER_ID),
            "--claim-id",
            str(RUN_ID),
            "--reason",
            "Not an owner",
        ]
    )

    assert captured == {"claim_id": RUN_ID, "reason": "Not an owner", "principal": principal}
    assert f"Denied claim {RUN_ID}" in capsys.readouterr().out


def test_stuck_runs_converts_minutes(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_find(**kwargs: object) -> list[object]:
        captured.update(kwargs)
        return []

    monkeypatch.setattr(app_module, "find_stuck_sync_runs", fake_find)

    cli.main(["stuck-runs", "--older-than-minutes", "90"])
    assert captured["older_than"] == timedelta(minutes=90)

    cli.main(["stuck-runs"])
    assert captured["older_than"] is None


def test_profile_create_parses_role(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_create_profile(email: str, **kwargs: object) -> object:
        captured.update(email=email, **kwargs)
        profile = make_profile(email, role=UserRole.CHAMBER_ADMIN, chamber_id=CHAMBER_ID)
        profile.id = USER_ID
        return profile

    monkeypatch.setattr(app_module, "create_profile", fake_create_profile)

    cli.main(
        [
            "profile",
            "create",
            "--email",
            "admin@example.com",
            "--role",
            "chamber_admin",
            "--chamber-id",
            str(CHAMBER_ID),
        ]
    )

    assert captured == {
        "email": "admin@example.com",
        "role": UserRole.CHAMBER_ADMIN,
        "chamber_id": CHAMBER_ID,
        "user_id": None,
    }
    assert f"Created profile {USER_ID} (chamber_admin)" in capsys.readouterr().out


def test_sync_status_requires_actor() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync-status", "--chamber-id", str(CHAMBER_ID)])

    assert excinfo.value.code == 2


def test_members_command_forwards_filters_and_paging(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    principal: Principal,
) -> None:
    member = make_member(CHAMBER_ID)
    captured: dict[str, object] = {}

    def fake_list_members(
        chamber_id: UUID, member_filter: MemberFilter | None, **kwargs: object
    ) -> MemberPage:
        captured.update(chamber_id=chamber_id, member_filter=member_filter, **kwargs)
        return MemberPage(members=[member], total=7, page=2, limit=5)

    monkeypatch.setattr(app_module, "list_members", fake_list_members)

    cli.main(
        [
            "members",
            "--chamber-id",
            str(CHAMBER_ID),
            "--as-user",
            str(USER_ID),
            "--status",
            "active",
            "--unclaimed",
            "--search",
            "acme",
            "--page",
            "2",
            "--limit",
            "5",
        ]
    )

    assert captured == {
        "chamber_id": CHAMBER_ID,
        "member_filter": MemberFilter(
            status=MemberStatus.ACTIVE, is_claimed=False, search="acme"
        ),
        "principal": principal,
        "page": 2,
        "limit": 5,
    }
    out = capsys.readouterr().out
    assert "Acme Hardware" in out
    assert "Page 2 of 2 (7 members)" in out


def test_members_command_defaults_to_unfiltered_first_page(
    monkeypatch: pytest.MonkeyPatch, principal: Principal
) -> None:
    captured: dict[str, object] = {}

    def fake_list_members(
        _chamber_id: UUID, member_filter: MemberFilter | None, **kwargs: object
    ) -> MemberPage:
        captured.update(member_filter=member_filter, principal=kwargs["principal"])
        captured.update(page=kwargs["page"], limit=kwargs["limit"])
        return MemberPage(members=[], total=0, page=1, limit=50)

    monkeypatch.setattr(app_module, "list_members", fake_list_members)

    cli.main(["members", "--chamber-id", str(CHAMBER_ID), "--as-user", str(USER_ID)])

    assert captured == {
        "member_filter": MemberFilter(),
        "principal": principal,
        "page": 1,
        "limit": 50,
    }


@pytest.mark.parametrize("flag", ["--page", "--limit"])
def test_members_paging_must_be_positive(flag: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(
            ["members", "--chamber-id", str(CHAMBER_ID), "--as-user", str(USER_ID), flag, "0"]
        )

    assert excinfo.value.code == 2
