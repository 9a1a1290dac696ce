# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from chambersync import app
from chambersync.config import configure_logging
from chambersync.domain.errors import ChamberSyncError
from chambersync.domain.model import ClaimStatus, ClaimSubmission, MemberStatus, UserRole
from chambersync.domain.ports.persistence import DEFAULT_MEMBER_PAGE_SIZE, MemberFilter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from chambersync.domain.member_sync import SyncResult

log = logging.getLogger(__name__)


class CliUsageError(ValueError):
    """Invalid command line input detected after argparse."""


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid UUID: {value}") from exc


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1: {value}")
    return number


def _add_actor(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--as-user",
        type=_parse_uuid,
        required=True,
        help="Profile id of the user performing the action",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="chambersync",
        description="Synchronise ChamberMaster members and review business claims",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    chamber = subparsers.add_parser("chamber", help="Chamber management commands")
    chamber_sub = chamber.add_subparsers(dest="chamber_command", required=True)
    chamber_create = chamber_sub.add_parser("create", help="Create a chamber")
    chamber_create.add_argument("--name", required=True, help="Display name of the chamber")
    chamber_create.add_argument("--slug", help="URL slug (derived from the name if omitted)")
    chamber_create.add_argument("--association-id", help="ChamberMaster association id")
    chamber_create.add_argument("--api-key", help="ChamberMaster API key")
    chamber_create.add_argument("--base-url", help="ChamberMaster API base URL override")
    chamber_create.add_argument(
        "--sync-enabled",
        action="store_true",
        help="Mark the chamber as enabled for directory sync",
    )

    profile = subparsers.add_parser("profile", help="Profile management commands")
    profile_sub = profile.add_subparsers(dest="profile_command", required=True)
    profile_create = profile_sub.add_parser("create", help="Create a user profile")
    profile_create.add_argument("--email", required=True, help="E-mail address of the user")
    profile_create.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.VISITOR.value,
        help="Role of the user (default: %(default)s)",
    )
    profile_create.add_argument("--chamber-id", type=_parse_uuid, help="Chamber of the user")
    profile_create.add_argument(
        "--user-id",
        type=_parse_uuid,
        help="Identity provider user id (generated if omitted)",
    )

    sync = subparsers.add_parser("sync", help="Sync a chamber's ChamberMaster members")
    sync.add_argument("--chamber-id", type=_parse_uuid, required=True)
    _add_actor(sync)

    status = subparsers.add_parser("sync-status", help="Show the last sync of a chamber")
    status.add_argument("--chamber-id", type=_parse_uuid, required=True)
    _add_actor(status)

    stuck = subparsers.add_parser("stuck-runs", help="List sync runs that never finished")
    stuck.add_argument(
        "--older-than-minutes",
        type=float,
        help="Age after which a started run counts as stuck (defaults to config)",
    )

    members = subparsers.add_parser("members", help="List a chamber's member records")
    members.add_argument("--chamber-id", type=_parse_uuid, required=True)
    _add_actor(members)
    members.add_argument(
        "--status", choices=[member_status.value for member_status in MemberStatus]
    )
    claimed_group = members.add_mutually_exclusive_group()
    claimed_group.add_argument(
        "--claimed", dest="is_claimed", action="store_const", const=True, help="Only claimed"
    )
    claimed_group.add_argument(
        "--unclaimed", dest="is_claimed", action="store_const", const=False, help="Only unclaimed"
    )
    members.add_argument("--search", help="Case-insensitive business name filter")
    members.add_argument("--page", type=_positive_int, default=1)
    members.add_argument(
        "--limit",
        type=_positive_int,
        default=DEFAULT_MEMBER_PAGE_SIZE,
        help="Members per page (default: %(default)s)",
    )

    claims = subparsers.add_parser("claims", help="Business claim commands")
    claims_sub = claims.add_subparsers(dest="claims_command", required=True)

    submit = claims_sub.add_parser("submit", help="Claim a member business")
    _add_actor(submit)
    submit.add_argument("--chamber-id", type=_parse_uuid, required=True)
    submit.add_argument("--member-id", type=_parse_uuid, required=True)
    submit.add_argument("--contact-name", required=True)
    submit.add_argument("--contact-email", required=True)
    submit.add_argument("--contact-phone")
    submit.add_argument("--message")

    listing = claims_sub.add_parser("list", help="List claims of a chamber")
    _add_actor(listing)
    listing.add_argument("--chamber-id", type=_parse_uuid, required=True)
    listing.add_argument("--status", choices=[status.value for status in ClaimStatus])

    approve = claims_sub.add_parser("approve", help="Approve a pending claim")
    _add_actor(approve)
    approve.add_argument("--claim-id", type=_parse_uuid, required=True)

    deny = claims_sub.add_parser("deny", help="Deny a pending claim")
    _add_actor(deny)
    deny.add_argument("--claim-id", type=_parse_uuid, required=True)
    deny.add_argument("--reason", required=True, help="Reason shown to the requester")

    return parser.parse_args(list(argv))


def _report_sync(result: SyncResult) -> None:
    if result.success:
        print(
            f"Sync {result.sync_run_id} completed: added={result.added}, "
            f"updated={result.updated}, deactivated={result.deactivated}"
        )
        return
    raise CliUsageError(f"Sync failed: {result.error_message}")


def _run_claims(args: argparse.Namespace) -> None:
    principal = app.load_principal(args.as_user)
    if args.claims_command == "submit":
        claim = app.create_claim(
            principal,
            ClaimSubmission(
                chamber_id=args.chamber_id,
                member_id=args.member_id,
                contact_name=args.contact_name,
                contact_email=args.contact_email,
                contact_phone=args.contact_phone,
                message=args.message,
            ),
        )
        print(f"Submitted claim {claim.id}")
    elif args.claims_command == "list":
        status = ClaimStatus(args.status) if args.status else None
        for entry in app.list_claims(args.chamber_id, status, principal=principal):
            print(
                f"{entry.claim.id}  {entry.claim.status:<8}  {entry.member.business_name}  "
                f"{entry.claim.contact_name} <{entry.claim.contact_email}>"
            )
    elif args.claims_command == "approve":
        merchant = app.approve_claim(args.claim_id, principal=principal)
        print(f"Approved claim {args.claim_id}, merchant {merchant.id} ({merchant.slug})")
    elif args.claims_command == "deny":
        app.deny_claim(args.claim_id, args.reason, principal=principal)
        print(f"Denied claim {args.claim_id}")
    else:
        raise CliUsageError(f"Unsupported claims command: {args.claims_command}")


def _list_members(args: argparse.Namespace) -> None:
    principal = app.load_principal(args.as_user)
    member_filter = MemberFilter(
        status=MemberStatus(args.status) if args.status else None,
        is_claimed=args.is_claimed,
        search=args.search,
    )
    result = app.list_members(
        args.chamber_id,
        member_filter,
        principal=principal,
        page=args.page,
        limit=args.limit,
    )
    for member in result.members:
        claimed = "claimed" if member.is_claimed else ""
        print(f"{member.id}  {member.member_status:<11}  {member.business_name}  {claimed}")
    print(f"Page {result.page} of {result.total_pages} ({result.total} members)")


def _dispatch(args: argparse.Namespace) -> None:
    if args.command == "chamber" and args.chamber_command == "create":
        chamber = app.create_chamber(
            args.name,
            slug=args.slug,
            association_id=args.association_id,
            api_key=args.api_key,
            base_url=args.base_url,
            sync_enabled=args.sync_enabled,
        )
        print(f"Created chamber {chamber.id} ({chamber.slug})")
    elif args.command == "profile" and args.profile_command == "create":
        profile = app.create_profile(
            args.email,
            role=UserRole(args.role),
            chamber_id=args.chamber_id,
            user_id=args.user_id,
        )
        print(f"Created profile {profile.id} ({profile.role})")
    elif args.command == "sync":
        principal = app.load_principal(args.as_user)
        _report_sync(app.sync_chamber(args.chamber_id, principal=principal))
    elif args.command == "sync-status":
        principal = app.load_principal(args.as_user)
        status = app.get_sync_status(args.chamber_id, principal=principal)
        print(f"Last sync: {status.last_sync_at or 'never'}")
        run = status.last_sync_run
        if run is not None:
            print(
                f"Last run {run.id}: {run.status} added={run.members_added} "
                f"updated={run.members_updated} deactivated={run.members_deactivated}"
            )
            if run.error_message:
                print(f"Error: {run.error_message}")
    elif args.command == "stuck-runs":
        older_than = (
            timedelta(minutes=args.older_than_minutes)
            if args.older_than_minutes is not None
            else None
        )
        for run in app.find_stuck_sync_runs(older_than=older_than):
            print(f"{run.id}  chamber={run.chamber_id}  started_at={run.started_at.isoformat()}")
    elif args.command == "members":
        _list_members(args)
    elif args.command == "claims":
        _run_claims(args)
    else:
        raise CliUsageError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _dispatch(parsed_args)
    except (ChamberSyncError, CliUsageError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
