"""Claim lifecycle: submission, review and merchant provisioning."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from chambersync.domain.errors import (
    ClaimNotFoundError,
    MemberAlreadyClaimedError,
    MemberNotFoundError,
    MerchantAlreadyLinkedError,
    PendingClaimExistsError,
    ProfileNotFoundError,
)
from chambersync.domain.model import (
    ClaimRequest,
    Merchant,
    Notification,
    NotificationType,
    utc_now,
)
from chambersync.domain.slugs import unique_slug

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from chambersync.domain.model import ChamberMember, ClaimStatus, ClaimSubmission
    from chambersync.domain.ports.notifications import ClaimNotifier
    from chambersync.domain.ports.persistence import ClaimWithMember
    from chambersync.domain.ports.unit_of_work import ClaimRepositories, ClaimUnitOfWork

log = getLogger(__name__)

MERCHANT_DASHBOARD_LINK = "/merchant/dashboard"


def create_claim(
    user_id: UUID,
    submission: ClaimSubmission,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
) -> ClaimRequest:
    """Record a pending claim of ``user_id`` on an unclaimed member record."""

    with unit_of_work_factory() as uow:
        repositories = uow.repositories

        profile = repositories.profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError
        if profile.has_merchant:
            raise MerchantAlreadyLinkedError
        if repositories.claims.get_pending_for_user(user_id) is not None:
            raise PendingClaimExistsError

        member = repositories.members.get(submission.member_id)
        if member is None or member.chamber_id != submission.chamber_id:
            raise MemberNotFoundError
        if member.is_claimed:
            raise MemberAlreadyClaimedError

        claim = ClaimRequest.submit(user_id, submission)
        repositories.claims.add(claim)
        uow.commit()

    log.info(
        "Claim request %s created by %s for %s", claim.id, user_id, member.business_name
    )
    return claim


def list_claims(
    chamber_id: UUID,
    status: ClaimStatus | None = None,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
) -> list[ClaimWithMember]:
    """Claims of a chamber with their member records, newest first."""

    with unit_of_work_factory() as uow:
        return uow.repositories.claims.list_for_chamber(chamber_id, status)


def approve_claim(
    claim_id: UUID,
    approver_id: UUID,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    notifier: ClaimNotifier | None = None,
    chamber_id: UUID | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> Merchant:
    """Approve a pending claim and provision the merchant it asks for.

    Runs in a single unit of work. The merchant row is written first, then the
    requester's profile link, the claimed flag on the member record, the
    notification and finally the claim status. Any failure rolls all of it
    back, so the claim stays pending and no merchant survives.
    """

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        claim = _load_pending_claim(repositories, claim_id, chamber_id)

        member = repositories.members.get_for_update(claim.member_id)
        if member is None:
            raise MemberNotFoundError
        if member.is_claimed:
            raise MemberAlreadyClaimedError

        merchant: Merchant | None = None
        try:
            now = clock()
            slug = unique_slug(member.business_name, repositories.merchants.slug_exists)
            merchant = Merchant.from_claim(
                member, claim, slug=slug, approved_by=approver_id, approved_at=now
            )
            repositories.merchants.add(merchant)

            requester = repositories.profiles.get(claim.requested_by)
            if requester is None:
                raise ProfileNotFoundError
            requester.link_merchant(merchant.id)

            member.mark_claimed(claim.requested_by, at=now)
            repositories.notifications.add(_approval_notification(claim, merchant))
            claim.approve(approver_id, at=now)
            uow.commit()
        except Exception:
            if merchant is not None:
                log.warning(
                    "Rolling back merchant %s created for claim %s", merchant.id, claim_id
                )
            log.exception("Failed to approve claim %s", claim_id)
            raise

    log.info(
        "Claim %s approved, merchant %s created for %s",
        claim_id,
        merchant.id,
        merchant.business_name,
    )
    if notifier is not None:
        _notify(lambda: notifier.claim_approved(claim, merchant), claim_id)
    return merchant


def deny_claim(
    claim_id: UUID,
    denier_id: UUID,
    reason: str,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    notifier: ClaimNotifier | None = None,
    chamber_id: UUID | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> None:
    """Deny a pending claim; ``reason`` must not be blank."""

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        claim = _load_pending_claim(repositories, claim_id, chamber_id)
        member = repositories.members.get(claim.member_id)
        if member is None:
            raise MemberNotFoundError

        claim.deny(denier_id, reason, at=clock())
        repositories.notifications.add(_denial_notification(claim, member))
        uow.commit()

    log.info("Claim %s denied: %s", claim_id, claim.denial_reason)
    if notifier is not None:
        _notify(lambda: notifier.claim_denied(claim, member), claim_id)


def _load_pending_claim(
    repositories: ClaimRepositories,
    claim_id: UUID,
    chamber_id: UUID | None,
) -> ClaimRequest:
    claim = repositories.claims.get(claim_id)
    if claim is None or (chamber_id is not None and claim.chamber_id != chamber_id):
        raise ClaimNotFoundError
    claim.ensure_pending()
    return claim


def _approval_notification(claim: ClaimRequest, merchant: Merchant) -> Notification:
    return Notification(
        recipient_id=claim.requested_by,
        type=NotificationType.CLAIM_APPROVED,
        title="Your business claim was approved!",
        message=(
            f"Your claim for {merchant.business_name} has been approved. "
            "You can now start adding products."
        ),
        link=MERCHANT_DASHBOARD_LINK,
        claim_id=claim.id,
        merchant_id=merchant.id,
    )


def _denial_notification(claim: ClaimRequest, member: ChamberMember) -> Notification:
    return Notification(
        recipient_id=claim.requested_by,
        type=NotificationType.CLAIM_DENIED,
        title="Your business claim was not approved",
        message=(
            f"Your claim for {member.business_name} was not approved. "
            f"Reason: {claim.denial_reason}"
        ),
        claim_id=claim.id,
    )


def _notify(send: Callable[[], None], claim_id: UUID) -> None:
    try:
        send()
    except Exception:
        log.exception("Failed to send notification for claim %s", claim_id)
