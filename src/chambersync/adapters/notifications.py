"""Claim decision notifier that records outgoing e-mails in the log."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from chambersync.domain.ports.notifications import ClaimNotifier

if TYPE_CHECKING:
    from chambersync.domain.model import ChamberMember, ClaimRequest, Merchant

log = getLogger(__name__)


class LoggingClaimNotifier:
    """Stand-in for an e-mail provider; each message is logged at info level."""

    def claim_approved(self, claim: ClaimRequest, merchant: Merchant) -> None:
        log.info(
            "Sending approval email to %s for merchant %s",
            claim.contact_email,
            merchant.business_name,
        )

    def claim_denied(self, claim: ClaimRequest, member: ChamberMember) -> None:
        log.info(
            "Sending denial email to %s for %s: %s",
            claim.contact_email,
            member.business_name,
            claim.denial_reason,
        )


if TYPE_CHECKING:
    _notifier_check: ClaimNotifier = LoggingClaimNotifier()
