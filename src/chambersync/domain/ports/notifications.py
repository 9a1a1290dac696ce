"""Outbound notification port for claim decisions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chambersync.domain.model import ChamberMember, ClaimRequest, Merchant


@runtime_checkable
class ClaimNotifier(Protocol):
    """Side channel (e-mail or similar) told about resolved claims.

    Callers treat every call as best effort.
    """

    def claim_approved(self, claim: ClaimRequest, merchant: Merchant) -> None: ...

    def claim_denied(self, claim: ClaimRequest, member: ChamberMember) -> None: ...
