"""Merchant storefront, provisioned only by an approved claim."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entity import Entity, utc_now
from .enums import MerchantStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .claim import ClaimRequest
    from .member import ChamberMember


@dataclass(eq=False, kw_only=True)
class Merchant(Entity):
    chamber_id: UUID
    member_id: UUID | None
    business_name: str
    slug: str
    contact_email: str

    phone: str | None = None
    website_url: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    status: MerchantStatus = MerchantStatus.ACTIVE
    approved_at: datetime | None = None
    approved_by: UUID | None = None

    total_products: int = 0
    total_orders: int = 0
    total_revenue_cents: int = 0

    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_claim(
        cls,
        member: ChamberMember,
        claim: ClaimRequest,
        *,
        slug: str,
        approved_by: UUID,
        approved_at: datetime,
    ) -> Merchant:
        """Copy identity fields from the member record, falling back to the claim's contact."""

        return cls(
            chamber_id=claim.chamber_id,
            member_id=member.id,
            business_name=member.business_name,
            slug=slug,
            contact_email=member.email or claim.contact_email,
            phone=member.phone or claim.contact_phone,
            website_url=member.website_url,
            address_line1=member.address_line1,
            address_line2=member.address_line2,
            city=member.city,
            state=member.state,
            zip_code=member.zip_code,
            approved_at=approved_at,
            approved_by=approved_by,
        )
