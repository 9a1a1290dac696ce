"""Local copy of one directory business, owned by a chamber."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chambersync.domain.errors import MemberAlreadyClaimedError

from .entity import Entity, utc_now
from .enums import MemberStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .directory import MappedMember

# Fields the directory sync owns. Claim fields are never part of this set.
DIRECTORY_FIELDS: tuple[str, ...] = (
    "business_name",
    "member_status",
    "member_status_code",
    "contact_name",
    "email",
    "phone",
    "website_url",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "zip_code",
    "category",
)


@dataclass(eq=False, kw_only=True)
class ChamberMember(Entity):
    """Member record keyed by ``(chamber_id, external_member_id)``."""

    chamber_id: UUID
    external_member_id: str
    business_name: str
    member_status: MemberStatus = MemberStatus.ACTIVE
    member_status_code: int | None = None

    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    website_url: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    category: str | None = None

    is_claimed: bool = False
    claimed_by: UUID | None = None
    claimed_at: datetime | None = None

    last_synced_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_directory(
        cls,
        chamber_id: UUID,
        mapped: MappedMember,
        *,
        synced_at: datetime,
    ) -> ChamberMember:
        member = cls(
            chamber_id=chamber_id,
            external_member_id=mapped.external_member_id,
            business_name=mapped.business_name,
        )
        member.apply_directory_update(mapped, synced_at=synced_at)
        return member

    def apply_directory_update(self, mapped: MappedMember, *, synced_at: datetime) -> bool:
        """Overwrite directory-owned fields; return whether this deactivated the member."""

        was_active = self.member_status == MemberStatus.ACTIVE
        for name in DIRECTORY_FIELDS:
            setattr(self, name, getattr(mapped, name))
        self.last_synced_at = synced_at
        return was_active and self.member_status != MemberStatus.ACTIVE

    def mark_claimed(self, user_id: UUID, *, at: datetime) -> None:
        if self.is_claimed:
            raise MemberAlreadyClaimedError
        self.is_claimed = True
        self.claimed_by = user_id
        self.claimed_at = at

    @property
    def address(self) -> str:
        parts = (self.address_line1, self.address_line2, self.city, self.state, self.zip_code)
        return ", ".join(part for part in parts if part)
