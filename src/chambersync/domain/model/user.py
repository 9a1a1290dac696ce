"""Users as seen by the core: stored profiles and authenticated principals."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chambersync.domain.errors import MerchantAlreadyLinkedError

from .entity import Entity, utc_now
from .enums import UserRole

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Profile(Entity):
    """Role/association profile kept alongside the identity provider's user.

    ``id`` is the identity provider's user id.
    """

    email: str
    role: UserRole = UserRole.VISITOR
    chamber_id: UUID | None = None
    merchant_id: UUID | None = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def has_merchant(self) -> bool:
        return self.merchant_id is not None

    def link_merchant(self, merchant_id: UUID) -> None:
        if self.merchant_id is not None:
            raise MerchantAlreadyLinkedError
        self.merchant_id = merchant_id
        if self.role == UserRole.VISITOR:
            self.role = UserRole.MERCHANT

    def principal(self) -> Principal:
        return Principal(
            user_id=self.id,
            email=self.email,
            role=self.role,
            chamber_id=self.chamber_id,
            merchant_id=self.merchant_id,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class Principal:
    """Authenticated identity, passed explicitly through the call chain."""

    user_id: UUID
    email: str
    role: UserRole
    chamber_id: UUID | None = None
    merchant_id: UUID | None = None

    def administers(self, chamber_id: UUID) -> bool:
        return self.role == UserRole.CHAMBER_ADMIN and self.chamber_id == chamber_id
