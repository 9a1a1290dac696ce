"""In-app notification records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entity import Entity, utc_now
from .enums import NotificationType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Notification(Entity):
    recipient_id: UUID
    type: NotificationType
    title: str
    message: str
    link: str | None = None
    claim_id: UUID | None = None
    merchant_id: UUID | None = None
    created_at: datetime = field(default_factory=utc_now)
    read_at: datetime | None = None
