"""Chamber of commerce tenant."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chambersync.domain.errors import DirectoryNotConfiguredError

from .entity import Entity, utc_now

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class DirectoryCredentials:
    account_id: str
    api_key: str
    base_url: str | None = None


@dataclass(eq=False, kw_only=True)
class Chamber(Entity):
    name: str
    slug: str

    chambermaster_association_id: str | None = None
    chambermaster_api_key: str | None = field(default=None, repr=False)
    chambermaster_base_url: str | None = None
    chambermaster_sync_enabled: bool = False
    chambermaster_last_sync_at: datetime | None = None

    created_at: datetime = field(default_factory=utc_now)

    def directory_credentials(self) -> DirectoryCredentials:
        if not self.chambermaster_association_id or not self.chambermaster_api_key:
            raise DirectoryNotConfiguredError
        return DirectoryCredentials(
            account_id=self.chambermaster_association_id,
            api_key=self.chambermaster_api_key,
            base_url=self.chambermaster_base_url,
        )

    def record_sync(self, at: datetime) -> None:
        self.chambermaster_last_sync_at = at
