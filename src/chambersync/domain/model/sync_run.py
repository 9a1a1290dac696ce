"""Audit record of one directory sync invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chambersync.domain.errors import SyncRunStateError

from .entity import Entity, utc_now
from .enums import SyncRunStatus, SyncType

if TYPE_CHECKING:
    from datetime import datetime, timedelta
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class SyncRun(Entity):
    """One row per sync invocation.

    A run moves from ``started`` to exactly one terminal state. A run that never
    gets there is stuck; it is reported, not repaired.
    """

    chamber_id: UUID
    sync_type: SyncType = SyncType.CHAMBERMASTER
    status: SyncRunStatus = SyncRunStatus.STARTED
    members_added: int = 0
    members_updated: int = 0
    members_deactivated: int = 0
    error_message: str | None = None
    started_at: datetime = field(default_factory=utc_now)
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status != SyncRunStatus.STARTED

    def complete(self, *, added: int, updated: int, deactivated: int, at: datetime) -> None:
        self._ensure_open()
        self.status = SyncRunStatus.COMPLETED
        self.members_added = added
        self.members_updated = updated
        self.members_deactivated = deactivated
        self.completed_at = at

    def fail(self, message: str, *, at: datetime) -> None:
        self._ensure_open()
        self.status = SyncRunStatus.FAILED
        self.error_message = message
        self.completed_at = at

    def is_stuck(self, now: datetime, threshold: timedelta) -> bool:
        return not self.is_terminal and now - self.started_at > threshold

    def _ensure_open(self) -> None:
        if self.is_terminal:
            raise SyncRunStateError(f"Sync run {self.id} already {self.status}")
