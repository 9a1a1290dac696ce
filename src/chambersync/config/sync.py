"""Synchronization defaults for member sync runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .env import env_float

DEFAULT_STUCK_AFTER_MINUTES = 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    stuck_after: timedelta = field(
        default_factory=lambda: timedelta(minutes=DEFAULT_STUCK_AFTER_MINUTES)
    )


def get_sync_config() -> SyncConfig:
    minutes = env_float("CHAMBERSYNC_STUCK_AFTER_MINUTES", default=DEFAULT_STUCK_AFTER_MINUTES)
    return SyncConfig(stuck_after=timedelta(minutes=minutes))
