"""SQLAlchemy adapter package for chambersync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyChamberMemberRepository,
    SqlAlchemyChamberRepository,
    SqlAlchemyClaimRepository,
    SqlAlchemyMerchantRepository,
    SqlAlchemyNotificationRepository,
    SqlAlchemyProfileRepository,
    SqlAlchemySyncRunRepository,
)
from .unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    SqlAlchemyMemberSyncUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyChamberMemberRepository",
    "SqlAlchemyChamberRepository",
    "SqlAlchemyClaimRepository",
    "SqlAlchemyClaimUnitOfWork",
    "SqlAlchemyMemberSyncUnitOfWork",
    "SqlAlchemyMerchantRepository",
    "SqlAlchemyNotificationRepository",
    "SqlAlchemyProfileRepository",
    "SqlAlchemySyncRunRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
