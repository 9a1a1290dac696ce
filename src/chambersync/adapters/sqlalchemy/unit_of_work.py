"""SQLAlchemy-backed units of work for member sync and the claim lifecycle."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from chambersync.adapters.sqlalchemy.mappings import start_mappers
from chambersync.adapters.sqlalchemy.migrations import upgrade_head
from chambersync.adapters.sqlalchemy.repositories import (
    SqlAlchemyChamberMemberRepository,
    SqlAlchemyChamberRepository,
    SqlAlchemyClaimRepository,
    SqlAlchemyMerchantRepository,
    SqlAlchemyNotificationRepository,
    SqlAlchemyProfileRepository,
    SqlAlchemySyncRunRepository,
)
from chambersync.config import get_database_uri
from chambersync.domain.ports.unit_of_work import (
    ClaimRepositories,
    MemberSyncRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call chambersync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, mappers, schema and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Leaving the block with an exception rolls the transaction back. A failing
    rollback is logged so the original exception is the one that propagates.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                try:
                    self.rollback()
                except Exception:
                    log.exception("Rollback failed while handling %s", exc_type.__name__)
        finally:
            self.session.close()
            self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyMemberSyncUnitOfWork(BaseSqlAlchemyUnitOfWork[MemberSyncRepositories]):
    """Unit of work for directory reconciliation and sync status queries."""

    def _build_repositories(self, session: Session) -> MemberSyncRepositories:
        return MemberSyncRepositories(
            chambers=SqlAlchemyChamberRepository(session),
            members=SqlAlchemyChamberMemberRepository(session),
            sync_runs=SqlAlchemySyncRunRepository(session),
        )


class SqlAlchemyClaimUnitOfWork(BaseSqlAlchemyUnitOfWork[ClaimRepositories]):
    """Unit of work for claim submission and review."""

    def _build_repositories(self, session: Session) -> ClaimRepositories:
        return ClaimRepositories(
            chambers=SqlAlchemyChamberRepository(session),
            profiles=SqlAlchemyProfileRepository(session),
            members=SqlAlchemyChamberMemberRepository(session),
            claims=SqlAlchemyClaimRepository(session),
            merchants=SqlAlchemyMerchantRepository(session),
            notifications=SqlAlchemyNotificationRepository(session),
        )


if TYPE_CHECKING:
    from chambersync.domain.ports.unit_of_work import ClaimUnitOfWork, MemberSyncUnitOfWork

    _uow_sync_check: MemberSyncUnitOfWork = SqlAlchemyMemberSyncUnitOfWork()
    _uow_claim_check: ClaimUnitOfWork = SqlAlchemyClaimUnitOfWork()
