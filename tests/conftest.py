from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from chambersync.adapters.sqlalchemy import start_mappers
from chambersync.adapters.sqlalchemy.migrations import upgrade_head
from chambersync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    SqlAlchemyMemberSyncUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.chambers import FakeStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("CHAMBERMASTER_MOCK", "true")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def mock_directory_path() -> Path:
    return DATA_DIR / "chambermaster_mock_data.json"


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def adapter_started(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def member_sync_uow(
    adapter_started: Engine,
) -> Callable[[], SqlAlchemyMemberSyncUnitOfWork]:
    _ = adapter_started
    return SqlAlchemyMemberSyncUnitOfWork


@pytest.fixture
def claim_uow(adapter_started: Engine) -> Callable[[], SqlAlchemyClaimUnitOfWork]:
    _ = adapter_started
    return SqlAlchemyClaimUnitOfWork
