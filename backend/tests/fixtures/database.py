"""Database fixtures.

Tests run against an in-memory SQLite database shared through a static
connection pool, so every session sees the same data.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from srmops.db import Base
from srmops.records import models  # noqa: F401
from srmops.records import directory  # noqa: F401
from srmops.records.store import RecordStore

__all__ = ["engine", "session_factory", "db_session", "store"]


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db_session) -> RecordStore:
    return RecordStore(db_session)
