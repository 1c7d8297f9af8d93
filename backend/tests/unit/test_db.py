"""Unit tests for database session handling."""

import pytest
from sqlalchemy import func, select

from srmops import db
from srmops.records.models import Intervention
from srmops.records.schemas import InterventionCreate
from srmops.records.store import RecordStore

from fixtures.records import AGENT, intervention_payload, make_intervention


@pytest.fixture
def patched_factory(session_factory, monkeypatch):
    monkeypatch.setattr(db, "_session_factory", session_factory)
    return session_factory


async def count_interventions(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Intervention))


@pytest.mark.asyncio
async def test_pending_changes_are_not_committed_on_exit(patched_factory):
    async with db.get_db_session() as session:
        session.add(make_intervention())
        await session.flush()

    assert await count_interventions(patched_factory) == 0


@pytest.mark.asyncio
async def test_store_commits_its_own_writes(patched_factory):
    async with db.get_db_session() as session:
        payload = InterventionCreate.model_validate(intervention_payload())
        await RecordStore(session).create_intervention(payload, AGENT.id, AGENT.name)

    assert await count_interventions(patched_factory) == 1


@pytest.mark.asyncio
async def test_error_rolls_back(patched_factory):
    with pytest.raises(RuntimeError):
        async with db.get_db_session() as session:
            session.add(make_intervention())
            await session.flush()
            raise RuntimeError("boom")

    assert await count_interventions(patched_factory) == 0
