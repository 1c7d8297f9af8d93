"""Shared fixtures: database, fake services and the API client."""

import httpx
import pytest
import pytest_asyncio

from srmops.api.auth import AdminPolicy, get_admin_policy
from srmops.api.deps import get_mailer, get_photo_storage, get_report_generator
from srmops.db import get_db
from srmops.main import create_app
from srmops.reporting.document import ReportGenerator

from fixtures.database import db_session, engine, session_factory, store  # noqa: F401
from fixtures.records import ADMIN
from fixtures.services import FakeStorage, RecordingMailer


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def report_generator() -> ReportGenerator:
    return ReportGenerator(organization_name="Région Souss-Massa")


@pytest.fixture
def app(session_factory, mailer, storage, report_generator):
    """Application wired to the in-memory database and fake services."""
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_report_generator] = lambda: report_generator
    app.dependency_overrides[get_admin_policy] = lambda: AdminPolicy([ADMIN.email])
    app.dependency_overrides[get_photo_storage] = lambda: storage
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
