"""API tests for the combined record listing and the spreadsheet export."""

import io
from datetime import datetime

import pytest
from openpyxl import load_workbook

from srmops.export.workbook import XLSX_MEDIA_TYPE
from srmops.records.directory import AuthUser

from fixtures.records import (
    ADMIN,
    AGENT,
    OTHER,
    auth_headers,
    intervention_payload,
    reclamation_payload,
)


async def submit_sample_records(client, user=AGENT):
    await client.post("/api/v1/interventions", json=intervention_payload(), headers=auth_headers(user))
    await client.post(
        "/api/v1/interventions",
        json=intervention_payload(siteName="Station Tiznit"),
        headers=auth_headers(user),
    )
    await client.post("/api/v1/reclamations", json=reclamation_payload(), headers=auth_headers(user))


class TestRecordsListing:
    """GET /records"""

    @pytest.mark.asyncio
    async def test_combined_newest_first(self, client):
        await submit_sample_records(client)
        await submit_sample_records(client, OTHER)

        response = await client.get("/api/v1/records", headers=auth_headers(AGENT))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [r["recordType"] for r in data] == ["reclamation", "intervention", "intervention"]
        assert {r["userName"] for r in data} == {"Youssef El Amrani"}
        assert {r["userId"] for r in data} == {"agent-1"}

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/records")
        assert response.status_code == 401


class TestExport:
    """GET /export"""

    @pytest.mark.asyncio
    async def test_user_export(self, client):
        await submit_sample_records(client)

        response = await client.get("/api/v1/export", headers=auth_headers(AGENT))

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="Records_Export_')
        assert disposition.endswith('.xlsx"')

        wb = load_workbook(io.BytesIO(response.content))
        assert wb.sheetnames == ["Interventions", "Reclamations", "All Records"]
        assert wb["All Records"].max_row == 4

    @pytest.mark.asyncio
    async def test_admin_export(self, client, db_session):
        db_session.add_all(
            [
                AuthUser(
                    id="agent-1",
                    name="Youssef El Amrani",
                    email="agent@srm-sm.ma",
                    email_verified=True,
                    role="default",
                    created_at=datetime(2025, 1, 10),
                    updated_at=datetime(2025, 1, 10),
                ),
                AuthUser(
                    id="agent-2",
                    name="Salma Idrissi",
                    email="salma@srm-sm.ma",
                    email_verified=False,
                    role="default",
                    created_at=datetime(2025, 2, 10),
                    updated_at=datetime(2025, 2, 10),
                ),
            ]
        )
        await db_session.commit()
        await submit_sample_records(client)

        response = await client.get(
            "/api/v1/export", params={"admin": "true"}, headers=auth_headers(ADMIN)
        )

        assert response.status_code == 200
        assert 'filename="Users_Export_' in response.headers["content-disposition"]
        sheet = load_workbook(io.BytesIO(response.content))["All Users"]
        rows = list(sheet.iter_rows(min_row=2, values_only=True))
        assert [r[0] for r in rows] == ["agent-1", "agent-2"]
        assert rows[0][-1] == 3
        assert rows[1][5] == "Never"

    @pytest.mark.asyncio
    async def test_admin_export_without_users(self, client):
        response = await client.get(
            "/api/v1/export", params={"admin": "true"}, headers=auth_headers(ADMIN)
        )

        assert response.status_code == 200
        sheet = load_workbook(io.BytesIO(response.content))["All Users"]
        assert sheet.max_row == 1

    @pytest.mark.asyncio
    async def test_admin_export_requires_admin(self, client):
        response = await client.get(
            "/api/v1/export", params={"admin": "true"}, headers=auth_headers(AGENT)
        )
        assert response.status_code == 403
