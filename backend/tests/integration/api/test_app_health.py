"""API tests for health endpoints and cross-cutting middleware."""

import pytest

from srmops.config import get_settings


@pytest.mark.asyncio
async def test_liveness(client):
    response = await client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


@pytest.mark.asyncio
async def test_request_id_is_generated(client):
    response = await client.get("/health")

    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_is_propagated(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_security_headers(client):
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_oversized_request_is_rejected(client, monkeypatch):
    """Test the declared body size is checked before the route runs."""
    monkeypatch.setattr(get_settings(), "max_request_bytes", 64)

    response = await client.post("/api/v1/interventions", content=b"x" * 200)

    assert response.status_code == 413
    assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"
