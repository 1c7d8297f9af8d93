"""API tests for photo uploads."""

import pytest

from srmops.config import get_settings

from fixtures.records import AGENT, auth_headers, tiny_png

URL = "/api/v1/uploads/photo"


@pytest.mark.asyncio
async def test_upload_png(client, storage):
    response = await client.post(
        URL,
        files={"file": ("site.png", tiny_png(), "image/png")},
        headers=auth_headers(AGENT),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["url"].startswith("https://cdn.srm-sm.test/photos/")
    assert body["content_type"] == "image/png"
    assert len(storage.objects) == 1


@pytest.mark.asyncio
async def test_declared_type_is_not_trusted(client, storage):
    """Test content is checked by magic number, not by the declared type."""
    response = await client.post(
        URL,
        files={"file": ("photo.jpg", b"#!/bin/sh\necho hi\n", "image/jpeg")},
        headers=auth_headers(AGENT),
    )

    assert response.status_code == 400
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_oversized_upload(client, storage, monkeypatch):
    monkeypatch.setattr(get_settings(), "max_upload_bytes", 32)

    response = await client.post(
        URL,
        files={"file": ("big.png", tiny_png() + b"\x00" * 64, "image/png")},
        headers=auth_headers(AGENT),
    )

    assert response.status_code == 413
    assert response.json()["error_code"] == "PAYLOAD_TOO_LARGE"
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.post(URL, files={"file": ("site.png", tiny_png(), "image/png")})
    assert response.status_code == 401
