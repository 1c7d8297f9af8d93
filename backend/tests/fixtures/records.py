"""Record fixtures: API payloads, ORM builders and image bytes."""

import struct
import zlib
from datetime import datetime
from uuid import UUID

from srmops.api.auth import User, create_access_token
from srmops.records.models import Intervention, Reclamation, utcnow

__all__ = [
    "ADMIN",
    "AGENT",
    "OTHER",
    "intervention_payload",
    "reclamation_payload",
    "make_intervention",
    "make_reclamation",
    "tiny_png",
    "FIXED_ID",
    "auth_headers",
]

# =========================
# Users
# =========================

ADMIN = User(id="admin-1", email="admin@srm-sm.ma", name="Admin SRM")
AGENT = User(id="agent-1", email="agent@srm-sm.ma", name="Youssef El Amrani")
OTHER = User(id="agent-2", email="salma@srm-sm.ma", name="Salma Idrissi")


# =========================
# API payloads
# =========================


def intervention_payload(**overrides) -> dict:
    payload = {
        "startDate": "2025-03-05T08:00:00Z",
        "endDate": "2025-03-05T16:30:00Z",
        "entrepriseName": "Hydro Services SARL",
        "responsable": "Karim Benali",
        "teamMembers": ["Ahmed Ouali", "Fatima Zahra"],
        "siteName": "Station Agadir Nord",
        "recipientEmails": ["chef@srm-sm.ma", "ops@srm-sm.ma"],
    }
    payload.update(overrides)
    return payload


def reclamation_payload(**overrides) -> dict:
    payload = {
        "date": "2025-03-04T22:15:00Z",
        "stationName": "Station Inezgane",
        "reclamationType": "water_leak",
        "description": "Fuite importante sur la conduite principale.",
        "recipientEmails": ["chef@srm-sm.ma"],
    }
    payload.update(overrides)
    return payload


# =========================
# ORM builders
# =========================


def make_intervention(
    user_id: str = "agent-1",
    created_at: datetime | None = None,
    **overrides,
) -> Intervention:
    created_at = created_at or utcnow()
    values = dict(
        user_id=user_id,
        user_name="Youssef El Amrani",
        start_date=datetime(2025, 3, 5, 8, 0),
        end_date=datetime(2025, 3, 5, 16, 30),
        entreprise_name="Hydro Services SARL",
        responsable="Karim Benali",
        team_members=["Ahmed Ouali", "Fatima Zahra"],
        site_name="Station Agadir Nord",
        photo_url=None,
        recipient_emails=["chef@srm-sm.ma"],
        created_at=created_at,
        updated_at=created_at,
    )
    values.update(overrides)
    return Intervention(**values)


def make_reclamation(
    user_id: str = "agent-1",
    created_at: datetime | None = None,
    **overrides,
) -> Reclamation:
    created_at = created_at or utcnow()
    values = dict(
        user_id=user_id,
        date=datetime(2025, 3, 4, 22, 15),
        station_name="Station Inezgane",
        reclamation_type="water_leak",
        description="Fuite importante sur la conduite principale.",
        photo_url=None,
        recipient_emails=["chef@srm-sm.ma"],
        created_at=created_at,
        updated_at=created_at,
    )
    values.update(overrides)
    return Reclamation(**values)


FIXED_ID = UUID("3f2b8c1e-5d4a-4e2f-9b7c-1a2b3c4d5e6f")


# =========================
# Images
# =========================


def tiny_png() -> bytes:
    """A valid 1x1 RGB PNG."""

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
    pixels = zlib.compress(b"\x00\x2c\x5f\xaa")
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", pixels)
        + chunk(b"IEND", b"")
    )


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header carrying a signed token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}
