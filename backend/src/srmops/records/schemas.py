"""Request and response models for record endpoints.

JSON bodies use camelCase field names (``entrepriseName``,
``recipientEmails``) to match the web client; Python code uses snake_case.
"""

import re
from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Incoming timestamps may carry an offset; storage is naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]


def _clean_emails(values: list[str]) -> list[str]:
    cleaned: list[str] = []
    for value in values:
        email = value.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValueError(f"invalid email address: {value!r}")
        if email not in cleaned:
            cleaned.append(email)
    return cleaned


def _clean_photo_url(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not value.startswith(("http://", "https://")):
        raise ValueError("photoUrl must be an http(s) URL")
    return value


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# =========================
# Interventions
# =========================


class InterventionCreate(CamelModel):
    """Payload for submitting an intervention."""

    start_date: UTCDateTime
    end_date: UTCDateTime
    entreprise_name: str = Field(..., min_length=1, max_length=255)
    responsable: str = Field(..., min_length=1, max_length=255)
    team_members: list[str] = Field(..., min_length=1)
    site_name: str = Field(..., min_length=1, max_length=255)
    recipient_emails: list[str] = Field(..., min_length=1)
    photo_url: str | None = None

    @field_validator("team_members")
    @classmethod
    def check_team_members(cls, values: list[str]) -> list[str]:
        members = [v.strip() for v in values]
        if any(not m for m in members):
            raise ValueError("team member names must not be blank")
        return members

    @field_validator("recipient_emails")
    @classmethod
    def check_recipients(cls, values: list[str]) -> list[str]:
        return _clean_emails(values)

    @field_validator("photo_url")
    @classmethod
    def check_photo_url(cls, value: str | None) -> str | None:
        return _clean_photo_url(value)

    @model_validator(mode="after")
    def check_period(self) -> "InterventionCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class InterventionRead(CamelModel):
    """A persisted intervention."""

    id: UUID
    user_id: str
    user_name: str
    start_date: datetime
    end_date: datetime
    entreprise_name: str
    responsable: str
    team_members: list[str]
    site_name: str
    photo_url: str | None = None
    recipient_emails: list[str]
    created_at: datetime
    updated_at: datetime


class InterventionCreated(InterventionRead):
    """Response for a successful intervention submission."""

    message: str


# =========================
# Reclamations
# =========================


class ReclamationCreate(CamelModel):
    """Payload for submitting a reclamation."""

    date: UTCDateTime
    station_name: str = Field(..., min_length=1, max_length=255)
    reclamation_type: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=10_000)
    recipient_emails: list[str] = Field(..., min_length=1)
    photo_url: str | None = None

    @field_validator("recipient_emails")
    @classmethod
    def check_recipients(cls, values: list[str]) -> list[str]:
        return _clean_emails(values)

    @field_validator("photo_url")
    @classmethod
    def check_photo_url(cls, value: str | None) -> str | None:
        return _clean_photo_url(value)


class ReclamationRead(CamelModel):
    """A persisted reclamation."""

    id: UUID
    user_id: str
    date: datetime
    station_name: str
    reclamation_type: str
    description: str
    photo_url: str | None = None
    recipient_emails: list[str]
    created_at: datetime
    updated_at: datetime


class ReclamationCreated(ReclamationRead):
    """Response for a successful reclamation submission."""

    message: str


# =========================
# Listing
# =========================


class InterventionList(BaseModel):
    success: bool = True
    data: list[InterventionRead]


class ReclamationList(BaseModel):
    success: bool = True
    data: list[ReclamationRead]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
