"""SQLAlchemy models for intervention and reclamation records."""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JSONList = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Current time as naive UTC, the convention for every stored timestamp."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordKind(str, Enum):
    """Kinds of records users can submit."""

    INTERVENTION = "intervention"
    RECLAMATION = "reclamation"


class Intervention(Base):
    """A field-maintenance activity carried out by a crew at a site."""

    __tablename__ = "interventions"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    user_name: Mapped[str] = mapped_column(String(255), default="N/A")
    start_date: Mapped[datetime] = mapped_column(DateTime)
    end_date: Mapped[datetime] = mapped_column(DateTime)
    entreprise_name: Mapped[str] = mapped_column(String(255))
    responsable: Mapped[str] = mapped_column(String(255))
    team_members: Mapped[list[str]] = mapped_column(JSONList)
    site_name: Mapped[str] = mapped_column(String(255))
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_emails: Mapped[list[str]] = mapped_column(JSONList)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    kind = RecordKind.INTERVENTION

    def __repr__(self) -> str:
        return f"<Intervention {self.id} site={self.site_name!r} user={self.user_id}>"


class Reclamation(Base):
    """A complaint or incident reported against a station."""

    __tablename__ = "reclamations"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    date: Mapped[datetime] = mapped_column(DateTime)
    station_name: Mapped[str] = mapped_column(String(255))
    reclamation_type: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    recipient_emails: Mapped[list[str]] = mapped_column(JSONList)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    kind = RecordKind.RECLAMATION

    def __repr__(self) -> str:
        return (
            f"<Reclamation {self.id} station={self.station_name!r} "
            f"user={self.user_id}>"
        )


RECORD_MODELS: dict[RecordKind, type[Intervention] | type[Reclamation]] = {
    RecordKind.INTERVENTION: Intervention,
    RecordKind.RECLAMATION: Reclamation,
}
