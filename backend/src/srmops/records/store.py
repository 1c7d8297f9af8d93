"""Persistence operations for intervention and reclamation records.

Records are immutable once created. The only mutation is an administrative
hard delete.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..logging import log_record_created, log_record_deleted
from .models import RECORD_MODELS, Intervention, Reclamation, RecordKind
from .schemas import InterventionCreate, ReclamationCreate

logger = logging.getLogger(__name__)


@dataclass
class UserActivity:
    """Aggregate submission counts for one user."""

    interventions: int = 0
    reclamations: int = 0
    last_intervention_at: datetime | None = None
    last_reclamation_at: datetime | None = None

    @property
    def total(self) -> int:
        return self.interventions + self.reclamations

    @property
    def last_activity(self) -> datetime | None:
        times = [t for t in (self.last_intervention_at, self.last_reclamation_at) if t]
        return max(times) if times else None


class RecordStore:
    """Reads and writes records through an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    # =========================
    # Creation
    # =========================

    async def create_intervention(
        self,
        payload: InterventionCreate,
        user_id: str,
        user_name: str | None,
    ) -> Intervention:
        """Persist an intervention owned by ``user_id``.

        The session is committed before returning so the record is durable
        regardless of what happens to the notification afterwards.
        """
        intervention = Intervention(
            user_id=user_id,
            user_name=user_name or "N/A",
            start_date=payload.start_date,
            end_date=payload.end_date,
            entreprise_name=payload.entreprise_name,
            responsable=payload.responsable,
            team_members=list(payload.team_members),
            site_name=payload.site_name,
            photo_url=payload.photo_url,
            recipient_emails=list(payload.recipient_emails),
        )
        self._session.add(intervention)
        await self._session.commit()

        log_record_created(RecordKind.INTERVENTION.value, str(intervention.id), user_id)
        return intervention

    async def create_reclamation(
        self,
        payload: ReclamationCreate,
        user_id: str,
    ) -> Reclamation:
        """Persist a reclamation owned by ``user_id``."""
        reclamation = Reclamation(
            user_id=user_id,
            date=payload.date,
            station_name=payload.station_name,
            reclamation_type=payload.reclamation_type,
            description=payload.description,
            photo_url=payload.photo_url,
            recipient_emails=list(payload.recipient_emails),
        )
        self._session.add(reclamation)
        await self._session.commit()

        log_record_created(RecordKind.RECLAMATION.value, str(reclamation.id), user_id)
        return reclamation

    # =========================
    # Queries
    # =========================

    async def list_interventions(self, user_id: str | None = None) -> list[Intervention]:
        """List interventions newest first; all users when ``user_id`` is None."""
        stmt = select(Intervention).order_by(Intervention.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(Intervention.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_reclamations(self, user_id: str | None = None) -> list[Reclamation]:
        """List reclamations newest first; all users when ``user_id`` is None."""
        stmt = select(Reclamation).order_by(Reclamation.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(Reclamation.user_id == user_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_created_since(self, user_id: str, since: datetime) -> int:
        """Count the user's records of both kinds created at or after ``since``."""
        total = 0
        for model in (Intervention, Reclamation):
            result = await self._session.execute(
                select(func.count())
                .select_from(model)
                .where(model.user_id == user_id, model.created_at >= since)
            )
            total += result.scalar_one()
        return total

    async def activity_by_user(self) -> dict[str, UserActivity]:
        """Aggregate per-user counts and latest creation time for both kinds."""
        activity: dict[str, UserActivity] = {}

        result = await self._session.execute(
            select(
                Intervention.user_id,
                func.count(),
                func.max(Intervention.created_at),
            ).group_by(Intervention.user_id)
        )
        for user_id, count, last_at in result.all():
            entry = activity.setdefault(user_id, UserActivity())
            entry.interventions = count
            entry.last_intervention_at = last_at

        result = await self._session.execute(
            select(
                Reclamation.user_id,
                func.count(),
                func.max(Reclamation.created_at),
            ).group_by(Reclamation.user_id)
        )
        for user_id, count, last_at in result.all():
            entry = activity.setdefault(user_id, UserActivity())
            entry.reclamations = count
            entry.last_reclamation_at = last_at

        return activity

    # =========================
    # Deletion
    # =========================

    async def delete(self, kind: RecordKind, record_id: UUID, deleted_by: str) -> bool:
        """Hard-delete a record.

        Returns:
            False if no record with that id exists
        """
        model = RECORD_MODELS[kind]
        result = await self._session.execute(
            delete(model).where(model.id == record_id)
        )
        await self._session.commit()

        if result.rowcount == 0:
            return False

        log_record_deleted(kind.value, str(record_id), deleted_by)
        return True
