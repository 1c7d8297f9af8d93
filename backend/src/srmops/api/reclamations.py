"""API endpoints for reclamation records."""

from fastapi import APIRouter, Query

from ..notifications.pipeline import notify_record
from ..records.models import RecordKind
from ..records.schemas import (
    DeleteResponse,
    ReclamationCreate,
    ReclamationCreated,
    ReclamationList,
    ReclamationRead,
)
from . import NotFoundError, RateLimitError
from .auth import Admins, AdminUser, CurrentUser, ensure_admin
from .deps import Limiter, Mailer, Reports, Store
from .interventions import parse_record_id

router = APIRouter(prefix="/reclamations", tags=["reclamations"])


@router.post("", response_model=ReclamationCreated, status_code=201)
async def create_reclamation(
    payload: ReclamationCreate,
    user: CurrentUser,
    store: Store,
    limiter: Limiter,
    generator: Reports,
    mailer: Mailer,
) -> ReclamationCreated:
    """Submit a reclamation and email its report to the recipients."""
    if not await limiter.check(user.id):
        raise RateLimitError(limiter.limit)

    reclamation = await store.create_reclamation(payload, user.id)
    await notify_record(
        RecordKind.RECLAMATION,
        reclamation,
        generator,
        mailer,
        submitter_name=user.name or user.email,
    )

    return ReclamationCreated(
        **ReclamationRead.model_validate(reclamation).model_dump(),
        message="Reclamation created successfully",
    )


@router.get("", response_model=ReclamationList)
async def list_reclamations(
    user: CurrentUser,
    policy: Admins,
    store: Store,
    admin: bool = Query(default=False),
) -> ReclamationList:
    """List the caller's reclamations, or every user's for admins."""
    if admin:
        ensure_admin(user, policy, "list_all_reclamations")
    items = await store.list_reclamations(None if admin else user.id)
    return ReclamationList(data=[ReclamationRead.model_validate(r) for r in items])


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_reclamation(
    record_id: str,
    user: AdminUser,
    store: Store,
) -> DeleteResponse:
    """Hard-delete a reclamation (admin only)."""
    kind = RecordKind.RECLAMATION
    deleted = await store.delete(kind, parse_record_id(kind, record_id), user.id)
    if not deleted:
        raise NotFoundError("Reclamation", record_id)
    return DeleteResponse(message="Reclamation deleted successfully")
