"""API endpoints for intervention records."""

from uuid import UUID

from fastapi import APIRouter, Query

from ..notifications.pipeline import notify_record
from ..records.models import RecordKind
from ..records.schemas import (
    DeleteResponse,
    InterventionCreate,
    InterventionCreated,
    InterventionList,
    InterventionRead,
)
from . import NotFoundError, RateLimitError
from .auth import Admins, AdminUser, CurrentUser, ensure_admin
from .deps import Limiter, Mailer, Reports, Store

router = APIRouter(prefix="/interventions", tags=["interventions"])


def parse_record_id(kind: RecordKind, value: str) -> UUID:
    """Parse a path id; malformed ids are reported as not found."""
    try:
        return UUID(value)
    except ValueError:
        raise NotFoundError(kind.value.capitalize(), value)


@router.post("", response_model=InterventionCreated, status_code=201)
async def create_intervention(
    payload: InterventionCreate,
    user: CurrentUser,
    store: Store,
    limiter: Limiter,
    generator: Reports,
    mailer: Mailer,
) -> InterventionCreated:
    """Submit an intervention and email its report to the recipients."""
    if not await limiter.check(user.id):
        raise RateLimitError(limiter.limit)

    intervention = await store.create_intervention(payload, user.id, user.name)
    await notify_record(RecordKind.INTERVENTION, intervention, generator, mailer)

    return InterventionCreated(
        **InterventionRead.model_validate(intervention).model_dump(),
        message="Intervention created successfully",
    )


@router.get("", response_model=InterventionList)
async def list_interventions(
    user: CurrentUser,
    policy: Admins,
    store: Store,
    admin: bool = Query(default=False),
) -> InterventionList:
    """List the caller's interventions, or every user's for admins."""
    if admin:
        ensure_admin(user, policy, "list_all_interventions")
    items = await store.list_interventions(None if admin else user.id)
    return InterventionList(data=[InterventionRead.model_validate(i) for i in items])


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_intervention(
    record_id: str,
    user: AdminUser,
    store: Store,
) -> DeleteResponse:
    """Hard-delete an intervention (admin only)."""
    kind = RecordKind.INTERVENTION
    deleted = await store.delete(kind, parse_record_id(kind, record_id), user.id)
    if not deleted:
        raise NotFoundError("Intervention", record_id)
    return DeleteResponse(message="Intervention deleted successfully")
