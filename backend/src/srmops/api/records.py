"""Combined record listing and spreadsheet export."""

from typing import Any

from fastapi import APIRouter, Query, Response
from pydantic import BaseModel

from ..export.workbook import (
    XLSX_MEDIA_TYPE,
    ExportMode,
    UserActivityReport,
    UserRecords,
    export_file_name,
    export_to_workbook,
)
from ..logging import get_context_logger
from ..records.models import RecordKind, utcnow
from ..records.schemas import InterventionRead, ReclamationRead
from .auth import Admins, CurrentUser, ensure_admin
from .deps import Directory, Formats, Store

router = APIRouter(tags=["records"])

logger = get_context_logger(__name__)


class RecordList(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]


@router.get("/records", response_model=RecordList)
async def list_records(user: CurrentUser, store: Store) -> RecordList:
    """The caller's interventions and reclamations, newest first."""
    user_name = user.name or "N/A"
    entries = []
    for item in await store.list_interventions(user.id):
        entry = InterventionRead.model_validate(item).model_dump(by_alias=True, mode="json")
        entries.append((item.created_at, RecordKind.INTERVENTION, entry))
    for item in await store.list_reclamations(user.id):
        entry = ReclamationRead.model_validate(item).model_dump(by_alias=True, mode="json")
        entries.append((item.created_at, RecordKind.RECLAMATION, entry))

    entries.sort(key=lambda e: e[0], reverse=True)
    return RecordList(
        data=[
            {**entry, "recordType": kind.value, "userName": user_name}
            for _, kind, entry in entries
        ]
    )


@router.get("/export")
async def export_records(
    user: CurrentUser,
    policy: Admins,
    store: Store,
    directory: Directory,
    formats: Formats,
    admin: bool = Query(default=False),
) -> Response:
    """Download records as an XLSX workbook.

    Regular mode exports the caller's own records; admin mode exports
    per-user activity for every account.
    """
    if admin:
        ensure_admin(user, policy, "export_all_users")
        mode = ExportMode.ADMIN
        report = UserActivityReport(
            users=await directory.list_users(),
            activity=await store.activity_by_user(),
        )
        content = export_to_workbook(report, mode, formats)
    else:
        mode = ExportMode.USER
        records = UserRecords(
            interventions=await store.list_interventions(user.id),
            reclamations=await store.list_reclamations(user.id),
        )
        content = export_to_workbook(records, mode, formats)

    file_name = export_file_name(mode, utcnow())
    logger.info(
        f"Exported {mode.value} workbook",
        extra={"user_id": user.id, "file_name": file_name, "size": len(content)},
    )
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
