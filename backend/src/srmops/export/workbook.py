"""Spreadsheet export of records and user activity.

Two modes:

    user   three sheets (Interventions, Reclamations, All Records) built from
           the caller's own records
    admin  one "All Users" sheet with per-user submission totals
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from io import BytesIO
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..config import Settings
from ..records.directory import UserAccount
from ..records.models import Intervention, Reclamation
from ..records.store import UserActivity

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

INTERVENTION_HEADERS = [
    "ID",
    "Type",
    "Start Date",
    "End Date",
    "Company Name",
    "Responsible Person",
    "Team Members",
    "Site Name",
    "Photo URL",
    "Recipient Emails",
    "Created At",
]

RECLAMATION_HEADERS = [
    "ID",
    "Type",
    "Date",
    "Station Name",
    "Reclamation Type",
    "Description",
    "Photo URL",
    "Recipient Emails",
    "Created At",
]

USER_HEADERS = [
    "ID",
    "Email",
    "Name",
    "Email Verified",
    "Joined Date",
    "Last Activity",
    "Total Interventions",
    "Total Reclamations",
    "Total Records",
]

HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="2C5FAA", end_color="2C5FAA", fill_type="solid")


class ExportMode(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class ExportFormats:
    """Date rendering used in exported cells."""

    date: str = "%d/%m/%Y"
    datetime: str = "%d/%m/%Y %H:%M:%S"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExportFormats":
        return cls(
            date=settings.export_date_format,
            datetime=settings.export_datetime_format,
        )


@dataclass
class UserRecords:
    """Input of a user-mode export."""

    interventions: Sequence[Intervention] = field(default_factory=list)
    reclamations: Sequence[Reclamation] = field(default_factory=list)


@dataclass
class UserActivityReport:
    """Input of an admin-mode export."""

    users: Sequence[UserAccount] = field(default_factory=list)
    activity: dict[str, UserActivity] = field(default_factory=dict)


def _fmt(value: datetime | None, pattern: str, default: str = "") -> str:
    return value.strftime(pattern) if value else default


# =========================
# Row mapping
# =========================


def intervention_rows(
    interventions: Sequence[Intervention],
    formats: ExportFormats,
    start_id: int = 1,
) -> list[dict[str, Any]]:
    return [
        {
            "ID": start_id + index,
            "Type": "Intervention",
            "Start Date": _fmt(item.start_date, formats.date),
            "End Date": _fmt(item.end_date, formats.date),
            "Company Name": item.entreprise_name,
            "Responsible Person": item.responsable,
            "Team Members": ", ".join(item.team_members),
            "Site Name": item.site_name,
            "Photo URL": item.photo_url or "N/A",
            "Recipient Emails": ", ".join(item.recipient_emails),
            "Created At": _fmt(item.created_at, formats.datetime),
        }
        for index, item in enumerate(interventions)
    ]


def reclamation_rows(
    reclamations: Sequence[Reclamation],
    formats: ExportFormats,
    start_id: int = 1,
) -> list[dict[str, Any]]:
    return [
        {
            "ID": start_id + index,
            "Type": "Reclamation",
            "Date": _fmt(item.date, formats.date),
            "Station Name": item.station_name,
            "Reclamation Type": item.reclamation_type,
            "Description": item.description,
            "Photo URL": item.photo_url or "N/A",
            "Recipient Emails": ", ".join(item.recipient_emails),
            "Created At": _fmt(item.created_at, formats.datetime),
        }
        for index, item in enumerate(reclamations)
    ]


def user_rows(report: UserActivityReport, formats: ExportFormats) -> list[dict[str, Any]]:
    rows = []
    for user in report.users:
        activity = report.activity.get(user.id, UserActivity())
        rows.append(
            {
                "ID": user.id,
                "Email": user.email,
                "Name": user.name or "N/A",
                "Email Verified": "Yes" if user.email_verified else "No",
                "Joined Date": _fmt(user.created_at, formats.date, "N/A"),
                "Last Activity": _fmt(activity.last_activity, formats.date, "Never"),
                "Total Interventions": activity.interventions,
                "Total Reclamations": activity.reclamations,
                "Total Records": activity.total,
            }
        )
    return rows


# =========================
# Workbook assembly
# =========================


def write_sheet(
    workbook: Workbook,
    title: str,
    headers: list[str],
    rows: list[dict[str, Any]],
    max_width: int = 60,
) -> None:
    """Append a sheet with a styled header row and auto-sized columns."""
    ws = workbook.create_sheet(title=title)
    ws.append(headers)
    for row in rows:
        ws.append([row.get(header, "") for header in headers])
        # User text starting with "=" must stay text, not become a formula
        for cell in ws[ws.max_row]:
            if cell.data_type == "f":
                cell.data_type = "s"

    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"

    for col, header in enumerate(headers, 1):
        longest = len(header)
        for row in rows:
            value = row.get(header)
            if value is not None:
                longest = max(longest, min(len(str(value)), max_width))
        ws.column_dimensions[get_column_letter(col)].width = max(longest + 2, 12)


def _to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _new_workbook() -> Workbook:
    workbook = Workbook()
    workbook.remove(workbook.active)
    return workbook


def build_user_workbook(records: UserRecords, formats: ExportFormats) -> bytes:
    """Interventions, Reclamations and All Records sheets for one user."""
    interventions = intervention_rows(records.interventions, formats)
    reclamations = reclamation_rows(
        records.reclamations, formats, start_id=len(interventions) + 1
    )
    combined_headers = INTERVENTION_HEADERS + [
        h for h in RECLAMATION_HEADERS if h not in INTERVENTION_HEADERS
    ]

    workbook = _new_workbook()
    write_sheet(workbook, "Interventions", INTERVENTION_HEADERS, interventions)
    write_sheet(workbook, "Reclamations", RECLAMATION_HEADERS, reclamations)
    write_sheet(workbook, "All Records", combined_headers, interventions + reclamations)
    return _to_bytes(workbook)


def build_admin_workbook(report: UserActivityReport, formats: ExportFormats) -> bytes:
    """All Users sheet; an empty directory yields a header-only sheet."""
    workbook = _new_workbook()
    write_sheet(workbook, "All Users", USER_HEADERS, user_rows(report, formats))
    return _to_bytes(workbook)


def export_to_workbook(
    records: UserRecords | UserActivityReport,
    mode: ExportMode,
    formats: ExportFormats | None = None,
) -> bytes:
    """Serialize records to an XLSX workbook.

    Args:
        records: UserRecords for user mode, UserActivityReport for admin mode
        mode: Export mode
        formats: Date formats (defaults to dd/mm/YYYY)

    Returns:
        XLSX file content
    """
    formats = formats or ExportFormats()
    if mode == ExportMode.ADMIN:
        if not isinstance(records, UserActivityReport):
            raise TypeError("admin export expects a UserActivityReport")
        return build_admin_workbook(records, formats)
    if not isinstance(records, UserRecords):
        raise TypeError("user export expects UserRecords")
    return build_user_workbook(records, formats)


def export_file_name(mode: ExportMode, now: datetime) -> str:
    """Attachment name, e.g. ``Records_Export_2025-03-05T14-30-00.xlsx``."""
    stamp = now.isoformat(timespec="seconds").replace(":", "-")
    prefix = "Users_Export" if mode == ExportMode.ADMIN else "Records_Export"
    return f"{prefix}_{stamp}.xlsx"
