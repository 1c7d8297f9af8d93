"""Spreadsheet export of records (user mode) and user activity (admin mode)."""

from .workbook import (
    XLSX_MEDIA_TYPE,
    ExportFormats,
    ExportMode,
    UserActivityReport,
    UserRecords,
    export_file_name,
    export_to_workbook,
)

__all__ = [
    "XLSX_MEDIA_TYPE",
    "ExportFormats",
    "ExportMode",
    "UserActivityReport",
    "UserRecords",
    "export_file_name",
    "export_to_workbook",
]
