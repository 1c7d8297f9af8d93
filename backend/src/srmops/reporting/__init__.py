"""DOCX report generation for interventions and reclamations."""

from .document import (
    ReportData,
    ReportGenerationError,
    ReportGenerator,
    intervention_report_data,
    reclamation_report_data,
)

__all__ = [
    "ReportData",
    "ReportGenerationError",
    "ReportGenerator",
    "intervention_report_data",
    "reclamation_report_data",
]
