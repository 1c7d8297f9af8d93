"""DOCX report generation for submitted records.

Every report shares one layout:

    logo
    title (two lines)
    introduction
    "Informations Détaillées"     bordered two-column table
    "Description"                 labelled lines specific to the record kind
    "Documentation Photographique" (only when a photo could be fetched)
    "Destinataires du Rapport"    one line per recipient
    footer with the generation timestamp

The output depends on the record, the photo bytes and the generation
timestamp. Pass ``generated_at`` to pin the timestamp.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import httpx
from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls
from docx.shared import Cm, Inches, Pt, RGBColor, Twips

from ..config import Settings
from ..records.models import Intervention, Reclamation, RecordKind, utcnow
from .labels import (
    format_date_fr,
    format_timestamp_fr,
    priority_label,
    reclamation_category_label,
    status_label,
)

logger = logging.getLogger(__name__)

# Professional color scheme
PRIMARY = "2C5FAA"
SECONDARY = "374151"
ACCENT = "1E40AF"
LIGHT_GRAY = "F8FAFC"

DEFAULT_PRIORITY = "Medium"
DEFAULT_STATUS = "Pending"

TITLES = {
    RecordKind.INTERVENTION: ("RAPPORT D'INTERVENTION", "TECHNIQUE"),
    RecordKind.RECLAMATION: ("RAPPORT DE RÉCLAMATION", "ET SUIVI"),
}


class ReportGenerationError(Exception):
    """Raised when a report document cannot be assembled."""


@dataclass
class ReportData:
    """Everything a report shows, independent of the record kind."""

    kind: RecordKind
    reference: str
    employee_name: str
    employee_id: str
    site_name: str
    station_name: str
    type_label: str
    type_value: str
    created_at: datetime | None
    description: list[tuple[str, str]]
    recipient_emails: list[str]
    photo_url: str | None = None
    priority: str = DEFAULT_PRIORITY
    status: str = DEFAULT_STATUS
    title: tuple[str, ...] = field(default=())


def intervention_report_data(intervention: Intervention) -> ReportData:
    """Map an intervention onto the report layout."""
    period = (
        f"{format_date_fr(intervention.start_date)} au "
        f"{format_date_fr(intervention.end_date)}"
    )
    return ReportData(
        kind=RecordKind.INTERVENTION,
        reference=str(intervention.id),
        employee_name=intervention.responsable,
        employee_id=intervention.user_id,
        site_name=intervention.site_name,
        station_name=intervention.site_name,
        type_label="Type d'Intervention",
        type_value="Maintenance",
        created_at=intervention.created_at,
        description=[
            ("Équipe d'Intervention", ", ".join(intervention.team_members)),
            ("Période d'Intervention", period),
            ("Entreprise Prestataire", intervention.entreprise_name),
        ],
        recipient_emails=list(intervention.recipient_emails),
        photo_url=intervention.photo_url,
        title=TITLES[RecordKind.INTERVENTION],
    )


def reclamation_report_data(
    reclamation: Reclamation, submitter_name: str | None = None
) -> ReportData:
    """Map a reclamation onto the report layout."""
    category = reclamation_category_label(reclamation.reclamation_type)
    return ReportData(
        kind=RecordKind.RECLAMATION,
        reference=str(reclamation.id),
        employee_name=submitter_name or "N/A",
        employee_id=reclamation.user_id,
        site_name=reclamation.station_name,
        station_name=reclamation.station_name,
        type_label="Catégorie",
        type_value=category,
        created_at=reclamation.created_at,
        description=[
            ("Nature de la Réclamation", category),
            ("Date de l'Incident", format_date_fr(reclamation.date)),
            ("Station Concernée", reclamation.station_name),
            (
                "Description Détaillée",
                reclamation.description or "Aucune description fournie",
            ),
        ],
        recipient_emails=list(reclamation.recipient_emails),
        photo_url=reclamation.photo_url,
        title=TITLES[RecordKind.RECLAMATION],
    )


# =========================
# Low-level formatting helpers
# =========================

_PPR_AFTER_BORDER = (
    "w:shd", "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap", "w:outlineLvl",
    "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)


def _rgb(hex_color: str) -> RGBColor:
    return RGBColor.from_string(hex_color)


def _shade_cell(cell, color_hex: str) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    tc_pr.append(
        parse_xml(f'<w:shd {nsdecls("w")} w:fill="{color_hex}" w:val="clear"/>')
    )


def _bottom_border(paragraph, color_hex: str, size: int = 6, style: str = "single") -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    border = parse_xml(
        f'<w:pBdr {nsdecls("w")}>'
        f'<w:bottom w:val="{style}" w:sz="{size}" w:space="1" w:color="{color_hex}"/>'
        f"</w:pBdr>"
    )
    # pBdr has to precede spacing and justification in pPr
    p_pr.insert_element_before(border, *_PPR_AFTER_BORDER)


def _add_run(paragraph, text: str, *, size: float = 11, color: str = SECONDARY,
             bold: bool = False, italic: bool = False):
    run = paragraph.add_run(text)
    run.font.name = "Arial"
    run.font.size = Pt(size)
    run.font.color.rgb = _rgb(color)
    run.font.bold = bold
    run.font.italic = italic
    return run


class ReportGenerator:
    """Builds DOCX reports for interventions and reclamations."""

    def __init__(
        self,
        organization_name: str = "Région Souss-Massa",
        logo_path: str | Path | None = None,
        photo_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.organization_name = organization_name
        self.logo_path = Path(logo_path) if logo_path else None
        self.photo_timeout = photo_timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReportGenerator":
        return cls(
            organization_name=settings.report_organization_name,
            logo_path=settings.report_logo_path or None,
            photo_timeout=settings.photo_fetch_timeout_seconds,
        )

    # =========================
    # Public API
    # =========================

    async def generate(
        self,
        kind: RecordKind,
        record: Intervention | Reclamation,
        submitter_name: str | None = None,
        generated_at: datetime | None = None,
    ) -> bytes:
        """Generate the report document for a record.

        Args:
            kind: Record kind
            record: The persisted record
            submitter_name: Display name of the submitting user (reclamations)
            generated_at: Timestamp printed in the footer (defaults to now)

        Returns:
            DOCX file content

        Raises:
            ReportGenerationError: If the document cannot be assembled
        """
        if kind == RecordKind.INTERVENTION:
            data = intervention_report_data(record)
        else:
            data = reclamation_report_data(record, submitter_name)

        photo = await self.fetch_photo(data.photo_url) if data.photo_url else None
        return self.render(data, photo=photo, generated_at=generated_at)

    async def fetch_photo(self, url: str) -> bytes | None:
        """Download the record photo; None if it cannot be fetched."""
        try:
            async with httpx.AsyncClient(
                timeout=self.photo_timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch report photo {url}: {e}")
            return None

    def render(
        self,
        data: ReportData,
        photo: bytes | None = None,
        generated_at: datetime | None = None,
    ) -> bytes:
        """Render report data to DOCX bytes."""
        generated_at = generated_at or utcnow()
        try:
            doc = Document()
            section = doc.sections[0]
            for side in ("top_margin", "right_margin", "bottom_margin", "left_margin"):
                setattr(section, side, Twips(800))

            self._add_logo(doc)
            self._add_title(doc, data.title)
            self._add_introduction(doc)

            self._add_section_header(doc, "Informations Détaillées")
            self._add_details_table(doc, data)

            self._add_section_header(doc, "Description")
            self._add_labelled_lines(doc, data.description)

            if photo:
                self._add_section_header(doc, "Documentation Photographique")
                paragraph = doc.add_paragraph()
                paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
                paragraph.add_run().add_picture(io.BytesIO(photo), width=Inches(5.2))

            self._add_section_header(doc, "Destinataires du Rapport")
            for email in data.recipient_emails:
                _add_run(doc.add_paragraph(), email)

            self._add_footer(doc, generated_at)

            buffer = io.BytesIO()
            doc.save(buffer)
            return buffer.getvalue()
        except Exception as e:
            raise ReportGenerationError(
                f"Could not build {data.kind.value} report {data.reference}: {e}"
            ) from e

    # =========================
    # Layout blocks
    # =========================

    def _add_logo(self, doc) -> None:
        if self.logo_path is None or not self.logo_path.exists():
            return
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
        paragraph.add_run().add_picture(str(self.logo_path), width=Cm(6.6))

    def _add_title(self, doc, lines: tuple[str, ...]) -> None:
        for index, line in enumerate(lines):
            paragraph = doc.add_paragraph()
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
            _add_run(paragraph, line.upper(), size=16, color=PRIMARY, bold=True)
            if index == len(lines) - 1:
                paragraph.paragraph_format.space_after = Pt(40)
                _bottom_border(paragraph, ACCENT, size=12, style="double")

    def _add_introduction(self, doc) -> None:
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
        _add_run(paragraph, "Rapport Officiel - ", size=10, bold=True)
        _add_run(
            paragraph,
            "Ce document présente les détails techniques et administratifs "
            "de l'opération.",
            size=10,
        )

    def _add_section_header(self, doc, text: str) -> None:
        paragraph = doc.add_paragraph()
        paragraph.paragraph_format.space_before = Pt(20)
        paragraph.paragraph_format.space_after = Pt(10)
        _add_run(paragraph, text, size=12, color=PRIMARY, bold=True)
        _bottom_border(paragraph, PRIMARY, size=4)

    def _add_details_table(self, doc, data: ReportData) -> None:
        rows = [
            ("Référence:", data.reference),
            ("Nom de l'Employé:", data.employee_name),
            ("Matricule:", data.employee_id),
            ("Site:", data.site_name),
            ("Station:", data.station_name),
            (f"{data.type_label}:", data.type_value),
            ("Priorité:", priority_label(data.priority)),
            ("Statut:", status_label(data.status)),
            ("Date de Création:", format_date_fr(data.created_at)),
        ]

        table = doc.add_table(rows=0, cols=2)
        table.alignment = WD_TABLE_ALIGNMENT.CENTER
        table.style = "Table Grid"

        for index, (label, value) in enumerate(rows):
            is_header = index == 0
            label_cell, value_cell = table.add_row().cells
            label_cell.width = Cm(6)
            value_cell.width = Cm(11)

            _shade_cell(label_cell, PRIMARY if is_header else LIGHT_GRAY)
            _add_run(
                label_cell.paragraphs[0],
                label,
                color="FFFFFF" if is_header else SECONDARY,
                bold=True,
            )
            _add_run(value_cell.paragraphs[0], value)

    def _add_labelled_lines(self, doc, lines: list[tuple[str, str]]) -> None:
        for label, value in lines:
            paragraph = doc.add_paragraph()
            _add_run(paragraph, f"{label}: ", color=PRIMARY, bold=True)
            _add_run(paragraph, value)

    def _add_footer(self, doc, generated_at: datetime) -> None:
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.paragraph_format.space_before = Pt(30)
        _add_run(
            paragraph,
            f"Document généré électroniquement le {format_timestamp_fr(generated_at)} - ",
            size=9,
            italic=True,
        )
        _add_run(paragraph, self.organization_name, size=9, color=PRIMARY,
                 bold=True, italic=True)
