"""Unit tests for DOCX report generation.

Documents are inspected through python-docx and the raw ``word/document.xml``
part of the package.
"""

import io
import zipfile
from datetime import datetime

import httpx
import pytest
from docx import Document

from srmops.records.models import RecordKind
from srmops.reporting.document import (
    ReportGenerationError,
    ReportGenerator,
    intervention_report_data,
    reclamation_report_data,
)

from fixtures.records import FIXED_ID, make_intervention, make_reclamation, tiny_png

GENERATED_AT = datetime(2025, 3, 5, 14, 30)
CREATED_AT = datetime(2025, 3, 5, 9, 0)


def document_xml(content: bytes) -> bytes:
    with zipfile.ZipFile(io.BytesIO(content)) as package:
        return package.read("word/document.xml")


def media_parts(content: bytes) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(content)) as package:
        return [n for n in package.namelist() if n.startswith("word/media/")]


def all_text(content: bytes) -> str:
    doc = Document(io.BytesIO(content))
    parts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            parts.extend(cell.text for cell in row.cells)
    return "\n".join(parts)


def photo_transport(status_code: int = 200, content: bytes = b"") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content)

    return httpx.MockTransport(handler)


class TestReportData:
    """Mapping records onto the report layout."""

    def test_intervention_mapping(self):
        data = intervention_report_data(make_intervention(id=FIXED_ID, created_at=CREATED_AT))

        assert data.reference == str(FIXED_ID)
        assert data.employee_name == "Karim Benali"
        assert data.employee_id == "agent-1"
        assert data.type_value == "Maintenance"
        assert ("Équipe d'Intervention", "Ahmed Ouali, Fatima Zahra") in data.description
        assert ("Période d'Intervention", "5 mars 2025 au 5 mars 2025") in data.description

    def test_reclamation_mapping_uses_category_label(self):
        data = reclamation_report_data(
            make_reclamation(id=FIXED_ID, created_at=CREATED_AT), "Youssef El Amrani"
        )

        assert data.employee_name == "Youssef El Amrani"
        assert data.type_value == "Fuite d'eau"
        assert ("Date de l'Incident", "4 mars 2025") in data.description


class TestGenerate:
    """End-to-end document generation."""

    @pytest.mark.asyncio
    async def test_identical_input_produces_identical_document(self):
        """Test generation is deterministic for a fixed timestamp."""
        generator = ReportGenerator()
        record = make_intervention(id=FIXED_ID, created_at=CREATED_AT)

        first = await generator.generate(
            RecordKind.INTERVENTION, record, generated_at=GENERATED_AT
        )
        second = await generator.generate(
            RecordKind.INTERVENTION, record, generated_at=GENERATED_AT
        )

        assert document_xml(first) == document_xml(second)

    @pytest.mark.asyncio
    async def test_intervention_document_content(self):
        generator = ReportGenerator(organization_name="Région Souss-Massa")
        record = make_intervention(id=FIXED_ID, created_at=CREATED_AT)

        content = await generator.generate(
            RecordKind.INTERVENTION, record, generated_at=GENERATED_AT
        )
        text = all_text(content)

        assert "RAPPORT D'INTERVENTION" in text
        assert "Station Agadir Nord" in text
        assert "Hydro Services SARL" in text
        assert "chef@srm-sm.ma" in text
        assert "Document généré électroniquement le 05/03/2025 à 14:30" in text
        assert "Région Souss-Massa" in text
        assert media_parts(content) == []

    @pytest.mark.asyncio
    async def test_reclamation_document_content(self):
        generator = ReportGenerator()
        record = make_reclamation(id=FIXED_ID, created_at=CREATED_AT)

        content = await generator.generate(
            RecordKind.RECLAMATION,
            record,
            submitter_name="Youssef El Amrani",
            generated_at=GENERATED_AT,
        )
        text = all_text(content)

        assert "RAPPORT DE RÉCLAMATION" in text
        assert "Youssef El Amrani" in text
        assert "Fuite importante sur la conduite principale." in text

    @pytest.mark.asyncio
    async def test_photo_is_embedded(self):
        generator = ReportGenerator(transport=photo_transport(content=tiny_png()))
        record = make_intervention(
            id=FIXED_ID,
            created_at=CREATED_AT,
            photo_url="https://cdn.srm-sm.ma/photos/site.png",
        )

        content = await generator.generate(RecordKind.INTERVENTION, record)

        assert len(media_parts(content)) == 1
        assert "Documentation Photographique" in all_text(content)

    @pytest.mark.asyncio
    async def test_unreachable_photo_is_skipped(self):
        """Test a failed photo download still yields a report."""
        generator = ReportGenerator(transport=photo_transport(status_code=404))
        record = make_intervention(
            id=FIXED_ID,
            created_at=CREATED_AT,
            photo_url="https://cdn.srm-sm.ma/photos/missing.png",
        )

        content = await generator.generate(RecordKind.INTERVENTION, record)

        assert media_parts(content) == []

    @pytest.mark.asyncio
    async def test_fetch_photo_returns_none_on_error(self):
        generator = ReportGenerator(transport=photo_transport(status_code=500))
        assert await generator.fetch_photo("https://cdn.srm-sm.ma/p.png") is None

    def test_invalid_image_raises(self):
        generator = ReportGenerator()
        data = intervention_report_data(make_intervention(id=FIXED_ID, created_at=CREATED_AT))

        with pytest.raises(ReportGenerationError):
            generator.render(data, photo=b"this is not an image")
