"""Unit tests for the post-submission notification pipeline."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from srmops.notifications.pipeline import notify_record, report_file_name, report_subject
from srmops.records.models import RecordKind
from srmops.reporting.document import ReportGenerationError, ReportGenerator

from fixtures.records import FIXED_ID, make_intervention, make_reclamation
from fixtures.services import RecordingMailer


def test_report_file_name():
    name = report_file_name(RecordKind.INTERVENTION, datetime(2025, 3, 5, 14, 30, 0, 123456))
    assert name == "Intervention_Report_2025-03-05T14-30-00-123456.docx"


def test_report_subject():
    assert (
        report_subject(RecordKind.INTERVENTION, make_intervention())
        == "New Intervention Report - Station Agadir Nord"
    )
    assert (
        report_subject(RecordKind.RECLAMATION, make_reclamation())
        == "New Reclamation Report - Station Inezgane"
    )


def test_report_subject_is_single_line():
    record = make_reclamation(station_name="Station\r\nInezgane  Sud")
    assert report_subject(RecordKind.RECLAMATION, record) == (
        "New Reclamation Report - Station Inezgane Sud"
    )


@pytest.mark.asyncio
async def test_sends_generated_report():
    mailer = RecordingMailer()
    record = make_reclamation(id=FIXED_ID)

    sent = await notify_record(
        RecordKind.RECLAMATION, record, ReportGenerator(), mailer, "Youssef El Amrani"
    )

    assert sent is True
    message, envelope = mailer.sent[0]
    assert message["Subject"] == "New Reclamation Report - Station Inezgane"
    assert envelope == ["chef@srm-sm.ma"]
    attachment = next(message.iter_attachments())
    assert attachment.get_filename().startswith("Reclamation_Report_")


@pytest.mark.asyncio
async def test_generation_failure_is_swallowed():
    generator = MagicMock(spec=ReportGenerator)
    generator.generate = AsyncMock(side_effect=ReportGenerationError("broken template"))
    mailer = RecordingMailer()

    sent = await notify_record(
        RecordKind.INTERVENTION, make_intervention(id=FIXED_ID), generator, mailer
    )

    assert sent is False
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_delivery_failure_is_reported():
    sent = await notify_record(
        RecordKind.INTERVENTION,
        make_intervention(id=FIXED_ID),
        ReportGenerator(),
        RecordingMailer(fail=True),
    )

    assert sent is False
