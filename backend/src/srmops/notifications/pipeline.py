"""Report notification for newly persisted records.

Runs after the record is committed. Any failure here is logged and reported
as ``False``; it never undoes the record or fails the request.
"""

import logging
from datetime import datetime

from ..logging import log_notification_result
from ..records.models import Intervention, Reclamation, RecordKind, utcnow
from ..reporting.document import ReportGenerator
from .mailer import ReportMailer

logger = logging.getLogger(__name__)


def report_file_name(kind: RecordKind, now: datetime | None = None) -> str:
    """File name of the attachment, e.g. ``Intervention_Report_2025-03-05T14-30-00-000000.docx``."""
    stamp = (now or utcnow()).isoformat(timespec="microseconds")
    stamp = stamp.replace(":", "-").replace(".", "-")
    return f"{kind.value.capitalize()}_Report_{stamp}.docx"


def report_subject(kind: RecordKind, record: Intervention | Reclamation) -> str:
    if kind == RecordKind.INTERVENTION:
        subject = f"New Intervention Report - {record.site_name}"
    else:
        subject = f"New Reclamation Report - {record.station_name}"
    # Header values cannot carry line breaks
    return " ".join(subject.split())


async def notify_record(
    kind: RecordKind,
    record: Intervention | Reclamation,
    generator: ReportGenerator,
    mailer: ReportMailer,
    submitter_name: str | None = None,
) -> bool:
    """Generate the record's report and email it to its recipients.

    Returns:
        True if the report was generated and accepted by the mail relay
    """
    record_id = str(record.id)
    recipients = list(record.recipient_emails)

    try:
        document = await generator.generate(kind, record, submitter_name=submitter_name)
    except Exception as e:
        logger.exception(f"Report generation failed for {kind.value} {record_id}")
        log_notification_result(kind.value, record_id, len(recipients), False, str(e))
        return False

    sent = await mailer.send_report_email(
        recipients,
        report_subject(kind, record),
        document,
        report_file_name(kind),
        kind.value,
    )
    log_notification_result(
        kind.value,
        record_id,
        len(recipients),
        sent,
        None if sent else "mail transport rejected or unavailable",
    )
    return sent
