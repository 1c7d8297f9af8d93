"""Report notification: SMTP mailer and the post-submission pipeline."""

from .mailer import ReportMailer
from .pipeline import notify_record, report_file_name, report_subject

__all__ = ["ReportMailer", "notify_record", "report_file_name", "report_subject"]
