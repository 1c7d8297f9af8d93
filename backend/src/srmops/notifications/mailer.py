"""SMTP delivery of generated reports.

One message is sent per report, carrying the DOCX attachment and addressed
to every recipient at once. By default the recipients are only on the SMTP
envelope (blind copy); the visible ``To`` header holds the sender address.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

from ..config import MailConfig

logger = logging.getLogger(__name__)

DOCX_MIME = ("application", "vnd.openxmlformats-officedocument.wordprocessingml.document")

KIND_LABELS = {
    "intervention": "d'intervention",
    "reclamation": "de réclamation",
}


class ReportMailer:
    """Sends report emails through the configured SMTP relay."""

    def __init__(self, config: MailConfig):
        self.config = config

    def build_message(
        self,
        recipients: list[str],
        subject: str,
        attachment: bytes,
        file_name: str,
        report_kind: str,
    ) -> EmailMessage:
        """Build the email carrying a report attachment."""
        kind_label = KIND_LABELS.get(report_kind, report_kind)

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.config.sender
        if self.config.recipient_mode == "to":
            message["To"] = ", ".join(recipients)
        else:
            message["To"] = self.config.sender
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()

        message.set_content(
            "Bonjour,\n\n"
            f"Veuillez trouver ci-joint le rapport {kind_label} ({file_name}).\n\n"
            "Ce message a été généré automatiquement, merci de ne pas y répondre.\n"
        )
        message.add_alternative(
            "<html><body>"
            "<p>Bonjour,</p>"
            f"<p>Veuillez trouver ci-joint le rapport {kind_label} "
            f"(<strong>{file_name}</strong>).</p>"
            "<p style=\"color:#6b7280;font-size:12px\">"
            "Ce message a été généré automatiquement, merci de ne pas y répondre."
            "</p></body></html>",
            subtype="html",
        )
        message.add_attachment(
            attachment,
            maintype=DOCX_MIME[0],
            subtype=DOCX_MIME[1],
            filename=file_name,
        )
        return message

    def _deliver(self, message: EmailMessage, recipients: list[str]) -> None:
        config = self.config
        with smtplib.SMTP(config.host, config.port, timeout=config.timeout) as server:
            if config.use_tls:
                server.starttls(context=ssl.create_default_context())
            if config.username and config.password:
                server.login(config.username, config.password)
            server.send_message(message, to_addrs=recipients)

    async def send_report_email(
        self,
        recipients: list[str],
        subject: str,
        attachment: bytes,
        file_name: str,
        report_kind: str,
    ) -> bool:
        """Send a report to all recipients in a single message.

        Returns:
            True if the relay accepted the message, False otherwise
        """
        if not recipients:
            logger.warning("No recipients for report email, nothing sent")
            return False
        if not self.config.is_configured:
            logger.warning("SMTP not configured; unable to send report email")
            return False

        try:
            message = self.build_message(
                recipients, subject, attachment, file_name, report_kind
            )
            await asyncio.to_thread(self._deliver, message, recipients)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.error(f"Failed to send report email '{subject}': {e}")
            return False

        logger.info(
            f"Report email sent: {subject}",
            extra={"recipients": len(recipients), "file_name": file_name},
        )
        return True
