import logging
from pathlib import Path
from typing import Protocol

import resend

from booking_api.core.config import Settings, settings

logger = logging.getLogger(__name__)


class ContactMailer(Protocol):
    def send_contact_email(self, to_email: str, full_name: str) -> bool:
        """Send the lead email; return False on failure instead of raising."""
        ...


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def build_contact_email_html(full_name: str, signature: str) -> str:
    """Build HTML body for the blueprint email sent after a contact request."""
    return (
        f"Hallo {_html_escape(full_name)}, <br><br> "
        "viel Erfolg bei der Automatisierung deiner Kanzlei! <br><br> "
        f"Beste Grüße <br><br> {_html_escape(signature)} <br><br>"
    )


class ResendMailer:
    """Sends the contact email with the PDF attachment through the Resend API."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    def _build_params(self, to_email: str, full_name: str, attachment: bytes) -> dict:
        cfg = self.config
        return {
            "from": f"{cfg.from_name}<{cfg.from_email}>",
            "to": [to_email],
            "subject": cfg.contact_email_subject,
            "html": build_contact_email_html(full_name, cfg.sender_signature),
            "bcc": [cfg.bcc_email] if cfg.bcc_email else [],
            "reply_to": cfg.reply_to_email,
            "attachments": [
                {"filename": cfg.contact_attachment_filename, "content": list(attachment)},
            ],
        }

    def send_contact_email(self, to_email: str, full_name: str) -> bool:
        logger.info("Preparing to send email to %s", to_email)
        if not self.config.email_enabled:
            logger.error("Email disabled (RESEND_API_KEY not configured), skipping send to %s", to_email)
            return False
        try:
            attachment = Path(self.config.contact_attachment_path).read_bytes()
        except OSError as e:
            logger.error("Failed to read attachment %s: %s", self.config.contact_attachment_path, e)
            return False
        resend.api_key = self.config.resend_api_key
        try:
            sent = resend.Emails.send(self._build_params(to_email, full_name, attachment))
        except Exception as e:
            logger.exception("Failed to send email to %s: %s", to_email, e)
            return False
        logger.info("Email sent to %s (id=%s)", to_email, sent.get("id"))
        return True
