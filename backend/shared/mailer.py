"""
Outbound mail transport.

Thin SMTP wrapper used for password-reset and verification mails.
Delivery is best-effort: callers schedule `send` as a background task,
so a missing or failing transport never fails the originating request.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class Mailer:
    """SMTP mail sender configured from settings."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        """Check if an SMTP host and credentials are configured."""
        s = self._settings
        return bool(s.smtp_host and s.smtp_user and s.smtp_password)

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.smtp_from
        msg["To"] = to
        msg.set_content(html, subtype="html")
        return msg

    def send(self, to: str, subject: str, html: str) -> bool:
        """
        Send an HTML mail.

        Returns:
            True if the message was handed to the SMTP server, False if the
            transport is not configured or delivery failed.
        """
        if not self.is_configured:
            logger.warning(f"SMTP not configured, skipping mail '{subject}'")
            return False

        s = self._settings
        msg = self.build_message(to, subject, html)
        try:
            if s.smtp_use_ssl:
                server = smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)
            else:
                server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)
            with server:
                if s.smtp_starttls and not s.smtp_use_ssl:
                    server.starttls()
                server.login(s.smtp_user, s.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception(f"Failed to deliver mail '{subject}'")
            return False

        logger.info(f"Delivered mail '{subject}'")
        return True

