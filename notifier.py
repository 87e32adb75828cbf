"""
Outbound email for the grievance portal, sent over SMTP.

Sending is independent of any complaint or user write.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from config import Settings, settings as default_settings
from errors import NotificationError

logger = logging.getLogger(__name__)


class EmailNotifier:
    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or default_settings
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.use_tls = settings.SMTP_USE_TLS
        self.username = settings.EMAIL_USER
        self.password = settings.EMAIL_PASS
        self.from_address = settings.EMAIL_FROM

    def build_message(self, to: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body or "", "plain")
        msg["Subject"] = subject or ""
        msg["From"] = self.from_address
        msg["To"] = to
        return msg

    def send(self, to: str, subject: str, body: str) -> None:
        msg = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email to %s: %s", to, e)
            raise NotificationError(str(e), details={"to": to}) from e
        logger.info("Email sent to %s", to)
