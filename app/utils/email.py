"""
SMTP delivery for notification emails.

``SMTPEmailSender`` is the sender the notification dispatcher uses: one
recipient, an HTML body, and an ``EmailResult`` instead of an exception
when delivery fails.
"""

from __future__ import annotations

import logging
import re
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from app.config.settings import settings

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


class EmailError(Exception):
    """Raised when a message cannot be built or delivered."""


@dataclass
class EmailResult:
    """Outcome of a single email send."""
    success: bool
    error: Optional[str] = None
    skipped: bool = False


@dataclass
class SMTPConfig:
    host: str
    port: int
    username: str = ""
    password: str = ""
    use_tls: bool = True
    sender: Optional[str] = None

    @classmethod
    def from_settings(cls) -> SMTPConfig:
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER or "",
            password=settings.SMTP_PASSWORD or "",
            use_tls=settings.SMTP_TLS,
            sender=settings.EMAIL_FROM_ADDRESS,
        )

    @property
    def from_address(self) -> str:
        return self.sender or self.username


class EmailSender(Protocol):
    def send_email(self, to: str, subject: str, body: str) -> EmailResult:
        ...


def build_message(sender: str, to: str, subject: str, html: str) -> MIMEMultipart:
    if not _ADDRESS_RE.match(to or ""):
        raise EmailError(f"Invalid recipient email: {to}")
    if not subject.strip():
        raise EmailError("Subject cannot be empty")

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = to
    message.attach(MIMEText(html, "html"))
    return message


class SMTPEmailSender:
    """Sends HTML bodies over SMTP and reports failures as results."""

    def __init__(self, config: SMTPConfig | None = None):
        self.config = config or SMTPConfig.from_settings()

    def deliver(self, message: MIMEMultipart) -> None:
        config = self.config
        try:
            with smtplib.SMTP(config.host, config.port) as server:
                if config.use_tls:
                    server.starttls()
                if config.username and config.password:
                    server.login(config.username, config.password)
                server.send_message(message)
        except (OSError, smtplib.SMTPException) as e:
            raise EmailError(f"Failed to send email: {e}") from e

    def send_email(self, to: str, subject: str, body: str) -> EmailResult:
        try:
            self.deliver(build_message(self.config.from_address, to, subject, body))
        except EmailError as e:
            logger.error(f"Email to {to} failed: {e}")
            return EmailResult(success=False, error=str(e))
        logger.info(f"Email sent to {to}: {subject}")
        return EmailResult(success=True)
