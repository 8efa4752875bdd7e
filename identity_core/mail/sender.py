"""
Email Transport
===============
Outbound email used to deliver OTPs.
"""

import asyncio
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage

import structlog

from identity_core.config import EmailConfig
from identity_core.errors import UpstreamDependencyFailure

logger = structlog.get_logger(__name__)


def mask_email(email: str) -> str:
    """Mask an address for logs (a***@example.com)."""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


class EmailSender(ABC):
    """Delivers a single HTML email."""

    @abstractmethod
    async def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Send an email.

        Raises:
            UpstreamDependencyFailure: If the transport fails
        """


class SMTPEmailSender(EmailSender):
    """
    SMTP transport.

    smtplib blocks, so each send runs in the default executor and is bounded
    by the configured timeout. Failures are not retried here.
    """

    def __init__(self, config: EmailConfig):
        self.config = config

    def _build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(
            self.config.host,
            self.config.port,
            timeout=self.config.timeout,
        ) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.username:
                smtp.login(self.config.username, self.config.password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, html_body: str) -> None:
        message = self._build_message(to, subject, html_body)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Email delivery failed",
                to=mask_email(to),
                error_type=type(e).__name__,
            )
            raise UpstreamDependencyFailure(str(e), service="smtp") from e

        logger.info("Email sent", to=mask_email(to), subject=subject)
