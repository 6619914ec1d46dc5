"""Mailers — SMTP delivery and a log-only stand-in for development.

Invariants:
    - Both implementations satisfy core.repository_protocols.Mailer
    - SMTP failures raise MailDeliveryError; callers decide whether that is fatal
    - Every SMTP exchange is bounded by smtp_timeout_seconds

Design Decisions:
    - smtplib in a worker thread (asyncio.to_thread): blocking client, async callers
    - LogMailer logs bodies at DEBUG only, so login codes never reach INFO logs
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage as MimeMessage

from shoplist.config import Settings
from shoplist.core.errors import MailDeliveryError
from shoplist.core.format_emails import EmailMessage

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends plain-text mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        starttls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    async def send(self, message: EmailMessage) -> None:
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {message.to} failed: {e}")
            raise MailDeliveryError(message.to, str(e)) from e
        logger.info(f"Mail '{message.subject}' sent to {message.to}")

    def _deliver(self, message: EmailMessage) -> None:
        mime = MimeMessage()
        mime["From"] = self.sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.body)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.starttls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password)
            smtp.send_message(mime)


class LogMailer:
    """Mail disabled: record the message in the log instead of sending it."""

    async def send(self, message: EmailMessage) -> None:
        logger.info(f"Mail delivery disabled, dropping '{message.subject}' to {message.to}")
        logger.debug(message.body)


def build_mailer(settings: Settings) -> SmtpMailer | LogMailer:
    if not settings.mail_enabled:
        return LogMailer()
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.smtp_from,
        username=settings.smtp_user,
        password=settings.smtp_pass,
        starttls=settings.smtp_starttls,
        timeout=settings.smtp_timeout_seconds,
    )
