import asyncio
from abc import ABC, abstractmethod
from email.message import EmailMessage as MimeMessage

import aiosmtplib

from approvaldesk.core.config import Settings
from approvaldesk.notifications.templates import EmailMessage
from approvaldesk.utils.logging import get_logger

logger = get_logger(__name__)


class EmailSendError(RuntimeError):
    pass


class EmailSender(ABC):
    @abstractmethod
    async def send(self, message: EmailMessage) -> None:
        raise NotImplementedError


class LogEmailSender(EmailSender):
    """Development sender: records the email in the log instead of delivering it."""

    async def send(self, message: EmailMessage) -> None:
        logger.info("Email to %s: %s", message.to, message.subject)


class SmtpEmailSender(EmailSender):
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_mime(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["From"] = f"{self.settings.mail_from_name} <{self.settings.mail_from_address}>"
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content("This email requires an HTML-capable client.")
        mime.add_alternative(message.html, subtype="html")
        return mime

    async def send(self, message: EmailMessage) -> None:
        if not self.settings.smtp_host:
            raise EmailSendError("SMTP_HOST not configured")
        await aiosmtplib.send(
            self.build_mime(message),
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            username=self.settings.smtp_username or None,
            password=self.settings.smtp_password or None,
            start_tls=self.settings.smtp_use_tls,
        )


class CeleryEmailSender(EmailSender):
    """Hands the rendered email to the Celery worker for SMTP delivery."""

    async def send(self, message: EmailMessage) -> None:
        from approvaldesk.worker import task_send_email

        # Publishing talks to the broker synchronously; keep it off the event loop.
        await asyncio.to_thread(task_send_email.delay, message.to, message.subject, message.html)


def build_sender(settings: Settings) -> EmailSender:
    backend = settings.notification_backend
    if backend == "smtp":
        return SmtpEmailSender(settings)
    if backend == "celery":
        return CeleryEmailSender()
    if backend != "log":
        logger.warning("Unknown notification backend %r, falling back to log", backend)
    return LogEmailSender()
