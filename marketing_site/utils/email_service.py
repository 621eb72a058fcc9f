# marketing_site/utils/email_service.py

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib
from fastapi import Request

from marketing_site.core.config import Settings
from marketing_site.schemas.contact import ContactMessageCreate, GdprRequestCreate

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification email could not be delivered."""


class NotifierUnavailable(NotificationError):
    """Raised when no mail channel is configured or it failed verification."""


def _or_dash(value) -> str:
    return value if value else "-"


def compose_contact_body(payload: ContactMessageCreate, record_id: int) -> str:
    lines = [
        "You have received a new message through the contact form:",
        f"Message ID: {record_id}",
        f"Name: {payload.full_name}",
        f"Company: {_or_dash(payload.company)}",
        f"Email: {payload.email}",
        f"Phone: {_or_dash(payload.phone)}",
        f"GDPR consent: {'YES' if payload.consent else 'NO'}",
        f"IP: {_or_dash(payload.ip_address)}",
        "",
        "Message:",
        payload.message,
    ]
    return "\n".join(lines)


def compose_gdpr_body(payload: GdprRequestCreate, record_id: int) -> str:
    lines = [
        "You have received a new GDPR request:",
        f"Request ID: {record_id}",
        f"Name: {payload.full_name}",
        f"Email: {payload.email}",
        f"Request type: {payload.request_type}",
        f"IP: {_or_dash(payload.ip_address)}",
        "",
        "Message:",
        payload.message,
    ]
    return "\n".join(lines)


class Notifier:
    """
    Best-effort SMTP notifications for new submissions.

    The channel is available only when host, port, user and password are all
    configured. Every send on an unavailable channel raises
    NotifierUnavailable straight away; SMTP failures raise NotificationError.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.available = settings.smtp_configured
        if not self.available:
            logger.warning("SMTP configuration incomplete - set SMTP_HOST, SMTP_PORT, SMTP_USER and SMTP_PASS to send emails.")

    @property
    def use_tls(self) -> bool:
        return self.settings.SMTP_PORT == 465

    @property
    def sender(self) -> str:
        return formataddr((self.settings.MAIL_FROM_NAME, self.settings.SMTP_USER or ""))

    async def verify(self) -> bool:
        """Log in once; a failure disables the channel for the rest of the process."""
        if not self.available:
            return False

        smtp = aiosmtplib.SMTP(
            hostname=self.settings.SMTP_HOST,
            port=self.settings.SMTP_PORT,
            use_tls=self.use_tls,
        )
        try:
            await smtp.connect()
            await smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASS)
            await smtp.quit()
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Could not verify the SMTP transport: {str(e)}")
            self.available = False
            return False

        logger.info("SMTP server ready to send emails.")
        return True

    async def notify_contact(self, payload: ContactMessageCreate, record_id: int) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.settings.CONTACT_RECIPIENT
        message["Subject"] = f"New website message (#{record_id})"
        if self.settings.CONTACT_CC:
            message["Cc"] = self.settings.CONTACT_CC
        if self.settings.CONTACT_BCC:
            message["Bcc"] = self.settings.CONTACT_BCC
        message.set_content(compose_contact_body(payload, record_id))

        await self._send(message)

    async def notify_gdpr(self, payload: GdprRequestCreate, record_id: int) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.settings.PRIVACY_CONTACT
        message["Subject"] = f"New GDPR request (#{record_id})"
        message.set_content(compose_gdpr_body(payload, record_id))

        await self._send(message)

    async def _send(self, message: EmailMessage) -> None:
        if not self.available:
            raise NotifierUnavailable("SMTP transport unavailable.")

        try:
            # aiosmtplib reads Cc/Bcc recipients from the headers and drops Bcc before sending.
            await aiosmtplib.send(
                message,
                hostname=self.settings.SMTP_HOST,
                port=self.settings.SMTP_PORT,
                username=self.settings.SMTP_USER,
                password=self.settings.SMTP_PASS,
                use_tls=self.use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise NotificationError(f"SMTP delivery failed: {str(e)}") from e

        logger.info(f"Notification sent: {message['Subject']}")


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
