"""
Lead notifier - SMTP emails for a freshly stored lead.

Sends two independent messages: an owner notification (Reply-To = customer) and a
customer confirmation. Both are always attempted; any failure is reported after both
ran. Nothing here touches the database, so a failure never undoes the stored lead.

Transport security follows the port: 465 = implicit TLS, 587 = STARTTLS required,
anything else = STARTTLS when the server offers it.
"""
import asyncio
import logging
import re
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr
from typing import Optional

from leaddesk.config import Settings
from leaddesk.errors import ConfigurationError, NotificationError
from leaddesk.models.lead import Lead
from leaddesk.services.email_templates import (
    Branding,
    render_customer_confirmation,
    render_owner_notification,
)
from leaddesk.utils.email_validation import mask_email

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465
STARTTLS_PORT = 587


def sanitize_password(password: str) -> str:
    """Strip all whitespace; app passwords are often pasted as 'abcd efgh ijkl mnop'."""
    return re.sub(r"\s+", "", password or "")


@dataclass
class NotifyResult:
    owner_sent: bool = False
    confirmation_sent: bool = False


class SmtpTransport:
    """Blocking smtplib transport. One connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = int(port)
        self.user = user
        self.password = sanitize_password(password)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            timeout=settings.smtp_timeout_seconds,
        )

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.port == IMPLICIT_TLS_PORT:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)

        smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            smtp.ehlo()
            if self.port == STARTTLS_PORT or smtp.has_extn("starttls"):
                # Raises SMTPNotSupportedError on 587 if the server cannot upgrade
                smtp.starttls(context=context)
                smtp.ehlo()
        except Exception:
            smtp.close()
            raise
        return smtp

    def send(self, message: EmailMessage) -> None:
        with self._connect() as smtp:
            smtp.login(self.user, self.password)
            smtp.send_message(message)


class Notifier:
    def __init__(self, settings: Settings, transport: Optional[SmtpTransport] = None):
        self.settings = settings
        self.branding = Branding.from_settings(settings)
        self._transport = transport

    def _require_config(self) -> SmtpTransport:
        if not self.settings.smtp_configured:
            raise ConfigurationError("SMTP config missing")
        if not self.settings.mail_to:
            raise ConfigurationError("MAIL_TO missing")
        if self._transport is None:
            self._transport = SmtpTransport.from_settings(self.settings)
        return self._transport

    def build_message(
        self,
        to: str,
        subject: str,
        text: str,
        html_body: str,
        reply_to: Optional[str] = None,
    ) -> EmailMessage:
        sender = self.settings.sender_address
        msg = EmailMessage()
        msg["From"] = sender
        msg["To"] = to
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        address = parseaddr(sender)[1]
        domain = address.split("@")[-1] if "@" in address else None
        msg["Message-ID"] = make_msgid(domain=domain)
        msg.set_content(text)
        msg.add_alternative(html_body, subtype="html")
        return msg

    async def _send(self, transport: SmtpTransport, message: EmailMessage) -> None:
        # smtplib blocks; keep it off the event loop
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, transport.send, message)

    async def notify(self, lead: Lead, page_url: Optional[str] = None) -> NotifyResult:
        """
        Send the owner notification and the customer confirmation for a stored lead.

        Raises:
            ConfigurationError: SMTP credentials or MAIL_TO are not configured.
            NotificationError: one or both sends failed (see .failures).
        """
        transport = self._require_config()
        result = NotifyResult()
        failures: dict[str, str] = {}

        subject, text, html_body = render_owner_notification(lead, self.branding, page_url)
        owner_msg = self.build_message(
            self.settings.mail_to, subject, text, html_body, reply_to=lead.email
        )
        try:
            await self._send(transport, owner_msg)
            result.owner_sent = True
        except Exception as e:
            failures["owner"] = str(e)
            logger.error("Owner notification failed: %s", str(e), extra={"lead_id": lead.id})

        subject, text, html_body = render_customer_confirmation(lead, self.branding)
        confirm_msg = self.build_message(
            lead.email,
            subject,
            text,
            html_body,
            reply_to=self.settings.reply_to or self.settings.sender_address,
        )
        try:
            await self._send(transport, confirm_msg)
            result.confirmation_sent = True
        except Exception as e:
            failures["confirmation"] = str(e)
            logger.error(
                "Confirmation to %s failed: %s",
                mask_email(lead.email), str(e),
                extra={"lead_id": lead.id},
            )

        if failures:
            raise NotificationError("Email send failed", lead_id=lead.id, failures=failures)

        logger.info(
            "Notifications sent (owner + confirmation to %s)",
            mask_email(lead.email),
            extra={"lead_id": lead.id},
        )
        return result
