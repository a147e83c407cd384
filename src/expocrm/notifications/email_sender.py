"""
Email Sender

Sends email drafts via SMTP using aiosmtplib.
"""
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

import aiosmtplib

from ..config import Config
from .base_sender import BaseSender, SendResult

logger = logging.getLogger("expocrm.notifications.email")


class EmailSender(BaseSender):
    """Send emails via SMTP"""

    def __init__(
        self,
        smtp_host: str = "",
        smtp_port: int = 587,
        smtp_user: str = "",
        smtp_password: str = "",
        from_name: str = "ExpoCRM",
        signature: str = "",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_name = from_name
        self.signature = signature

    @classmethod
    def from_settings(cls, settings) -> "EmailSender":
        """
        Sender for the stored SMTP settings, falling back to the environment
        for every field left empty.
        """
        return cls(
            smtp_host=settings.smtp_host or Config.SMTP_HOST,
            smtp_port=int(settings.smtp_port or Config.SMTP_PORT),
            smtp_user=settings.smtp_user or Config.SMTP_USER,
            smtp_password=settings.smtp_password or Config.SMTP_PASSWORD,
            from_name=Config.SMTP_FROM_NAME,
            signature=settings.email_signature or "",
        )

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user)

    def build_message(self, recipient: dict, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.from_name, self.smtp_user))
        msg["To"] = formataddr((recipient.get("name") or "", recipient["email"]))
        msg["Subject"] = subject

        if self.signature:
            body = f"{body}\n\n{self.signature}"
        msg.attach(MIMEText(body, "plain", "utf-8"))
        return msg

    async def send(self, recipient: dict, subject: str, body: str) -> SendResult:
        """
        Send one email.

        recipient must contain 'email'. Optional: 'name'.
        """
        if not recipient.get("email"):
            return SendResult(success=False, error="Contact has no email address")

        if not self.configured:
            return SendResult(success=False, error="SMTP not configured")

        try:
            await aiosmtplib.send(
                self.build_message(recipient, subject, body),
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                use_tls=False,
                start_tls=True,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Email send error: {e}")
            return SendResult(success=False, error=str(e))

        logger.info(f"Email sent to {recipient['email']}")
        return SendResult(success=True)
