"""Email delivery over SMTP."""

import asyncio
import re
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable

from vaxremind.config import EmailSettings
from vaxremind.errors import FailureCause
from vaxremind.utils import logger

from .base import Channel, DeliveryChannel, DeliveryResult, MessageBody

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmailChannel(DeliveryChannel):
    """SMTP email channel.

    smtplib is blocking, so each send runs in a worker thread to keep the
    event loop free for the other channel and other children.
    """

    channel = Channel.EMAIL

    def __init__(
        self,
        settings: EmailSettings,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ):
        """Initialize email channel.

        Args:
            settings: SMTP settings
            smtp_factory: SMTP connection class (replaced in tests)
        """
        self.settings = settings
        self._smtp_factory = smtp_factory

    @property
    def configured(self) -> bool:
        return self.settings.configured

    def is_valid_destination(self, destination: str) -> bool:
        return bool(EMAIL_PATTERN.match(destination))

    def build_message(self, destination: str, body: MessageBody) -> EmailMessage:
        """Build a multipart/alternative message (plain text + HTML)."""
        msg = EmailMessage()
        msg["Subject"] = body.subject or ""
        msg["From"] = self.settings.sender
        msg["To"] = destination
        msg.set_content(body.text)
        if body.html:
            msg.add_alternative(body.html, subtype="html")
        return msg

    def _send_blocking(self, msg: EmailMessage) -> None:
        with self._smtp_factory(
            self.settings.host, self.settings.port, timeout=self.settings.timeout
        ) as smtp:
            if self.settings.use_tls:
                smtp.starttls(context=ssl.create_default_context())
            smtp.login(self.settings.user, self.settings.password)
            smtp.send_message(msg)

    async def _deliver(self, destination: str, body: MessageBody) -> DeliveryResult:
        try:
            msg = self.build_message(destination, body)
        except ValueError as e:
            # Header values with line breaks are rejected by the email package
            return DeliveryResult.failed(FailureCause.PROVIDER_ERROR, f"Invalid message: {e}")

        try:
            await asyncio.to_thread(self._send_blocking, msg)
        except smtplib.SMTPRecipientsRefused as e:
            logger.warning(f"SMTP server refused recipient: {e.recipients}")
            return DeliveryResult.failed(FailureCause.INVALID_DESTINATION, str(e.recipients))
        except (TimeoutError, smtplib.SMTPServerDisconnected) as e:
            logger.warning(f"SMTP delivery timed out or disconnected: {type(e).__name__}: {e}")
            cause = FailureCause.TIMEOUT if isinstance(e, TimeoutError) else FailureCause.PROVIDER_ERROR
            return DeliveryResult.failed(cause, f"{type(e).__name__}: {e}")
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP delivery failed: {type(e).__name__}: {e}")
            return DeliveryResult.failed(FailureCause.PROVIDER_ERROR, f"{type(e).__name__}: {e}")

        return DeliveryResult.sent()
