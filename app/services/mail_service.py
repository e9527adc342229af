"""
MailService Module

This module relays formatted messages to the operator mailbox through an SMTP provider.
"""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from starlette.concurrency import run_in_threadpool

from app.models.relay import SMTPConfig, OutboundEmail, RelayResult
from app.core.config import settings

import logging

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Custom exception for failed relay attempts."""

    pass


class MailRelay:
    """Interface the contact endpoint relays messages through."""

    async def send(self, email: OutboundEmail) -> RelayResult:
        raise NotImplementedError

    async def verify(self) -> None:
        raise NotImplementedError


class SMTPMailRelay(MailRelay):
    """Mail relay backed by an SMTP provider."""

    def __init__(self, config: SMTPConfig):
        self.config = config

    def create_ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.config.verify_certificates:
            # some providers ship certificates that fail verification
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def create_email_message(self, email: OutboundEmail, message_id: str) -> EmailMessage:
        """
        Creates an HTML email message.

        Args:
            email (OutboundEmail): The formatted message to send.
            message_id (str): Value for the Message-ID header.

        Returns:
            EmailMessage: The constructed email message ready to be sent.
        """
        message = EmailMessage()
        message["Subject"] = email.subject
        message["From"] = email.sender
        message["To"] = email.recipient
        message["Reply-To"] = email.reply_to
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = message_id
        message.set_content(email.html, subtype="html")
        return message

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated connection to the SMTP server."""
        context = self.create_ssl_context()
        kwargs = {}
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout

        if self.config.secure:
            server = smtplib.SMTP_SSL(
                self.config.host, self.config.port, context=context, **kwargs
            )
        else:
            server = smtplib.SMTP(self.config.host, self.config.port, **kwargs)

        try:
            server.ehlo()
            if not self.config.secure and server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
            if self.config.user:
                server.login(self.config.user, self.config.password or "")
        except BaseException:
            server.close()
            raise
        return server

    def _close(self, server: smtplib.SMTP) -> None:
        """End the session. The outcome of the transaction is already known here."""
        try:
            server.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP session did not close cleanly: {str(e) or e.__class__.__name__}")
        finally:
            server.close()

    def _send_sync(self, email: OutboundEmail) -> RelayResult:
        domain = email.recipient.rpartition("@")[2] or None
        message_id = make_msgid(domain=domain)
        msg = self.create_email_message(email, message_id)

        try:
            logger.info(f"Connecting to SMTP server {self.config.host}:{self.config.port}")
            server = self._connect()
            try:
                server.send_message(msg)
            finally:
                self._close(server)
        except smtplib.SMTPRecipientsRefused as e:
            raise RelayError(f"Recipient rejected: {', '.join(e.recipients)}") from e
        except smtplib.SMTPResponseException as e:
            error = e.smtp_error.decode(errors="replace") if isinstance(e.smtp_error, bytes) else str(e.smtp_error)
            raise RelayError(f"{e.smtp_code} {error}") from e
        except (smtplib.SMTPException, OSError) as e:
            raise RelayError(str(e) or e.__class__.__name__) from e

        return RelayResult(message_id=message_id)

    def _verify_sync(self) -> None:
        try:
            self._close(self._connect())
        except (smtplib.SMTPException, OSError) as e:
            raise RelayError(str(e) or e.__class__.__name__) from e

    async def send(self, email: OutboundEmail) -> RelayResult:
        """
        Send a formatted message through the SMTP provider.

        The SMTP transaction blocks, so it runs in the threadpool.

        Args:
            email: The formatted message to send

        Returns:
            RelayResult carrying the generated Message-ID

        Raises:
            RelayError: If the connection, authentication or delivery fails
        """
        result = await run_in_threadpool(self._send_sync, email)
        logger.info(f"Email relayed to {email.recipient}: {result.message_id}")
        return result

    async def verify(self) -> None:
        """Check that the provider accepts a connection and our credentials."""
        await run_in_threadpool(self._verify_sync)


mail_relay = SMTPMailRelay(settings.smtp_config)
