import pytest
import smtplib
import ssl

from app.models.relay import SMTPConfig, OutboundEmail
from app.services.mail_service import SMTPMailRelay, RelayError
from app.tests.constants.contact import ContactTestConstants

MAILBOX = ContactTestConstants.MOCK_MAILBOX.value


def make_email(**overrides) -> OutboundEmail:
    values = {
        "sender": MAILBOX,
        "reply_to": "jane@example.com",
        "recipient": MAILBOX,
        "subject": "Website Inquiry - Consulting",
        "html": "<p>Please contact me.</p>",
    }
    values.update(overrides)
    return OutboundEmail(**values)


def make_config(**overrides) -> SMTPConfig:
    values = {
        "host": "smtp.relay-test.com",
        "port": 587,
        "user": MAILBOX,
        "password": "app-password",
    }
    values.update(overrides)
    return SMTPConfig(**values)


class TestEmailMessage:
    def test_headers(self):
        relay = SMTPMailRelay(make_config())

        message = relay.create_email_message(make_email(), "<id@relay-test.com>")

        assert message["From"] == MAILBOX
        assert message["To"] == MAILBOX
        assert message["Reply-To"] == "jane@example.com"
        assert message["Subject"] == "Website Inquiry - Consulting"
        assert message["Message-ID"] == "<id@relay-test.com>"
        assert message.get_content_type() == "text/html"
        assert "Please contact me." in message.get_content()

    def test_ssl_context_verifies_by_default(self):
        context = SMTPMailRelay(make_config()).create_ssl_context()

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

    def test_ssl_context_without_verification(self):
        context = SMTPMailRelay(make_config(verify_certificates=False)).create_ssl_context()

        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False


@pytest.mark.asyncio
class TestSMTPMailRelay:
    async def test_send_with_starttls(self, mock_smtp):
        relay = SMTPMailRelay(make_config())

        result = await relay.send(make_email())

        mock_smtp.assert_called_once_with("smtp.relay-test.com", 587)
        server = mock_smtp.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with(MAILBOX, "app-password")
        server.send_message.assert_called_once()
        server.quit.assert_called_once()

        sent = server.send_message.call_args.args[0]
        assert sent["Message-ID"] == result.message_id
        assert result.message_id.endswith("@relay-test.com>")
        mock_smtp.return_value.close.assert_called_once()

    async def test_send_succeeds_when_server_drops_on_quit(self, mock_smtp):
        """A message the server accepted is reported as sent even if QUIT fails."""
        server = mock_smtp.return_value
        server.quit.side_effect = smtplib.SMTPServerDisconnected(
            "Connection unexpectedly closed"
        )

        result = await SMTPMailRelay(make_config()).send(make_email())

        server.send_message.assert_called_once()
        server.close.assert_called_once()
        assert result.message_id.endswith("@relay-test.com>")

    async def test_send_failure_still_closes_connection(self, mock_smtp):
        server = mock_smtp.return_value
        server.send_message.side_effect = smtplib.SMTPDataError(554, b"Message rejected")
        server.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

        with pytest.raises(RelayError, match="554 Message rejected"):
            await SMTPMailRelay(make_config()).send(make_email())

        server.close.assert_called_once()

    async def test_send_skips_starttls_when_not_offered(self, mock_smtp):
        mock_smtp.return_value.has_extn.return_value = False

        await SMTPMailRelay(make_config()).send(make_email())

        mock_smtp.return_value.starttls.assert_not_called()

    async def test_send_with_implicit_tls_and_timeout(self, mock_smtp_ssl, mock_smtp):
        relay = SMTPMailRelay(make_config(port=465, secure=True, timeout=10))

        await relay.send(make_email())

        mock_smtp.assert_not_called()
        args, kwargs = mock_smtp_ssl.call_args
        assert args == ("smtp.relay-test.com", 465)
        assert kwargs["timeout"] == 10
        assert isinstance(kwargs["context"], ssl.SSLContext)
        mock_smtp_ssl.return_value.starttls.assert_not_called()

    async def test_send_without_credentials_skips_login(self, mock_smtp):
        await SMTPMailRelay(make_config(user=None, password=None)).send(make_email())

        mock_smtp.return_value.login.assert_not_called()

    async def test_send_authentication_failure(self, mock_smtp):
        mock_smtp.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
            535, b"Authentication Failed"
        )

        with pytest.raises(RelayError, match="535 Authentication Failed"):
            await SMTPMailRelay(make_config()).send(make_email())

        mock_smtp.return_value.close.assert_called_once()
        mock_smtp.return_value.send_message.assert_not_called()

    async def test_send_connection_failure(self, mock_smtp):
        mock_smtp.side_effect = TimeoutError("timed out")

        with pytest.raises(RelayError, match="timed out"):
            await SMTPMailRelay(make_config(timeout=5)).send(make_email())

    async def test_send_recipient_refused(self, mock_smtp):
        mock_smtp.return_value.send_message.side_effect = smtplib.SMTPRecipientsRefused(
            {MAILBOX: (550, b"No such user")}
        )

        with pytest.raises(RelayError, match="Recipient rejected"):
            await SMTPMailRelay(make_config()).send(make_email())

        mock_smtp.return_value.quit.assert_called_once()

    async def test_verify(self, mock_smtp):
        await SMTPMailRelay(make_config()).verify()

        mock_smtp.return_value.login.assert_called_once()
        mock_smtp.return_value.send_message.assert_not_called()
        mock_smtp.return_value.quit.assert_called_once()

    async def test_verify_failure(self, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError("Connection refused")

        with pytest.raises(RelayError, match="Connection refused"):
            await SMTPMailRelay(make_config()).verify()
