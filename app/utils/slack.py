"""Operator alerts for failed relays, posted to Slack."""

from typing import Optional
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from app.core.config import settings

import logging

logger = logging.getLogger(__name__)

ALERT_TITLE = "Contact form relay failed"


def alerts_enabled() -> bool:
    return bool(settings.SLACK_BOT_TOKEN)


def format_relay_failure(reply_to: Optional[str], error: str) -> str:
    """Slack mrkdwn text describing a failed relay."""
    sender = reply_to or "unknown sender"
    return (
        f"*{ALERT_TITLE}*\n"
        f"Inquiry from `{sender}` was not delivered to {settings.SMTP_USER or 'the operator mailbox'}.\n"
        f"SMTP {settings.SMTP_HOST}:{settings.SMTP_PORT} said: {error or 'no error description'}\n"
        "The inquirer was told to resubmit."
    )


def send_relay_failure_alert(reply_to: Optional[str], error: str) -> None:
    """Post a relay failure to the alert channel.

    Runs as a background task after the response is sent, so failures here
    are logged and never reach the caller.
    """
    client = WebClient(token=settings.SLACK_BOT_TOKEN)
    try:
        client.chat_postMessage(
            channel=settings.SLACK_ALERT_CHANNEL,
            text=format_relay_failure(reply_to, error),
            mrkdwn=True,
        )
        logger.info(f"Relay failure alert posted to {settings.SLACK_ALERT_CHANNEL}")
    except SlackApiError as e:
        logger.error(f"Slack alert failed: {e.response['error']}")
    except Exception as e:
        logger.error(f"Error sending Slack alert: {str(e)}")
