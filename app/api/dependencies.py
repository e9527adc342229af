from app.core.config import settings
from app.models.relay import RelayPolicy
from app.services.mail_service import MailRelay, mail_relay


def get_mail_relay() -> MailRelay:
    """Relay used by the contact endpoint, overridden in tests."""
    return mail_relay


def get_relay_policy() -> RelayPolicy:
    return settings.relay_policy
