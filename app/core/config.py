"""Configuration settings for the contact relay API.

This module manages environment variables and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

from app.models.relay import SMTPConfig, RelayPolicy

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_timeout(name: str) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return None
    return float(value)


class Settings:
    """Application settings.

    Attributes:
        PROJECT_NAME: Name of the project
        DEBUG: Debug mode flag
        LOG_LEVEL: Root log level
        PORT: Port uvicorn listens on
        FRONTEND_URL: Allowed cross-origin caller(s), comma separated
        SMTP_USER: SMTP username, also the outbound mailbox
        smtp_config: Immutable SMTP transport configuration
        relay_policy: Immutable message formatting policy
    """
    def __init__(self):
        self.PROJECT_NAME = "Contact Relay API"
        self.DEBUG = _env_flag("DEBUG", "False")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.PORT = int(os.getenv("PORT", 5000))

        # CORS Settings
        self.FRONTEND_URL = os.getenv("FRONTEND_URL") or "*"

        # SMTP Settings
        self.SMTP_HOST = os.getenv("SMTP_HOST", "smtp.zoho.in")
        self.SMTP_PORT = int(os.getenv("SMTP_PORT") or 587)
        self.SMTP_SECURE = _env_flag("SMTP_SECURE", "false")
        self.SMTP_USER = os.getenv("SMTP_USER")
        self.SMTP_PASS = os.getenv("SMTP_PASS")
        self.SMTP_VERIFY_CERTIFICATES = _env_flag("SMTP_VERIFY_CERTIFICATES", "true")
        self.SMTP_TIMEOUT = _env_timeout("SMTP_TIMEOUT")
        self.SMTP_VERIFY_ON_STARTUP = _env_flag("SMTP_VERIFY_ON_STARTUP", "true")

        # Email Settings
        self.EMAIL_FROM_DISPLAY_NAME = _env_flag("EMAIL_FROM_DISPLAY_NAME", "false")
        self.EMAIL_SUBJECT_TEMPLATE = os.getenv(
            "EMAIL_SUBJECT_TEMPLATE", "Website Inquiry - {service}"
        )

        # Slack Settings
        self.SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
        self.SLACK_ALERT_CHANNEL = os.getenv("SLACK_ALERT_CHANNEL", "#contact-relay-alerts")

        self.smtp_config = SMTPConfig(
            host=self.SMTP_HOST,
            port=self.SMTP_PORT,
            secure=self.SMTP_SECURE,
            user=self.SMTP_USER,
            password=self.SMTP_PASS,
            verify_certificates=self.SMTP_VERIFY_CERTIFICATES,
            timeout=self.SMTP_TIMEOUT,
        )
        self.relay_policy = RelayPolicy(
            mailbox=self.SMTP_USER or "",
            from_display_name=self.EMAIL_FROM_DISPLAY_NAME,
            subject_template=self.EMAIL_SUBJECT_TEMPLATE,
        )

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.FRONTEND_URL.split(",") if o.strip()]


settings = Settings()
