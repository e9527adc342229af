import os

# Configure a deterministic environment before the app reads its settings
os.environ["SMTP_USER"] = "inbox@relay-test.com"
os.environ["SMTP_PASS"] = "app-password"
os.environ["SMTP_VERIFY_ON_STARTUP"] = "false"
for name in ("SLACK_BOT_TOKEN", "EMAIL_FROM_DISPLAY_NAME", "EMAIL_SUBJECT_TEMPLATE", "FRONTEND_URL"):
    os.environ.pop(name, None)

import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.api.dependencies import get_mail_relay
from app.tests.fixtures.contact import *


@pytest.fixture(scope="function")
def client(recording_relay):
    """Fixture providing a TestClient whose mail relay is the recording stand-in."""
    app.dependency_overrides[get_mail_relay] = lambda: recording_relay

    with TestClient(app) as c:
        yield c

    # Clean up overrides after the test finished
    app.dependency_overrides.clear()
