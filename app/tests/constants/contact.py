from enum import Enum


class ContactTestConstants(Enum):
    MOCK_MAILBOX = "inbox@relay-test.com"
    MOCK_MESSAGE_ID = "<171234567890.4242.1@relay-test.com>"
    MOCK_RELAY_ERROR = "535 Authentication Failed"
    MOCK_INQUIRY = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "555-1234",
        "service": "Consulting",
        "message": "Please contact me.",
    }
    MISSING_FIELDS_ERROR = "Missing required fields: name, email, or message"
