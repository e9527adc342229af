"""Mail relay models for the contact relay API.

This module contains the Pydantic models exchanged between the contact
endpoint and the mail relay, plus the immutable configuration records the
relay is constructed with.
"""

from typing import Optional
from typing_extensions import Annotated
from pydantic import BaseModel, Field, ConfigDict, field_validator


class SMTPConfig(BaseModel):
    """SMTP transport configuration, built once at startup.

    Attributes:
        host: SMTP server host
        port: SMTP server port
        secure: Connect with implicit TLS instead of upgrading with STARTTLS
        user: SMTP username, authentication is skipped when unset
        password: SMTP password
        verify_certificates: Verify the provider's certificate and hostname
        timeout: Connection and socket timeout in seconds, None for no timeout
    """
    host: Annotated[str, Field(..., description="SMTP server host")]
    port: Annotated[int, Field(587, description="SMTP server port")]
    secure: Annotated[bool, Field(False, description="Use implicit TLS")]
    user: Annotated[Optional[str], Field(None, description="SMTP username")]
    password: Annotated[Optional[str], Field(None, description="SMTP password")]
    verify_certificates: Annotated[bool, Field(True, description="Verify provider certificates")]
    timeout: Annotated[Optional[float], Field(None, gt=0, description="Socket timeout in seconds")]

    model_config = ConfigDict(frozen=True)


class RelayPolicy(BaseModel):
    """How an inquiry is turned into an outbound message.

    Attributes:
        mailbox: Operator mailbox that both sends and receives relayed inquiries
        from_display_name: Wrap the sender as "<inquirer name>" <mailbox>
        subject_template: Subject line template with a {service} placeholder
        default_subject_service: Service label used in the subject when none was submitted
    """
    mailbox: str
    from_display_name: bool = False
    subject_template: str = "Website Inquiry - {service}"
    default_subject_service: str = "General"

    model_config = ConfigDict(frozen=True)

    @field_validator("subject_template")
    @classmethod
    def check_subject_template(cls, value: str) -> str:
        # {service} is the only placeholder filled in per request
        try:
            value.format(service="General")
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise ValueError(f"Invalid subject template {value!r}: {e!r}")
        return value


class OutboundEmail(BaseModel):
    """A fully formatted message ready for the relay."""
    sender: str
    reply_to: str
    recipient: str
    subject: str
    html: str

    model_config = ConfigDict(frozen=True)


class RelayResult(BaseModel):
    """Outcome of a successful relay.

    Attributes:
        message_id: Opaque delivery identifier used for correlation and logging
    """
    message_id: str
