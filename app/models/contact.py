"""Contact form models for the contact relay API.

This module contains the Pydantic models for contact form functionality.
"""

from typing import Optional
from typing_extensions import Annotated
from pydantic import BaseModel, Field, ConfigDict

MISSING_FIELDS_ERROR = "Missing required fields: name, email, or message"


class InquiryValidationError(Exception):
    """Raised when a contact inquiry is missing a required field."""

    pass


class ContactInquiry(BaseModel):
    """Request model for contact form submissions.

    Presence of the required fields is checked by `ensure_required_fields`
    rather than by the schema, so that missing and empty values are rejected
    with the same error.

    Attributes:
        name: Full name of the person getting in touch
        email: Address replies should go to
        phone: Optional phone number
        service: Optional service the inquiry is about
        message: The message from the client
    """
    name: Annotated[Optional[str], Field(None, description="Full name of the person getting in touch")]
    email: Annotated[Optional[str], Field(None, description="Address replies should go to")]
    phone: Annotated[Optional[str], Field(None, description="Optional phone number")]
    service: Annotated[Optional[str], Field(None, description="Optional service the inquiry is about")]
    message: Annotated[Optional[str], Field(None, description="The message from the client")]

    model_config = ConfigDict(populate_by_name=True)

    def ensure_required_fields(self) -> None:
        if not (self.name and self.email and self.message):
            raise InquiryValidationError(MISSING_FIELDS_ERROR)


class ContactFormResponse(BaseModel):
    """Response model for a relayed contact form.

    Attributes:
        success: Whether the inquiry was relayed
        message: Confirmation message for the user
        messageId: Delivery identifier returned by the relay
    """
    success: bool = Field(..., description="Whether the inquiry was relayed")
    message: str = Field(..., description="Confirmation message for the user")
    messageId: Optional[str] = Field(None, description="Delivery identifier returned by the relay")


class ErrorResponse(BaseModel):
    """Failure payload returned for rejected or failed submissions."""
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
    timestamp: int
