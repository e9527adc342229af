"""Contact form endpoints for the contact relay API.

This module contains the FastAPI route that relays website contact form
submissions to the operator mailbox.
"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_mail_relay, get_relay_policy
from app.models.contact import (
    ContactInquiry,
    ContactFormResponse,
    ErrorResponse,
    InquiryValidationError,
)
from app.models.relay import RelayPolicy
from app.services.inquiry_service import build_inquiry_email
from app.services.mail_service import MailRelay
from app.utils.slack import alerts_enabled, send_relay_failure_alert

logger = logging.getLogger(__name__)

router = APIRouter()

RELAY_FALLBACK_ERROR = "Failed to send email"


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error).model_dump(),
    )


@router.post(
    "/send-email",
    response_model=ContactFormResponse,
    status_code=status.HTTP_200_OK,
    summary="Relay contact form",
    description="Relay a website contact form submission to the operator mailbox. No authentication required.",
    responses={
        400: {"model": ErrorResponse, "description": "Missing required fields or malformed body"},
        500: {"model": ErrorResponse, "description": "The mail relay failed"},
    },
)
async def send_email(
    inquiry: ContactInquiry,
    background_tasks: BackgroundTasks,
    relay: MailRelay = Depends(get_mail_relay),
    policy: RelayPolicy = Depends(get_relay_policy),
):
    """
    Relay a contact form submission as an email.

    This endpoint:
    - Rejects submissions missing name, email or message without contacting the relay
    - Sends one HTML message to the operator mailbox with Reply-To set to the inquirer
    - Returns the relay's delivery identifier

    Submissions are not deduplicated; resubmitting sends another email.

    Args:
        inquiry: Contact form data
        background_tasks: Used to alert operators after a relay failure
        relay: Mail relay the message is handed to
        policy: Sender, subject and recipient policy

    Returns:
        ContactFormResponse on success, otherwise an ErrorResponse with status 400 or 500
    """
    try:
        inquiry.ensure_required_fields()
    except InquiryValidationError as e:
        logger.info(f"Rejected contact form submission: {str(e)}")
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))

    try:
        email = await build_inquiry_email(inquiry, policy)
        logger.info(f"Relaying contact form submission from {email.reply_to}")
        result = await relay.send(email)
    except Exception as e:
        logger.error(f"Email sending error: {str(e)}")
        if alerts_enabled():
            background_tasks.add_task(send_relay_failure_alert, inquiry.email, str(e))
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or RELAY_FALLBACK_ERROR
        )

    logger.info(f"Email sent: {result.message_id}")

    return ContactFormResponse(
        success=True,
        message="Email sent successfully",
        messageId=result.message_id,
    )
