"""
InquiryService Module

This module turns a validated contact inquiry into an outbound message, rendering
the HTML body with Jinja2.
"""

import os
import re
from email.utils import formataddr
from typing import Dict, Any, Optional
from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.models.contact import ContactInquiry
from app.models.relay import OutboundEmail, RelayPolicy

import logging

logger = logging.getLogger(__name__)

NOTIFICATION_TEMPLATE = "inquiry_notification.html"
PHONE_PLACEHOLDER = "Not provided"
SERVICE_PLACEHOLDER = "Not mentioned"

# Set up Jinja2 environment with auto-escaping, every interpolated field is user input
template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml']),
    enable_async=True
)

_LINE_BREAKS = re.compile(r"[\r\n]+")


def sanitize_header(value: Optional[str]) -> str:
    """Collapse line breaks so a submitted value cannot inject extra headers."""
    if not value:
        return ""
    return _LINE_BREAKS.sub(" ", value).strip()


async def render_template(template_name: str, context: Dict[str, Any]) -> str:
    """
    Asynchronously render a Jinja template with the given context.

    Args:
        template_name: The name of the template file to render
        context: Dictionary of variables to pass to the template

    Returns:
        The rendered template as a string
    """
    try:
        template = jinja_env.get_template(template_name)
        return await template.render_async(**context)
    except Exception as e:
        logger.error(f"Error rendering template {template_name}: {str(e)}")
        raise ValueError(f"Error rendering template: {str(e)}")


def build_subject(inquiry: ContactInquiry, policy: RelayPolicy) -> str:
    service = sanitize_header(inquiry.service) or policy.default_subject_service
    return sanitize_header(policy.subject_template.format(service=service))


def build_sender(inquiry: ContactInquiry, policy: RelayPolicy) -> str:
    # The inquirer's own address is never used as the sender
    if policy.from_display_name:
        return formataddr((sanitize_header(inquiry.name), policy.mailbox))
    return policy.mailbox


async def build_inquiry_email(inquiry: ContactInquiry, policy: RelayPolicy) -> OutboundEmail:
    """
    Format a validated inquiry as a message to the operator mailbox.

    Args:
        inquiry: Inquiry with name, email and message present
        policy: Sender, subject and recipient policy

    Returns:
        OutboundEmail addressed to the operator mailbox, replying to the inquirer
    """
    html = await render_template(
        NOTIFICATION_TEMPLATE,
        {
            "name": inquiry.name,
            "email": inquiry.email,
            "phone": inquiry.phone or PHONE_PLACEHOLDER,
            "service": inquiry.service or SERVICE_PLACEHOLDER,
            "message": inquiry.message,
        },
    )

    return OutboundEmail(
        sender=build_sender(inquiry, policy),
        reply_to=sanitize_header(inquiry.email),
        recipient=policy.mailbox,
        subject=build_subject(inquiry, policy),
        html=html,
    )
