"""Transactional email service: composes each lifecycle email and hands it to the mailer."""

import logging
import os
from urllib.parse import quote

from domain.model.delivery import DeliveryResult
from port.mailer import MailerPort
from utils.email_templates import (
    build_membership_expired_email,
    build_refund_email,
    build_welcome_email,
)

logger = logging.getLogger(__name__)

APP_URL = os.getenv('APP_URL', 'http://localhost:8000')
CANCELLATION_TEMPLATE_ID = os.getenv('RESEND_CANCELLATION_TEMPLATE_ID', '')
DISCORD_INVITE_URL = os.getenv('DISCORD_INVITE_URL', 'https://discord.gg/your-server')
WHOP_REACTIVATE_URL = os.getenv(
    'WHOP_REACTIVATE_URL', 'https://whop.com/api-app-w-ra-uj15-o8-i8n-l2-premium-access/'
)

WELCOME_SUBJECT = "\U0001F389 Welcome to Tom's Trading Room!"
REFUND_SUBJECT = "\U0001F4B8 Your Refund Has Been Processed"
EXPIRED_SUBJECT = "⏰ Your Membership Has Expired - Reactivate Now"


def build_unsubscribe_url(email: str, app_url: str | None = None) -> str:
    app_url = APP_URL if app_url is None else app_url
    return f"{app_url.rstrip('/')}/unsubscribe?email={quote(email, safe='')}"


async def send_welcome_email(mailer: MailerPort, to: str, name: str) -> DeliveryResult:
    html = build_welcome_email(name, DISCORD_INVITE_URL)
    return await mailer.send_html(to, WELCOME_SUBJECT, html)


async def send_cancellation_email(
    mailer: MailerPort,
    to: str,
    name: str,
    template_id: str | None = None,
) -> DeliveryResult:
    """Send the provider-stored cancellation template with an unsubscribe link."""
    template_id = CANCELLATION_TEMPLATE_ID if template_id is None else template_id
    if not template_id:
        logger.error("Missing RESEND_CANCELLATION_TEMPLATE_ID", extra={"to": to})
        return DeliveryResult.failed("Missing template ID")

    variables = {
        "whopName": name or "there",
        "UNSUBSCRIBE_URL": build_unsubscribe_url(to),
    }
    return await mailer.send_template(to, template_id, variables)


async def send_refund_email(mailer: MailerPort, to: str, name: str, amount: str) -> DeliveryResult:
    html = build_refund_email(name, amount)
    return await mailer.send_html(to, REFUND_SUBJECT, html)


async def send_membership_expired_email(mailer: MailerPort, to: str, name: str) -> DeliveryResult:
    html = build_membership_expired_email(name, WHOP_REACTIVATE_URL)
    return await mailer.send_html(to, EXPIRED_SUBJECT, html)
