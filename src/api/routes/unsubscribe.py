"""Email unsubscribe endpoint (linked from email footers)."""

import logging
import os
from datetime import datetime, timezone
from html import escape
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse

from api.dependencies import get_member_repo
from port.member_repository import MemberRepository
from services.subscription_service import UnsubscribeOutcome, unsubscribe

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscription"])

WHOP_CHECKOUT_URL = os.getenv('WHOP_CHECKOUT_URL', 'https://whop.com/')

_PAGE_STYLE = """
            body { font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px; text-align: center; }
            h1 { color: #10b981; }
            h1.info { color: #3b82f6; }
            h1.error { color: #ef4444; }
            p { line-height: 1.6; color: #333; }
            .feedback { background: #f3f4f6; padding: 20px; border-radius: 8px; margin-top: 30px; }
            .button { display: inline-block; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin-top: 20px; }"""


@router.get("/unsubscribe", response_class=HTMLResponse)
async def unsubscribe_endpoint(
    email: Optional[str] = Query(None),
    repo: MemberRepository = Depends(get_member_repo),
):
    """Unsubscribe an email address and render a confirmation page."""
    if not email:
        return _render_page(
            "Unsubscribe", "Invalid Request", "<p>No email address provided.</p>",
            status.HTTP_400_BAD_REQUEST, heading_class="error",
        )

    logger.info("Unsubscribe request", extra={"email": email})
    outcome = unsubscribe(repo, email)

    if outcome == UnsubscribeOutcome.NOT_FOUND:
        return _render_page(
            "Unsubscribe", "User Not Found",
            "<p>We couldn't find this email address in our system.</p>",
            status.HTTP_404_NOT_FOUND, heading_class="error",
        )

    if outcome == UnsubscribeOutcome.ALREADY_UNSUBSCRIBED:
        return _render_page(
            "Already Unsubscribed", "Already Unsubscribed",
            f"""
            <p>You're already unsubscribed from our emails.</p>
            <p>If you'd like to rejoin, visit:</p>
            {_rejoin_button()}""",
            status.HTTP_200_OK, heading_class="info",
        )

    if outcome == UnsubscribeOutcome.FAILED:
        return _render_page(
            "Error", "Error",
            "<p>Something went wrong. Please try again later or contact support.</p>",
            status.HTTP_500_INTERNAL_SERVER_ERROR, heading_class="error",
        )

    today = datetime.now(timezone.utc).strftime('%Y-%m-%d')
    return _render_page(
        "Unsubscribed", "&#10003; You've Been Unsubscribed",
        f"""
            <p>You won't receive any more emails from Tom's Trading Room.</p>
            <div class="feedback">
              <p><strong>We're sorry to see you go!</strong></p>
              <p>If you change your mind, you can always rejoin our community:</p>
              {_rejoin_button()}
            </div>
            <p style="margin-top: 30px; font-size: 14px; color: #666;">
              Unsubscribed: {escape(email)}<br>
              Date: {today}
            </p>""",
        status.HTTP_200_OK,
    )


def _rejoin_button() -> str:
    return f'<a href="{escape(WHOP_CHECKOUT_URL, quote=True)}" class="button">Rejoin Tom\'s Trading Room</a>'


def _render_page(title: str, heading: str, body: str, status_code: int, heading_class: str = "") -> HTMLResponse:
    class_attr = f' class="{heading_class}"' if heading_class else ""
    html = f"""
    <!DOCTYPE html>
    <html>
      <head>
        <title>{title} - Tom's Trading Room</title>
        <style>{_PAGE_STYLE}
        </style>
      </head>
      <body>
        <h1{class_attr}>{heading}</h1>
        {body}
      </body>
    </html>
    """
    return HTMLResponse(content=html, status_code=status_code)
