"""Resend adapter.

Implements MailerPort (transactional email) and MailingListPort (contacts)
against the Resend REST API.

API Documentation: https://resend.com/docs/api-reference
"""

import logging
import os
from typing import Any

import httpx

from domain.model.delivery import DeliveryResult

logger = logging.getLogger(__name__)

RESEND_API_BASE_URL = "https://api.resend.com"
API_TIMEOUT_SECONDS = 10.0

RESEND_API_KEY = os.getenv('RESEND_API_KEY', '')
RESEND_AUDIENCE_ID = os.getenv('RESEND_AUDIENCE_ID', '')
FROM_EMAIL = os.getenv('RESEND_FROM_EMAIL', "Tom's Trading Room <onboarding@resend.dev>")


class ResendError(Exception):
    """Error response returned by the Resend API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Resend API error {status_code}: {message}")


class _ResendClient:
    """Shared request handling for Resend endpoints."""

    def __init__(self, api_key: str | None = None):
        self.api_key = RESEND_API_KEY if api_key is None else api_key

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        async with httpx.AsyncClient(base_url=RESEND_API_BASE_URL, timeout=API_TIMEOUT_SECONDS) as client:
            response = await client.post(path, json=payload, headers=headers)

        if response.is_error:
            raise ResendError(response.status_code, _error_message(response))
        data = response.json()
        return data if isinstance(data, dict) else {}


class ResendMailer(_ResendClient):
    """Sends transactional emails through Resend."""

    def __init__(self, api_key: str | None = None, from_email: str | None = None):
        super().__init__(api_key)
        self.from_email = FROM_EMAIL if from_email is None else from_email

    async def send_html(self, to: str, subject: str, html: str) -> DeliveryResult:
        return await self._send(to, {"subject": subject, "html": html}, subject)

    async def send_template(self, to: str, template_id: str, variables: dict[str, str]) -> DeliveryResult:
        if not template_id:
            logger.error("Missing email template id", extra={"to": to})
            return DeliveryResult.failed("Missing template ID")
        return await self._send(to, {"template": {"id": template_id, "variables": variables}}, template_id)

    async def _send(self, to: str, content: dict[str, Any], label: str) -> DeliveryResult:
        if not to or not self.api_key:
            logger.error(
                "Missing recipient email or Resend API key",
                extra={"to": to, "hasKey": bool(self.api_key)},
            )
            return DeliveryResult.failed("Missing email or API key")

        logger.info("Sending email", extra={"to": to, "label": label})
        try:
            data = await self._post("/emails", {"from": self.from_email, "to": to, **content})
        except ResendError as e:
            logger.error("Failed to send email", extra={"to": to, "label": label, "error": e.message})
            return DeliveryResult.failed(e.message)
        except httpx.HTTPError as e:
            logger.error(
                "Error sending email",
                extra={"to": to, "label": label, "error_type": type(e).__name__, "error": str(e)},
            )
            return DeliveryResult.failed(str(e))

        logger.info("Email sent", extra={"to": to, "label": label, "emailId": data.get("id")})
        return DeliveryResult(success=True, id=data.get("id"))


class ResendMailingList(_ResendClient):
    """Creates Resend contacts, inside the configured audience when one is set."""

    def __init__(self, api_key: str | None = None, audience_id: str | None = None):
        super().__init__(api_key)
        self.audience_id = RESEND_AUDIENCE_ID if audience_id is None else audience_id

    async def add_contact(
        self,
        email: str,
        first_name: str = '',
        last_name: str = '',
        source: str | None = None,
    ) -> DeliveryResult:
        if not email:
            logger.warning("Missing email, cannot add contact")
            return DeliveryResult.failed("Missing email")

        contact: dict[str, Any] = {"email": email, "unsubscribed": False}
        if first_name:
            contact["first_name"] = first_name
        if last_name:
            contact["last_name"] = last_name

        path = f"/audiences/{self.audience_id}/contacts" if self.audience_id else "/contacts"
        try:
            data = await self._post(path, contact)
        except ResendError as e:
            if "already exists" in e.message.lower():
                logger.info("Contact already exists", extra={"email": email, "source": source})
                return DeliveryResult(success=True, exists=True)
            logger.error("Failed to add contact", extra={"email": email, "source": source, "error": e.message})
            return DeliveryResult.failed(e.message)
        except httpx.HTTPError as e:
            logger.error(
                "Error adding contact",
                extra={"email": email, "source": source, "error_type": type(e).__name__, "error": str(e)},
            )
            return DeliveryResult.failed(str(e))

        logger.info("Added contact to mailing list", extra={"email": email, "source": source})
        return DeliveryResult(success=True, id=data.get("id"))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]
