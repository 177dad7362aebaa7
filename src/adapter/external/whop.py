"""Whop webhook verification.

Whop signs webhooks with the Standard Webhooks scheme:
- ``webhook-id``, ``webhook-timestamp`` and ``webhook-signature`` headers
- signature = base64(HMAC-SHA256(secret, "{id}.{timestamp}.{body}"))
- ``webhook-signature`` holds space-separated ``v1,<signature>`` entries

Verification fails closed: a missing secret rejects every request.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time

from domain.model.errors import ValidationError, WebhookVerificationError
from domain.model.webhook import WebhookEvent

logger = logging.getLogger(__name__)

WHOP_WEBHOOK_SECRET = os.getenv('WHOP_WEBHOOK_SECRET', '')

# Replay window for webhook-timestamp (seconds, either direction)
TIMESTAMP_TOLERANCE_SECONDS = 300


def sign_payload(secret: str, webhook_id: str, timestamp: str, body: bytes) -> str:
    """Compute the ``v1`` signature for a payload."""
    signed_content = f"{webhook_id}.{timestamp}.".encode('utf-8') + body
    digest = hmac.new(secret.encode('utf-8'), signed_content, hashlib.sha256).digest()
    return base64.b64encode(digest).decode('utf-8')


class WhopWebhookVerifier:
    """Verifies and parses inbound Whop webhooks."""

    def __init__(self, secret: str | None = None, tolerance_seconds: int = TIMESTAMP_TOLERANCE_SECONDS):
        self.secret = WHOP_WEBHOOK_SECRET if secret is None else secret
        self.tolerance_seconds = tolerance_seconds

    def verify(self, body: bytes, headers: dict[str, str]) -> str:
        """Check the signature headers. Return the webhook id or raise WebhookVerificationError."""
        if not self.secret:
            logger.warning("WHOP_WEBHOOK_SECRET not set, rejecting webhook")
            raise WebhookVerificationError("Webhook secret not configured")

        headers = {k.lower(): v for k, v in headers.items()}
        webhook_id = headers.get('webhook-id')
        timestamp = headers.get('webhook-timestamp')
        signature_header = headers.get('webhook-signature')
        if not webhook_id or not timestamp or not signature_header:
            raise WebhookVerificationError("Missing signature headers")

        try:
            sent_at = int(timestamp)
        except ValueError:
            raise WebhookVerificationError("Invalid timestamp header")

        if abs(time.time() - sent_at) > self.tolerance_seconds:
            raise WebhookVerificationError("Timestamp outside tolerance")

        expected = sign_payload(self.secret, webhook_id, timestamp, body)
        for entry in signature_header.split():
            version, _, signature = entry.partition(',')
            if version == 'v1' and hmac.compare_digest(expected, signature):
                return webhook_id

        raise WebhookVerificationError("No matching signature")

    def unwrap(self, body: bytes, headers: dict[str, str]) -> WebhookEvent:
        webhook_id = self.verify(body, headers)

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError("Webhook body is not valid JSON")

        if not isinstance(payload, dict):
            raise ValidationError("Webhook body must be a JSON object")

        event_type = payload.get('type')
        if not isinstance(event_type, str) or not event_type:
            raise ValidationError("Webhook body is missing 'type'")

        data = payload.get('data')
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValidationError("Webhook 'data' must be an object")

        return WebhookEvent(type=event_type, data=data, webhook_id=webhook_id)
