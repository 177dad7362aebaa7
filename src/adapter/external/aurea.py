"""Aurea CRM analytics adapter.

Implements AnalyticsPort by posting batched tracking events to the Aurea
``/track/events`` endpoint.
"""

import logging
import os
import random
import string
import time
from typing import Any

import httpx

from port.analytics import TrackingContext

logger = logging.getLogger(__name__)

AUREA_API_URL = os.getenv('AUREA_API_URL', 'http://localhost:3000/api')
AUREA_API_KEY = os.getenv('AUREA_API_KEY', '')
AUREA_FUNNEL_ID = os.getenv('AUREA_FUNNEL_ID', '')
API_TIMEOUT_SECONDS = 5.0


def new_event_id() -> str:
    """Event id in Aurea's ``evt_<epoch ms>_<9 chars>`` format."""
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"evt_{int(time.time() * 1000)}_{suffix}"


class AureaAnalytics:
    """Server-side event tracking for the purchase funnel."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        funnel_id: str | None = None,
    ):
        self.api_url = (AUREA_API_URL if api_url is None else api_url).rstrip('/')
        self.api_key = AUREA_API_KEY if api_key is None else api_key
        self.funnel_id = AUREA_FUNNEL_ID if funnel_id is None else funnel_id

    async def track(self, event_name: str, properties: dict[str, Any], context: TrackingContext) -> bool:
        event = {
            "eventId": new_event_id(),
            "eventName": event_name,
            "properties": properties,
            "context": {
                "user": {"userId": context.user_id, "anonymousId": context.anonymous_id},
                "session": {"sessionId": context.session_id},
            },
            "timestamp": int(time.time() * 1000),
        }
        return await self._post_events([event], event_name, context.session_id)

    async def identify(self, email: str, anonymous_id: str, traits: dict[str, Any]) -> bool:
        """Link an anonymous visitor to a known user."""
        event = {
            "eventId": new_event_id(),
            "eventName": "user_identified",
            "properties": {"userId": email, "anonymousId": anonymous_id, "traits": traits},
            "context": {
                "user": {"userId": email, "anonymousId": anonymous_id},
                "session": {"sessionId": anonymous_id},
            },
            "timestamp": int(time.time() * 1000),
        }
        return await self._post_events([event], "user_identified", anonymous_id)

    async def _post_events(self, events: list[dict[str, Any]], event_name: str, session_id: str) -> bool:
        headers = {
            "X-Aurea-API-Key": self.api_key,
            "X-Aurea-Funnel-ID": self.funnel_id,
        }
        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    f"{self.api_url}/track/events",
                    json={"events": events, "batch": True},
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error(
                "Aurea tracking error",
                extra={"eventName": event_name, "error_type": type(e).__name__, "error": str(e)},
            )
            return False

        if response.is_error:
            logger.error(
                "Aurea tracking failed",
                extra={"eventName": event_name, "status_code": response.status_code, "body": response.text[:200]},
            )
            return False

        logger.info("Aurea event tracked", extra={"eventName": event_name, "sessionId": session_id})
        return True
