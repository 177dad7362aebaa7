"""Discord webhook adapter.

Implements NotifierPort by POSTing ``{content?, embeds?}`` JSON to the
webhook URL configured for each notification channel.
"""

import logging
import os

import httpx

from domain.model.notification import NotificationChannel, NotificationMessage

logger = logging.getLogger(__name__)

API_TIMEOUT_SECONDS = 5.0

CHANNEL_WEBHOOK_URLS = {
    NotificationChannel.PAYMENTS: os.getenv('DISCORD_PAYMENTS_WEBHOOK_URL', ''),
    NotificationChannel.MEMBERSHIPS: os.getenv('DISCORD_MEMBERSHIPS_WEBHOOK_URL', ''),
    NotificationChannel.CHECKOUTS: os.getenv('DISCORD_INITIATE_WEBHOOK_URL', ''),
}


class DiscordNotifier:
    """Fire-and-forget notifications to Discord channel webhooks."""

    def __init__(self, webhook_urls: dict[NotificationChannel, str] | None = None):
        self.webhook_urls = CHANNEL_WEBHOOK_URLS if webhook_urls is None else webhook_urls

    async def send(self, channel: NotificationChannel, message: NotificationMessage) -> bool:
        webhook_url = self.webhook_urls.get(channel)
        if not webhook_url:
            logger.warning("Discord webhook URL not provided", extra={"channel": channel.value})
            return False

        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                response = await client.post(webhook_url, json=message.to_dict())

            if response.is_success:
                return True

            logger.error(
                "Discord webhook failed",
                extra={"channel": channel.value, "status_code": response.status_code, "body": response.text[:200]},
            )
            return False
        except httpx.HTTPError as e:
            logger.error(
                "Discord webhook error",
                extra={"channel": channel.value, "error_type": type(e).__name__, "error": str(e)},
            )
            return False
