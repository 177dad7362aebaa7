"""Checkout funnel service: abandoned-checkout sweep and checkout notifications."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from domain.model.notification import EmbedColor, NotificationChannel, NotificationMessage
from port.analytics import AnalyticsPort, TrackingContext
from port.checkout_store import CheckoutStorePort
from port.notifier import NotifierPort

logger = logging.getLogger(__name__)

ABANDONED_AFTER = timedelta(minutes=30)


@dataclass
class SweepResult:
    abandoned: int
    tracked: int

    @property
    def message(self) -> str:
        return f"Processed {self.abandoned} abandoned checkouts"


async def sweep_abandoned_checkouts(
    store: CheckoutStorePort,
    analytics: AnalyticsPort,
    older_than: timedelta = ABANDONED_AFTER,
) -> SweepResult:
    """Track ``checkout_abandoned`` once for every session idle past the threshold."""
    sessions = store.find_abandoned(older_than)
    logger.info("Found abandoned checkouts", extra={"count": len(sessions)})

    tracked = 0
    for session in sessions:
        properties = {
            "reason": f"timeout_{int(older_than.total_seconds() // 60)}min",
            "checkoutStartedAt": session.started_at.isoformat(),
            "abandonedAt": datetime.now(timezone.utc).isoformat(),
            "anonymousId": session.anonymous_id,
        }
        context = TrackingContext(anonymous_id=session.anonymous_id, session_id=session.anonymous_id)
        try:
            if await analytics.track("checkout_abandoned", properties, context):
                tracked += 1
        except Exception as e:
            logger.error(
                "Failed to track abandoned checkout",
                extra={"anonymousId": session.anonymous_id, "error": str(e)},
            )

    return SweepResult(abandoned=len(sessions), tracked=tracked)


async def notify_checkout_initiated(notifier: NotifierPort) -> bool:
    message = NotificationMessage.embed(
        "\U0001F525 Checkout initiated",
        EmbedColor.INFO,
        description="Someone's started a checkout!",
    )
    return await notifier.send(NotificationChannel.CHECKOUTS, message)
