"""Tests for the abandoned-checkout sweep and checkout notifications."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

from adapter.fake.analytics import FakeAnalytics
from adapter.fake.checkout_store import FakeCheckoutStore
from adapter.fake.notifier import FakeNotifier
from domain.model.checkout import CheckoutSession
from domain.model.notification import EmbedColor, NotificationChannel
from services.checkout_service import notify_checkout_initiated, sweep_abandoned_checkouts


def _session(anonymous_id: str, minutes_ago: int) -> CheckoutSession:
    return CheckoutSession(
        anonymous_id=anonymous_id,
        started_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


class TestSweepAbandonedCheckouts(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = FakeCheckoutStore()
        self.analytics = FakeAnalytics()

    async def test_tracks_only_stale_sessions(self):
        self.store.sessions['old'] = _session('old', 45)
        self.store.sessions['fresh'] = _session('fresh', 5)

        result = await sweep_abandoned_checkouts(self.store, self.analytics)

        self.assertEqual(result.abandoned, 1)
        self.assertEqual(result.tracked, 1)
        self.assertEqual(result.message, "Processed 1 abandoned checkouts")
        name, properties, context = self.analytics.events[0]
        self.assertEqual(name, 'checkout_abandoned')
        self.assertEqual(properties['reason'], 'timeout_30min')
        self.assertEqual(properties['anonymousId'], 'old')
        self.assertEqual((context.anonymous_id, context.session_id), ('old', 'old'))

    async def test_session_reported_once(self):
        self.store.sessions['old'] = _session('old', 45)

        await sweep_abandoned_checkouts(self.store, self.analytics)
        second = await sweep_abandoned_checkouts(self.store, self.analytics)

        self.assertEqual(second.abandoned, 0)
        self.assertEqual(len(self.analytics.events), 1)

    async def test_analytics_error_does_not_abort_sweep(self):
        self.store.sessions['a'] = _session('a', 60)
        self.store.sessions['b'] = _session('b', 60)
        analytics = AsyncMock()
        analytics.track.side_effect = [RuntimeError("collector down"), True]

        result = await sweep_abandoned_checkouts(self.store, analytics)

        self.assertEqual(result.abandoned, 2)
        self.assertEqual(result.tracked, 1)


class TestNotifyCheckoutInitiated(unittest.IsolatedAsyncioTestCase):

    async def test_posts_to_checkouts_channel(self):
        notifier = FakeNotifier()

        self.assertTrue(await notify_checkout_initiated(notifier))

        channel, message = notifier.sent[0]
        self.assertEqual(channel, NotificationChannel.CHECKOUTS)
        self.assertEqual(message.embeds[0].color, EmbedColor.INFO)
        self.assertIn('Checkout initiated', message.embeds[0].title)


if __name__ == '__main__':
    unittest.main()
