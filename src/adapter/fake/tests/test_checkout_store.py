"""Unit tests for FakeCheckoutStore: verifies Port contract compliance."""

import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.checkout_store import FakeCheckoutStore


class TestFakeCheckoutStore(unittest.TestCase):

    def setUp(self):
        self.store = FakeCheckoutStore()

    def test_purchase_flag_is_consumed_once(self):
        self.store.mark_purchased('anon_1')

        self.assertTrue(self.store.consume_purchase('anon_1'))
        self.assertFalse(self.store.consume_purchase('anon_1'))

    def test_consume_unknown_is_false(self):
        self.assertFalse(self.store.consume_purchase('anon_1'))

    def test_completed_session_is_never_abandoned(self):
        self.store.start_session('anon_1')
        self.store.sessions['anon_1'].started_at = datetime.now(timezone.utc) - timedelta(hours=1)
        self.store.complete_session('anon_1')

        self.assertEqual(self.store.find_abandoned(timedelta(minutes=30)), [])

    def test_find_abandoned_marks_notified(self):
        self.store.start_session('anon_1')
        self.store.sessions['anon_1'].started_at = datetime.now(timezone.utc) - timedelta(hours=1)

        first = self.store.find_abandoned(timedelta(minutes=30))
        second = self.store.find_abandoned(timedelta(minutes=30))

        self.assertEqual([s.anonymous_id for s in first], ['anon_1'])
        self.assertEqual(second, [])

    def test_recent_session_not_abandoned(self):
        self.store.start_session('anon_1')
        self.assertEqual(self.store.find_abandoned(timedelta(minutes=30)), [])


if __name__ == '__main__':
    unittest.main()
