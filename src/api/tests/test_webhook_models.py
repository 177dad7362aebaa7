"""Tests for webhook payload extraction (EventIdentity, TrackingMetadata)."""

import unittest

from domain.model.member import split_name
from domain.model.webhook import EventIdentity, EventType, Recipient, TrackingMetadata, WebhookEvent


class TestEventType(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(EventType.parse('membership.went_valid'), EventType.MEMBERSHIP_WENT_VALID)
        self.assertIsNone(EventType.parse('invoice.created'))

    def test_event_property(self):
        self.assertEqual(WebhookEvent('payment.refunded', {}).event_type, EventType.PAYMENT_REFUNDED)


class TestTrackingMetadata(unittest.TestCase):

    def test_prefers_checkout_session_metadata(self):
        data = {
            'checkout_session': {'metadata': {'aurea_anonymous_id': 'anon_cs', 'aurea_session_id': 'sess_cs'}},
            'metadata': {'aurea_anonymous_id': 'anon_top'},
        }

        tracking = TrackingMetadata.from_data(data)

        self.assertEqual(tracking.anonymous_id, 'anon_cs')
        self.assertEqual(tracking.session_id, 'sess_cs')

    def test_falls_back_to_aurea_id_and_session(self):
        tracking = TrackingMetadata.from_data({'metadata': {'aurea_id': 'anon_legacy'}})

        self.assertEqual(tracking.anonymous_id, 'anon_legacy')
        self.assertEqual(tracking.session_id, 'anon_legacy')
        self.assertEqual(tracking.funnel_stage, 'checkout')

    def test_missing_metadata(self):
        tracking = TrackingMetadata.from_data({})
        self.assertEqual(tracking.anonymous_id, '')
        self.assertIsNone(tracking.checkout_duration())

    def test_checkout_duration(self):
        tracking = TrackingMetadata(checkout_started_at='1700000000000')
        self.assertEqual(tracking.checkout_duration(now_ms=1700000090500), 90)

    def test_checkout_duration_unparseable(self):
        self.assertIsNone(TrackingMetadata(checkout_started_at='soon').checkout_duration())


class TestEventIdentity(unittest.TestCase):

    def test_user_email_preferred_over_top_level(self):
        identity = EventIdentity.from_data({
            'user': {'id': 'user_1', 'email': 'nested@example.com'},
            'email': 'top@example.com',
        })
        self.assertEqual(identity.email, 'nested@example.com')

    def test_top_level_email_fallback(self):
        identity = EventIdentity.from_data({'user': {'id': 'user_1'}, 'email': 'top@example.com'})
        self.assertEqual(identity.email, 'top@example.com')

    def test_no_email(self):
        identity = EventIdentity.from_data({'user': {'id': 'user_1'}})
        self.assertIsNone(identity.email)
        self.assertEqual(identity.user_id, 'user_1')

    def test_non_dict_user_is_ignored(self):
        identity = EventIdentity.from_data({'user': 'user_1'})
        self.assertIsNone(identity.user_id)

    def test_amounts_and_defaults(self):
        identity = EventIdentity.from_data({'subtotal': 12000, 'currency': 'eur'})

        self.assertIsNone(identity.final_amount)
        self.assertEqual(identity.revenue_cents, 12000)
        self.assertEqual(identity.currency, 'EUR')
        self.assertEqual(identity.product_or_default, 'TTR Membership')
        self.assertEqual(EventIdentity.from_data({}).revenue_cents, 9900)

    def test_boolean_amount_is_not_a_number(self):
        self.assertIsNone(EventIdentity.from_data({'final_amount': True}).final_amount)

    def test_refund_cents(self):
        self.assertEqual(EventIdentity.from_data({'final_amount': 9900}).refund_cents, 9900)
        self.assertEqual(
            EventIdentity.from_data({'final_amount': 9900, 'refunded_amount': 4000}).refund_cents, 4000,
        )

    def test_format_price(self):
        identity = EventIdentity.from_data({'currency': 'usd'})
        self.assertEqual(identity.format_price(9900), 'USD 99.00')
        self.assertEqual(identity.format_price(None), 'N/A')
        self.assertEqual(identity.format_price(0), 'N/A')

    def test_user_label(self):
        identity = EventIdentity.from_data({'user': {'name': 'Mary Jane Watson', 'username': 'mj'}})

        self.assertEqual(identity.user_label, 'Mary Jane Watson (@mj)')

    def test_reasons(self):
        identity = EventIdentity.from_data({'failure_reason': 'card_declined', 'payment_method': 'card'})
        self.assertEqual(identity.failure_reason, 'card_declined')
        self.assertEqual(identity.payment_method, 'card')


class TestSplitName(unittest.TestCase):

    def test_split(self):
        self.assertEqual(split_name('Jane'), ('Jane', ''))
        self.assertEqual(split_name(''), ('', ''))
        self.assertEqual(split_name(None), ('', ''))

    def test_recipient_names(self):
        recipient = Recipient('mj@example.com', 'Mary Jane Watson')

        self.assertEqual(recipient.first_name, 'Mary')
        self.assertEqual(recipient.last_name, 'Jane Watson')


if __name__ == '__main__':
    unittest.main()
