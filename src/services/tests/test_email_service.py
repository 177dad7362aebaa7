"""Tests for transactional email composition."""

import unittest
from unittest.mock import patch

from adapter.fake.mailer import FakeMailer
from services.email_service import (
    build_unsubscribe_url,
    send_cancellation_email,
    send_membership_expired_email,
    send_refund_email,
    send_welcome_email,
)


class TestBuildUnsubscribeUrl(unittest.TestCase):

    def test_encodes_email(self):
        url = build_unsubscribe_url('a+b@example.com', app_url='https://ttr.example')
        self.assertEqual(url, 'https://ttr.example/unsubscribe?email=a%2Bb%40example.com')

    def test_strips_trailing_slash(self):
        url = build_unsubscribe_url('x@example.com', app_url='https://ttr.example/')
        self.assertTrue(url.startswith('https://ttr.example/unsubscribe?'))

    @patch('services.email_service.APP_URL', 'https://configured.example')
    def test_defaults_to_app_url(self):
        self.assertTrue(build_unsubscribe_url('x@example.com').startswith('https://configured.example/'))


class TestSendEmails(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.mailer = FakeMailer()

    async def test_welcome_escapes_name(self):
        result = await send_welcome_email(self.mailer, 'x@example.com', '<b>Eve</b>')

        self.assertTrue(result.success)
        html = self.mailer.sent[0]['html']
        self.assertIn('&lt;b&gt;Eve&lt;/b&gt;', html)
        self.assertNotIn('<b>Eve</b>', html)

    async def test_welcome_without_name_greets_there(self):
        await send_welcome_email(self.mailer, 'x@example.com', '')

        self.assertIn('Hey there!', self.mailer.sent[0]['html'])

    @patch('services.email_service.APP_URL', 'https://ttr.example')
    async def test_cancellation_uses_template_variables(self):
        result = await send_cancellation_email(self.mailer, 'x@example.com', 'Sam', template_id='tmpl_1')

        self.assertTrue(result.success)
        self.assertEqual(self.mailer.sent[0], {
            'to': 'x@example.com',
            'template_id': 'tmpl_1',
            'variables': {
                'whopName': 'Sam',
                'UNSUBSCRIBE_URL': 'https://ttr.example/unsubscribe?email=x%40example.com',
            },
        })

    @patch('services.email_service.CANCELLATION_TEMPLATE_ID', '')
    async def test_cancellation_without_template_fails(self):
        result = await send_cancellation_email(self.mailer, 'x@example.com', 'Sam')

        self.assertFalse(result.success)
        self.assertEqual(result.error, 'Missing template ID')
        self.assertEqual(self.mailer.sent, [])

    async def test_refund_includes_amount(self):
        await send_refund_email(self.mailer, 'x@example.com', 'Sam', 'EUR 12.00')

        self.assertIn('EUR 12.00', self.mailer.sent[0]['html'])
        self.assertIn('Refund', self.mailer.sent[0]['subject'])

    @patch('services.email_service.WHOP_REACTIVATE_URL', 'https://whop.example/reactivate')
    async def test_expired_links_to_reactivation(self):
        await send_membership_expired_email(self.mailer, 'x@example.com', 'Sam')

        self.assertIn('href="https://whop.example/reactivate"', self.mailer.sent[0]['html'])


if __name__ == '__main__':
    unittest.main()
