"""Tests for transactional email HTML builders."""

import unittest

from utils.email_templates import (
    build_membership_expired_email,
    build_refund_email,
    build_welcome_email,
)


class TestWelcomeEmail(unittest.TestCase):

    def test_greets_by_name_and_links_discord(self):
        html = build_welcome_email('Jane', 'https://discord.gg/abc')

        self.assertIn('Hey Jane!', html)
        self.assertIn('href="https://discord.gg/abc"', html)
        self.assertIn("Welcome to Tom's Trading Room!", html)

    def test_missing_name_falls_back(self):
        self.assertIn('Hey there!', build_welcome_email('', 'https://discord.gg/abc'))

    def test_name_is_escaped(self):
        html = build_welcome_email('<script>x</script>', 'https://discord.gg/abc')

        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)


class TestRefundEmail(unittest.TestCase):

    def test_includes_amount(self):
        html = build_refund_email('Sam', 'USD 99.00')

        self.assertIn('Hey Sam,', html)
        self.assertIn('<strong>Refund Amount:</strong> USD 99.00', html)
        self.assertIn('5-10 business days', html)


class TestMembershipExpiredEmail(unittest.TestCase):

    def test_links_reactivation(self):
        html = build_membership_expired_email('', 'https://whop.com/ttr?a=1&b=2')

        self.assertIn('Hey there,', html)
        self.assertIn('href="https://whop.com/ttr?a=1&amp;b=2"', html)
        self.assertIn('Your Membership Has Expired', html)


if __name__ == '__main__':
    unittest.main()
