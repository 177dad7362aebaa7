"""Unit tests for FakeMemberRepository: verifies Port contract compliance."""

import unittest

from adapter.fake.member_repository import FakeMemberRepository
from domain.model.member import EmailStatus, Member


class TestFakeMemberRepository(unittest.TestCase):
    """Tests that FakeMemberRepository correctly implements MemberRepository Protocol."""

    def setUp(self):
        self.repo = FakeMemberRepository()

    # ── upsert ───────────────────────────────────────────────

    def test_upsert_creates_active_member(self):
        self.assertTrue(self.repo.upsert('user_1', 'jane@example.com', 'Jane Doe', 'jdoe'))

        member = self.repo.get_by_id('user_1')
        self.assertIsInstance(member, Member)
        self.assertEqual(member.email, 'jane@example.com')
        self.assertEqual(member.name, 'Jane Doe')
        self.assertEqual(member.username, 'jdoe')
        self.assertEqual(member.email_status, EmailStatus.ACTIVE)
        self.assertIsNone(member.unsubscribed_at)

    def test_upsert_requires_id_and_email(self):
        self.assertFalse(self.repo.upsert('', 'jane@example.com'))
        self.assertFalse(self.repo.upsert('user_1', ''))
        self.assertEqual(self.repo.store, {})

    def test_upsert_overwrites_email(self):
        self.repo.upsert('user_1', 'old@example.com')
        self.repo.upsert('user_1', 'new@example.com')

        self.assertEqual(self.repo.get_by_id('user_1').email, 'new@example.com')
        self.assertIsNone(self.repo.get_by_email('old@example.com'))

    def test_upsert_keeps_known_name_when_missing(self):
        self.repo.upsert('user_1', 'jane@example.com', 'Jane Doe', 'jdoe')
        self.repo.upsert('user_1', 'jane@example.com')

        member = self.repo.get_by_id('user_1')
        self.assertEqual(member.name, 'Jane Doe')
        self.assertEqual(member.username, 'jdoe')

    def test_upsert_preserves_created_at_and_status(self):
        self.repo.upsert('user_1', 'jane@example.com')
        self.repo.update_email_status('jane@example.com', EmailStatus.UNSUBSCRIBED)
        created_at = self.repo.get_by_id('user_1').created_at

        self.repo.upsert('user_1', 'jane@example.com', 'Jane')

        member = self.repo.get_by_id('user_1')
        self.assertEqual(member.created_at, created_at)
        self.assertEqual(member.email_status, EmailStatus.UNSUBSCRIBED)

    # ── reads ────────────────────────────────────────────────

    def test_get_by_id_returns_none_for_missing(self):
        self.assertIsNone(self.repo.get_by_id('nonexistent'))

    def test_get_by_email(self):
        self.repo.upsert('user_1', 'jane@example.com')
        self.assertEqual(self.repo.get_by_email('jane@example.com').id, 'user_1')

    # ── email status ─────────────────────────────────────────

    def test_unsubscribe_sets_timestamp(self):
        self.repo.upsert('user_1', 'jane@example.com')

        self.assertTrue(self.repo.update_email_status('jane@example.com', EmailStatus.UNSUBSCRIBED))

        member = self.repo.get_by_id('user_1')
        self.assertEqual(member.email_status, EmailStatus.UNSUBSCRIBED)
        self.assertIsNotNone(member.unsubscribed_at)

    def test_count_by_status(self):
        self.repo.upsert('user_1', 'a@example.com')
        self.repo.upsert('user_2', 'b@example.com')
        self.repo.update_email_status('b@example.com', EmailStatus.BOUNCED)

        self.assertEqual(self.repo.count_by_status(EmailStatus.ACTIVE), 1)
        self.assertEqual(self.repo.count_by_status(EmailStatus.BOUNCED), 1)
        self.assertEqual(self.repo.count_by_status(EmailStatus.UNSUBSCRIBED), 0)


if __name__ == '__main__':
    unittest.main()
