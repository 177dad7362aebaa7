from fastapi import HTTPException

from adapter.checkout.redis_checkout_store import RedisCheckoutStore
from adapter.external.aurea import AureaAnalytics
from adapter.external.darwinex import DarwinexStatsAdapter
from adapter.external.discord import DiscordNotifier
from adapter.external.resend import ResendMailer, ResendMailingList
from adapter.external.whop import WhopWebhookVerifier
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.member_repository import MongoMemberRepository
from port.analytics import AnalyticsPort
from port.checkout_store import CheckoutStorePort
from port.mailer import MailerPort
from port.mailing_list import MailingListPort
from port.member_repository import MemberRepository
from port.notifier import NotifierPort
from port.stats_source import StatsSourcePort
from port.webhook_verifier import WebhookVerifierPort

# The Redis store caches its own connection, so one instance serves the process
_checkout_store: RedisCheckoutStore | None = None


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_member_repo() -> MemberRepository:
    return MongoMemberRepository(_get_db())


def get_member_repo_or_none() -> MemberRepository | None:
    """Member store for best-effort callers; None instead of 503 when MongoDB is down."""
    client = get_mongodb_client()
    if client is None:
        return None
    return MongoMemberRepository(client[DATABASE_NAME])


def get_checkout_store() -> CheckoutStorePort:
    global _checkout_store
    if _checkout_store is None:
        _checkout_store = RedisCheckoutStore()
    return _checkout_store


def get_webhook_verifier() -> WebhookVerifierPort:
    return WhopWebhookVerifier()


def get_notifier() -> NotifierPort:
    return DiscordNotifier()


def get_mailer() -> MailerPort:
    return ResendMailer()


def get_mailing_list() -> MailingListPort:
    return ResendMailingList()


def get_analytics() -> AnalyticsPort:
    return AureaAnalytics()


def get_stats_source() -> StatsSourcePort:
    return DarwinexStatsAdapter()
