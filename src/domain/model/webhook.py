# domain/model/webhook.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.model.member import split_name

DEFAULT_PRODUCT = 'TTR Membership'
DEFAULT_REVENUE_CENTS = 9900


class EventType(str, Enum):
    """Webhook event types emitted by the checkout provider."""
    PAYMENT_SUCCEEDED = 'payment.succeeded'
    PAYMENT_FAILED = 'payment.failed'
    PAYMENT_PENDING = 'payment.pending'
    PAYMENT_REFUNDED = 'payment.refunded'
    PAYMENT_ACCOUNT_ON_HOLD = 'payment.account_on_hold'
    MEMBERSHIP_ACTIVATED = 'membership.activated'
    MEMBERSHIP_DEACTIVATED = 'membership.deactivated'
    MEMBERSHIP_CANCELLED = 'membership.cancelled'
    MEMBERSHIP_WENT_VALID = 'membership.went_valid'
    MEMBERSHIP_WENT_INVALID = 'membership.went_invalid'

    @classmethod
    def parse(cls, value: str) -> EventType | None:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class WebhookEvent:
    """Verified event envelope ``{type, data}``."""
    type: str
    data: dict[str, Any]
    webhook_id: str | None = None

    @property
    def event_type(self) -> EventType | None:
        return EventType.parse(self.type)


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class TrackingMetadata:
    """Attribution ids the site attached to the checkout session."""
    anonymous_id: str = ''
    session_id: str = ''
    checkout_started_at: str | None = None
    funnel_stage: str = 'checkout'

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> TrackingMetadata:
        checkout_session = _as_dict(data.get('checkout_session'))
        metadata = checkout_session.get('metadata')
        if metadata is None:
            metadata = data.get('metadata')
        metadata = _as_dict(metadata)

        anonymous_id = _as_str(metadata.get('aurea_anonymous_id')) or _as_str(metadata.get('aurea_id'))
        return cls(
            anonymous_id=anonymous_id,
            session_id=_as_str(metadata.get('aurea_session_id')) or anonymous_id,
            checkout_started_at=_as_str(metadata.get('checkout_started_at')) or None,
            funnel_stage=_as_str(metadata.get('funnel_stage')) or 'checkout',
        )

    def checkout_duration(self, now_ms: int | None = None) -> int | None:
        """Seconds elapsed since checkout started, or None if unknown."""
        if not self.checkout_started_at:
            return None
        try:
            started_ms = int(self.checkout_started_at)
        except ValueError:
            return None
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return (now_ms - started_ms) // 1000


@dataclass(frozen=True)
class EventIdentity:
    """User, product and payment fields extracted from an event payload.

    Email comes from ``data.user.email``, then ``data.email``; it is None when
    the event type does not carry one (membership events usually don't).
    """
    user_id: str | None
    username: str = ''
    name: str = ''
    email: str | None = None
    product: str = ''
    order_id: str = ''
    final_amount: int | None = None
    subtotal: int | None = None
    refunded_amount: int | None = None
    currency: str = 'USD'
    failure_reason: str = ''
    deactivation_reason: str = ''
    cancellation_reason: str = ''
    refund_reason: str = ''
    payment_method: str = ''
    tracking: TrackingMetadata = field(default_factory=TrackingMetadata)

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> EventIdentity:
        user = _as_dict(data.get('user'))
        product = _as_dict(data.get('product'))
        email = _as_str(user.get('email')) or _as_str(data.get('email')) or None
        currency = _as_str(data.get('currency')).upper() or 'USD'

        return cls(
            user_id=_as_str(user.get('id')) or None,
            username=_as_str(user.get('username')),
            name=_as_str(user.get('name')),
            email=email,
            product=_as_str(product.get('title')),
            order_id=_as_str(data.get('id')),
            final_amount=_as_amount(data.get('final_amount')),
            subtotal=_as_amount(data.get('subtotal')),
            refunded_amount=_as_amount(data.get('refunded_amount')),
            currency=currency,
            failure_reason=_as_str(data.get('failure_reason')),
            deactivation_reason=_as_str(data.get('deactivation_reason')),
            cancellation_reason=_as_str(data.get('cancellation_reason')),
            refund_reason=_as_str(data.get('refund_reason')),
            payment_method=_as_str(data.get('payment_method')),
            tracking=TrackingMetadata.from_data(data),
        )

    @property
    def user_label(self) -> str:
        """``"Name (@username)"`` as shown in payment notifications."""
        return f"{self.name} (@{self.username})"

    @property
    def product_or_default(self) -> str:
        return self.product or DEFAULT_PRODUCT

    @property
    def revenue_cents(self) -> int:
        return self.final_amount or self.subtotal or DEFAULT_REVENUE_CENTS

    @property
    def refund_cents(self) -> int | None:
        if self.refunded_amount is not None:
            return self.refunded_amount
        return self.final_amount

    def format_price(self, amount: int | None) -> str:
        """Format a minor-unit amount as ``"USD 99.00"``; ``"N/A"`` when missing."""
        if not amount:
            return 'N/A'
        return f"{self.currency} {amount / 100:.2f}"


@dataclass(frozen=True)
class Recipient:
    """Target of an email-bound side effect."""
    email: str
    name: str = ''

    @property
    def first_name(self) -> str:
        return split_name(self.name)[0]

    @property
    def last_name(self) -> str:
        return split_name(self.name)[1]


# ── helpers ──────────────────────────────────────────────


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _as_amount(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None
