"""Webhook reconciliation service.

Turns a verified checkout-provider event into its side effects: member upsert,
chat notification, analytics events, mailing-list sync and a transactional
email. Every effect is best-effort. A failure is logged and recorded on the
result, and the remaining effects still run.

No de-duplication is done here. Redelivering an event re-sends notifications
and emails; the member store converges because upserts merge.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from domain.model.delivery import DeliveryResult
from domain.model.notification import (
    EmbedColor,
    EmbedField,
    NotificationChannel,
    NotificationMessage,
)
from domain.model.webhook import EventIdentity, EventType, Recipient, WebhookEvent
from port.analytics import AnalyticsPort, TrackingContext
from port.checkout_store import CheckoutStorePort
from port.mailer import MailerPort
from port.mailing_list import MailingListPort
from port.member_repository import MemberRepository
from port.notifier import NotifierPort
from services import email_service

logger = logging.getLogger(__name__)

EMAIL_DELAY_SECONDS = 0.6


@dataclass
class WebhookEffects:
    """Collaborators the reconciliation writes to.

    ``members`` and ``checkout_store`` may be None when their datastore is
    unavailable; the effects that need them are skipped.
    """
    notifier: NotifierPort
    mailer: MailerPort
    mailing_list: MailingListPort
    analytics: AnalyticsPort
    members: MemberRepository | None = None
    checkout_store: CheckoutStorePort | None = None
    email_delay_seconds: float = EMAIL_DELAY_SECONDS


@dataclass
class ReconcileResult:
    event_type: str
    handled: bool = False
    upserted: bool = False
    recipient: Recipient | None = None
    failures: list[str] = field(default_factory=list)


@dataclass
class _Context:
    event: WebhookEvent
    identity: EventIdentity
    effects: WebhookEffects
    result: ReconcileResult

    @property
    def tracking(self) -> TrackingContext:
        identity = self.identity
        anonymous_id = identity.tracking.anonymous_id or identity.user_id or ''
        return TrackingContext(
            anonymous_id=anonymous_id,
            session_id=identity.tracking.session_id or anonymous_id,
            user_id=identity.email,
        )

    async def safely(self, effect: str, awaitable: Awaitable[Any]) -> Any:
        try:
            result = await awaitable
        except Exception as e:
            self._failed(effect, e)
            return None
        # Email and contact adapters report provider errors without raising
        if isinstance(result, DeliveryResult) and not result.success:
            self._rejected(effect, result.error)
        return result

    def safely_sync(self, effect: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            self._failed(effect, e)
            return None

    def _failed(self, effect: str, error: Exception) -> None:
        logger.error(
            "Webhook side effect failed",
            extra={
                "eventType": self.event.type,
                "effect": effect,
                "userId": self.identity.user_id,
                "error": str(error),
            },
            exc_info=True,
        )
        self.result.failures.append(effect)

    def _rejected(self, effect: str, error: str | None) -> None:
        logger.error(
            "Webhook side effect rejected",
            extra={
                "eventType": self.event.type,
                "effect": effect,
                "userId": self.identity.user_id,
                "error": error,
            },
        )
        self.result.failures.append(effect)


# ── Entry point ──────────────────────────────────────────────


async def process_event(event: WebhookEvent, effects: WebhookEffects) -> ReconcileResult:
    """Apply the side effects for one verified event.

    Never raises; unknown event types are logged and ignored.
    """
    result = ReconcileResult(event_type=event.type)
    event_type = event.event_type
    if event_type is None:
        logger.info("Unhandled webhook type", extra={"eventType": event.type})
        return result

    identity = EventIdentity.from_data(event.data)
    ctx = _Context(event=event, identity=identity, effects=effects, result=result)
    logger.info(
        "Processing webhook",
        extra={
            "eventType": event.type,
            "webhookId": event.webhook_id,
            "userId": identity.user_id,
            "hasEmail": identity.email is not None,
            "anonymousId": identity.tracking.anonymous_id or None,
        },
    )

    if identity.user_id and identity.email and effects.members is not None:
        stored = ctx.safely_sync(
            "upsert", effects.members.upsert,
            identity.user_id, identity.email, identity.name, identity.username,
        )
        result.upserted = bool(stored)

    await _HANDLERS[event_type](ctx)
    result.handled = True
    return result


# ── Payment events ───────────────────────────────────────────


async def _payment_succeeded(ctx: _Context) -> None:
    identity = ctx.identity
    fields = _payment_fields(identity)
    if identity.final_amount:
        fields.append(EmbedField("Amount", identity.format_price(identity.final_amount)))
        if identity.subtotal != identity.final_amount:
            fields.append(EmbedField("Subtotal", identity.format_price(identity.subtotal)))
    await _notify(
        ctx, NotificationChannel.PAYMENTS, "Payment succeeded",
        "A new payment has been successfully processed!", EmbedColor.SUCCESS, fields,
    )

    anonymous_id = identity.tracking.anonymous_id
    analytics = ctx.effects.analytics
    if identity.email and anonymous_id:
        traits = {
            "name": identity.name or identity.username or "Unknown",
            "email": identity.email,
            "username": identity.username,
            "product": identity.product_or_default,
            "whopUserId": identity.user_id or "",
            "purchaseDate": _now_iso(),
        }
        await ctx.safely("identify", analytics.identify(identity.email, anonymous_id, traits))

    await _track(ctx, "checkout_completed", {
        "conversionType": "purchase",
        "revenue": identity.revenue_cents / 100,
        "currency": identity.currency,
        "orderId": identity.order_id,
        "checkoutDuration": identity.tracking.checkout_duration(),
        "funnelStage": identity.tracking.funnel_stage,
        "product": identity.product_or_default,
        "username": identity.username,
        "email": identity.email or "",
        "source": "whop_webhook",
        "isConversion": True,
    })
    await _track(ctx, "membership_activated", {
        "product": identity.product_or_default,
        "username": identity.username,
        "email": identity.email or "",
        "activatedAt": _now_iso(),
    })

    store = ctx.effects.checkout_store
    if anonymous_id and store is not None:
        ctx.safely_sync("mark_purchased", store.mark_purchased, anonymous_id)
        ctx.safely_sync("complete_session", store.complete_session, anonymous_id)

    recipient = _event_recipient(ctx)
    if recipient is None:
        return
    await _sync_contact(ctx, recipient)
    await _pause(ctx)
    await ctx.safely("welcome_email", email_service.send_welcome_email(
        ctx.effects.mailer, recipient.email, recipient.name or identity.username,
    ))


async def _payment_failed(ctx: _Context) -> None:
    identity = ctx.identity
    await _notify(
        ctx, NotificationChannel.PAYMENTS, "Payment Failed",
        "A payment attempt has failed.", EmbedColor.ERROR, _payment_fields(identity),
    )
    await _track(ctx, "payment_failed", {
        "attemptedRevenue": identity.revenue_cents / 100,
        "currency": identity.currency,
        "failureReason": identity.failure_reason or "unknown",
        "product": identity.product_or_default,
        "username": identity.username,
        "email": identity.email or "",
    })
    recipient = _event_recipient(ctx)
    if recipient is not None:
        await _sync_contact(ctx, recipient)


async def _payment_pending(ctx: _Context) -> None:
    identity = ctx.identity
    await _notify(
        ctx, NotificationChannel.PAYMENTS, "Payment Pending",
        "A payment is pending confirmation.", EmbedColor.PENDING, _payment_fields(identity),
    )
    await _track(ctx, "payment_pending", {
        "pendingRevenue": identity.revenue_cents / 100,
        "currency": identity.currency,
        "paymentMethod": identity.payment_method or "unknown",
        "product": identity.product_or_default,
        "username": identity.username,
        "email": identity.email or "",
    })
    recipient = _event_recipient(ctx)
    if recipient is not None:
        await _sync_contact(ctx, recipient)


async def _payment_refunded(ctx: _Context) -> None:
    identity = ctx.identity
    refund_amount = identity.format_price(identity.refund_cents)
    fields = _payment_fields(identity)
    fields.append(EmbedField("Refund Amount", refund_amount))
    await _notify(
        ctx, NotificationChannel.PAYMENTS, "Payment Refunded",
        "A payment has been refunded.", EmbedColor.WARNING, fields,
    )
    await _track(ctx, "payment_refunded", {
        "refundAmount": (identity.refund_cents or 0) / 100,
        "currency": identity.currency,
        "refundReason": identity.refund_reason or "unknown",
        "orderId": identity.order_id,
        "product": identity.product_or_default,
        "username": identity.username,
        "email": identity.email or "",
    })

    recipient = _event_recipient(ctx)
    if recipient is None:
        return
    await _sync_contact(ctx, recipient)
    await _pause(ctx)
    await ctx.safely("refund_email", email_service.send_refund_email(
        ctx.effects.mailer, recipient.email, recipient.name, refund_amount,
    ))


async def _payment_account_on_hold(ctx: _Context) -> None:
    await _notify(
        ctx, NotificationChannel.PAYMENTS, "Account On Hold",
        "Payment method has failed repeatedly. Member needs to update payment.",
        EmbedColor.WARNING, _payment_fields(ctx.identity),
    )


# ── Membership events ────────────────────────────────────────


async def _membership_activated(ctx: _Context) -> None:
    # Welcome email goes out on payment.succeeded, which carries the email
    await _notify(
        ctx, NotificationChannel.MEMBERSHIPS, "Membership Activated",
        "A new member has joined!", EmbedColor.SUCCESS, _membership_fields(ctx.identity),
    )


async def _membership_deactivated(ctx: _Context) -> None:
    identity = ctx.identity
    await _notify(
        ctx, NotificationChannel.MEMBERSHIPS, "Membership Deactivated",
        "A membership has been deactivated.", EmbedColor.WARNING, _membership_fields(identity),
    )
    await _track(ctx, "membership_deactivated", {
        "deactivationReason": identity.deactivation_reason or "unknown",
        "product": identity.product_or_default,
        "username": identity.username,
    })
    await _send_cancellation(ctx)


async def _membership_cancelled(ctx: _Context) -> None:
    identity = ctx.identity
    reason = identity.cancellation_reason or "Not specified"
    fields = _membership_fields(identity)
    fields.append(EmbedField("Reason", reason, inline=False))
    await _notify(
        ctx, NotificationChannel.MEMBERSHIPS, "Membership Cancelled",
        "A member has cancelled their subscription.", EmbedColor.WARNING, fields,
    )
    await _track(ctx, "membership_cancelled", {
        "cancellationReason": reason,
        "cancelledAt": _now_iso(),
        "product": identity.product_or_default,
        "username": identity.username,
    })
    await _send_cancellation(ctx)


async def _membership_went_valid(ctx: _Context) -> None:
    await _notify(
        ctx, NotificationChannel.MEMBERSHIPS, "Membership Went Valid",
        "A trial has ended and membership is now active!", EmbedColor.SUCCESS,
        _membership_fields(ctx.identity),
    )


async def _membership_went_invalid(ctx: _Context) -> None:
    await _notify(
        ctx, NotificationChannel.MEMBERSHIPS, "Membership Went Invalid",
        "A membership has expired or been cancelled.", EmbedColor.ERROR,
        _membership_fields(ctx.identity),
    )
    recipient = resolve_recipient(ctx.identity, ctx.effects.members)
    ctx.result.recipient = recipient
    if recipient is None:
        return
    await _sync_contact(ctx, recipient)
    await _pause(ctx)
    await ctx.safely("expired_email", email_service.send_membership_expired_email(
        ctx.effects.mailer, recipient.email, recipient.name,
    ))


async def _send_cancellation(ctx: _Context) -> None:
    recipient = resolve_recipient(ctx.identity, ctx.effects.members)
    ctx.result.recipient = recipient
    if recipient is None:
        return
    await _sync_contact(ctx, recipient)
    await _pause(ctx)
    await ctx.safely("cancellation_email", email_service.send_cancellation_email(
        ctx.effects.mailer, recipient.email, recipient.name,
    ))


_HANDLERS: dict[EventType, Callable[[_Context], Awaitable[None]]] = {
    EventType.PAYMENT_SUCCEEDED: _payment_succeeded,
    EventType.PAYMENT_FAILED: _payment_failed,
    EventType.PAYMENT_PENDING: _payment_pending,
    EventType.PAYMENT_REFUNDED: _payment_refunded,
    EventType.PAYMENT_ACCOUNT_ON_HOLD: _payment_account_on_hold,
    EventType.MEMBERSHIP_ACTIVATED: _membership_activated,
    EventType.MEMBERSHIP_DEACTIVATED: _membership_deactivated,
    EventType.MEMBERSHIP_CANCELLED: _membership_cancelled,
    EventType.MEMBERSHIP_WENT_VALID: _membership_went_valid,
    EventType.MEMBERSHIP_WENT_INVALID: _membership_went_invalid,
}


# ── Recipient resolution ─────────────────────────────────────


def resolve_recipient(identity: EventIdentity, members: MemberRepository | None) -> Recipient | None:
    """Event email when present, else the stored member for the provider user id."""
    if identity.email:
        return Recipient(email=identity.email, name=identity.name or identity.username)
    if not identity.user_id or members is None:
        return None
    try:
        member = members.get_by_id(identity.user_id)
    except Exception as e:
        logger.error("Member lookup failed", extra={"userId": identity.user_id, "error": str(e)})
        return None
    if member is None or not member.email:
        logger.info("No stored email for member", extra={"userId": identity.user_id})
        return None
    return Recipient(email=member.email, name=member.display_name)


def _event_recipient(ctx: _Context) -> Recipient | None:
    # Payment events carry the email themselves
    identity = ctx.identity
    if not identity.email:
        return None
    recipient = Recipient(email=identity.email, name=identity.name)
    ctx.result.recipient = recipient
    return recipient


# ── Effect helpers ───────────────────────────────────────────


def _payment_fields(identity: EventIdentity) -> list[EmbedField]:
    return [
        EmbedField("User", identity.user_label),
        EmbedField("Product", identity.product),
    ]


def _membership_fields(identity: EventIdentity) -> list[EmbedField]:
    return [
        EmbedField("User", f"@{identity.username}"),
        EmbedField("Product", identity.product),
    ]


async def _notify(
    ctx: _Context,
    channel: NotificationChannel,
    title: str,
    description: str,
    color: EmbedColor,
    fields: list[EmbedField],
) -> None:
    message = NotificationMessage.embed(title, color, description=description, fields=fields)
    await ctx.safely("notify", ctx.effects.notifier.send(channel, message))


async def _track(ctx: _Context, event_name: str, properties: dict[str, Any]) -> None:
    await ctx.safely(event_name, ctx.effects.analytics.track(event_name, properties, ctx.tracking))


async def _sync_contact(ctx: _Context, recipient: Recipient) -> None:
    await ctx.safely("list_sync", ctx.effects.mailing_list.add_contact(
        recipient.email, recipient.first_name, recipient.last_name, source=ctx.event.type,
    ))


async def _pause(ctx: _Context) -> None:
    # Email provider rate limit between the contact sync and the send
    if ctx.effects.email_delay_seconds > 0:
        await asyncio.sleep(ctx.effects.email_delay_seconds)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
