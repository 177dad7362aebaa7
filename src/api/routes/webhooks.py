"""Checkout provider webhook endpoint."""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import PlainTextResponse

from api.dependencies import (
    get_analytics,
    get_checkout_store,
    get_mailer,
    get_mailing_list,
    get_member_repo_or_none,
    get_notifier,
    get_webhook_verifier,
)
from domain.model.errors import ValidationError, WebhookVerificationError
from port.analytics import AnalyticsPort
from port.checkout_store import CheckoutStorePort
from port.mailer import MailerPort
from port.mailing_list import MailingListPort
from port.member_repository import MemberRepository
from port.notifier import NotifierPort
from port.webhook_verifier import WebhookVerifierPort
from services.webhook_service import WebhookEffects, process_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/whop", response_class=PlainTextResponse)
async def whop_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    verifier: WebhookVerifierPort = Depends(get_webhook_verifier),
    notifier: NotifierPort = Depends(get_notifier),
    mailer: MailerPort = Depends(get_mailer),
    mailing_list: MailingListPort = Depends(get_mailing_list),
    analytics: AnalyticsPort = Depends(get_analytics),
    members: MemberRepository | None = Depends(get_member_repo_or_none),
    checkout_store: CheckoutStorePort = Depends(get_checkout_store),
):
    """Verify a Whop webhook and reconcile it in the background.

    Answers as soon as the event is verified so the provider does not retry
    while notifications and emails are still going out.
    """
    body = await request.body()

    try:
        event = verifier.unwrap(body, dict(request.headers))
    except WebhookVerificationError as e:
        logger.warning("Invalid Whop webhook signature", extra={"reason": str(e)})
        return PlainTextResponse("Invalid signature", status_code=status.HTTP_401_UNAUTHORIZED)
    except ValidationError as e:
        logger.warning("Malformed Whop webhook", extra={"reason": str(e)})
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)

    logger.info("Whop webhook verified", extra={"eventType": event.type, "webhookId": event.webhook_id})

    effects = WebhookEffects(
        notifier=notifier,
        mailer=mailer,
        mailing_list=mailing_list,
        analytics=analytics,
        members=members,
        checkout_store=checkout_store,
    )
    background_tasks.add_task(process_event, event, effects)
    return PlainTextResponse("OK")
