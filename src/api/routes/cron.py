"""Scheduled job endpoints, invoked by the platform cron with a bearer secret."""

import hmac
import logging
import os
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException

from api.dependencies import get_analytics, get_checkout_store
from api.models import AbandonedSweepResponse
from port.analytics import AnalyticsPort
from port.checkout_store import CheckoutStorePort
from services.checkout_service import sweep_abandoned_checkouts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])

CRON_SECRET = os.getenv('CRON_SECRET', '')


def _verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    expected = f"Bearer {CRON_SECRET}"
    if not CRON_SECRET or not authorization or not hmac.compare_digest(
        authorization.encode('utf-8'), expected.encode('utf-8'),
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get(
    "/check-abandoned",
    response_model=AbandonedSweepResponse,
    dependencies=[Depends(_verify_cron_secret)],
)
async def check_abandoned(
    store: CheckoutStorePort = Depends(get_checkout_store),
    analytics: AnalyticsPort = Depends(get_analytics),
):
    """Report checkouts idle for 30 minutes as abandoned (once per session)."""
    result = await sweep_abandoned_checkouts(store, analytics)
    logger.info(
        "Abandoned checkout sweep finished",
        extra={"abandoned": result.abandoned, "tracked": result.tracked},
    )
    return AbandonedSweepResponse(success=True, abandoned=result.abandoned, message=result.message)
