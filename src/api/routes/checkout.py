"""Checkout funnel endpoints.

Called by the marketing site around the hand-off to the Whop checkout:
- /checkout/init records that a visitor opened checkout
- /check-purchase lets the site poll whether the webhook saw the purchase
- /purchase-redirect bounces the buyer to the thank-you page
- /events/initiate-checkout pings the checkouts Discord channel
"""

import hmac
import logging
import os
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse

from api.dependencies import get_checkout_store, get_notifier
from api.models import (
    CheckoutInitRequest,
    InitiateCheckoutResponse,
    MarkPurchaseRequest,
    PurchaseCheckResponse,
    SuccessResponse,
)
from port.checkout_store import CheckoutStorePort
from port.notifier import NotifierPort
from services.checkout_service import notify_checkout_initiated

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])

PURCHASE_CHECK_SECRET = os.getenv('PURCHASE_CHECK_SECRET', '')

PURCHASE_REDIRECT_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>Redirecting...</title>
  <style>
    body { background: #020513; color: white; font-family: system-ui, -apple-system, sans-serif; display: flex; align-items: center; justify-content: center; height: 100vh; margin: 0; }
    .loader { text-align: center; }
    .spinner { border: 3px solid rgba(255, 255, 255, 0.1); border-top: 3px solid white; border-radius: 50%; width: 40px; height: 40px; animation: spin 1s linear infinite; margin: 0 auto 20px; }
    @keyframes spin { 0% { transform: rotate(0deg); } 100% { transform: rotate(360deg); } }
  </style>
</head>
<body>
  <div class="loader">
    <div class="spinner"></div>
    <p>Purchase successful! Redirecting...</p>
  </div>
  <script>
    localStorage.setItem('aurea_just_purchased', 'true');
    setTimeout(() => {
      window.location.href = '/thank-you?from_checkout=true';
    }, 500);
  </script>
</body>
</html>
"""


@router.post("/checkout/init", response_model=SuccessResponse)
async def init_checkout(
    request: CheckoutInitRequest,
    store: CheckoutStorePort = Depends(get_checkout_store),
):
    """Record the start of a checkout for abandonment tracking."""
    if not request.anonymousId:
        raise HTTPException(status_code=400, detail="anonymousId is required")

    if not store.start_session(request.anonymousId):
        raise HTTPException(status_code=503, detail="Checkout store unavailable")

    return SuccessResponse(success=True)


@router.get("/check-purchase", response_model=PurchaseCheckResponse)
async def check_purchase(
    anonymousId: Optional[str] = Query(None),
    store: CheckoutStorePort = Depends(get_checkout_store),
):
    """Poll for a purchase flag. A flag is returned once, then cleared."""
    if not anonymousId:
        return PurchaseCheckResponse(hasPurchased=False)
    return PurchaseCheckResponse(hasPurchased=store.consume_purchase(anonymousId))


@router.post("/check-purchase", response_model=SuccessResponse)
async def mark_purchase(
    request: MarkPurchaseRequest,
    store: CheckoutStorePort = Depends(get_checkout_store),
):
    """Flag a visitor as having purchased. Requires the shared secret."""
    if not PURCHASE_CHECK_SECRET or not hmac.compare_digest(
        (request.secret or '').encode('utf-8'), PURCHASE_CHECK_SECRET.encode('utf-8'),
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")

    if not request.anonymousId:
        raise HTTPException(status_code=400, detail="Missing anonymousId")

    if not store.mark_purchased(request.anonymousId):
        raise HTTPException(status_code=503, detail="Checkout store unavailable")

    return SuccessResponse(success=True)


@router.get("/purchase-redirect", response_class=HTMLResponse)
async def purchase_redirect():
    return HTMLResponse(content=PURCHASE_REDIRECT_HTML)


@router.post("/events/initiate-checkout", response_model=InitiateCheckoutResponse)
async def initiate_checkout(notifier: NotifierPort = Depends(get_notifier)):
    try:
        await notify_checkout_initiated(notifier)
    except Exception as e:
        logger.error("Failed to send checkout notification", extra={"error": str(e)})
    return InitiateCheckoutResponse(ok=True)
