"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_checkout_store
from adapter.mongodb.connection import get_mongodb_client
from port.checkout_store import CheckoutStorePort

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _service_status(healthy: bool, message: str | None = None) -> dict:
    if message is None:
        message = "Connection successful" if healthy else "Connection failed or not configured"
    return {"status": "healthy" if healthy else "unhealthy", "message": message}


@router.get("")
async def health(
    checkout_store: CheckoutStorePort = Depends(get_checkout_store),
):
    """Report MongoDB (members) and Redis (checkout sessions) connectivity."""
    services = {}

    try:
        services["redis"] = _service_status(checkout_store.ping())
    except Exception as e:
        services["redis"] = _service_status(False, f"Connection error: {str(e)[:200]}")

    try:
        mongo_client = get_mongodb_client()
        if mongo_client:
            mongo_client.admin.command('ping')
        services["mongodb"] = _service_status(mongo_client is not None)
    except Exception as e:
        services["mongodb"] = _service_status(False, f"Connection error: {str(e)[:200]}")

    overall_healthy = all(s["status"] == "healthy" for s in services.values())
    if not overall_healthy:
        logger.warning("Health check degraded", extra={"services": services})

    return JSONResponse(
        content={
            "status": "healthy" if overall_healthy else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "services": services,
        },
        status_code=status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
