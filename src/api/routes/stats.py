"""DARWIN trading statistics API route."""

import logging
import re
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from api.dependencies import get_stats_source
from api.models import DarwinStatsResponse
from domain.model.errors import StatsUnavailableError
from port.stats_source import StatsSourcePort

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])

DARWIN_CODE_PATTERN = re.compile(r"[A-Z]{3}")
CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=600"


@router.get("/darwinex-stats")
async def get_darwinex_stats(
    code: Optional[str] = Query(None, description="DARWIN code, e.g. WLE"),
    source: StatsSourcePort = Depends(get_stats_source),
):
    """Get trading statistics for a DARWIN.

    Fields the page does not expose are null; return since inception and
    best/worst month fall back to static values.
    """
    if not code:
        return JSONResponse(
            {"error": "Missing required parameter: code"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not DARWIN_CODE_PATTERN.fullmatch(code):
        return JSONResponse(
            {"error": "Invalid DARWIN code format. Expected 3 uppercase letters."},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        stats = await source.fetch(code)
    except StatsUnavailableError as e:
        logger.error("Error fetching Darwinex stats", extra={"code": code, "error": str(e)})
        return JSONResponse(
            {"error": "Failed to fetch Darwinex statistics", "details": str(e)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = DarwinStatsResponse.from_domain(stats).model_dump(by_alias=True)
    return JSONResponse(body, headers={"Cache-Control": CACHE_CONTROL})
