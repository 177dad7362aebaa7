"""Member count endpoint (social proof on the landing page)."""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_member_repo_or_none
from api.models import MemberCountResponse
from port.member_repository import MemberRepository
from services.subscription_service import count_active_members

logger = logging.getLogger(__name__)

router = APIRouter(tags=["members"])


@router.get("/member-count", response_model=MemberCountResponse)
async def member_count(repo: MemberRepository | None = Depends(get_member_repo_or_none)):
    """Count members whose email status is still active.

    The landing page renders the count as-is, so failures answer ``{"count": 0}``.
    """
    count = count_active_members(repo) if repo is not None else None
    if count is None:
        logger.error("Failed to fetch member count")
        return JSONResponse({"count": 0}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return MemberCountResponse(count=count)
