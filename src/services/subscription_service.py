"""Email subscription service: unsubscribe, bounce and resubscribe flows.

Status is stored per member record; every record sharing the address is
updated together.
"""

import logging
from enum import Enum

from domain.model.member import EmailStatus
from port.member_repository import MemberRepository

logger = logging.getLogger(__name__)


class UnsubscribeOutcome(str, Enum):
    UNSUBSCRIBED = 'unsubscribed'
    ALREADY_UNSUBSCRIBED = 'already_unsubscribed'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'


def unsubscribe(repo: MemberRepository, email: str) -> UnsubscribeOutcome:
    """Unsubscribe an address from emails.

    An address that is already unsubscribed is left untouched, so its
    ``unsubscribed_at`` keeps the time of the first request.
    """
    member = repo.get_by_email(email)
    if member is None:
        logger.info("Unsubscribe for unknown email", extra={"email": email})
        return UnsubscribeOutcome.NOT_FOUND

    if member.email_status == EmailStatus.UNSUBSCRIBED:
        logger.info("Email already unsubscribed", extra={"email": email})
        return UnsubscribeOutcome.ALREADY_UNSUBSCRIBED

    if not repo.update_email_status(email, EmailStatus.UNSUBSCRIBED):
        logger.error("Failed to unsubscribe", extra={"email": email})
        return UnsubscribeOutcome.FAILED

    logger.info("Email unsubscribed", extra={"email": email, "userId": member.id})
    return UnsubscribeOutcome.UNSUBSCRIBED


def mark_bounced(repo: MemberRepository, email: str) -> bool:
    if not email:
        return False
    return repo.update_email_status(email, EmailStatus.BOUNCED)


def resubscribe(repo: MemberRepository, email: str) -> bool:
    if not email:
        return False
    return repo.update_email_status(email, EmailStatus.ACTIVE)


def count_active_members(repo: MemberRepository) -> int | None:
    """Number of members still receiving emails. None when the store failed."""
    return repo.count_by_status(EmailStatus.ACTIVE)
