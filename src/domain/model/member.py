from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class EmailStatus(str, Enum):
    """Email subscription status of a member."""
    ACTIVE = 'active'
    UNSUBSCRIBED = 'unsubscribed'
    BOUNCED = 'bounced'


@dataclass
class Member:
    """Domain model representing a provider user known to the funnel.

    Keyed by the checkout provider's user id. Email is overwritten by any
    event that carries one; records are never deleted.
    """
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    name: str | None = None
    username: str | None = None
    email_status: EmailStatus = EmailStatus.ACTIVE
    unsubscribed_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.username or ''


def split_name(name: str | None) -> tuple[str, str]:
    """Split a display name into (first, last) on the first space."""
    if not name:
        return '', ''
    parts = name.split(' ')
    return parts[0], ' '.join(parts[1:])
