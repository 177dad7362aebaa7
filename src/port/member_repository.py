from typing import Protocol

from domain.model.member import EmailStatus, Member


class MemberRepository(Protocol):
    """Protocol defining the interface for member identity storage."""
    def upsert(
        self,
        user_id: str,
        email: str,
        name: str | None = None,
        username: str | None = None,
    ) -> bool:
        """Insert or merge a member keyed by provider user id. Return True if stored."""
        ...

    def get_by_id(self, user_id: str) -> Member | None:
        """Find a member by provider user id. Return Member or None if not found."""
        ...

    def get_by_email(self, email: str) -> Member | None:
        """Find a member by email. Return Member or None if not found."""
        ...

    def update_email_status(self, email: str, status: EmailStatus) -> bool:
        """Set the email status of every member with this email. Return True if successful."""
        ...

    def count_by_status(self, status: EmailStatus) -> int | None:
        """Count members with the given email status. Return None on failure."""
        ...
