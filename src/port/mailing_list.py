"""Port definition for mailing-list contact sync."""

from typing import Protocol

from domain.model.delivery import DeliveryResult


class MailingListPort(Protocol):
    async def add_contact(
        self,
        email: str,
        first_name: str = '',
        last_name: str = '',
        source: str | None = None,
    ) -> DeliveryResult: ...
