"""Port definition for transactional email delivery."""

from typing import Protocol

from domain.model.delivery import DeliveryResult


class MailerPort(Protocol):
    async def send_html(self, to: str, subject: str, html: str) -> DeliveryResult: ...
    async def send_template(self, to: str, template_id: str, variables: dict[str, str]) -> DeliveryResult: ...
