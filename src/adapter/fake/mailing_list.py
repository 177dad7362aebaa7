"""In-memory implementation of MailingListPort for testing."""

from domain.model.delivery import DeliveryResult


class FakeMailingList:
    def __init__(self):
        self.contacts: list[dict] = []

    async def add_contact(
        self,
        email: str,
        first_name: str = '',
        last_name: str = '',
        source: str | None = None,
    ) -> DeliveryResult:
        if not email:
            return DeliveryResult.failed("Missing email")
        exists = any(c['email'] == email for c in self.contacts)
        self.contacts.append({
            'email': email, 'first_name': first_name, 'last_name': last_name, 'source': source,
        })
        return DeliveryResult(success=True, exists=exists)
