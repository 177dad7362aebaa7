"""Port definition for inbound webhook verification."""

from typing import Protocol

from domain.model.webhook import WebhookEvent


class WebhookVerifierPort(Protocol):
    def unwrap(self, body: bytes, headers: dict[str, str]) -> WebhookEvent:
        """Verify signature and parse the envelope.

        Raises WebhookVerificationError on a bad signature and ValidationError
        on a malformed envelope.
        """
        ...
