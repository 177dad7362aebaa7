"""Port definition for checkout session and purchase-flag tracking."""

from datetime import timedelta
from typing import Protocol

from domain.model.checkout import CheckoutSession


class CheckoutStorePort(Protocol):
    def start_session(self, anonymous_id: str) -> bool: ...
    def complete_session(self, anonymous_id: str) -> bool: ...
    def find_abandoned(self, older_than: timedelta) -> list[CheckoutSession]: ...
    def mark_purchased(self, anonymous_id: str) -> bool: ...
    def consume_purchase(self, anonymous_id: str) -> bool: ...
    def ping(self) -> bool: ...
