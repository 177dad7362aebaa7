"""In-memory implementation of CheckoutStorePort for testing."""

from datetime import datetime, timedelta, timezone

from domain.model.checkout import CheckoutSession


class FakeCheckoutStore:
    def __init__(self):
        self.sessions: dict[str, CheckoutSession] = {}
        self.purchases: set[str] = set()
        self.healthy = True

    def start_session(self, anonymous_id: str) -> bool:
        self.sessions[anonymous_id] = CheckoutSession(
            anonymous_id=anonymous_id,
            started_at=datetime.now(timezone.utc),
        )
        return True

    def complete_session(self, anonymous_id: str) -> bool:
        self.sessions.pop(anonymous_id, None)
        return True

    def find_abandoned(self, older_than: timedelta) -> list[CheckoutSession]:
        cutoff = datetime.now(timezone.utc) - older_than
        abandoned = []
        for session in self.sessions.values():
            if session.notified or session.started_at >= cutoff:
                continue
            abandoned.append(CheckoutSession(session.anonymous_id, session.started_at, False))
            session.notified = True
        return abandoned

    def mark_purchased(self, anonymous_id: str) -> bool:
        self.purchases.add(anonymous_id)
        return True

    def consume_purchase(self, anonymous_id: str) -> bool:
        if anonymous_id in self.purchases:
            self.purchases.discard(anonymous_id)
            return True
        return False

    def ping(self) -> bool:
        return self.healthy
