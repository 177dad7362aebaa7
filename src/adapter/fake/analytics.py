"""In-memory implementation of AnalyticsPort for testing."""

from typing import Any

from port.analytics import TrackingContext


class FakeAnalytics:
    def __init__(self):
        self.events: list[tuple[str, dict[str, Any], TrackingContext]] = []
        self.identified: list[tuple[str, str, dict[str, Any]]] = []

    async def track(self, event_name: str, properties: dict[str, Any], context: TrackingContext) -> bool:
        self.events.append((event_name, properties, context))
        return True

    async def identify(self, email: str, anonymous_id: str, traits: dict[str, Any]) -> bool:
        self.identified.append((email, anonymous_id, traits))
        return True

    @property
    def event_names(self) -> list[str]:
        return [name for name, _, _ in self.events]
