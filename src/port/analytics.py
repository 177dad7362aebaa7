"""Port definition for server-side funnel analytics."""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class TrackingContext:
    """Identifies the visitor an analytics event belongs to."""
    anonymous_id: str
    session_id: str
    user_id: str | None = None


class AnalyticsPort(Protocol):
    async def track(self, event_name: str, properties: dict[str, Any], context: TrackingContext) -> bool: ...
    async def identify(self, email: str, anonymous_id: str, traits: dict[str, Any]) -> bool: ...
