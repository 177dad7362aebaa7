"""Port definition for trading statistics lookup."""

from typing import Protocol

from domain.model.stats import DarwinStats


class StatsSourcePort(Protocol):
    async def fetch(self, code: str) -> DarwinStats:
        """Fetch statistics for a DARWIN code. Raises StatsUnavailableError on failure."""
        ...
