"""In-memory implementation of StatsSourcePort for testing."""

from domain.model.errors import StatsUnavailableError
from domain.model.stats import DarwinStats


class FakeStatsSource:
    """Returns preconfigured stats, or raises when constructed with ``error``."""

    def __init__(self, stats: DarwinStats | None = None, error: str | None = None):
        self.stats = stats or DarwinStats()
        self.error = error
        self.requested: list[str] = []

    async def fetch(self, code: str) -> DarwinStats:
        self.requested.append(code)
        if self.error:
            raise StatsUnavailableError(code, self.error)
        return self.stats
