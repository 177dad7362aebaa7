"""Domain model for scraped DARWIN trading statistics."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class DarwinStats:
    """Statistics shown on a DARWIN invest page.

    Every numeric field is None when it could not be parsed, except the three
    fields that fall back to static values (see ``FALLBACK_STATS``).
    """
    return_since_inception: float | None = None
    annualized_return: float | None = None
    track_record_years: float | None = None
    maximum_drawdown: float | None = None
    best_month: float | None = None
    worst_month: float | None = None
    number_of_trades: float | None = None
    average_trade_duration: str | None = None
    winning_trades_ratio: float | None = None
    current_investors: float | None = None
    aum: float | None = None
    last_updated: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    )
