from dataclasses import dataclass
from datetime import datetime


@dataclass
class CheckoutSession:
    """A checkout started by an anonymous visitor."""
    anonymous_id: str
    started_at: datetime
    notified: bool = False
