"""Quote data model and per-symbol fetch failure marker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union


@dataclass(frozen=True)
class Quote:
    """Current price data for one symbol.

    Attributes:
        symbol: Ticker symbol.
        name: Company name.
        current: Last traded price.
        open: Today's opening price (0 before the open on some feeds).
        high: High of the day.
        low: Low of the day.
        previous_close: Previous session's close.
        timestamp: When the quote was fetched.
    """

    symbol: str
    name: str
    current: float
    open: float
    high: float
    low: float
    previous_close: float
    timestamp: datetime | None = None

    @property
    def change(self) -> float:
        """Dollar change from previous close."""
        return self.current - self.previous_close

    @property
    def change_pct(self) -> float:
        """Percent change from previous close."""
        if self.previous_close <= 0:
            return 0.0
        return self.change / self.previous_close * 100


@dataclass(frozen=True)
class QuoteFailure:
    """Stands in for a Quote when fetching that symbol failed this cycle."""

    symbol: str
    reason: str


QuoteResult = Union[Quote, QuoteFailure]

# symbol -> result, in configured order
QuoteBatch = dict[str, QuoteResult]
