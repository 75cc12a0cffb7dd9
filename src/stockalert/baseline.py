"""Opening-price baseline for the current trading day."""

from __future__ import annotations

import logging
from typing import Mapping

from stockalert.clock import DayBoundaryClock
from stockalert.models.quote import Quote, QuoteResult

logger = logging.getLogger(__name__)


class BaselineStore:
    """Holds each symbol's opening price, tagged with the day it was captured.

    Entries exist only for symbols whose fetched open was strictly positive;
    zero opens are pre-market artifacts. ``set_baseline`` always replaces the
    whole mapping in one rebinding.
    """

    def __init__(self, clock: DayBoundaryClock) -> None:
        self.clock = clock
        self._opens: dict[str, float] = {}
        self._trading_day: str | None = None

    @property
    def trading_day(self) -> str | None:
        return self._trading_day

    def set_baseline(self, batch: Mapping[str, QuoteResult]) -> dict[str, float]:
        """Replace the baseline from a fetch batch and stamp it with today."""
        opens = {
            symbol: result.open
            for symbol, result in batch.items()
            if isinstance(result, Quote) and result.open > 0
        }
        self._opens = opens
        self._trading_day = self.clock.current_trading_day()
        logger.info(
            "Opening prices stored for %d symbol(s) (%s)", len(opens), self._trading_day,
        )
        return dict(opens)

    def get_baseline(self) -> dict[str, float]:
        return dict(self._opens)

    def is_stale(self) -> bool:
        """True when the baseline belongs to another trading day (or none yet)."""
        return self._trading_day != self.clock.current_trading_day()

    def missing_opens(self, batch: Mapping[str, QuoteResult]) -> list[str]:
        """Symbols with a positive open in ``batch`` but no baseline entry.

        Non-empty after a capture that ran before the session opened (opens
        still zero) or that lost symbols to fetch failures.
        """
        return [
            symbol
            for symbol, result in batch.items()
            if isinstance(result, Quote) and result.open > 0 and symbol not in self._opens
        ]
