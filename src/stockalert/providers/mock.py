"""Mock provider for testing and dry runs — no API keys required."""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone

from stockalert.errors import StockAlertError, StockAlertErrorCode
from stockalert.models.quote import Quote
from stockalert.providers.base import BaseQuoteProvider


class MockProvider(BaseQuoteProvider):
    """In-memory provider that returns configurable static data.

    Use ``set_price`` / ``set_quote`` to pre-load data and ``set_failure`` to
    make a symbol raise. Unknown symbols get a flat synthetic quote.
    ``calls`` keeps the most recent ``max_calls`` requested symbols.
    """

    def __init__(self, max_calls: int = 1000) -> None:
        self._quotes: dict[str, Quote] = {}
        self._failures: dict[str, StockAlertError] = {}
        self.calls: deque[str] = deque(maxlen=max_calls)

    # --- Pre-load helpers ---

    def set_quote(self, symbol: str, quote: Quote) -> None:
        self._quotes[symbol.upper()] = quote

    def set_price(
        self,
        symbol: str,
        current: float,
        open: float | None = None,
        name: str | None = None,
    ) -> None:
        key = symbol.upper()
        if open is None:
            previous = self._quotes.get(key)
            open = previous.open if previous is not None else current
        self._quotes[key] = Quote(
            symbol=key,
            name=name or key,
            current=current,
            open=open,
            high=max(current, open),
            low=min(current, open) if open > 0 else current,
            previous_close=open if open > 0 else current,
        )

    def set_failure(self, symbol: str, message: str = "simulated failure") -> None:
        self._failures[symbol.upper()] = StockAlertError(
            message, code=StockAlertErrorCode.PROVIDER_ERROR, retryable=True,
        )

    def clear_failure(self, symbol: str) -> None:
        self._failures.pop(symbol.upper(), None)

    # --- Provider implementation ---

    def get_quote(self, symbol: str, name: str | None = None) -> Quote:
        key = symbol.upper()
        self.calls.append(key)
        if key in self._failures:
            raise self._failures[key]

        now = datetime.now(timezone.utc)
        quote = self._quotes.get(key)
        if quote is None:
            return Quote(
                symbol=key,
                name=name or key,
                current=150.00,
                open=150.00,
                high=150.25,
                low=149.85,
                previous_close=149.50,
                timestamp=now,
            )
        return Quote(
            symbol=quote.symbol,
            name=name or quote.name,
            current=quote.current,
            open=quote.open,
            high=quote.high,
            low=quote.low,
            previous_close=quote.previous_close,
            timestamp=quote.timestamp or now,
        )
