"""Abstract base class for quote providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockalert.models.quote import Quote


class BaseQuoteProvider(ABC):
    """Abstract base for all quote providers.

    Implementations are synchronous and may block on network I/O; the
    ``QuoteSource`` runs them off the event loop.
    """

    @abstractmethod
    def get_quote(self, symbol: str, name: str | None = None) -> Quote:
        """Fetch the current quote for one symbol.

        Args:
            symbol: Ticker symbol.
            name: Company name to attach to the quote (defaults to the symbol).

        Raises:
            StockAlertError: When the provider fails or returns no data.
        """
        ...
