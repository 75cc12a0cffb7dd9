"""Finnhub quote provider.

Uses the ``/quote`` endpoint through finnhub-python. Response fields:
``c`` current, ``o`` open, ``h`` high, ``l`` low, ``pc`` previous close.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any

from stockalert.errors import ConfigError, StockAlertError, StockAlertErrorCode
from stockalert.models.quote import Quote
from stockalert.providers.base import BaseQuoteProvider

try:
    import finnhub
    _FINNHUB_AVAILABLE = True
except ImportError:
    _FINNHUB_AVAILABLE = False


class FinnhubProvider(BaseQuoteProvider):
    """Fetch real-time quotes from Finnhub.io.

    Args:
        api_key: Finnhub API key (falls back to ``FINNHUB_API_KEY``).
        timeout: Per-request timeout in seconds.
        client: Pre-built client, mainly for tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: Any | None = None,
    ) -> None:
        if client is not None:
            self.client = client
            return

        if not _FINNHUB_AVAILABLE:
            raise ConfigError(
                "finnhub-python is not installed. Run: pip install finnhub-python",
            )

        self.api_key = api_key or os.getenv("FINNHUB_API_KEY")
        if not self.api_key:
            raise ConfigError(
                "Finnhub API key required. Set FINNHUB_API_KEY env var or pass api_key.",
                code=StockAlertErrorCode.AUTH_FAILED,
            )

        self.client = finnhub.Client(api_key=self.api_key)
        self.client.DEFAULT_TIMEOUT = timeout

    def get_quote(self, symbol: str, name: str | None = None) -> Quote:
        symbol = symbol.upper()
        try:
            data = self.client.quote(symbol)
        except Exception as exc:
            raise StockAlertError(
                f"Finnhub quote failed for {symbol}: {exc}",
                code=_classify(exc),
                retryable=True,
            ) from exc

        if not data or data.get("c") is None:
            raise StockAlertError(
                f"No price data returned for {symbol}",
                code=StockAlertErrorCode.NO_DATA,
                retryable=True,
            )
        # Unknown symbols come back as an all-zero payload
        if not data.get("c") and not data.get("pc"):
            raise StockAlertError(
                f"Unknown symbol {symbol}",
                code=StockAlertErrorCode.NOT_FOUND,
            )

        return Quote(
            symbol=symbol,
            name=name or symbol,
            current=float(data["c"]),
            open=float(data.get("o") or 0.0),
            high=float(data.get("h") or 0.0),
            low=float(data.get("l") or 0.0),
            previous_close=float(data.get("pc") or 0.0),
            timestamp=datetime.now(timezone.utc),
        )


def _classify(exc: Exception) -> StockAlertErrorCode:
    status = getattr(exc, "status_code", None)
    if status == 429:
        return StockAlertErrorCode.RATE_LIMITED
    if status in (401, 403):
        return StockAlertErrorCode.AUTH_FAILED
    if "timed out" in str(exc).lower():
        return StockAlertErrorCode.TIMEOUT
    return StockAlertErrorCode.PROVIDER_ERROR
