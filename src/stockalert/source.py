"""Quote source — parallel per-symbol fetch with all-settled semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from stockalert.models.quote import Quote, QuoteBatch, QuoteFailure
from stockalert.providers.base import BaseQuoteProvider

logger = logging.getLogger(__name__)


class QuoteSource:
    """Fetches every tracked symbol concurrently.

    Each symbol succeeds or fails on its own; a failure becomes a
    ``QuoteFailure`` in the batch and never cancels the other fetches.

    Args:
        provider: Blocking quote provider, called from worker threads.
        symbols: symbol -> company name, in the order results should keep.
    """

    def __init__(self, provider: BaseQuoteProvider, symbols: Mapping[str, str]) -> None:
        self.provider = provider
        self.symbols = {s.upper(): name for s, name in symbols.items()}

    async def fetch_all(self) -> QuoteBatch:
        symbols = list(self.symbols)
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.provider.get_quote, s, self.symbols[s])
                for s in symbols
            ),
            return_exceptions=True,
        )

        batch: QuoteBatch = {}
        for symbol, result in zip(symbols, results):
            if isinstance(result, Quote):
                batch[symbol] = result
            elif isinstance(result, Exception):
                logger.error("Failed to fetch %s: %s", symbol, result)
                batch[symbol] = QuoteFailure(symbol=symbol, reason=str(result))
            elif isinstance(result, BaseException):
                # CancelledError / KeyboardInterrupt must propagate
                raise result
            else:
                logger.error("Provider returned %r for %s", type(result).__name__, symbol)
                batch[symbol] = QuoteFailure(symbol=symbol, reason="unexpected provider result")
        return batch
