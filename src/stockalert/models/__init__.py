"""Stock alert models."""

from stockalert.models.alert import AlertEvent, AlertKind
from stockalert.models.quote import Quote, QuoteBatch, QuoteFailure, QuoteResult

__all__ = [
    "AlertEvent",
    "AlertKind",
    "Quote",
    "QuoteBatch",
    "QuoteFailure",
    "QuoteResult",
]
