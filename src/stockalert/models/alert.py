"""Alert event data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AlertKind(Enum):
    """Condition that produced an alert."""

    DROP_PERCENT = "drop_percent"
    ABOVE = "above"
    BELOW = "below"


@dataclass(frozen=True)
class AlertEvent:
    """A single alert firing.

    Attributes:
        symbol: Ticker symbol.
        name: Company name.
        kind: Condition kind.
        reference: Opening price for drops, threshold price for crossings.
        observed: Price that triggered the alert.
        magnitude: Percent move for drops, dollars past the threshold otherwise.
        timestamp: When the condition was detected.
    """

    symbol: str
    name: str
    kind: AlertKind
    reference: float
    observed: float
    magnitude: float
    timestamp: datetime

    def describe(self) -> str:
        """One-line human summary."""
        if self.kind is AlertKind.DROP_PERCENT:
            return (
                f"{self.symbol} ${self.observed:.2f} "
                f"({self.magnitude:+.2f}% from open ${self.reference:.2f})"
            )
        return (
            f"{self.symbol} crossed {self.kind.value} ${self.reference:.2f} "
            f"(now ${self.observed:.2f})"
        )
