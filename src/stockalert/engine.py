"""Alert detection — drop-from-open and threshold-crossing detectors.

The two detectors keep separate suppression state with different reset
triggers: the drop detector is one-shot per symbol per day (cleared by the
midnight reset), while crossing conditions re-arm only when the price returns
past the threshold. Fetch failures are "no signal" for both and never touch
suppression state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, Mapping

from stockalert.models.alert import AlertEvent, AlertKind
from stockalert.models.quote import Quote, QuoteResult

DEFAULT_DROP_THRESHOLD_PCT = -5.0
DEFAULT_ALERT_LOG_CAPACITY = 50


@dataclass(frozen=True)
class PriceThreshold:
    """Optional above/below price levels for one symbol."""

    above: float | None = None
    below: float | None = None


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


class DropDetector:
    """Fires once per symbol per day when the price falls far enough below open.

    Args:
        threshold_pct: Percent change from open at or below which to alert
            (negative, default -5).
    """

    def __init__(self, threshold_pct: float = DEFAULT_DROP_THRESHOLD_PCT) -> None:
        self.threshold_pct = threshold_pct
        self._alerted: set[str] = set()

    @property
    def suppressed(self) -> frozenset[str]:
        return frozenset(self._alerted)

    def evaluate(
        self,
        batch: Mapping[str, QuoteResult],
        baseline: Mapping[str, float],
        now: datetime | None = None,
    ) -> list[AlertEvent]:
        now = _now(now)
        events: list[AlertEvent] = []

        for symbol, result in batch.items():
            if not isinstance(result, Quote):
                continue
            if symbol in self._alerted:
                continue
            base = baseline.get(symbol)
            if not base:
                continue

            drop_pct = (result.current - base) / base * 100
            if drop_pct > self.threshold_pct:
                continue

            events.append(AlertEvent(
                symbol=symbol,
                name=result.name,
                kind=AlertKind.DROP_PERCENT,
                reference=base,
                observed=result.current,
                magnitude=drop_pct,
                timestamp=now,
            ))
            self._alerted.add(symbol)

        return events

    def reset(self) -> int:
        """Clear the whole suppression set; returns how many symbols were cleared."""
        count = len(self._alerted)
        self._alerted.clear()
        return count


class ThresholdCrossingDetector:
    """Fires when a price crosses a configured level, with hysteresis.

    A fired (symbol, kind) pair stays armed until the price is back at or on
    the other side of the threshold; day boundaries do not re-arm it.
    """

    def __init__(self, thresholds: Mapping[str, PriceThreshold] | None = None) -> None:
        self.thresholds: dict[str, PriceThreshold] = dict(thresholds or {})
        self._armed: set[tuple[str, AlertKind]] = set()

    @property
    def armed(self) -> frozenset[tuple[str, AlertKind]]:
        return frozenset(self._armed)

    def evaluate(
        self,
        batch: Mapping[str, QuoteResult],
        now: datetime | None = None,
    ) -> list[AlertEvent]:
        now = _now(now)
        events: list[AlertEvent] = []

        for symbol, result in batch.items():
            if not isinstance(result, Quote):
                continue
            config = self.thresholds.get(symbol)
            if config is None:
                continue

            price = result.current

            if config.above is not None:
                key = (symbol, AlertKind.ABOVE)
                if price > config.above:
                    if key not in self._armed:
                        self._armed.add(key)
                        events.append(self._event(result, AlertKind.ABOVE, config.above, now))
                else:
                    self._armed.discard(key)

            if config.below is not None:
                key = (symbol, AlertKind.BELOW)
                if price < config.below:
                    if key not in self._armed:
                        self._armed.add(key)
                        events.append(self._event(result, AlertKind.BELOW, config.below, now))
                else:
                    self._armed.discard(key)

        return events

    @staticmethod
    def _event(
        quote: Quote, kind: AlertKind, threshold: float, now: datetime,
    ) -> AlertEvent:
        return AlertEvent(
            symbol=quote.symbol,
            name=quote.name,
            kind=kind,
            reference=threshold,
            observed=quote.current,
            magnitude=abs(quote.current - threshold),
            timestamp=now,
        )


class AlertLog:
    """Bounded rolling log of alert events, oldest first."""

    def __init__(self, capacity: int = DEFAULT_ALERT_LOG_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._events: deque[AlertEvent] = deque(maxlen=capacity)

    def append(self, event: AlertEvent) -> None:
        self._events.append(event)

    def extend(self, events: list[AlertEvent]) -> None:
        self._events.extend(events)

    def recent(self, n: int | None = None) -> list[AlertEvent]:
        """Last ``n`` events (all when ``n`` is None), chronological."""
        events = list(self._events)
        if n is None:
            return events
        return events[-n:] if n > 0 else []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[AlertEvent]:
        return iter(list(self._events))
