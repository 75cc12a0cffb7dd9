"""AlertScheduler — poll cycle and midnight reset on one asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Sequence

from stockalert.baseline import BaselineStore
from stockalert.clock import DayBoundaryClock
from stockalert.dashboard import TerminalDashboard
from stockalert.engine import (
    DEFAULT_ALERT_LOG_CAPACITY,
    DEFAULT_DROP_THRESHOLD_PCT,
    AlertLog,
    DropDetector,
    PriceThreshold,
    ThresholdCrossingDetector,
)
from stockalert.models.alert import AlertEvent
from stockalert.models.quote import Quote, QuoteBatch
from stockalert.notifiers.base import BaseNotifier
from stockalert.source import QuoteSource

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class MonitorState:
    """All mutable alerting state, owned by one scheduler.

    Only touched from the scheduler's callbacks, which run on a single event
    loop, so no lock is held around mutations.
    """

    baseline: BaselineStore
    drops: DropDetector
    crossings: ThresholdCrossingDetector
    alert_log: AlertLog
    latest: QuoteBatch = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        clock: DayBoundaryClock,
        drop_threshold_pct: float = DEFAULT_DROP_THRESHOLD_PCT,
        thresholds: Mapping[str, PriceThreshold] | None = None,
        alert_log_capacity: int = DEFAULT_ALERT_LOG_CAPACITY,
    ) -> "MonitorState":
        return cls(
            baseline=BaselineStore(clock),
            drops=DropDetector(drop_threshold_pct),
            crossings=ThresholdCrossingDetector(thresholds),
            alert_log=AlertLog(alert_log_capacity),
        )


class AlertScheduler:
    """Central loop: gate on market hours -> refresh baseline -> fetch -> detect -> notify.

    Usage::

        scheduler = AlertScheduler(source, clock, notifiers=[LogNotifier()])
        asyncio.run(scheduler.run())

    Args:
        source: Quote source for the tracked symbols.
        clock: Reference-timezone clock.
        notifiers: Channels that receive each non-empty event batch.
        state: Alert state; built from the clock with defaults when omitted.
        poll_interval_seconds: Period between poll cycles.
        dashboard: Optional display refreshed after every fetched cycle.
        sleep: Awaitable sleep, replaceable in tests.
    """

    def __init__(
        self,
        source: QuoteSource,
        clock: DayBoundaryClock,
        notifiers: Sequence[BaseNotifier] = (),
        state: MonitorState | None = None,
        poll_interval_seconds: float = 180,
        dashboard: TerminalDashboard | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self.source = source
        self.clock = clock
        self.notifiers = list(notifiers)
        self.state = state or MonitorState.create(clock)
        self.poll_interval_seconds = poll_interval_seconds
        self.dashboard = dashboard
        self._sleep: Sleep = sleep or asyncio.sleep

    # ------------------------------------------------------------ baseline

    async def capture_baseline(self) -> bool:
        """Fetch and store today's opening prices. Failures are logged, not raised."""
        logger.info("[%s] Fetching opening prices...", self.clock.timestamp())
        try:
            batch = await self.source.fetch_all()
        except Exception as exc:
            logger.error(
                "[%s] Capturing opening prices failed: %s", self.clock.timestamp(), exc,
            )
            return False
        self.state.baseline.set_baseline(batch)
        return True

    # ----------------------------------------------------------- poll cycle

    async def poll_once(self) -> list[AlertEvent]:
        """Run one poll cycle and return the events it emitted."""
        if not self.clock.is_market_open():
            return []

        if self.state.baseline.is_stale():
            await self.capture_baseline()

        ts = self.clock.timestamp()
        try:
            batch = await self.source.fetch_all()
        except Exception as exc:
            logger.error("[%s] Fetching prices failed, retrying next cycle: %s", ts, exc)
            return []

        self.state.latest = batch
        missing = self.state.baseline.missing_opens(batch)
        if missing:
            logger.info(
                "[%s] Opening prices now available for %s, refreshing baseline",
                ts, ", ".join(missing),
            )
            self.state.baseline.set_baseline(batch)
        baseline = self.state.baseline.get_baseline()
        self._log_batch(ts, batch, baseline)

        now = self.clock.now()
        events = self.state.drops.evaluate(batch, baseline, now)
        events += self.state.crossings.evaluate(batch, now)

        if events:
            self.state.alert_log.extend(events)
            for event in events:
                logger.warning("[%s] ALERT %s", ts, event.describe())
            self._notify(ts, events)

        if self.dashboard is not None:
            try:
                self.dashboard.render(batch, self.state.alert_log, now)
            except Exception as exc:
                logger.error("[%s] Rendering dashboard failed: %s", ts, exc)

        return events

    def _log_batch(
        self, ts: str, batch: QuoteBatch, baseline: Mapping[str, float],
    ) -> None:
        threshold = self.state.drops.threshold_pct
        for symbol, result in batch.items():
            if not isinstance(result, Quote):
                logger.info("[%s] %s: ERROR (skipped)", ts, symbol)
                continue
            base = baseline.get(symbol)
            if not base:
                logger.info("[%s] %s: $%.2f (no open price yet)", ts, symbol, result.current)
                continue
            pct = (result.current - base) / base * 100
            flag = " !" if pct <= threshold else ""
            logger.info(
                "[%s] %s: $%.2f (%+.2f%% from open)%s", ts, symbol, result.current, pct, flag,
            )

    def _notify(self, ts: str, events: list[AlertEvent]) -> None:
        for notifier in self.notifiers:
            try:
                notifier.send(events)
            except Exception as exc:
                logger.error("[%s] Sending alerts via %s failed: %s", ts, notifier.name, exc)

    # ------------------------------------------------------------- midnight

    async def midnight_reset(self) -> None:
        """Start a new trading day: clear drop suppression, re-prime the baseline."""
        cleared = self.state.drops.reset()
        logger.info(
            "[%s] Midnight reset: %d symbol(s) cleared from drop suppression",
            self.clock.timestamp(), cleared,
        )
        # Opens are usually still zero this early; poll_once refreshes the
        # baseline once the session reports them.
        await self.capture_baseline()

    # ---------------------------------------------------------------- loops

    async def run_poll_loop(self) -> None:
        while True:
            await self._sleep(self.poll_interval_seconds)
            await self.poll_once()

    async def run_midnight_loop(self) -> None:
        while True:
            delay = self.clock.duration_until_next_midnight()
            logger.info("Next midnight reset in ~%d minutes", round(delay.total_seconds() / 60))
            await self._sleep(delay.total_seconds())
            await self.midnight_reset()

    async def run(self) -> None:
        """Capture baseline, poll immediately, then run both schedules forever."""
        await self.capture_baseline()
        await self.poll_once()
        logger.info(
            "Polling every %.0fs during market hours (%s-%s %s)",
            self.poll_interval_seconds,
            f"{self.clock.market_open:%H:%M}",
            f"{self.clock.market_close:%H:%M}",
            self.clock.zone.key,
        )
        await asyncio.gather(self.run_poll_loop(), self.run_midnight_loop())
