"""Day-boundary clock — reference-timezone date, market hours, midnight timing.

All wall-clock fields are read in the reference zone through ``zoneinfo`` so
DST transitions are handled by the zone database, never by a fixed offset.
Holidays are not considered: a weekday holiday counts as a market day.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from stockalert.errors import ConfigError

DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_MARKET_OPEN = time(9, 30)
DEFAULT_MARKET_CLOSE = time(16, 0)

_SECONDS_PER_DAY = 24 * 3600


def load_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone name, raising ConfigError for unknown zones."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {name!r}") from exc


class DayBoundaryClock:
    """Wall clock pinned to one reference timezone.

    Args:
        timezone: IANA zone name for the trading day (default US Eastern).
        market_open: Regular session open, local time.
        market_close: Regular session close, local time (exclusive).
        now_fn: Optional source of the current time. May return naive
            (interpreted as reference-zone) or aware datetimes.
        rollover_buffer: Added to the midnight delay so the reset fires
            strictly after the date changes.
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        market_open: time = DEFAULT_MARKET_OPEN,
        market_close: time = DEFAULT_MARKET_CLOSE,
        now_fn: Callable[[], datetime] | None = None,
        rollover_buffer: timedelta = timedelta(seconds=1),
    ) -> None:
        if market_open >= market_close:
            raise ConfigError(
                f"Market open {market_open:%H:%M} must be before close {market_close:%H:%M}"
            )
        if rollover_buffer < timedelta(seconds=1):
            raise ConfigError("Rollover buffer must be at least one second")

        self.zone = load_zone(timezone)
        self.market_open = market_open
        self.market_close = market_close
        self.rollover_buffer = rollover_buffer
        self._now_fn = now_fn

    def now(self) -> datetime:
        """Current time in the reference zone."""
        if self._now_fn is None:
            return datetime.now(self.zone)
        dt = self._now_fn()
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self.zone)
        return dt.astimezone(self.zone)

    def current_trading_day(self) -> str:
        """Reference-zone calendar date as ``YYYY-MM-DD``."""
        return self.now().date().isoformat()

    def is_market_open(self) -> bool:
        """Monday–Friday within [open, close) local time."""
        dt = self.now()
        if dt.weekday() >= 5:
            return False
        return self.market_open <= dt.time() < self.market_close

    def duration_until_next_midnight(self) -> timedelta:
        """Time left until the reference-zone date changes, plus the buffer.

        Recomputed from the local clock fields on every call; callers must
        not cache the result across days.
        """
        dt = self.now()
        elapsed = dt.hour * 3600 + dt.minute * 60 + dt.second
        remaining = _SECONDS_PER_DAY - elapsed
        return timedelta(seconds=remaining) + self.rollover_buffer

    def timestamp(self) -> str:
        """Log-line timestamp, e.g. ``2026-02-26 10:33 EST``."""
        return self.now().strftime("%Y-%m-%d %H:%M %Z")
