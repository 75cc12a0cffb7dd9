"""Shared fixtures for stockalert tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from stockalert.clock import DayBoundaryClock
from stockalert.models.quote import Quote
from stockalert.providers.mock import MockProvider

ET = ZoneInfo("America/New_York")


class FakeNow:
    """Settable, advanceable replacement for the wall clock."""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def __call__(self) -> datetime:
        return self.current

    def set(self, *args: int) -> None:
        self.current = datetime(*args, tzinfo=ET)

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


def make_quote(
    symbol: str,
    current: float,
    open: float = 100.0,
    name: str | None = None,
) -> Quote:
    return Quote(
        symbol=symbol,
        name=name or f"{symbol} Inc.",
        current=current,
        open=open,
        high=max(current, open),
        low=min(current, open),
        previous_close=open,
    )


@pytest.fixture
def fake_now() -> FakeNow:
    # Tuesday, mid-session
    return FakeNow(datetime(2024, 1, 16, 10, 0, tzinfo=ET))


@pytest.fixture
def clock(fake_now: FakeNow) -> DayBoundaryClock:
    return DayBoundaryClock(now_fn=fake_now)


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()
