"""Tests for the day-boundary clock."""

from datetime import datetime, time, timedelta, timezone

import pytest

from stockalert.clock import DayBoundaryClock
from stockalert.errors import ConfigError

from conftest import ET, FakeNow


def _clock_at(*args: int) -> DayBoundaryClock:
    return DayBoundaryClock(now_fn=FakeNow(datetime(*args, tzinfo=ET)))


class TestNow:
    def test_naive_is_reference_zone(self):
        clock = DayBoundaryClock(now_fn=lambda: datetime(2024, 1, 16, 10, 0))
        assert clock.now().tzinfo is not None
        assert clock.now().hour == 10

    def test_aware_converted(self):
        clock = DayBoundaryClock(
            now_fn=lambda: datetime(2024, 1, 16, 15, 0, tzinfo=timezone.utc),
        )
        assert clock.now().hour == 10  # EST is UTC-5

    def test_real_clock_is_aware(self):
        assert DayBoundaryClock().now().tzinfo is not None


class TestTradingDay:
    def test_iso_date(self):
        assert _clock_at(2024, 1, 16, 10, 0).current_trading_day() == "2024-01-16"

    def test_uses_reference_date_not_utc(self):
        # 03:00 UTC on the 17th is still the evening of the 16th in New York
        clock = DayBoundaryClock(
            now_fn=lambda: datetime(2024, 1, 17, 3, 0, tzinfo=timezone.utc),
        )
        assert clock.current_trading_day() == "2024-01-16"


class TestMarketOpen:
    def test_open_at_bell(self):
        assert _clock_at(2024, 1, 16, 9, 30).is_market_open()

    def test_closed_before_bell(self):
        assert not _clock_at(2024, 1, 16, 9, 29, 59).is_market_open()

    def test_open_before_close(self):
        assert _clock_at(2024, 1, 16, 15, 59).is_market_open()

    def test_closed_at_close(self):
        assert not _clock_at(2024, 1, 16, 16, 0).is_market_open()

    def test_weekend_closed(self):
        assert not _clock_at(2024, 1, 13, 11, 0).is_market_open()  # Saturday
        assert not _clock_at(2024, 1, 14, 11, 0).is_market_open()  # Sunday

    def test_holiday_not_considered(self):
        # MLK Day 2024 is a weekday holiday; treated as a market day
        assert _clock_at(2024, 1, 15, 11, 0).is_market_open()

    def test_dst_handled_by_zone(self):
        # 14:00 UTC is 09:00 EST in January but 10:00 EDT in July
        winter = DayBoundaryClock(
            now_fn=lambda: datetime(2024, 1, 16, 14, 0, tzinfo=timezone.utc),
        )
        summer = DayBoundaryClock(
            now_fn=lambda: datetime(2024, 7, 16, 14, 0, tzinfo=timezone.utc),
        )
        assert not winter.is_market_open()
        assert summer.is_market_open()

    def test_custom_window(self):
        clock = DayBoundaryClock(
            market_open=time(4, 0),
            market_close=time(20, 0),
            now_fn=FakeNow(datetime(2024, 1, 16, 5, 0, tzinfo=ET)),
        )
        assert clock.is_market_open()


class TestMidnight:
    def test_one_second_before_midnight(self):
        delay = _clock_at(2024, 1, 16, 23, 59, 59).duration_until_next_midnight()
        assert timedelta(0) < delay <= timedelta(seconds=2)

    def test_at_midnight_full_day_plus_buffer(self):
        delay = _clock_at(2024, 1, 16, 0, 0, 0).duration_until_next_midnight()
        assert delay == timedelta(days=1, seconds=1)

    def test_recomputed_each_call(self, fake_now, clock):
        first = clock.duration_until_next_midnight()
        fake_now.advance(3600)
        second = clock.duration_until_next_midnight()
        assert first - second == timedelta(hours=1)

    def test_fires_after_rollover(self, fake_now, clock):
        fake_now.set(2024, 1, 16, 22, 15, 30)
        fake_now.advance(clock.duration_until_next_midnight().total_seconds())
        assert clock.current_trading_day() == "2024-01-17"


class TestValidation:
    def test_unknown_timezone(self):
        with pytest.raises(ConfigError):
            DayBoundaryClock(timezone="Mars/Olympus_Mons")

    def test_open_after_close(self):
        with pytest.raises(ConfigError):
            DayBoundaryClock(market_open=time(16, 0), market_close=time(9, 30))

    def test_buffer_too_small(self):
        with pytest.raises(ConfigError):
            DayBoundaryClock(rollover_buffer=timedelta(0))


def test_timestamp_format():
    assert _clock_at(2024, 1, 16, 10, 33).timestamp() == "2024-01-16 10:33 EST"
