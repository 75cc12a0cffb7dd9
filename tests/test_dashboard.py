"""Tests for the terminal dashboard projection."""

import io
from datetime import datetime, timedelta, timezone

from stockalert.dashboard import TerminalDashboard, alerts_frame, quotes_frame
from stockalert.engine import AlertLog
from stockalert.models.alert import AlertEvent, AlertKind
from stockalert.models.quote import QuoteFailure

from conftest import make_quote

T0 = datetime(2024, 1, 16, 15, 0, tzinfo=timezone.utc)


def _event(i, kind=AlertKind.ABOVE):
    return AlertEvent(f"S{i:02d}", "Co", kind, 100.0, 101.0, 1.0, T0 + timedelta(minutes=i))


class TestFrames:
    def test_quotes_frame(self):
        frame = quotes_frame({
            "AAPL": make_quote("AAPL", 105.0, open=100.0),
            "NVDA": QuoteFailure("NVDA", "boom"),
        })
        assert list(frame["Symbol"]) == ["AAPL", "NVDA"]
        assert frame.loc[0, "Price"] == "$105.00"
        assert frame.loc[0, "Change %"] == "+5.00%"
        assert frame.loc[1, "Price"] == "ERROR: boom"

    def test_zero_open_shown_as_na(self):
        frame = quotes_frame({"AAPL": make_quote("AAPL", 105.0, open=0.0)})
        assert frame.loc[0, "Open"] == "N/A"

    def test_alerts_frame(self):
        frame = alerts_frame([_event(1, AlertKind.DROP_PERCENT), _event(2)])
        assert list(frame["Type"]) == ["DROP", "ABOVE"]


class TestRender:
    def test_no_alerts(self):
        text = TerminalDashboard(clear=False).render_text(
            {"AAPL": make_quote("AAPL", 105.0)}, AlertLog(),
        )
        assert "AAPL" in text
        assert "No alerts triggered yet." in text

    def test_shows_last_ten(self):
        log = AlertLog()
        log.extend([_event(i) for i in range(15)])
        text = TerminalDashboard(clear=False).render_text({}, log)
        assert "S14" in text
        assert "S05" in text
        assert "S04" not in text

    def test_writes_to_stream(self):
        out = io.StringIO()
        TerminalDashboard(stream=out, clear=True).render({}, [])
        assert out.getvalue().startswith("\x1b[2J")
        assert "No quotes yet." in out.getvalue()
