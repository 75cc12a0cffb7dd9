"""Terminal dashboard — pure projection of the latest batch and alert log."""

from __future__ import annotations

import shutil
import sys
from datetime import datetime
from typing import Iterable, TextIO

import pandas as pd

from stockalert.models.alert import AlertEvent, AlertKind
from stockalert.models.quote import Quote, QuoteBatch

_COLUMNS = ["Symbol", "Price", "Change", "Change %", "Day High", "Day Low", "Open", "Prev Close"]


def _price(value: float | None) -> str:
    return f"${value:.2f}" if value else "N/A"


def quotes_frame(batch: QuoteBatch) -> pd.DataFrame:
    """One row per symbol; failed fetches carry their error in the Price column."""
    rows = []
    for symbol, result in batch.items():
        if not isinstance(result, Quote):
            rows.append([symbol, f"ERROR: {result.reason}", "", "", "", "", "", ""])
            continue
        arrow = "▲" if result.change >= 0 else "▼"
        rows.append([
            symbol,
            _price(result.current),
            f"{arrow} {abs(result.change):.2f}",
            f"{result.change_pct:+.2f}%",
            _price(result.high),
            _price(result.low),
            _price(result.open),
            _price(result.previous_close),
        ])
    return pd.DataFrame(rows, columns=_COLUMNS)


def alerts_frame(events: Iterable[AlertEvent]) -> pd.DataFrame:
    rows = [
        [
            e.timestamp.strftime("%H:%M:%S"),
            "DROP" if e.kind is AlertKind.DROP_PERCENT else e.kind.value.upper(),
            e.symbol,
            e.describe(),
        ]
        for e in events
    ]
    return pd.DataFrame(rows, columns=["Time", "Type", "Symbol", "Detail"])


class TerminalDashboard:
    """Renders a quote table plus the most recent alerts.

    Args:
        stream: Output stream (default stdout).
        clear: Clear the terminal before each render.
        max_alerts: Number of recent alerts shown.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        clear: bool = True,
        max_alerts: int = 10,
    ) -> None:
        self.stream = stream or sys.stdout
        self.clear = clear
        self.max_alerts = max_alerts

    def render_text(
        self,
        batch: QuoteBatch,
        alerts: Iterable[AlertEvent],
        updated: datetime | None = None,
    ) -> str:
        width = shutil.get_terminal_size((100, 24)).columns
        updated = updated or datetime.now()
        lines = [
            " STOCK ALERT MONITOR ".center(width).rstrip(),
            f" Last updated: {updated:%Y-%m-%d %H:%M:%S}   Press Ctrl+C to exit",
            "",
        ]
        frame = quotes_frame(batch)
        lines.append(frame.to_string(index=False) if not frame.empty else " No quotes yet.")

        recent = list(alerts)[-self.max_alerts:]
        lines.append("")
        if recent:
            lines.append(" PRICE ALERTS")
            lines.append(alerts_frame(recent).to_string(index=False))
        else:
            lines.append(" No alerts triggered yet.")
        lines.append("")
        return "\n".join(lines)

    def render(
        self,
        batch: QuoteBatch,
        alerts: Iterable[AlertEvent],
        updated: datetime | None = None,
    ) -> None:
        text = self.render_text(batch, alerts, updated)
        if self.clear:
            self.stream.write("\x1b[2J\x1b[H")
        self.stream.write(text + "\n")
        self.stream.flush()
