"""Subject line and message bodies for alert notifications."""

from __future__ import annotations

import html
from datetime import datetime

from stockalert.models.alert import AlertEvent, AlertKind


def fmt_price(value: float) -> str:
    return f"${value:.2f}"


def fmt_pct(value: float) -> str:
    return f"{value:+.2f}%"


def fmt_change(event: AlertEvent) -> str:
    if event.kind is AlertKind.DROP_PERCENT:
        return fmt_pct(event.magnitude)
    sign = "+" if event.kind is AlertKind.ABOVE else "-"
    return f"{sign}{fmt_price(event.magnitude)}"


def condition_label(event: AlertEvent) -> str:
    if event.kind is AlertKind.DROP_PERCENT:
        return "Drop from open"
    return f"Crossed {event.kind.value}"


def build_subject(events: list[AlertEvent]) -> str:
    """Singular phrasing for one event, combined phrasing otherwise."""
    if not events:
        raise ValueError("events must not be empty")

    if len(events) == 1:
        e = events[0]
        if e.kind is AlertKind.DROP_PERCENT:
            return f"Stock Alert: {e.symbol} dropped {abs(e.magnitude):.2f}% today"
        return f"Stock Alert: {e.symbol} crossed {e.kind.value} {fmt_price(e.reference)}"

    tickers = ", ".join(dict.fromkeys(e.symbol for e in events))
    if all(e.kind is AlertKind.DROP_PERCENT for e in events):
        return f"Stock Alert: {len(events)} stocks dropped sharply today ({tickers})"
    return f"Stock Alert: {len(events)} alerts triggered today ({tickers})"


def build_text_body(events: list[AlertEvent], alert_time: str) -> str:
    lines = [f"Stock alerts at {alert_time}", ""]
    for e in events:
        lines.append(
            f"{e.symbol:<6} {e.name:<20} {condition_label(e):<16} "
            f"ref {fmt_price(e.reference):>10}  now {fmt_price(e.observed):>10}  {fmt_change(e)}"
        )
    lines += ["", "Sent by your stock alert agent"]
    return "\n".join(lines)


_CELL = "padding:12px 16px"
_HEAD = "padding:10px 16px;text-align:left;color:#6b7280;font-weight:600;border-bottom:1px solid #e5e7eb"


def build_html_body(events: list[AlertEvent], alert_time: str) -> str:
    rows = "".join(
        f"""
      <tr>
        <td style="{_CELL};font-weight:700">{html.escape(e.symbol)}</td>
        <td style="{_CELL};color:#4b5563">{html.escape(e.name)}</td>
        <td style="{_CELL}">{condition_label(e)}</td>
        <td style="{_CELL}">{fmt_price(e.reference)}</td>
        <td style="{_CELL}">{fmt_price(e.observed)}</td>
        <td style="{_CELL};color:{'#16a34a' if e.kind is AlertKind.ABOVE else '#dc2626'};font-weight:700">{fmt_change(e)}</td>
      </tr>"""
        for e in events
    )
    headers = "".join(
        f'<th style="{_HEAD}">{h}</th>'
        for h in ("Ticker", "Company", "Condition", "Reference", "Current", "Change")
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<body style="margin:0;padding:24px;background:#f1f5f9;font-family:-apple-system,'Segoe UI',Roboto,sans-serif">
  <div style="max-width:680px;margin:0 auto;background:#ffffff;border-radius:12px;overflow:hidden">
    <div style="background:#0f172a;padding:28px 32px">
      <h1 style="margin:0;color:#f8fafc;font-size:22px">Stock Alert</h1>
      <p style="margin:6px 0 0;color:#94a3b8;font-size:14px">{html.escape(alert_time)}</p>
    </div>
    <div style="padding:28px 32px">
      <table style="width:100%;border-collapse:collapse;font-size:14px">
        <thead><tr style="background:#f9fafb">{headers}</tr></thead>
        <tbody>{rows}
        </tbody>
      </table>
    </div>
    <div style="padding:16px 32px;background:#f9fafb;border-top:1px solid #e5e7eb">
      <p style="margin:0;color:#9ca3af;font-size:12px">Sent by your stock alert agent</p>
    </div>
  </div>
</body>
</html>"""


def alert_time(events: list[AlertEvent]) -> str:
    """Timestamp of the latest event, formatted for humans."""
    latest: datetime = max(e.timestamp for e in events)
    return latest.strftime("%b %d, %Y %H:%M %Z").strip()
