"""Stock alert configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from pathlib import Path
from typing import Any

from stockalert.clock import (
    DEFAULT_MARKET_CLOSE,
    DEFAULT_MARKET_OPEN,
    DEFAULT_TIMEZONE,
    load_zone,
)
from stockalert.engine import (
    DEFAULT_ALERT_LOG_CAPACITY,
    DEFAULT_DROP_THRESHOLD_PCT,
    PriceThreshold,
)
from stockalert.errors import ConfigError, StockAlertErrorCode


class ProviderType(Enum):
    """Supported quote provider backends."""

    FINNHUB = "finnhub"
    MOCK = "mock"


class NotifierType(Enum):
    """Supported notification channels."""

    LOG = "log"
    RESEND = "resend"
    SMTP = "smtp"


DEFAULT_SYMBOLS: dict[str, str] = {
    # FAANG
    "META": "Meta Platforms",
    "AAPL": "Apple",
    "AMZN": "Amazon",
    "NFLX": "Netflix",
    "GOOGL": "Alphabet (Google)",
    # Semiconductors
    "NVDA": "NVIDIA",
    "AMD": "AMD",
    "INTC": "Intel",
    # Enterprise
    "MSFT": "Microsoft",
    "CRM": "Salesforce",
    "ORCL": "Oracle",
}

DEFAULT_POLL_INTERVAL_SECONDS = 180
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StockAlertConfig:
    """Configuration for AlertScheduler and its collaborators.

    Attributes:
        provider: Quote provider backend.
        finnhub_api_key: Finnhub API key.
        symbols: Tracked symbols, symbol -> company name, in display order.
        poll_interval_seconds: Period between poll cycles.
        timezone: Reference timezone for trading days and market hours.
        market_open: Regular session open, local time.
        market_close: Regular session close, local time.
        drop_threshold_pct: Percent change from open that triggers a drop alert.
        thresholds: Per-symbol above/below price levels.
        alert_log_capacity: Number of recent alerts kept for display.
        notifiers: Notification channels, in delivery order.
        email_from: Sender address for email channels.
        email_to: Recipient address for email channels.
        resend_api_key: Resend API key.
        smtp_host: SMTP server host.
        smtp_port: SMTP server port.
        smtp_user: SMTP login (optional).
        smtp_password: SMTP password.
        smtp_security: "starttls", "ssl" or "none".
        request_timeout: Timeout in seconds for provider and notifier calls.
        dashboard: Whether to render the terminal dashboard each cycle.
        log_dir: Directory for log files (console only when unset).
        log_level: Logging level name.
    """

    provider: ProviderType = ProviderType.FINNHUB
    finnhub_api_key: str | None = None
    symbols: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SYMBOLS))
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    timezone: str = DEFAULT_TIMEZONE
    market_open: time = DEFAULT_MARKET_OPEN
    market_close: time = DEFAULT_MARKET_CLOSE
    drop_threshold_pct: float = DEFAULT_DROP_THRESHOLD_PCT
    thresholds: dict[str, PriceThreshold] = field(default_factory=dict)
    alert_log_capacity: int = DEFAULT_ALERT_LOG_CAPACITY
    notifiers: list[NotifierType] = field(default_factory=lambda: [NotifierType.LOG])

    email_from: str | None = None
    email_to: str | None = None
    resend_api_key: str | None = None
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_security: str = "starttls"
    request_timeout: float = 10.0

    dashboard: bool = False
    log_dir: str | None = None
    log_level: str = "INFO"

    def validate(self) -> None:
        """Raise ConfigError for anything that would fail at runtime."""
        if self.provider is ProviderType.FINNHUB and not self.finnhub_api_key:
            raise ConfigError(
                "FINNHUB_API_KEY is not set",
                code=StockAlertErrorCode.AUTH_FAILED,
            )
        if not self.symbols:
            raise ConfigError("No symbols configured")
        if self.poll_interval_seconds <= 0:
            raise ConfigError("Poll interval must be positive")
        if self.alert_log_capacity <= 0:
            raise ConfigError("Alert log capacity must be positive")
        if self.market_open >= self.market_close:
            raise ConfigError("Market open must be before market close")
        load_zone(self.timezone)
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")

        for symbol, levels in self.thresholds.items():
            if (
                levels.above is not None
                and levels.below is not None
                and levels.below >= levels.above
            ):
                raise ConfigError(
                    f"{symbol}: below threshold {levels.below} must be under above {levels.above}"
                )

        email_channels = {NotifierType.RESEND, NotifierType.SMTP} & set(self.notifiers)
        if email_channels:
            if not self.email_from:
                raise ConfigError("ALERT_EMAIL_FROM is not set")
            if not self.email_to:
                raise ConfigError("ALERT_EMAIL_TO is not set")
        if NotifierType.RESEND in self.notifiers and not self.resend_api_key:
            raise ConfigError(
                "RESEND_API_KEY is not set",
                code=StockAlertErrorCode.AUTH_FAILED,
            )
        if NotifierType.SMTP in self.notifiers:
            if not self.smtp_host:
                raise ConfigError("SMTP_HOST is not set")
            if self.smtp_security not in {"starttls", "ssl", "none"}:
                raise ConfigError(f"Unknown SMTP security mode: {self.smtp_security!r}")


# ---- parsing helpers ----

def parse_hhmm(value: str) -> time:
    """Parse ``HH:MM`` into a time."""
    try:
        hour, minute = value.strip().split(":")
        return time(int(hour), int(minute))
    except ValueError as exc:
        raise ConfigError(f"Expected HH:MM, got {value!r}") from exc


def _parse_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc


def _parse_enum_list(name: str, value: str, enum_cls: type[Enum]) -> list[Any]:
    items = []
    for raw in value.split(","):
        raw = raw.strip().lower()
        if not raw:
            continue
        try:
            items.append(enum_cls(raw))
        except ValueError as exc:
            raise ConfigError(f"{name}: unknown value {raw!r}") from exc
    return items


def _parse_thresholds(raw: dict[str, Any]) -> dict[str, PriceThreshold]:
    thresholds: dict[str, PriceThreshold] = {}
    for symbol, levels in raw.items():
        if not isinstance(levels, dict):
            raise ConfigError(f"alerts.{symbol} must be an object with above/below")
        above = levels.get("above")
        below = levels.get("below")
        thresholds[symbol.upper()] = PriceThreshold(
            above=_parse_float(f"alerts.{symbol}.above", above) if above is not None else None,
            below=_parse_float(f"alerts.{symbol}.below", below) if below is not None else None,
        )
    return thresholds


def _apply_file(config: StockAlertConfig, path: Path) -> None:
    """Apply a JSON config file: ``stocks``, ``alerts``, ``refreshInterval``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    stocks = data.get("stocks")
    if isinstance(stocks, list):
        if not all(isinstance(s, str) for s in stocks):
            raise ConfigError("stocks must be a list of ticker strings")
        config.symbols = {
            s.upper(): config.symbols.get(s.upper(), s.upper()) for s in stocks
        }
    elif isinstance(stocks, dict):
        config.symbols = {s.upper(): str(n) for s, n in stocks.items()}
    elif stocks is not None:
        raise ConfigError("stocks must be a list or an object")

    if "alerts" in data:
        alerts = data["alerts"] or {}
        if not isinstance(alerts, dict):
            raise ConfigError("alerts must be an object keyed by symbol")
        config.thresholds = _parse_thresholds(alerts)
    if "refreshInterval" in data:
        config.poll_interval_seconds = _parse_float("refreshInterval", data["refreshInterval"])
    if "dropThresholdPct" in data:
        config.drop_threshold_pct = _parse_float("dropThresholdPct", data["dropThresholdPct"])
    if "alertLogCapacity" in data:
        capacity = _parse_float("alertLogCapacity", data["alertLogCapacity"])
        if not capacity.is_integer():
            raise ConfigError(f"alertLogCapacity must be a whole number, got {capacity!r}")
        config.alert_log_capacity = int(capacity)


def load_config(path: str | Path | None = None) -> StockAlertConfig:
    """Build a config from an optional JSON file, then environment variables.

    Environment variables:
        FINNHUB_API_KEY: Finnhub API key.
        STOCK_ALERT_PROVIDER: "finnhub" or "mock" (default: "finnhub").
        STOCK_ALERT_SYMBOLS: Comma-separated symbols (overrides the file).
        STOCK_ALERT_POLL_SECONDS: Poll period in seconds (default: 180).
        STOCK_ALERT_TIMEZONE: Reference timezone (default: America/New_York).
        STOCK_ALERT_MARKET_OPEN / STOCK_ALERT_MARKET_CLOSE: ``HH:MM``.
        STOCK_ALERT_DROP_PCT: Drop threshold in percent (default: -5).
        STOCK_ALERT_NOTIFIERS: Comma-separated channels: log, resend, smtp
            (default: "resend" when RESEND_API_KEY is set, else "log").
        RESEND_API_KEY: Resend API key.
        ALERT_EMAIL_FROM / ALERT_EMAIL_TO: Email sender and recipient.
        SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_SECURITY: SMTP settings.
        STOCK_ALERT_LOG_DIR: Directory for log files.
        STOCK_ALERT_LOG_LEVEL: Logging level (default: INFO).
    """
    config = StockAlertConfig()
    if path is not None:
        _apply_file(config, Path(path))

    env = os.environ
    config.finnhub_api_key = env.get("FINNHUB_API_KEY") or None

    if env.get("STOCK_ALERT_PROVIDER"):
        config.provider = _parse_enum_list(
            "STOCK_ALERT_PROVIDER", env["STOCK_ALERT_PROVIDER"], ProviderType,
        )[0]
    if env.get("STOCK_ALERT_SYMBOLS"):
        symbols = [s.strip().upper() for s in env["STOCK_ALERT_SYMBOLS"].split(",") if s.strip()]
        config.symbols = {s: config.symbols.get(s, DEFAULT_SYMBOLS.get(s, s)) for s in symbols}
    if env.get("STOCK_ALERT_POLL_SECONDS"):
        config.poll_interval_seconds = _parse_float(
            "STOCK_ALERT_POLL_SECONDS", env["STOCK_ALERT_POLL_SECONDS"],
        )
    if env.get("STOCK_ALERT_TIMEZONE"):
        config.timezone = env["STOCK_ALERT_TIMEZONE"]
    if env.get("STOCK_ALERT_MARKET_OPEN"):
        config.market_open = parse_hhmm(env["STOCK_ALERT_MARKET_OPEN"])
    if env.get("STOCK_ALERT_MARKET_CLOSE"):
        config.market_close = parse_hhmm(env["STOCK_ALERT_MARKET_CLOSE"])
    if env.get("STOCK_ALERT_DROP_PCT"):
        config.drop_threshold_pct = _parse_float("STOCK_ALERT_DROP_PCT", env["STOCK_ALERT_DROP_PCT"])

    config.resend_api_key = env.get("RESEND_API_KEY") or None
    config.email_from = env.get("ALERT_EMAIL_FROM") or None
    config.email_to = env.get("ALERT_EMAIL_TO") or None
    config.smtp_host = env.get("SMTP_HOST") or None
    if env.get("SMTP_PORT"):
        config.smtp_port = int(_parse_float("SMTP_PORT", env["SMTP_PORT"]))
    config.smtp_user = env.get("SMTP_USER") or None
    config.smtp_password = env.get("SMTP_PASS") or None
    config.smtp_security = env.get("SMTP_SECURITY", config.smtp_security).strip().lower()

    if env.get("STOCK_ALERT_NOTIFIERS"):
        config.notifiers = _parse_enum_list(
            "STOCK_ALERT_NOTIFIERS", env["STOCK_ALERT_NOTIFIERS"], NotifierType,
        )
    elif config.resend_api_key:
        config.notifiers = [NotifierType.RESEND]

    config.log_dir = env.get("STOCK_ALERT_LOG_DIR") or None
    config.log_level = env.get("STOCK_ALERT_LOG_LEVEL", config.log_level).upper()
    return config
