"""stockalert — stock price drop and threshold-crossing alerts.

Polls a quote provider during market hours, detects drops from the day's
opening price and above/below threshold crossings, and notifies by email,
log and terminal dashboard.

Quick start::

    import asyncio
    from stockalert import build_scheduler, load_config

    config = load_config("config.json")
    config.validate()
    asyncio.run(build_scheduler(config).run())
"""

from __future__ import annotations

from stockalert.baseline import BaselineStore
from stockalert.clock import DayBoundaryClock
from stockalert.config import (
    DEFAULT_SYMBOLS,
    NotifierType,
    ProviderType,
    StockAlertConfig,
    load_config,
)
from stockalert.dashboard import TerminalDashboard
from stockalert.engine import AlertLog, DropDetector, PriceThreshold, ThresholdCrossingDetector
from stockalert.errors import ConfigError, StockAlertError, StockAlertErrorCode
from stockalert.models.alert import AlertEvent, AlertKind
from stockalert.models.quote import Quote, QuoteBatch, QuoteFailure
from stockalert.notifiers import create_notifiers
from stockalert.providers import create_provider
from stockalert.scheduler import AlertScheduler, MonitorState
from stockalert.source import QuoteSource

__version__ = "0.1.0"

__all__ = [
    # Scheduler
    "AlertScheduler",
    "MonitorState",
    "build_scheduler",
    # Core
    "BaselineStore",
    "DayBoundaryClock",
    "DropDetector",
    "ThresholdCrossingDetector",
    "PriceThreshold",
    "AlertLog",
    "QuoteSource",
    "TerminalDashboard",
    # Config
    "StockAlertConfig",
    "ProviderType",
    "NotifierType",
    "DEFAULT_SYMBOLS",
    "load_config",
    # Errors
    "StockAlertError",
    "StockAlertErrorCode",
    "ConfigError",
    # Models
    "Quote",
    "QuoteBatch",
    "QuoteFailure",
    "AlertEvent",
    "AlertKind",
]


def build_scheduler(config: StockAlertConfig) -> AlertScheduler:
    """Wire provider, clock, state, notifiers and dashboard from a config."""
    kwargs = {}
    if config.provider is ProviderType.FINNHUB:
        kwargs = {"api_key": config.finnhub_api_key, "timeout": config.request_timeout}
    provider = create_provider(config.provider, **kwargs)

    clock = DayBoundaryClock(
        timezone=config.timezone,
        market_open=config.market_open,
        market_close=config.market_close,
    )
    state = MonitorState.create(
        clock,
        drop_threshold_pct=config.drop_threshold_pct,
        thresholds=config.thresholds,
        alert_log_capacity=config.alert_log_capacity,
    )
    return AlertScheduler(
        source=QuoteSource(provider, config.symbols),
        clock=clock,
        notifiers=create_notifiers(config),
        state=state,
        poll_interval_seconds=config.poll_interval_seconds,
        dashboard=TerminalDashboard() if config.dashboard else None,
    )
