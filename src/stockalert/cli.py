"""Command-line entry point: ``stockalert`` / ``python -m stockalert``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

from stockalert import build_scheduler
from stockalert.config import ProviderType, StockAlertConfig, load_config
from stockalert.errors import ConfigError, StockAlertError
from stockalert.logger import setup_logger
from stockalert.models.alert import AlertEvent, AlertKind

logger = logging.getLogger("stockalert.cli")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stockalert",
        description="Poll stock quotes and alert on drops and threshold crossings.",
    )
    parser.add_argument("--config", help="JSON config file (stocks, alerts, refreshInterval)")
    parser.add_argument(
        "--env-file", default=".env",
        help="Dotenv file with API keys and email settings (default: .env)",
    )
    parser.add_argument(
        "--provider", choices=[p.value for p in ProviderType], help="Quote provider override",
    )
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit")
    parser.add_argument("--dashboard", action="store_true", help="Render the terminal dashboard")
    parser.add_argument(
        "--test-email", action="store_true",
        help="Send a simulated drop alert through the configured notifiers and exit",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def _banner(config: StockAlertConfig) -> str:
    def flag(value: str | None) -> str:
        return "SET" if value else "NOT SET"

    return "\n".join([
        "",
        "  Stock Alert Agent",
        "  -----------------------------------------",
        f"  Provider        : {config.provider.value}",
        f"  FINNHUB_API_KEY : {flag(config.finnhub_api_key)}",
        f"  Notifiers       : {', '.join(n.value for n in config.notifiers)}",
        f"  ALERT_EMAIL_TO  : {config.email_to or 'NOT SET'}",
        f"  Symbols         : {', '.join(config.symbols)}",
        f"  Poll interval   : every {config.poll_interval_seconds:g}s during market hours",
        "  -----------------------------------------",
        "",
    ])


def _test_events(now: datetime) -> list[AlertEvent]:
    return [AlertEvent(
        symbol="NVDA",
        name="NVIDIA",
        kind=AlertKind.DROP_PERCENT,
        reference=125.40,
        observed=118.09,
        magnitude=-5.83,
        timestamp=now,
    )]


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    # Variables already in the environment win over the file.
    load_dotenv(args.env_file)

    try:
        config = load_config(args.config)
        if args.provider:
            config.provider = ProviderType(args.provider)
        if args.dashboard:
            config.dashboard = True
        if args.log_level:
            config.log_level = args.log_level.upper()
        config.validate()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    setup_logger(
        "stockalert",
        log_dir=config.log_dir,
        level=config.log_level,
        log_to_file=config.log_dir is not None,
    )
    print(_banner(config))

    try:
        scheduler = build_scheduler(config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if args.test_email:
        failed = False
        for notifier in scheduler.notifiers:
            try:
                notifier.send(_test_events(scheduler.clock.now()))
                logger.info("Test alert sent via %s", notifier.name)
            except StockAlertError as exc:
                logger.error("Test alert via %s failed: %s", notifier.name, exc)
                failed = True
        return 1 if failed else 0

    try:
        if args.once:
            asyncio.run(_run_once(scheduler))
        else:
            asyncio.run(scheduler.run())
    except KeyboardInterrupt:
        logger.info("Stopped.")
    return 0


async def _run_once(scheduler) -> None:
    await scheduler.capture_baseline()
    events = await scheduler.poll_once()
    if not scheduler.clock.is_market_open():
        logger.info("Market is closed; nothing polled.")
    else:
        logger.info("Cycle finished with %d alert(s).", len(events))


if __name__ == "__main__":
    sys.exit(main())
