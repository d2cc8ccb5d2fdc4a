"""Entry point for the gas price tracker bot.

Wires all components together and runs them on a single asyncio event loop
until SIGINT/SIGTERM.

Component wiring order (in _build_components):
1. AppSettings (configuration, fatal if incomplete)
2. Logging setup
3. HistoryStore (created empty on first run, fatal if corrupt)
4. JsonRpcGasPriceSource / FiatRateService (HTTP clients)
5. TelegramClient + Notifier (fixed destination chat)
6. ThresholdTracker (primary tick) and DailySummary
7. Scheduler (two independent IntervalJobs)
8. GasQueryHandlers + CommandPoller (chat commands)
"""

import asyncio
import signal
import sys
from datetime import timedelta
from typing import Any

from gasbot.commands.handlers import GasQueryHandlers, build_networks
from gasbot.commands.poller import CommandPoller
from gasbot.config import AppSettings, load_settings
from gasbot.exceptions import ConfigurationError, HistoryError
from gasbot.history.store import HistoryStore
from gasbot.logging import get_logger, setup_logging
from gasbot.notify.telegram import Notifier, TelegramClient
from gasbot.scheduler import IntervalJob, Scheduler
from gasbot.sources.fiat_rate import FiatRateService
from gasbot.sources.gas_price import JsonRpcGasPriceSource
from gasbot.tracker.summary import DailySummary
from gasbot.tracker.threshold import ThresholdTracker


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all bot components from settings.

    Does not start anything or touch the network; the history record is
    validated separately in run().
    """
    tracker_settings = settings.tracker

    store = HistoryStore(tracker_settings.history_path)
    source = JsonRpcGasPriceSource(timeout=settings.rpc.timeout)
    fiat = FiatRateService(
        base_url=settings.pricing.coingecko_url,
        asset_id=settings.pricing.asset_id,
        cache_ttl_seconds=settings.pricing.cache_ttl_seconds,
        timeout=settings.pricing.timeout,
    )
    telegram = TelegramClient(
        bot_token=settings.telegram.bot_token.get_secret_value(),
        api_url=settings.telegram.api_url,
        timeout=settings.telegram.request_timeout,
    )
    notifier = Notifier(telegram, settings.telegram.chat_id)

    tracker = ThresholdTracker(
        source=source,
        store=store,
        notifier=notifier,
        rpc_url=settings.rpc.primary_url,
        retention=timedelta(days=tracker_settings.retention_days),
        fetch_timeout=settings.rpc.timeout,
        display_timezone=settings.display_timezone,
    )
    summary = DailySummary(
        store=store,
        notifier=notifier,
        window=timedelta(hours=tracker_settings.daily_window_hours),
        display_timezone=settings.display_timezone,
    )

    scheduler = Scheduler(
        [
            IntervalJob(
                "gas_tracker",
                tracker.tick,
                interval=tracker_settings.poll_interval_seconds,
                timeout=tracker_settings.run_timeout_seconds,
                run_immediately=True,
            ),
            IntervalJob(
                "daily_summary",
                summary.run,
                interval=tracker_settings.summary_interval_seconds,
                timeout=tracker_settings.run_timeout_seconds,
            ),
        ]
    )

    handlers = GasQueryHandlers(
        telegram=telegram,
        source=source,
        fiat=fiat,
        networks=build_networks(settings.rpc.arbitrum_url, settings.rpc.optimism_url),
        gas_units=settings.pricing.transfer_gas_units,
        display_timezone=settings.display_timezone,
    )
    poller = CommandPoller(
        telegram=telegram,
        commands=handlers.command_table(),
        poll_timeout=settings.telegram.poll_timeout,
        handler_timeout=tracker_settings.run_timeout_seconds,
    )

    return {
        "store": store,
        "source": source,
        "fiat": fiat,
        "telegram": telegram,
        "notifier": notifier,
        "tracker": tracker,
        "summary": summary,
        "scheduler": scheduler,
        "handlers": handlers,
        "poller": poller,
    }


def _setup_signal_handlers(stop_event: asyncio.Event) -> None:
    """Register SIGINT/SIGTERM to trigger a graceful stop.

    Must be called after the asyncio event loop is running.
    """
    logger = get_logger("gasbot.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


async def _close_clients(components: dict[str, Any]) -> None:
    for name in ("source", "fiat", "telegram"):
        await components[name].close()


async def run(settings: AppSettings) -> None:
    """Run the bot until a shutdown signal arrives.

    Raises:
        HistoryError: If the history record is corrupt or cannot be created.
    """
    logger = get_logger("gasbot.main")
    components = _build_components(settings)

    try:
        await components["store"].initialize()

        stop_event = asyncio.Event()
        _setup_signal_handlers(stop_event)

        logger.info(
            "gas_tracker_starting",
            history_path=settings.tracker.history_path,
            poll_interval=settings.tracker.poll_interval_seconds,
            retention_days=settings.tracker.retention_days,
        )
        await components["scheduler"].start()
        await components["poller"].start()

        await stop_event.wait()

        await components["poller"].stop()
        await components["scheduler"].stop()
    finally:
        await _close_clients(components)
        logger.info("gas_tracker_stopped")


def main() -> None:
    """Synchronous entry point. Startup errors exit with status 1."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        get_logger("gasbot.main").critical("configuration_error", error=str(e))
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)

    try:
        asyncio.run(run(settings))
    except HistoryError as e:
        get_logger("gasbot.main").critical("history_startup_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
