"""Daily summary -- reports the 24-hour low/high straight from the history store."""

from datetime import timedelta

from gasbot.history.store import HistoryStore
from gasbot.history.window import evaluate_window
from gasbot.logging import get_logger
from gasbot.messages import daily_report_message
from gasbot.models import WindowStats, utc_now
from gasbot.notify.telegram import Notifier

logger = get_logger(__name__)


class DailySummary:
    """Sends the min/max of the last day's samples.

    An empty daily window is a no-op, not an error.
    """

    def __init__(
        self,
        store: HistoryStore,
        notifier: Notifier,
        window: timedelta = timedelta(hours=24),
        display_timezone: str = "UTC",
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._window = window
        self._tz = display_timezone

    async def run(self) -> WindowStats | None:
        """Compute and send the daily report. Returns the stats sent, if any."""
        now = utc_now()
        samples = await self._store.window(now - self._window)
        if not samples:
            logger.info("daily_summary_skipped", reason="no_samples")
            return None

        stats = evaluate_window(samples)
        logger.info(
            "daily_summary",
            low=str(stats.low),
            high=str(stats.high),
            samples=stats.count,
        )
        await self._notifier.notify(daily_report_message(stats, now, self._tz))
        return stats
