"""Threshold tracker -- samples gas, maintains the 7-day window, alerts on breaches.

Each tick:
  1. FETCH: read the current gas price (bounded by a timeout)
  2. RECORD: append to history, prune to retention, persist (store lock held)
  3. COMPARE: check the new price against the PRE-APPEND window extrema
  4. NOTIFY: send "New 7d Low/High" on a breach

Comparing against the pre-append extrema is the contract: the new sample is
a breach only if it is strictly below every previously retained sample or
strictly above every one of them. An empty previous window has no baseline,
so the very first sample never alerts.

All failures are contained within the tick. A failed fetch leaves the
history record untouched.
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta

from gasbot.exceptions import HistoryError, SampleFetchError
from gasbot.history.store import HistoryStore
from gasbot.history.window import evaluate_window
from gasbot.logging import get_logger
from gasbot.messages import breach_message
from gasbot.models import Breach, BreachKind, Sample, WindowStats, utc_now
from gasbot.notify.telegram import Notifier
from gasbot.sources.gas_price import GasPriceSource

logger = get_logger(__name__)


def classify_breach(sample: Sample, previous: WindowStats | None) -> Breach | None:
    """Decide whether sample broke the previous window's extrema."""
    if previous is None:
        return None
    if sample.price < previous.low:
        kind = BreachKind.LOW
    elif sample.price > previous.high:
        kind = BreachKind.HIGH
    else:
        return None
    return Breach(
        kind=kind,
        sample=sample,
        previous_low=previous.low,
        previous_high=previous.high,
    )


@dataclass(frozen=True)
class TickResult:
    """Outcome of one tracker tick."""

    sample: Sample | None = None
    window: WindowStats | None = None
    breach: Breach | None = None
    notified: bool = False
    skipped_reason: str | None = None


class ThresholdTracker:
    """Samples the primary network and alerts on new window extrema.

    Args:
        source: Gas price reader.
        store: History store (the only shared mutable resource).
        notifier: Destination for breach alerts.
        rpc_url: Primary network endpoint.
        retention: Retention window (7 days by default).
        fetch_timeout: Seconds before a fetch counts as failed.
        display_timezone: Timezone used in alert text.
    """

    def __init__(
        self,
        source: GasPriceSource,
        store: HistoryStore,
        notifier: Notifier,
        rpc_url: str,
        retention: timedelta = timedelta(days=7),
        fetch_timeout: float = 30.0,
        display_timezone: str = "UTC",
    ) -> None:
        self._source = source
        self._store = store
        self._notifier = notifier
        self._rpc_url = rpc_url
        self._retention = retention
        self._fetch_timeout = fetch_timeout
        self._tz = display_timezone

    async def tick(self) -> TickResult:
        """Run one sample-record-compare-notify cycle. Never raises."""
        try:
            price = await asyncio.wait_for(
                self._source.fetch_gas_price(self._rpc_url),
                timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("gas_fetch_timeout", timeout=self._fetch_timeout)
            return TickResult(skipped_reason="fetch_timeout")
        except SampleFetchError as e:
            logger.warning("gas_fetch_failed", error=str(e))
            return TickResult(skipped_reason="fetch_failed")

        sample = Sample(timestamp=utc_now(), price=price)

        try:
            previous, retained = await self._store.append(
                sample, self._retention, now=sample.timestamp
            )
        except HistoryError as e:
            logger.error("history_update_failed", error=str(e))
            return TickResult(sample=sample, skipped_reason="history_error")

        window = evaluate_window(retained)
        baseline = evaluate_window(previous) if previous else None
        breach = classify_breach(sample, baseline)

        logger.info(
            "gas_sample_recorded",
            price=str(sample.price),
            low=str(window.low),
            high=str(window.high),
            samples=window.count,
            breach=breach.kind.value if breach else None,
        )

        notified = False
        if breach is not None:
            notified = await self._notifier.notify(breach_message(breach, self._tz))

        return TickResult(sample=sample, window=window, breach=breach, notified=notified)
