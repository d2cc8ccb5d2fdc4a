"""Tests for the daily summary job."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from gasbot.models import Sample, utc_now
from gasbot.notify.telegram import Notifier
from gasbot.tracker.summary import DailySummary


@pytest.fixture
def mock_notifier() -> AsyncMock:
    notifier = AsyncMock(spec=Notifier)
    notifier.notify.return_value = True
    return notifier


@pytest.fixture
def summary(store, mock_notifier) -> DailySummary:
    return DailySummary(store=store, notifier=mock_notifier)


class TestDailySummary:
    @pytest.mark.asyncio
    async def test_empty_history_is_a_noop(self, summary, mock_notifier) -> None:
        assert await summary.run() is None
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_samples_in_last_day_is_a_noop(self, summary, store, mock_notifier) -> None:
        now = utc_now()
        await store.save([Sample(timestamp=now - timedelta(days=2), price=Decimal("3.0"))])

        assert await summary.run() is None
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reports_low_and_high_of_last_day(self, summary, store, mock_notifier) -> None:
        now = utc_now()
        await store.save(
            [
                Sample(timestamp=now - timedelta(days=3), price=Decimal("0.5")),
                Sample(timestamp=now - timedelta(hours=20), price=Decimal("2.0")),
                Sample(timestamp=now - timedelta(hours=10), price=Decimal("1.5")),
                Sample(timestamp=now - timedelta(hours=1), price=Decimal("4.125")),
            ]
        )

        stats = await summary.run()

        assert stats is not None
        assert stats.low == Decimal("1.5")
        assert stats.high == Decimal("4.125")
        assert stats.count == 3
        text = mock_notifier.notify.await_args.args[0]
        assert "Daily Gas Report" in text
        assert "Low: 1.5 gwei" in text
        assert "High: 4.125 gwei" in text

    @pytest.mark.asyncio
    async def test_does_not_modify_history(self, summary, store, history_path, make_samples) -> None:
        await store.save(make_samples(["1.0", "2.0"]))
        before = history_path.read_bytes()

        await summary.run()

        assert history_path.read_bytes() == before
