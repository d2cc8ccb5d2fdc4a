"""Tests for chat message formatting."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from gasbot.messages import (
    breach_message,
    daily_report_message,
    format_gwei,
    format_local_time,
    greeting,
)
from gasbot.models import Breach, BreachKind, Sample, WindowStats

NOON = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestFormatGwei:
    @pytest.mark.parametrize(
        "value, expected",
        [("2.500", "2.5"), ("3.000", "3"), ("0.011", "0.011"), ("12", "12")],
    )
    def test_strips_trailing_zeros(self, value, expected) -> None:
        assert format_gwei(Decimal(value)) == expected


class TestTime:
    def test_local_time_in_display_timezone(self) -> None:
        assert format_local_time(NOON, "Asia/Seoul") == "2024-05-01 21:00:00 KST"

    @pytest.mark.parametrize(
        "hour, expected",
        [(6, "🌅 Good morning!"), (12, "🌤 Good afternoon!"), (20, "🌙 Good evening!")],
    )
    def test_greeting(self, hour, expected) -> None:
        assert greeting(NOON.replace(hour=hour)) == expected


class TestAlertMessages:
    def test_breach_message(self) -> None:
        breach = Breach(
            kind=BreachKind.LOW,
            sample=Sample(timestamp=NOON, price=Decimal("2.500")),
            previous_low=Decimal("3.0"),
            previous_high=Decimal("5.0"),
        )
        assert breach_message(breach) == "📉 New 7d Low: 2.5 gwei\n2024-05-01 12:00:00 UTC"

    def test_daily_report(self) -> None:
        stats = WindowStats(low=Decimal("1.5"), high=Decimal("4.125"), count=3)
        text = daily_report_message(stats, NOON)
        assert text.splitlines() == [
            "📊 Daily Gas Report",
            "📉 Low: 1.5 gwei",
            "📈 High: 4.125 gwei",
            "🕒 2024-05-01 12:00:00 UTC",
        ]
