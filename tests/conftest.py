"""Shared test fixtures for the gas price tracker bot."""

from datetime import timedelta
from decimal import Decimal

import pytest

from gasbot.config import AppSettings, RpcSettings, TelegramSettings, TrackerSettings
from gasbot.history.store import HistoryStore
from gasbot.models import Sample, utc_now


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with test defaults (dummy token, temp history file)."""
    return AppSettings(
        log_level="DEBUG",
        telegram=TelegramSettings(
            bot_token="123:test-token",  # type: ignore[arg-type]
            chat_id="42",
        ),
        rpc=RpcSettings(primary_url="https://rpc.test"),
        tracker=TrackerSettings(history_path=str(tmp_path / "gas-history.json")),
    )


@pytest.fixture
def history_path(tmp_path):
    """Location of the history record for a single test."""
    return tmp_path / "gas-history.json"


@pytest.fixture
def store(history_path) -> HistoryStore:
    """HistoryStore backed by a temp file."""
    return HistoryStore(history_path)


def _build_samples(prices: list[str], spacing: timedelta = timedelta(hours=1)) -> list[Sample]:
    now = utc_now()
    count = len(prices)
    return [
        Sample(timestamp=now - spacing * (count - i), price=Decimal(p))
        for i, p in enumerate(prices)
    ]


@pytest.fixture
def make_samples():
    """Factory: samples spaced one hour apart, ending one hour before now, oldest first."""
    return _build_samples
