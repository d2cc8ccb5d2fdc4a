"""Rolling gas price history -- JSON file store and window evaluation."""

from gasbot.history.store import HistoryStore
from gasbot.history.window import evaluate_window, filter_since

__all__ = ["HistoryStore", "evaluate_window", "filter_since"]
