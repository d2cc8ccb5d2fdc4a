"""Tracking jobs -- threshold alerts on every tick and the daily report."""

from gasbot.tracker.summary import DailySummary
from gasbot.tracker.threshold import ThresholdTracker, TickResult, classify_breach

__all__ = ["DailySummary", "ThresholdTracker", "TickResult", "classify_breach"]
