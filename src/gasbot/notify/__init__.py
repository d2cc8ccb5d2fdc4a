"""Notification transport -- Telegram Bot API."""

from gasbot.notify.telegram import Notifier, TelegramClient

__all__ = ["Notifier", "TelegramClient"]
