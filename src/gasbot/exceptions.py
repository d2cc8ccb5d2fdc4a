"""Custom exceptions for the gas price tracker bot.

Startup errors (configuration, corrupt history) are fatal. Everything raised
during a scheduled run is contained by the scheduler and only logged.
"""


class GasBotError(Exception):
    """Base exception for all bot errors."""


class ConfigurationError(GasBotError):
    """Raised when required configuration is missing or invalid at startup."""


class HistoryError(GasBotError):
    """Base exception for history persistence failures."""


class HistoryCorruptError(HistoryError):
    """Raised when the persisted history record exists but cannot be parsed."""


class HistoryWriteError(HistoryError):
    """Raised when the history record could not be replaced on disk."""


class SampleFetchError(GasBotError):
    """Raised when a gas price reading could not be fetched."""


class MalformedResponseError(SampleFetchError):
    """Raised when an RPC response does not carry a parseable gas price."""


class RateUnavailableError(GasBotError):
    """Raised when the USD rate of the native asset is unavailable."""


class NotificationError(GasBotError):
    """Raised when a Telegram message could not be delivered."""
