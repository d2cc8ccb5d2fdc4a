"""Chat command layer -- static command table and Telegram update polling."""

from gasbot.commands.handlers import GasQueryHandlers, build_networks, parse_command
from gasbot.commands.poller import CommandPoller

__all__ = ["CommandPoller", "GasQueryHandlers", "build_networks", "parse_command"]
