"""Chat message text for alerts, reports and command replies."""

from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from gasbot.models import Breach, BreachKind, GasTiers, Network, WindowStats

COMMAND_LIST = (
    "\nAvailable commands:"
    "\n/mainnet – Ethereum gas tiers"
    "\n/arbitrum – Arbitrum gas price"
    "\n/optimism – Optimism gas price"
)

_BREACH_TITLES = {
    BreachKind.LOW: "📉 New 7d Low",
    BreachKind.HIGH: "📈 New 7d High",
}


def format_local_time(moment: datetime, tz: str = "UTC") -> str:
    """Render a timestamp in the display timezone."""
    return moment.astimezone(ZoneInfo(tz)).strftime("%Y-%m-%d %H:%M:%S %Z")


def format_gwei(value: Decimal) -> str:
    """Gwei without trailing zeros (2.500 -> 2.5)."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def greeting(moment: datetime, tz: str = "UTC") -> str:
    hour = moment.astimezone(ZoneInfo(tz)).hour
    if hour < 12:
        return "🌅 Good morning!"
    if hour < 18:
        return "🌤 Good afternoon!"
    return "🌙 Good evening!"


def breach_message(breach: Breach, tz: str = "UTC") -> str:
    title = _BREACH_TITLES[breach.kind]
    return (
        f"{title}: {format_gwei(breach.sample.price)} gwei\n"
        f"{format_local_time(breach.sample.timestamp, tz)}"
    )


def daily_report_message(stats: WindowStats, moment: datetime, tz: str = "UTC") -> str:
    return (
        "📊 Daily Gas Report\n"
        f"📉 Low: {format_gwei(stats.low)} gwei\n"
        f"📈 High: {format_gwei(stats.high)} gwei\n"
        f"🕒 {format_local_time(moment, tz)}"
    )


def tiers_message(
    tiers: GasTiers,
    costs: dict[str, Decimal],
    moment: datetime,
    tz: str = "UTC",
) -> str:
    """Mainnet tier table; costs maps "low"/"average"/"high" to USD."""
    return (
        "Ethereum Gas Fee (typical tx)\n\n"
        f"📉 Low: {format_gwei(tiers.low)} gwei (${costs['low']})\n"
        f"📊 Average: {format_gwei(tiers.average)} gwei (${costs['average']})\n"
        f"📈 High: {format_gwei(tiers.high)} gwei (${costs['high']})\n\n"
        f"🕒 {format_local_time(moment, tz)}"
    )


def network_gas_caption(
    network: Network,
    gwei: Decimal,
    cost_usd: Decimal,
    moment: datetime,
    tz: str = "UTC",
) -> str:
    return (
        f"{network.emoji} {network.label} Gas Price\n"
        f"{format_gwei(gwei)} gwei (${cost_usd})\n"
        f"🕒 {format_local_time(moment, tz)}"
    )


def start_message(moment: datetime, tz: str = "UTC") -> str:
    return (
        f"{greeting(moment, tz)} 👋\n"
        "I'm your Ethereum gas tracker bot.\n"
        f"🕒 Current time: {format_local_time(moment, tz)}"
        f"{COMMAND_LIST}\n/help – ℹ️ Show help menu"
    )


def help_message() -> str:
    return f"ℹ️ Help Menu{COMMAND_LIST}"
