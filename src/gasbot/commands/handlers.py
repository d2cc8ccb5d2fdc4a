"""On-demand chat command handlers.

Commands map to handlers through a static table built once at startup.
Handlers read fresh prices and never touch the tracked history.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime

from gasbot.logging import get_logger
from gasbot.messages import (
    help_message,
    network_gas_caption,
    start_message,
    tiers_message,
)
from gasbot.models import MAINNET_GAS_TIERS, GasTiers, Network, utc_now
from gasbot.notify.telegram import TelegramClient
from gasbot.sources.fiat_rate import FiatRateService, estimate_cost_usd
from gasbot.sources.gas_price import GasPriceSource

logger = get_logger(__name__)

CommandHandler = Callable[[int | str], Awaitable[None]]

ARBITRUM_LOGO = "https://cryptologos.cc/logos/arbitrum-arb-logo.png"
OPTIMISM_LOGO = "https://cryptologos.cc/logos/optimism-ethereum-op-logo.png"


def build_networks(arbitrum_url: str, optimism_url: str) -> dict[str, Network]:
    """Networks answerable with a live gas price, keyed by command name."""
    return {
        "arbitrum": Network(
            key="arbitrum",
            label="Arbitrum",
            rpc_url=arbitrum_url,
            emoji="🔵",
            image_url=ARBITRUM_LOGO,
        ),
        "optimism": Network(
            key="optimism",
            label="Optimism",
            rpc_url=optimism_url,
            emoji="🔴",
            image_url=OPTIMISM_LOGO,
        ),
    }


def parse_command(text: str | None) -> str | None:
    """Extract the command token from a message ("/help@MyBot now" -> "/help")."""
    if not text or not text.startswith("/"):
        return None
    token = text.split(maxsplit=1)[0]
    return token.split("@", 1)[0].lower()


class GasQueryHandlers:
    """Replies to the chat commands.

    Args:
        telegram: Transport used to reply to the requesting chat.
        source: Gas price reader for live network queries.
        fiat: USD rate service for cost estimates.
        networks: Live-queryable networks keyed by command name.
        tiers: Static mainnet gas tiers.
        gas_units: Gas used by the reference transaction.
        display_timezone: Timezone used in reply text.
        clock: Returns the current time (overridable in tests).
    """

    def __init__(
        self,
        telegram: TelegramClient,
        source: GasPriceSource,
        fiat: FiatRateService,
        networks: dict[str, Network],
        tiers: GasTiers = MAINNET_GAS_TIERS,
        gas_units: int = 21000,
        display_timezone: str = "UTC",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._telegram = telegram
        self._source = source
        self._fiat = fiat
        self._networks = networks
        self._tiers = tiers
        self._gas_units = gas_units
        self._tz = display_timezone
        self._clock = clock

    def command_table(self) -> dict[str, CommandHandler]:
        """Static mapping from command token to handler."""
        table: dict[str, CommandHandler] = {
            "/mainnet": self.mainnet,
            "/start": self.start,
            "/help": self.help,
        }
        for key in self._networks:
            table[f"/{key}"] = self._network_handler(key)
        return table

    def _network_handler(self, key: str) -> CommandHandler:
        async def handler(chat_id: int | str) -> None:
            await self.network_gas(chat_id, key)

        return handler

    async def mainnet(self, chat_id: int | str) -> None:
        usd_rate = await self._fiat.get_usd_rate()
        costs = {
            name: estimate_cost_usd(getattr(self._tiers, name), usd_rate, self._gas_units)
            for name in ("low", "average", "high")
        }
        text = tiers_message(self._tiers, costs, self._clock(), self._tz)
        await self._telegram.send_message(chat_id, text)

    async def network_gas(self, chat_id: int | str, key: str) -> None:
        network = self._networks[key]
        usd_rate = await self._fiat.get_usd_rate()
        gwei = await self._source.fetch_gas_price(network.rpc_url)
        cost = estimate_cost_usd(gwei, usd_rate, self._gas_units)
        caption = network_gas_caption(network, gwei, cost, self._clock(), self._tz)
        await self._telegram.send_photo(chat_id, network.image_url, caption)
        logger.info("network_gas_replied", network=key, gwei=str(gwei))

    async def start(self, chat_id: int | str) -> None:
        await self._telegram.send_message(chat_id, start_message(self._clock(), self._tz))

    async def help(self, chat_id: int | str) -> None:
        await self._telegram.send_message(chat_id, help_message())
