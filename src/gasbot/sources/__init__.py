"""External data sources -- JSON-RPC gas price reader and CoinGecko USD rate."""

from gasbot.sources.fiat_rate import FiatRateService, estimate_cost_usd
from gasbot.sources.gas_price import GasPriceSource, JsonRpcGasPriceSource, wei_hex_to_gwei

__all__ = [
    "FiatRateService",
    "GasPriceSource",
    "JsonRpcGasPriceSource",
    "estimate_cost_usd",
    "wei_hex_to_gwei",
]
