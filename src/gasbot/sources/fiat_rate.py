"""CoinGecko USD rate service for gas cost estimates.

Fetches the USD price of the network's native asset via the CoinGecko
simple price API. Results are cached in memory with a short TTL, since
several chat commands can arrive within the same minute.
"""

import time
from decimal import ROUND_HALF_UP, Decimal

import httpx

from gasbot.exceptions import RateUnavailableError
from gasbot.logging import get_logger

logger = get_logger(__name__)

_CENT = Decimal("0.01")
_GWEI_TO_NATIVE = Decimal("1e-9")


def estimate_cost_usd(gwei: Decimal, usd_rate: Decimal, gas_units: int = 21000) -> Decimal:
    """USD cost of gas_units at gwei per unit, rounded to cents.

    Args:
        gwei: Gas price in gwei.
        usd_rate: USD price of one unit of the native asset.
        gas_units: Gas consumed (21000 for a plain transfer).
    """
    cost = gwei * _GWEI_TO_NATIVE * gas_units * usd_rate
    return cost.quantize(_CENT, rounding=ROUND_HALF_UP)


class FiatRateService:
    """Fetches and caches the USD rate of one asset from CoinGecko.

    Args:
        base_url: CoinGecko API root.
        asset_id: CoinGecko coin id (e.g. "ethereum").
        cache_ttl_seconds: How long a fetched rate is reused.
        timeout: Per-request timeout in seconds.
        client: Optional pre-built httpx.AsyncClient.
    """

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        asset_id: str = "ethereum",
        cache_ttl_seconds: int = 60,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._asset_id = asset_id
        self._ttl = cache_ttl_seconds
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": "GasTrackerBot/1.0"},
        )
        self._cached_rate: Decimal | None = None
        self._cache_time: float = 0

    def _is_cache_valid(self) -> bool:
        return self._cached_rate is not None and (time.time() - self._cache_time < self._ttl)

    async def get_usd_rate(self) -> Decimal:
        """Return the USD rate, from cache when fresh.

        Raises:
            RateUnavailableError: If the API call fails or the response
                does not contain the rate.
        """
        if self._is_cache_valid():
            return self._cached_rate  # type: ignore[return-value]

        url = f"{self._base_url}/simple/price"
        params = {"ids": self._asset_id, "vs_currencies": "usd"}
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
            rate = Decimal(str(data[self._asset_id]["usd"]))
        except httpx.HTTPError as e:
            logger.warning("coingecko_fetch_error", asset=self._asset_id, error=str(e))
            raise RateUnavailableError(f"USD rate request failed: {e}") from e
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            logger.warning("coingecko_bad_response", asset=self._asset_id, error=str(e))
            raise RateUnavailableError(f"Unexpected USD rate response: {e}") from e

        self._cached_rate = rate
        self._cache_time = time.time()
        logger.debug("usd_rate_fetched", asset=self._asset_id, usd=str(rate))
        return rate

    async def close(self) -> None:
        await self._client.aclose()
