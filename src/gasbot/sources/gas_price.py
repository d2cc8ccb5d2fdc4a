"""Gas price source: eth_gasPrice over JSON-RPC via httpx async.

Strategy code depends only on the GasPriceSource interface; the JSON-RPC
details stay in JsonRpcGasPriceSource.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

import httpx

from gasbot.exceptions import MalformedResponseError, SampleFetchError
from gasbot.logging import get_logger
from gasbot.models import WEI_PER_GWEI, quantize_gwei

logger = get_logger(__name__)

_GAS_PRICE_REQUEST = {
    "jsonrpc": "2.0",
    "method": "eth_gasPrice",
    "params": [],
    "id": 1,
}


def wei_hex_to_gwei(result: object) -> Decimal:
    """Convert a hex-encoded wei quantity to gwei with 3 decimals.

    Raises:
        MalformedResponseError: If result is not a 0x-prefixed hex string.
    """
    if not isinstance(result, str) or not result.lower().startswith("0x"):
        raise MalformedResponseError(f"Expected hex quantity, got {result!r}")
    try:
        wei = int(result, 16)
    except ValueError as e:
        raise MalformedResponseError(f"Invalid hex quantity {result!r}") from e
    return quantize_gwei(Decimal(wei) / WEI_PER_GWEI)


class GasPriceSource(ABC):
    """Abstract base class for gas price readers."""

    @abstractmethod
    async def fetch_gas_price(self, rpc_url: str) -> Decimal:
        """Return the current gas price in gwei for the given endpoint.

        Raises:
            SampleFetchError: On transport errors or malformed responses.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...


class JsonRpcGasPriceSource(GasPriceSource):
    """Reads gas prices with a JSON-RPC eth_gasPrice call.

    Args:
        timeout: Per-request timeout in seconds.
        client: Optional pre-built httpx.AsyncClient (tests inject one with
            a MockTransport).
    """

    def __init__(self, timeout: float = 10.0, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch_gas_price(self, rpc_url: str) -> Decimal:
        try:
            response = await self._client.post(rpc_url, json=_GAS_PRICE_REQUEST)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise SampleFetchError(f"eth_gasPrice request failed: {e}") from e
        except ValueError as e:
            raise MalformedResponseError(f"eth_gasPrice returned non-JSON body: {e}") from e

        if not isinstance(body, dict):
            raise MalformedResponseError(f"Unexpected JSON-RPC body: {body!r}")
        if body.get("error"):
            raise SampleFetchError(f"eth_gasPrice RPC error: {body['error']}")

        gwei = wei_hex_to_gwei(body.get("result"))
        logger.debug("gas_price_fetched", rpc_url=rpc_url, gwei=str(gwei))
        return gwei

    async def close(self) -> None:
        await self._client.aclose()
