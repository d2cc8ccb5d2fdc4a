"""Tests for the JSON-RPC gas price source.

All HTTP goes through httpx.MockTransport; no real RPC calls.
"""

import json
from decimal import Decimal

import httpx
import pytest

from gasbot.exceptions import MalformedResponseError, SampleFetchError
from gasbot.sources.gas_price import JsonRpcGasPriceSource, wei_hex_to_gwei

RPC_URL = "https://rpc.test"


def _source(handler) -> JsonRpcGasPriceSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return JsonRpcGasPriceSource(client=client)


class TestWeiHexToGwei:
    def test_converts_wei_to_gwei(self) -> None:
        assert wei_hex_to_gwei(hex(2_000_000_000)) == Decimal("2.000")

    def test_rounds_to_three_decimals(self) -> None:
        assert wei_hex_to_gwei(hex(2_512_345_678)) == Decimal("2.512")
        assert wei_hex_to_gwei(hex(1_000_500_000)) == Decimal("1.001")

    def test_accepts_uppercase_prefix(self) -> None:
        assert wei_hex_to_gwei("0X77359400") == Decimal("2.000")

    @pytest.mark.parametrize("result", [None, 2000000000, "", "12345", "0xZZ"])
    def test_rejects_non_hex(self, result) -> None:
        with pytest.raises(MalformedResponseError):
            wei_hex_to_gwei(result)


class TestJsonRpcGasPriceSource:
    @pytest.mark.asyncio
    async def test_posts_eth_gas_price_request(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": hex(3_141_592_653)})

        source = _source(handler)
        price = await source.fetch_gas_price(RPC_URL)
        await source.close()

        assert price == Decimal("3.142")
        assert seen == [{"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1}]

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        source = _source(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(SampleFetchError):
            await source.fetch_gas_price(RPC_URL)

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        source = _source(handler)
        with pytest.raises(SampleFetchError):
            await source.fetch_gas_price(RPC_URL)

    @pytest.mark.asyncio
    async def test_rpc_error_object(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "rate limited"}}
        source = _source(lambda request: httpx.Response(200, json=body))
        with pytest.raises(SampleFetchError, match="rate limited"):
            await source.fetch_gas_price(RPC_URL)

    @pytest.mark.asyncio
    async def test_missing_result_is_malformed(self) -> None:
        source = _source(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1}))
        with pytest.raises(MalformedResponseError):
            await source.fetch_gas_price(RPC_URL)

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self) -> None:
        source = _source(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(MalformedResponseError):
            await source.fetch_gas_price(RPC_URL)

    @pytest.mark.asyncio
    async def test_json_array_body_is_malformed(self) -> None:
        source = _source(lambda request: httpx.Response(200, json=[1, 2]))
        with pytest.raises(MalformedResponseError):
            await source.fetch_gas_price(RPC_URL)
