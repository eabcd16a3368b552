"""Tests for the EVM JSON-RPC client (async methods with mocked HTTP)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from daybreak.constants import EIP1967_IMPLEMENTATION_SLOT
from daybreak.data_sources.evm_rpc import EvmRpcClient
from daybreak.errors import RpcError


def _client_returning(*results):
    responses = []
    for result in results:
        resp = MagicMock()
        resp.status_code = 200
        resp.headers = {}
        resp.raise_for_status = MagicMock()
        resp.json.return_value = {"jsonrpc": "2.0", "id": 1, "result": result}
        responses.append(resp)
    mock_client = AsyncMock()
    mock_client.post = AsyncMock(side_effect=responses)
    mock_client.is_closed = False
    return mock_client


@pytest.fixture
def rpc():
    return EvmRpcClient(endpoint="https://rpc.example.com/", timeout=5)


class TestCall:

    @pytest.mark.asyncio
    async def test_payload_shape(self, rpc):
        rpc._client = _client_returning("0x01")
        await rpc.eth_call("0x" + "1" * 40, "0x313ce567")

        url = rpc._client.post.call_args.args[0]
        payload = rpc._client.post.call_args.kwargs["json"]
        assert url == "https://rpc.example.com"
        assert payload["method"] == "eth_call"
        assert payload["params"] == [{"to": "0x" + "1" * 40, "data": "0x313ce567"}, "latest"]
        assert payload["jsonrpc"] == "2.0"

    @pytest.mark.asyncio
    async def test_ids_increment(self, rpc):
        rpc._client = _client_returning("0x", "0x")
        await rpc.get_code("0x" + "1" * 40)
        await rpc.get_code("0x" + "1" * 40)
        ids = [c.kwargs["json"]["id"] for c in rpc._client.post.call_args_list]
        assert ids == [1, 2]

    @pytest.mark.asyncio
    async def test_null_result_becomes_empty_hex(self, rpc):
        rpc._client = _client_returning(None)
        assert await rpc.get_code("0x" + "1" * 40) == "0x"

    @pytest.mark.asyncio
    async def test_rpc_error_propagates(self, rpc):
        resp = MagicMock()
        resp.status_code = 200
        resp.headers = {}
        resp.raise_for_status = MagicMock()
        resp.json.return_value = {"error": {"code": -32000, "message": "header not found"}}
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(return_value=resp)
        mock_client.is_closed = False
        rpc._client = mock_client

        with pytest.raises(RpcError, match="header not found"):
            await rpc.eth_call("0x" + "1" * 40, "0x06fdde03")


class TestEip1967:

    @pytest.mark.asyncio
    async def test_reads_implementation_slot(self, rpc):
        impl = "ab" * 20
        rpc._client = _client_returning("0x" + "0" * 24 + impl)

        assert await rpc.get_eip1967_implementation("0x" + "1" * 40) == "0x" + impl
        params = rpc._client.post.call_args.kwargs["json"]["params"]
        assert params[1] == EIP1967_IMPLEMENTATION_SLOT

    @pytest.mark.asyncio
    async def test_empty_slot_is_none(self, rpc):
        rpc._client = _client_returning("0x" + "0" * 64)
        assert await rpc.get_eip1967_implementation("0x" + "1" * 40) is None

    @pytest.mark.asyncio
    async def test_short_slot_value_is_padded(self, rpc):
        rpc._client = _client_returning("0x1234")
        assert await rpc.get_eip1967_implementation("0x" + "1" * 40) == "0x" + "0" * 36 + "1234"


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_close(self, rpc):
        mock_client = AsyncMock()
        mock_client.is_closed = False
        rpc._client = mock_client
        await rpc.close()
        mock_client.aclose.assert_awaited_once()

    def test_endpoint_trailing_slash_stripped(self, rpc):
        assert rpc.endpoint == "https://rpc.example.com"
