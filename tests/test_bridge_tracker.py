"""Tests for existing bridge-presence detection."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from conftest import UNKNOWN_TOKEN, USDC
from daybreak.bridge_tracker import (
    _target_chain,
    detect_bridge_status,
    is_known_rebasing,
    lookup_curated,
)
from daybreak.models import BridgeStatus, Chain

USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"
UNI = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"
STETH = "0xae7ab96520de3a18e5e111b5eaab095312d7fe84"

_FETCH = "daybreak.bridge_tracker._fetch_wormhole_operations"


def _op(to_chain: int, token_chain: int = 2) -> dict:
    return {
        "id": "op",
        "content": {
            "standarizedProperties": {"toChain": to_chain, "tokenChain": token_chain},
        },
    }


class TestCuratedTable:

    def test_usdc_is_native(self):
        status = lookup_curated(USDC)
        assert status.already_on_destination
        assert status.bridge_kind == "native"
        assert status.provider == "Circle"
        assert status.destination_address == "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        assert status.attested

    def test_usdt_is_wrapped(self):
        status = lookup_curated(USDT.upper().replace("0X", "0x"))
        assert status.bridge_kind == "wrapped"
        assert status.provider == "Wormhole"

    def test_attested_only(self):
        status = lookup_curated(UNI)
        assert status == BridgeStatus(attested=True, provider="Wormhole")

    def test_unknown(self):
        assert lookup_curated(UNKNOWN_TOKEN) is None

    def test_other_chains_not_matched(self):
        assert lookup_curated(USDC, Chain.POLYGON) is None


class TestRebasing:

    def test_steth(self):
        assert is_known_rebasing(STETH)
        assert not is_known_rebasing(USDC)
        assert not is_known_rebasing(STETH, Chain.ARBITRUM)


class TestDetectBridgeStatus:

    @pytest.mark.asyncio
    async def test_curated_wins_without_network(self):
        client = AsyncMock()
        with patch(_FETCH, new_callable=AsyncMock) as fetch:
            status = await detect_bridge_status(USDC, client=client)
        assert status.already_on_destination
        fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_client_gives_default(self):
        assert await detect_bridge_status(UNKNOWN_TOKEN) == BridgeStatus()

    @pytest.mark.asyncio
    async def test_wormholescan_solana_transfer_attests(self):
        with patch(_FETCH, new_callable=AsyncMock, return_value=[_op(23), _op(1)]):
            status = await detect_bridge_status(UNKNOWN_TOKEN, client=AsyncMock())
        assert status.attested
        assert not status.already_on_destination

    @pytest.mark.asyncio
    async def test_wormholescan_other_destinations(self):
        with patch(_FETCH, new_callable=AsyncMock, return_value=[_op(23), _op(30)]):
            status = await detect_bridge_status(UNKNOWN_TOKEN, client=AsyncMock())
        assert status == BridgeStatus()

    @pytest.mark.asyncio
    async def test_wormholescan_foreign_origin_ignored(self):
        with patch(_FETCH, new_callable=AsyncMock, return_value=[_op(1, token_chain=5)]):
            status = await detect_bridge_status(UNKNOWN_TOKEN, Chain.ETHEREUM, client=AsyncMock())
        assert not status.attested

    @pytest.mark.asyncio
    async def test_wormholescan_unavailable(self):
        with patch(_FETCH, new_callable=AsyncMock, return_value=[]):
            status = await detect_bridge_status(UNKNOWN_TOKEN, client=AsyncMock())
        assert status == BridgeStatus()


class TestParseOperation:

    def test_target_chain_fallbacks(self):
        assert _target_chain(_op(1)) == 1
        assert _target_chain({"targetChain": "30"}) == 30
        assert _target_chain({"content": None}) == 0
        assert _target_chain({"content": {"standarizedProperties": {"toChain": "bad"}}}) == 0
