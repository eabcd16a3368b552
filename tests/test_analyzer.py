"""Tests for the analysis orchestrator."""

from __future__ import annotations

import asyncio
from contextlib import ExitStack
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import UNKNOWN_TOKEN, USDC
from daybreak.analyzer import analyze_token
from daybreak.errors import DecodeError, InvalidAddressError
from daybreak.models import (
    BridgeStatus,
    BytecodeProfile,
    Chain,
    FeatureVector,
    HolderData,
    HolderInfo,
    TokenMetadata,
)

STETH = "0xae7ab96520de3a18e5e111b5eaab095312d7fe84"
_MOD = "daybreak.analyzer"


def _metadata(address: str = UNKNOWN_TOKEN, decimals: int = 18) -> TokenMetadata:
    return TokenMetadata(
        address=address, name="Token", symbol="TKN", decimals=decimals,
        total_supply=str(10 ** 6 * 10 ** decimals),
    )


class _Harness:
    """Patch every network-facing collaborator of the analyzer."""

    def __init__(
        self,
        *,
        metadata: TokenMetadata | None = None,
        profile: BytecodeProfile | None = None,
        features: FeatureVector | None = None,
        bridge=None,
        holders=None,
        transfers=None,
        has_key: bool = False,
    ):
        self.explorer = MagicMock(has_api_key=has_key)
        self.explorer.get_token_transfers = AsyncMock(return_value=transfers)
        self.mocks = {
            "get_rpc_client": MagicMock(return_value=MagicMock()),
            "get_explorer_client": MagicMock(return_value=self.explorer),
            "get_wormholescan_client": MagicMock(return_value=MagicMock()),
            "resolve_metadata": AsyncMock(return_value=metadata or _metadata()),
            "resolve_bytecode": AsyncMock(
                return_value=(profile or BytecodeProfile(size_bytes=3000), features or FeatureVector())
            ),
            "detect_bridge_status": (
                bridge if isinstance(bridge, AsyncMock)
                else AsyncMock(return_value=bridge or BridgeStatus())
            ),
            "fetch_holder_data": AsyncMock(return_value=holders),
        }
        self._stack = ExitStack()

    def __enter__(self):
        for name, mock in self.mocks.items():
            self._stack.enter_context(patch(f"{_MOD}.{name}", mock))
        return self

    def __exit__(self, *exc):
        self._stack.close()
        return False


class TestAnalyzeToken:

    @pytest.mark.asyncio
    async def test_plain_token(self):
        with _Harness() as h:
            record = await analyze_token(UNKNOWN_TOKEN)
        assert record.token.symbol == "TKN"
        assert record.compatibility.is_compatible
        assert record.compatibility.destination_decimals == 8
        assert record.risk_score.total == 25
        assert record.holder_data is None
        assert record.rate_limit.recommended_daily_limit == 1000
        assert "ETHERSCAN_API_KEY" in record.rate_limit.reasoning
        h.explorer.get_token_transfers.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepts_chain_alias(self):
        with _Harness() as h:
            await analyze_token(UNKNOWN_TOKEN, "matic")
        h.mocks["get_rpc_client"].assert_called_once_with(Chain.POLYGON)
        assert h.mocks["resolve_metadata"].call_args.args[2] is Chain.POLYGON

    @pytest.mark.asyncio
    async def test_invalid_address_before_network(self):
        with _Harness() as h:
            with pytest.raises(InvalidAddressError):
                await analyze_token("0xnothex")
        h.mocks["get_rpc_client"].assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_chain(self):
        with _Harness():
            with pytest.raises(ValueError, match="Unknown chain"):
                await analyze_token(UNKNOWN_TOKEN, "fantom")

    @pytest.mark.asyncio
    async def test_bytecode_failure_propagates(self):
        with _Harness() as h:
            h.mocks["resolve_bytecode"].side_effect = DecodeError("no contract code")
            with pytest.raises(DecodeError):
                await analyze_token(UNKNOWN_TOKEN)

    @pytest.mark.asyncio
    async def test_bridge_failure_is_tolerated(self):
        bridge = AsyncMock(side_effect=RuntimeError("wormholescan down"))
        with _Harness(bridge=bridge):
            record = await analyze_token(UNKNOWN_TOKEN)
        assert record.bridge_status == BridgeStatus()

    @pytest.mark.asyncio
    async def test_known_rebasing_token_blocked(self):
        with _Harness(metadata=_metadata(STETH)):
            record = await analyze_token(STETH)
        assert record.features.rebasing
        assert not record.compatibility.is_compatible
        assert record.risk_score.components.token_features == 25

    @pytest.mark.asyncio
    async def test_holders_and_transfers_with_key(self):
        holders = HolderData(
            top_holders=(HolderInfo(address="0x" + "a" * 40, balance="1", percentage=60.0),),
            top_10_concentration=60.0,
        )
        transfers = [{"timeStamp": "9999999999", "value": str(10 ** 24)}]
        with _Harness(holders=holders, transfers=transfers, has_key=True) as h:
            record = await analyze_token(UNKNOWN_TOKEN, etherscan_key="KEY")
        h.mocks["get_explorer_client"].assert_called_once_with(Chain.ETHEREUM, "KEY")
        assert record.holder_data == holders
        assert record.risk_score.components.holder_concentration == 15
        assert record.rate_limit.daily_transfers == 1
        assert record.rate_limit.recommended_daily_limit == 100_000

    @pytest.mark.asyncio
    async def test_skip_holders(self):
        with _Harness(has_key=True, transfers=[]) as h:
            record = await analyze_token(UNKNOWN_TOKEN, skip_holders=True)
        h.mocks["fetch_holder_data"].assert_not_called()
        assert record.holder_data is None
        assert record.rate_limit.reasoning.startswith("Transfer history unavailable.")

    @pytest.mark.asyncio
    async def test_curated_bridge_status_recorded(self):
        status = BridgeStatus(already_on_destination=True, attested=True, provider="Circle")
        with _Harness(metadata=_metadata(USDC, decimals=6), bridge=status):
            record = await analyze_token(USDC)
        assert record.bridge_status.provider == "Circle"
        assert record.risk_score.components.bridge_status == 15

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def _slow(*args, **kwargs):
            await asyncio.sleep(1)

        with _Harness() as h:
            h.mocks["resolve_metadata"].side_effect = _slow
            with pytest.raises(asyncio.TimeoutError):
                await analyze_token(UNKNOWN_TOKEN, timeout=0.01)

    @pytest.mark.asyncio
    async def test_failure_cancels_pending_lookups(self):
        cancelled = asyncio.Event()

        async def _slow_bytecode(*args, **kwargs):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with _Harness() as h:
            h.mocks["resolve_metadata"].side_effect = DecodeError("bad name")
            h.mocks["resolve_bytecode"].side_effect = _slow_bytecode
            with pytest.raises(DecodeError):
                await analyze_token(UNKNOWN_TOKEN)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_log_context_bound_to_token(self):
        from daybreak.logging_config import token_ctx

        seen = []

        async def _capture(*args, **kwargs):
            seen.append(token_ctx.get())
            return _metadata()

        with _Harness() as h:
            h.mocks["resolve_metadata"].side_effect = _capture
            await analyze_token(UNKNOWN_TOKEN)
        assert seen == [f"ethereum:{UNKNOWN_TOKEN}"]
        assert token_ctx.get() == "-"
