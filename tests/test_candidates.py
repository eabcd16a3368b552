"""Tests for migration-candidate ranking."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import make_record
from daybreak.candidates import curated_candidates, rank_candidates, sort_rows, to_row
from daybreak.constants import CANDIDATE_TOKENS
from daybreak.errors import RpcError
from daybreak.models import BridgeStatus, CandidateRow, Chain, RiskRating, TransferMode
from daybreak.utils import normalize_address

_ANALYZE = "daybreak.candidates.analyze_token"


def _row(symbol: str, risk: int, bridged: bool = False) -> CandidateRow:
    return CandidateRow(
        symbol=symbol,
        address="0x" + "1" * 40,
        decimals=18,
        risk_score=risk,
        rating=RiskRating.LOW,
        is_compatible=True,
        recommended_mode=TransferMode.LOCKING,
        already_on_destination=bridged,
    )


class TestCuratedCandidates:

    def test_ondo_first(self):
        first = curated_candidates(1)[0]
        assert first.symbol == "ONDO"
        assert first.address == "0xfaba6f8e4a5e8ab82f62fe7c39859fa577269be3"
        assert first.rank == 1

    def test_limit(self):
        assert len(curated_candidates(3)) == 3
        assert len(curated_candidates(1000)) == len(CANDIDATE_TOKENS) == 45
        assert curated_candidates(0) == []

    def test_addresses_are_canonical(self):
        for candidate in curated_candidates():
            assert normalize_address(candidate.address) == candidate.address, candidate.symbol

    def test_includes_already_bridged_contrast(self):
        symbols = {c.symbol for c in curated_candidates()}
        assert {"USDC", "USDT", "WBTC"} <= symbols


class TestSortRows:

    def test_unbridged_first_then_by_risk(self):
        rows = [_row("A", 40), _row("B", 10, bridged=True), _row("C", 5), _row("D", 70)]
        assert [r.symbol for r in sort_rows(rows)] == ["C", "A", "D", "B"]


class TestToRow:

    def test_copies_record_fields(self):
        record = make_record(
            decimals=6,
            bridge_status=BridgeStatus(already_on_destination=True, provider="Circle"),
        )
        candidate = curated_candidates(1)[0]
        row = to_row(candidate, record)
        assert row.symbol == "TKN"
        assert row.decimals == 6
        assert row.risk_score == record.risk_score.total
        assert row.already_on_destination
        assert row.provider == "Circle"


class TestRankCandidates:

    @pytest.mark.asyncio
    async def test_ranks_and_skips_failures(self):
        low = make_record(symbol="LOW")
        bridged = make_record(symbol="BRG", bridge_status=BridgeStatus(already_on_destination=True))

        async def _fake(address, chain, **kwargs):
            assert kwargs["skip_holders"] is True
            if address == CANDIDATE_TOKENS[0][2]:
                return bridged
            if address == CANDIDATE_TOKENS[1][2]:
                raise RpcError("eth_call", "node down")
            return low

        with patch(_ANALYZE, side_effect=_fake):
            rows = await rank_candidates(Chain.ETHEREUM, 3)
        assert [r.symbol for r in rows] == ["LOW", "BRG"]

    @pytest.mark.asyncio
    async def test_timeouts_are_skipped(self):
        with patch(_ANALYZE, new_callable=AsyncMock, side_effect=asyncio.TimeoutError()):
            assert await rank_candidates("eth", 2) == []

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        async def _fake(address, chain, **kwargs):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return make_record()

        with patch(_ANALYZE, side_effect=_fake):
            rows = await rank_candidates(limit=6, max_concurrency=2)
        assert len(rows) == 6
        assert peak == 2

    @pytest.mark.asyncio
    async def test_unknown_chain(self):
        with pytest.raises(ValueError, match="Unknown chain"):
            await rank_candidates("fantom")
