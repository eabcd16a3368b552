"""Tests for holder distribution."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from daybreak.holders import compute_holder_data, fetch_holder_data


class TestComputeHolderData:

    def test_percentages_of_fetched_total(self, sample_holder_rows):
        data = compute_holder_data(sample_holder_rows)
        assert [h.percentage for h in data.top_holders] == pytest.approx([60.0, 20.0, 20.0])
        assert data.top_10_concentration == pytest.approx(100.0)
        assert data.total_holders is None

    def test_sorted_and_lowercased(self, sample_holder_rows):
        data = compute_holder_data(sample_holder_rows)
        assert data.top_holders[0].address == "0x" + "a" * 40
        assert data.top_holders[0].balance == "600"

    def test_keeps_top_ten(self):
        rows = [
            {"TokenHolderAddress": f"0x{i:040x}", "TokenHolderQuantity": str(i)}
            for i in range(1, 16)
        ]
        data = compute_holder_data(rows)
        assert len(data.top_holders) == 10
        assert data.top_holders[0].balance == "15"

    def test_bad_balances_count_as_zero(self):
        rows = [
            {"TokenHolderAddress": "0x1", "TokenHolderQuantity": "n/a"},
            {"TokenHolderAddress": "0x2", "TokenHolderQuantity": "100"},
        ]
        data = compute_holder_data(rows)
        assert data.top_holders[0].percentage == 100.0
        assert data.top_holders[1].percentage == 0.0

    def test_all_zero(self):
        data = compute_holder_data([{"TokenHolderAddress": "0x1", "TokenHolderQuantity": "0"}])
        assert data.top_10_concentration == 0.0

    def test_empty(self):
        assert compute_holder_data([]).top_holders == ()


class TestFetchHolderData:

    @pytest.mark.asyncio
    async def test_without_key(self):
        explorer = MagicMock(has_api_key=False)
        explorer.get_token_holders = AsyncMock()
        assert await fetch_holder_data(explorer, "0x" + "1" * 40) is None
        explorer.get_token_holders.assert_not_called()

    @pytest.mark.asyncio
    async def test_with_rows(self, sample_holder_rows):
        explorer = MagicMock(has_api_key=True)
        explorer.get_token_holders = AsyncMock(return_value=sample_holder_rows)
        data = await fetch_holder_data(explorer, "0x" + "1" * 40)
        assert data.top_holders[0].percentage == pytest.approx(60.0)

    @pytest.mark.asyncio
    async def test_no_rows(self):
        explorer = MagicMock(has_api_key=True)
        explorer.get_token_holders = AsyncMock(return_value=None)
        assert await fetch_holder_data(explorer, "0x" + "1" * 40) is None
