"""
Top-holder distribution from Etherscan-family explorers.

Percentages are relative to the combined balance of the fetched holders,
not to total supply, so ``top_10_concentration`` is always ≤ 100.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .data_sources.explorer import ExplorerClient
from .models import HolderData, HolderInfo

logger = logging.getLogger(__name__)

TOP_HOLDER_LIMIT = 10


def _parse_balance(raw: Any) -> int:
    try:
        return max(int(str(raw)), 0)
    except (TypeError, ValueError):
        return 0


def compute_holder_data(raw_holders: list[dict[str, Any]]) -> HolderData:
    """Build ``HolderData`` from explorer ``tokenholderlist`` rows.

    Rows are sorted largest first; at most ``TOP_HOLDER_LIMIT`` are kept.
    """
    parsed = [
        (str(row.get("TokenHolderAddress", "")).lower(), _parse_balance(row.get("TokenHolderQuantity")))
        for row in raw_holders
    ]
    parsed.sort(key=lambda item: item[1], reverse=True)
    parsed = parsed[:TOP_HOLDER_LIMIT]

    total = sum(balance for _, balance in parsed)
    holders = tuple(
        HolderInfo(
            address=address,
            balance=str(balance),
            percentage=min(balance / total * 100.0, 100.0) if total else 0.0,
        )
        for address, balance in parsed
    )
    concentration = min(sum(h.percentage for h in holders), 100.0)
    return HolderData(top_holders=holders, top_10_concentration=concentration)


async def fetch_holder_data(explorer: ExplorerClient, address: str) -> Optional[HolderData]:
    """Return holder data, or ``None`` when the explorer has nothing usable."""
    if not explorer.has_api_key:
        logger.debug("No explorer API key; skipping holder lookup for %s", address)
        return None
    rows = await explorer.get_token_holders(address, limit=TOP_HOLDER_LIMIT)
    if not rows:
        return None
    data = compute_holder_data(rows)
    logger.debug("Holders %s: top-10 %.1f%%", address, data.top_10_concentration)
    return data
