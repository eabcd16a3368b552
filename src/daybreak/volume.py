"""
NTT rate-limit recommendation from recent transfer activity.

The daily inbound limit is 10% of observed daily volume, floored at 0.1% of
total supply; the per-transaction limit is 1% of the daily limit.  Without
transfer data the supply floor alone is used.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from .data_sources.explorer import ExplorerClient
from .models import RateLimitRecommendation, TokenMetadata

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400
TRANSFER_SAMPLE_SIZE = 100
HIGH_VOLUME_TRANSFERS = 1000

_VOLUME_SHARE = 0.1
_SUPPLY_SHARE = 0.001
_PER_TX_SHARE = 0.01


def _int_field(tx: dict[str, Any], key: str) -> int:
    try:
        return int(str(tx.get(key, "0")))
    except (TypeError, ValueError):
        return 0


def supply_in_tokens(total_supply: str, decimals: int) -> float:
    """Convert a raw supply string into whole tokens."""
    try:
        return int(total_supply) / (10 ** decimals)
    except ValueError:
        return 0.0


def estimate_daily_activity(
    transfers: list[dict[str, Any]],
    decimals: int,
    now: Optional[int] = None,
) -> tuple[int, float]:
    """Return ``(transfers_per_day, tokens_per_day)`` for a newest-first sample.

    When no transfer falls inside the last 24h the whole sample is
    extrapolated over its time span.
    """
    if not transfers:
        return 0, 0.0
    now = int(time.time()) if now is None else now
    divisor = 10 ** decimals
    cutoff = now - SECONDS_PER_DAY

    recent = [tx for tx in transfers if _int_field(tx, "timeStamp") >= cutoff]
    if recent:
        volume = sum(_int_field(tx, "value") for tx in recent) / divisor
        return len(recent), volume

    oldest = _int_field(transfers[-1], "timeStamp") or now
    span = max(now - oldest, 1)
    count = int(len(transfers) / span * SECONDS_PER_DAY)
    volume = sum(_int_field(tx, "value") for tx in transfers) / divisor
    return count, volume * (SECONDS_PER_DAY / span)


def recommend_rate_limit(
    transfers: list[dict[str, Any]],
    decimals: int,
    total_supply: str,
    now: Optional[int] = None,
) -> RateLimitRecommendation:
    """Recommend daily and per-transaction limits from a transfer sample."""
    if not transfers:
        return fallback_recommendation(
            decimals, total_supply, reason="No recent transfer activity detected."
        )

    daily_transfers, daily_volume = estimate_daily_activity(transfers, decimals, now)
    supply = supply_in_tokens(total_supply, decimals)

    volume_limit = max(daily_volume * _VOLUME_SHARE, 1.0)
    daily_limit = max(int(max(volume_limit, supply * _SUPPLY_SHARE)), 1)
    per_tx = max(int(daily_limit * _PER_TX_SHARE), 1)
    high_volume = daily_transfers > HIGH_VOLUME_TRANSFERS

    if daily_volume > 0:
        activity = (
            "High activity, consider tighter per-tx limits."
            if high_volume
            else "Moderate activity, standard limits appropriate."
        )
        reasoning = (
            f"Token moves ~{daily_volume:.0f} tokens/day across ~{daily_transfers} transfers. "
            f"Recommended limit: {daily_limit} tokens/day (10% of volume). {activity}"
        )
    else:
        reasoning = (
            "No recent transfer volume detected. Using supply-based fallback: "
            f"{daily_limit} tokens/day (0.1% of supply)."
        )

    return RateLimitRecommendation(
        daily_transfers=daily_transfers,
        recommended_daily_limit=daily_limit,
        recommended_per_tx_limit=per_tx,
        reasoning=reasoning,
        high_volume_warning=high_volume,
    )


def fallback_recommendation(
    decimals: int,
    total_supply: str,
    *,
    reason: str = "No explorer API key.",
) -> RateLimitRecommendation:
    """Supply-only recommendation: 0.1% of supply per day."""
    daily_limit = max(int(supply_in_tokens(total_supply, decimals) * _SUPPLY_SHARE), 1)
    per_tx = max(int(daily_limit * _PER_TX_SHARE), 1)
    return RateLimitRecommendation(
        daily_transfers=0,
        recommended_daily_limit=daily_limit,
        recommended_per_tx_limit=per_tx,
        reasoning=(
            f"{reason} Using supply-based estimate: {daily_limit} tokens/day "
            "(0.1% of supply). Set ETHERSCAN_API_KEY for volume-based calculation."
        ),
        high_volume_warning=False,
    )


async def fetch_transfers(
    explorer: ExplorerClient,
    address: str,
) -> Optional[list[dict[str, Any]]]:
    """Recent transfers for *address*, or ``None`` without an API key."""
    if not explorer.has_api_key:
        return None
    return await explorer.get_token_transfers(address, limit=TRANSFER_SAMPLE_SIZE)


def rate_limit_for(
    metadata: TokenMetadata,
    transfers: Optional[list[dict[str, Any]]],
    *,
    has_api_key: bool,
) -> RateLimitRecommendation:
    """Pick the volume-based recommendation or the matching supply fallback."""
    if transfers:
        return recommend_rate_limit(transfers, metadata.decimals, metadata.total_supply)
    if not has_api_key:
        return fallback_recommendation(metadata.decimals, metadata.total_supply)
    logger.debug("No transfer data for %s; using supply fallback", metadata.address)
    return fallback_recommendation(
        metadata.decimals, metadata.total_supply,
        reason="Transfer history unavailable.",
    )
