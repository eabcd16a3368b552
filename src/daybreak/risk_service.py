"""
Migration Risk Score Service.

Combines token metadata, capabilities, bytecode profile, bridge presence and
(optional) holder distribution into a composite 0-100 risk score.

Score breakdown (0-100 total):
  - Decimal handling      0-20  (≤8 → 0, 9 → 3, 10-12 → 8, 13-15 → 14, ≥16 → 20)
  - Token features        0-25  (rebasing → 25 outright; else fee +15,
                                 pausable +3, blacklist +4, selfdestruct +3)
  - Bytecode complexity   0-20  (simple 0 / moderate 8 / complex 15, proxy +5)
  - Holder concentration  0-15  (no data → 5; top holder >50% → 15;
                                 top-10 <50% → 0, <70% → 5, <85% → 10, else 15)
  - Bridge status         0-20  (already on Solana → 15, attested → 5)

Risk ratings:
  0-33   → low
  34-66  → medium
  67-100 → high
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import (
    BridgeStatus,
    BytecodeProfile,
    Complexity,
    FeatureVector,
    HolderData,
    RiskComponents,
    RiskScore,
    TokenMetadata,
)

logger = logging.getLogger(__name__)

_MAX_DECIMALS = 20
_MAX_FEATURES = 25
_MAX_BYTECODE = 20
_MAX_HOLDERS = 15
_MAX_BRIDGE = 20

_COMPLEXITY_BASE: dict[Complexity, int] = {
    Complexity.SIMPLE: 0,
    Complexity.MODERATE: 8,
    Complexity.COMPLEX: 15,
}


def score(
    metadata: TokenMetadata,
    features: FeatureVector,
    profile: BytecodeProfile,
    bridge_status: BridgeStatus,
    holder_data: Optional[HolderData] = None,
) -> RiskScore:
    """Return the composite ``RiskScore``.  Pure and deterministic."""
    components = RiskComponents(
        decimal_handling=score_decimals(metadata.decimals),
        token_features=score_features(features, profile),
        bytecode_complexity=score_bytecode(profile),
        holder_concentration=score_holders(holder_data),
        bridge_status=score_bridge(bridge_status),
    )
    result = RiskScore.from_components(components)
    logger.debug(
        "risk %s: total=%d rating=%s", metadata.address, result.total, result.rating.value
    )
    return result


def score_decimals(decimals: int) -> int:
    if decimals <= 8:
        return 0
    if decimals == 9:
        return 3
    if decimals <= 12:
        return 8
    if decimals <= 15:
        return 14
    return _MAX_DECIMALS


def score_features(features: FeatureVector, profile: BytecodeProfile) -> int:
    if features.rebasing:
        return _MAX_FEATURES

    score = 0
    if profile.has_fee_pattern:
        score += 15
    if features.pausable:
        score += 3
    if features.blacklist_capable:
        score += 4
    if profile.has_selfdestruct:
        score += 3
    return min(score, _MAX_FEATURES)


def score_bytecode(profile: BytecodeProfile) -> int:
    score = _COMPLEXITY_BASE[profile.complexity]
    if profile.is_proxy:
        score += 5
    return min(score, _MAX_BYTECODE)


def score_holders(holder_data: Optional[HolderData]) -> int:
    if holder_data is None:
        # unknown distribution is not the same as a safe one
        return 5

    if holder_data.top_holders and holder_data.top_holders[0].percentage > 50.0:
        return _MAX_HOLDERS

    # Explorer-derived data is normalised to the fetched top 10 and sits near
    # 100; the lower bands only apply to externally supplied HolderData.
    concentration = holder_data.top_10_concentration
    if concentration < 50.0:
        return 0
    if concentration < 70.0:
        return 5
    if concentration < 85.0:
        return 10
    return _MAX_HOLDERS


def score_bridge(bridge_status: BridgeStatus) -> int:
    if bridge_status.already_on_destination:
        return 15
    if bridge_status.attested:
        return 5
    return 0
