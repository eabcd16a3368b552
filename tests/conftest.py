"""Shared test fixtures for the Daybreak test suite."""

from __future__ import annotations

import sys
import os

# Ensure src/ is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from daybreak.models import (
    AnalysisRecord,
    BridgeStatus,
    BytecodeProfile,
    Chain,
    CompatibilityVerdict,
    FeatureVector,
    RiskComponents,
    RiskScore,
    TokenMetadata,
    TransferMode,
)

USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
UNKNOWN_TOKEN = "0x1111111111111111111111111111111111111111"


def abi_string(text: str) -> str:
    """ABI-encode *text* as a dynamic string return value."""
    payload = text.encode("utf-8").hex()
    padded = payload + "0" * (-len(payload) % 64)
    return "0x" + f"{32:064x}" + f"{len(text.encode('utf-8')):064x}" + padded


def abi_uint(value: int) -> str:
    return "0x" + f"{value:064x}"


def make_record(
    *,
    decimals: int = 18,
    features: FeatureVector | None = None,
    profile: BytecodeProfile | None = None,
    is_compatible: bool = True,
    mode: TransferMode = TransferMode.LOCKING,
    bridge_status: BridgeStatus | None = None,
    rate_limit=None,
    symbol: str = "TKN",
) -> AnalysisRecord:
    """Build an ``AnalysisRecord`` with sensible defaults for planning tests."""
    return AnalysisRecord(
        token=TokenMetadata(
            address=UNKNOWN_TOKEN,
            chain=Chain.ETHEREUM,
            name="Token",
            symbol=symbol,
            decimals=decimals,
            total_supply="1000000000000000000000000",
        ),
        features=features or FeatureVector(),
        bytecode=profile or BytecodeProfile(size_bytes=3000),
        compatibility=CompatibilityVerdict(
            is_compatible=is_compatible,
            recommended_mode=mode,
            decimal_trimming_required=decimals > 8,
            destination_decimals=min(decimals, 8),
        ),
        bridge_status=bridge_status or BridgeStatus(),
        risk_score=RiskScore.from_components(RiskComponents()),
        rate_limit=rate_limit,
    )


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def usdc_metadata():
    return TokenMetadata(
        address=USDC,
        chain=Chain.ETHEREUM,
        name="USD Coin",
        symbol="USDC",
        decimals=6,
        total_supply="25000000000000000",
    )


@pytest.fixture
def plain_metadata():
    return TokenMetadata(address=UNKNOWN_TOKEN, name="Token", symbol="TKN", decimals=18)


@pytest.fixture
def sample_holder_rows():
    """Explorer ``tokenholderlist`` rows, deliberately unsorted."""
    return [
        {"TokenHolderAddress": "0x" + "b" * 40, "TokenHolderQuantity": "200"},
        {"TokenHolderAddress": "0x" + "A" * 40, "TokenHolderQuantity": "600"},
        {"TokenHolderAddress": "0x" + "c" * 40, "TokenHolderQuantity": "200"},
    ]
