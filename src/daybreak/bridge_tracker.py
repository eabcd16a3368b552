"""
Existing cross-chain presence tracker.

Answers two questions for a source token: is it already live on Solana, and
has it been attested on the Wormhole Token Bridge?

Lookup order:
  1. Curated table of well-known bridged tokens (USDC native, USDT/WBTC/DAI
     Wormhole-wrapped) plus the curated attested set.
  2. Wormholescan ``/operations`` query for the token address: any transfer
     whose target chain is Solana counts as an attestation.

The Wormholescan API is public; no API key is required.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .constants import (
    KNOWN_BRIDGED_TOKENS,
    KNOWN_REBASING_TOKENS,
    WORMHOLE_ATTESTED_TOKENS,
    WORMHOLE_SOLANA_CHAIN_ID,
)
from .data_sources._retry import async_http_get
from .models import BridgeStatus, Chain
from .utils import normalize_address
from config import WORMHOLESCAN_BASE_URL

logger = logging.getLogger(__name__)

# Source chain → Wormhole chain ID
_WORMHOLE_CHAIN_IDS: dict[Chain, int] = {
    Chain.ETHEREUM: 2,
    Chain.BSC: 4,
    Chain.POLYGON: 5,
    Chain.AVALANCHE: 6,
    Chain.ARBITRUM: 23,
    Chain.OPTIMISM: 24,
    Chain.BASE: 30,
}


def is_known_rebasing(address: str, chain: Chain = Chain.ETHEREUM) -> bool:
    """Return True if the token is in the curated rebasing table."""
    return chain is Chain.ETHEREUM and normalize_address(address) in KNOWN_REBASING_TOKENS


def lookup_curated(address: str, chain: Chain = Chain.ETHEREUM) -> Optional[BridgeStatus]:
    """Return the curated status for *address*, or ``None`` if it is not listed.

    The curated addresses are Ethereum mainnet deployments.
    """
    if chain is not Chain.ETHEREUM:
        return None
    address = normalize_address(address)
    attested = address in WORMHOLE_ATTESTED_TOKENS
    known = KNOWN_BRIDGED_TOKENS.get(address)
    if known is not None:
        destination, provider, kind = known
        return BridgeStatus(
            already_on_destination=True,
            destination_address=destination,
            provider=provider,
            bridge_kind=kind,
            attested=attested,
        )
    if attested:
        return BridgeStatus(attested=True, provider="Wormhole")
    return None


# ---------------------------------------------------------------------------
# Internal Wormholescan helpers
# ---------------------------------------------------------------------------

async def _fetch_wormhole_operations(
    client: httpx.AsyncClient,
    address: str,
) -> list[dict]:
    """Query Wormholescan for recent operations involving *address*."""
    data = await async_http_get(
        client,
        f"{WORMHOLESCAN_BASE_URL.rstrip('/')}/operations",
        params={"address": address, "pageSize": "25"},
        max_retries=2,
        label="Wormholescan",
    )
    if not isinstance(data, dict):
        return []
    return data.get("operations") or []


def _target_chain(op: dict) -> int:
    """Extract the destination Wormhole chain ID from an operation dict."""
    props = (op.get("content") or {}).get("standarizedProperties") or {}
    try:
        return int(props.get("toChain") or op.get("targetChain") or 0)
    except (TypeError, ValueError):
        return 0


def _source_chain(op: dict) -> int:
    props = (op.get("content") or {}).get("standarizedProperties") or {}
    try:
        return int(props.get("tokenChain") or (op.get("sourceChain") or {}).get("chainId") or 0)
    except (TypeError, ValueError, AttributeError):
        return 0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def detect_bridge_status(
    address: str,
    chain: Chain = Chain.ETHEREUM,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> BridgeStatus:
    """Return the bridge status of *address*.

    The curated table wins.  Otherwise, when *client* is given, Wormholescan
    is consulted.  No signal at all yields the default (unbridged) status.
    """
    curated = lookup_curated(address, chain)
    if curated is not None:
        return curated
    if client is None:
        return BridgeStatus()

    address = normalize_address(address)
    operations = await _fetch_wormhole_operations(client, address)
    source_id = _WORMHOLE_CHAIN_IDS[chain]
    for op in operations:
        if _target_chain(op) != WORMHOLE_SOLANA_CHAIN_ID:
            continue
        origin = _source_chain(op)
        if origin and origin != source_id:
            continue
        logger.info("Wormholescan shows %s transferred to Solana", address)
        return BridgeStatus(attested=True, provider="Wormhole")

    return BridgeStatus()
