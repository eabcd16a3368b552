"""
Singleton HTTP client management for the Daybreak analyzer.

Provides lazily-initialised per-chain EVM RPC and explorer clients plus a
shared client for the Wormholescan API.

``init_clients`` / ``close_clients`` should be called at app startup/shutdown.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..models import Chain
from .evm_rpc import EvmRpcClient
from .explorer import ExplorerClient
from config import (
    ETHERSCAN_API_KEY,
    EXPLORER_API_URLS,
    HTTP_MAX_RETRIES,
    REQUEST_TIMEOUT,
    RPC_URLS,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singletons (created once, reused)
# ---------------------------------------------------------------------------
_rpc_clients: dict[Chain, EvmRpcClient] = {}
_explorer_clients: dict[tuple[Chain, str], ExplorerClient] = {}
_wormholescan_client: Optional[httpx.AsyncClient] = None


def get_rpc_client(chain: Chain) -> EvmRpcClient:
    client = _rpc_clients.get(chain)
    if client is None:
        client = EvmRpcClient(
            endpoint=RPC_URLS[chain.value],
            timeout=REQUEST_TIMEOUT,
            max_retries=HTTP_MAX_RETRIES,
        )
        _rpc_clients[chain] = client
    return client


def get_explorer_client(chain: Chain, api_key: Optional[str] = None) -> ExplorerClient:
    """Explorer client for *chain*; *api_key* overrides ``ETHERSCAN_API_KEY``."""
    key = api_key if api_key is not None else ETHERSCAN_API_KEY
    client = _explorer_clients.get((chain, key))
    if client is None:
        client = ExplorerClient(
            base_url=EXPLORER_API_URLS[chain.value],
            api_key=key,
            timeout=REQUEST_TIMEOUT,
            max_retries=HTTP_MAX_RETRIES,
        )
        _explorer_clients[(chain, key)] = client
    return client


def get_wormholescan_client() -> httpx.AsyncClient:
    """Return a long-lived httpx client for Wormholescan lookups."""
    global _wormholescan_client
    if _wormholescan_client is None or _wormholescan_client.is_closed:
        _wormholescan_client = httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT,
            headers={"Accept": "application/json"},
        )
    return _wormholescan_client


async def init_clients() -> None:
    """Eagerly create the singleton HTTP clients (called at startup)."""
    for chain in Chain:
        get_rpc_client(chain)
    get_wormholescan_client()
    logger.info("HTTP clients ready for %d chains", len(_rpc_clients))


async def close_clients() -> None:
    """Close singleton HTTP clients gracefully (called at shutdown)."""
    global _wormholescan_client
    for rpc in _rpc_clients.values():
        await rpc.close()
    _rpc_clients.clear()
    for explorer in _explorer_clients.values():
        await explorer.close()
    _explorer_clients.clear()
    if _wormholescan_client is not None:
        await _wormholescan_client.aclose()
        _wormholescan_client = None
