"""
Analysis orchestrator.

``analyze_token`` is the main async entry point.  It resolves metadata and
bytecode from the source chain, looks up existing bridge presence, holder
distribution and transfer activity concurrently, then runs the pure
compatibility evaluator and risk scorer.

Metadata and bytecode are required: their failures propagate.  Bridge,
holder and volume lookups are best-effort; a failure only means that signal
is absent from the record.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Optional, TypeVar

from config import ANALYSIS_TIMEOUT_SECONDS
from . import compatibility, risk_service
from .bridge_tracker import detect_bridge_status, is_known_rebasing
from .data_sources._clients import (
    close_clients,
    get_explorer_client,
    get_rpc_client,
    get_wormholescan_client,
    init_clients,
)
from .holders import fetch_holder_data
from .logging_config import bind_token
from .models import AnalysisRecord, BridgeStatus, Chain
from .token_resolver import resolve_bytecode, resolve_metadata
from .utils import normalize_address
from .volume import fetch_transfers, rate_limit_for

__all__ = ["analyze_token", "init_clients", "close_clients"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _safe(coro: Awaitable[T], label: str) -> Optional[T]:
    try:
        return await coro
    except Exception as exc:
        logger.warning("%s lookup failed: %s", label, exc)
        return None


async def _none() -> None:
    return None


async def analyze_token(
    address: str,
    chain: Chain | str = Chain.ETHEREUM,
    *,
    skip_holders: bool = False,
    etherscan_key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> AnalysisRecord:
    """Analyse the ERC-20 token at *address* for migration to Solana.

    Parameters
    ----------
    address:
        Token contract address (40 hex digits, ``0x`` optional).
    chain:
        Source network, as a :class:`Chain` or a name / alias.
    skip_holders:
        Do not query holder distribution.
    etherscan_key:
        Explorer API key; defaults to ``ETHERSCAN_API_KEY``.
    timeout:
        Overall deadline in seconds; defaults to ``ANALYSIS_TIMEOUT_SECONDS``.
    """
    address = normalize_address(address)
    if not isinstance(chain, Chain):
        chain = Chain.parse(chain)
    deadline = ANALYSIS_TIMEOUT_SECONDS if timeout is None else timeout
    # separate task: bind_token() must not leak into the caller's context
    task = asyncio.ensure_future(
        _analyze(address, chain, skip_holders=skip_holders, etherscan_key=etherscan_key)
    )
    return await asyncio.wait_for(task, timeout=deadline)


async def _gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """``asyncio.gather`` that cancels the remaining tasks when one fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def _analyze(
    address: str,
    chain: Chain,
    *,
    skip_holders: bool,
    etherscan_key: Optional[str],
) -> AnalysisRecord:
    bind_token(chain.value, address)
    rpc = get_rpc_client(chain)
    explorer = get_explorer_client(chain, etherscan_key)

    logger.info("Analysing %s on %s", address, chain.value)

    holders_coro: Awaitable[Any] = (
        _none() if skip_holders
        else _safe(fetch_holder_data(explorer, address), "Holder")
    )

    metadata, (profile, features), bridge_status, holder_data, transfers = await _gather_or_cancel(
        resolve_metadata(rpc, address, chain),
        resolve_bytecode(rpc, address),
        _safe(detect_bridge_status(address, chain, client=get_wormholescan_client()), "Bridge"),
        holders_coro,
        _safe(fetch_transfers(explorer, address), "Transfer"),
    )

    if is_known_rebasing(address, chain):
        features = features.model_copy(update={"rebasing": True})
    if bridge_status is None:
        bridge_status = BridgeStatus()

    rate_limit = rate_limit_for(metadata, transfers, has_api_key=explorer.has_api_key)

    verdict = compatibility.evaluate(metadata, features, profile)
    risk = risk_service.score(metadata, features, profile, bridge_status, holder_data)

    logger.info(
        "%s (%s): compatible=%s risk=%d/%s",
        metadata.symbol or address, chain.value, verdict.is_compatible,
        risk.total, risk.rating.value,
    )
    return AnalysisRecord(
        token=metadata,
        features=features,
        bytecode=profile,
        compatibility=verdict,
        bridge_status=bridge_status,
        risk_score=risk,
        holder_data=holder_data,
        rate_limit=rate_limit,
    )
