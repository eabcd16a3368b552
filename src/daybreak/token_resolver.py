"""
On-chain resolution of ERC-20 metadata and runtime bytecode.

``resolve_metadata`` issues the four metadata ``eth_call``s concurrently and
decodes them; ``resolve_bytecode`` fetches the runtime code, profiles it and,
for proxies, reads the EIP-1967 implementation slot.
"""

from __future__ import annotations

import asyncio
import logging

from . import bytecode as bytecode_analyzer
from .constants import (
    SELECTOR_DECIMALS,
    SELECTOR_NAME,
    SELECTOR_SYMBOL,
    SELECTOR_TOTAL_SUPPLY,
)
from .data_sources.evm_rpc import EvmRpcClient
from .decoder import decode_byte, decode_string, decode_uint
from .errors import DecodeError, RpcError
from .models import BytecodeProfile, Chain, FeatureVector, TokenMetadata
from .utils import normalize_address

logger = logging.getLogger(__name__)


async def resolve_metadata(
    rpc: EvmRpcClient,
    address: str,
    chain: Chain = Chain.ETHEREUM,
) -> TokenMetadata:
    """Read ``name``, ``symbol``, ``decimals`` and ``totalSupply`` in parallel.

    Raises :class:`InvalidAddressError` for a malformed address, and
    :class:`RpcError` / :class:`DecodeError` when a read fails.
    """
    address = normalize_address(address)

    name_raw, symbol_raw, decimals_raw, supply_raw = await asyncio.gather(
        rpc.eth_call(address, SELECTOR_NAME),
        rpc.eth_call(address, SELECTOR_SYMBOL),
        rpc.eth_call(address, SELECTOR_DECIMALS),
        rpc.eth_call(address, SELECTOR_TOTAL_SUPPLY),
    )

    metadata = TokenMetadata(
        address=address,
        chain=chain,
        name=decode_string(name_raw),
        symbol=decode_string(symbol_raw),
        decimals=decode_byte(decimals_raw),
        total_supply=decode_uint(supply_raw),
    )
    logger.info(
        "Resolved %s on %s: %s (%s), %d decimals",
        address, chain.value, metadata.name or "?", metadata.symbol or "?", metadata.decimals,
    )
    return metadata


async def resolve_bytecode(
    rpc: EvmRpcClient,
    address: str,
) -> tuple[BytecodeProfile, FeatureVector]:
    """Fetch and profile the runtime code at *address*.

    An address without code (EOA or self-destructed contract) raises
    :class:`DecodeError`: there is no token to analyse.
    """
    address = normalize_address(address)
    code = await rpc.get_code(address)
    if code in ("", "0x", "0X"):
        raise DecodeError(f"no contract code at {address}")

    profile = bytecode_analyzer.analyze(code)
    features = bytecode_analyzer.detect_capabilities(code)

    if profile.is_proxy:
        try:
            implementation = await rpc.get_eip1967_implementation(address)
        except RpcError as exc:
            logger.warning("EIP-1967 slot read failed for %s: %s", address, exc)
            implementation = None
        if implementation is not None:
            profile = profile.model_copy(update={"implementation_address": implementation})

    logger.debug(
        "Bytecode %s: %d bytes, %s, proxy=%s",
        address, profile.size_bytes, profile.complexity.value, profile.proxy_kind.value,
    )
    return profile, features
