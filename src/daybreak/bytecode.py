"""
Bytecode pattern analyzer.

Turns raw runtime bytecode into a :class:`BytecodeProfile` and the
bytecode-derivable part of a :class:`FeatureVector`.

All checks are substring scans over the hex text.  They do not disassemble,
so an opcode byte or selector that merely appears inside PUSH data will
match too.  Consumers treat the flags as warning signals, never proofs.

Proxy detection is a size + DELEGATECALL heuristic.  Telling EIP-1967 from
other upgradeable layouts needs a storage read, which the RPC resolver does
separately when it fills ``implementation_address``.
"""

from __future__ import annotations

from .constants import (
    CAPABILITY_SELECTORS,
    FEE_SELECTORS,
    MINIMAL_PROXY_PREFIX,
    MODERATE_MAX_BYTES,
    OPCODE_DELEGATECALL,
    OPCODE_SELFDESTRUCT,
    SIMPLE_MAX_BYTES,
    SMALL_PROXY_MAX_BYTES,
    UPGRADEABLE_PROXY_MAX_BYTES,
)
from .models import BytecodeProfile, Complexity, FeatureVector, ProxyKind
from .utils import strip_hex_prefix


def _normalize(bytecode_hex: str) -> str:
    return strip_hex_prefix(bytecode_hex.strip()).lower()


def classify_complexity(size_bytes: int) -> Complexity:
    if size_bytes < SIMPLE_MAX_BYTES:
        return Complexity.SIMPLE
    if size_bytes < MODERATE_MAX_BYTES:
        return Complexity.MODERATE
    return Complexity.COMPLEX


def has_opcode(code: str, opcode: str) -> bool:
    return opcode in code


def detect_proxy(code: str) -> ProxyKind:
    """Classify *code* (normalized hex) by proxy pattern, in priority order."""
    if code.startswith(MINIMAL_PROXY_PREFIX):
        return ProxyKind.MINIMAL_PROXY

    size = len(code) // 2
    if has_opcode(code, OPCODE_DELEGATECALL):
        if size < SMALL_PROXY_MAX_BYTES:
            return ProxyKind.EIP1967
        if size < UPGRADEABLE_PROXY_MAX_BYTES:
            return ProxyKind.TRANSPARENT_UPGRADEABLE
    return ProxyKind.NONE


def detect_fee_pattern(code: str) -> bool:
    return any(selector in code for selector in FEE_SELECTORS)


def analyze(bytecode_hex: str) -> BytecodeProfile:
    """Build the full bytecode profile.  Empty code yields the zero profile."""
    code = _normalize(bytecode_hex)
    size_bytes = len(code) // 2
    if size_bytes == 0:
        return BytecodeProfile()

    proxy_kind = detect_proxy(code)
    return BytecodeProfile(
        size_bytes=size_bytes,
        complexity=classify_complexity(size_bytes),
        is_proxy=proxy_kind is not ProxyKind.NONE,
        proxy_kind=proxy_kind,
        has_selfdestruct=has_opcode(code, OPCODE_SELFDESTRUCT),
        has_delegatecall=has_opcode(code, OPCODE_DELEGATECALL),
        has_fee_pattern=detect_fee_pattern(code),
    )


def detect_capabilities(bytecode_hex: str) -> FeatureVector:
    """Selector-based capability flags.  ``rebasing`` is always False here."""
    code = _normalize(bytecode_hex)
    flags = {
        feature: any(selector in code for selector in selectors)
        for feature, selectors in CAPABILITY_SELECTORS.items()
    }
    return FeatureVector(
        upgradeable=bool(code) and detect_proxy(code) is not ProxyKind.NONE,
        **flags,
    )
