"""
Project configuration file for the Daybreak migration analyzer.

This module centralises all user-modifiable settings such as RPC endpoints,
block-explorer API keys, timeouts and API server options.  You can edit these
values directly or set environment variables to override them.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _parse_float(name: str, default: str, *, low: float = 0.0, high: float = 1.0) -> float:
    """Parse an env var as a float and validate it within [low, high]."""
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.error("Invalid value for %s: %r – using default %s", name, raw, default)
        value = float(default)
    if not (low <= value <= high):
        logger.warning("%s=%.4f is outside [%.1f, %.1f] – clamped", name, value, low, high)
        value = max(low, min(value, high))
    return value


def _parse_int(name: str, default: str, *, minimum: int = 1) -> int:
    """Parse an env var as an int and enforce a minimum."""
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.error("Invalid value for %s: %r – using default %s", name, raw, default)
        value = int(default)
    if value < minimum:
        logger.warning("%s=%d is below minimum %d – clamped", name, value, minimum)
        value = minimum
    return value


# ---------------------------------------------------------------------------
# EVM RPC endpoints (public, rate-limited defaults)
# ---------------------------------------------------------------------------
_DEFAULT_RPC_URLS: dict[str, str] = {
    "ethereum": "https://ethereum-rpc.publicnode.com",
    "polygon": "https://polygon-bor-rpc.publicnode.com",
    "arbitrum": "https://arbitrum-one-rpc.publicnode.com",
    "optimism": "https://optimism-rpc.publicnode.com",
    "base": "https://base-rpc.publicnode.com",
    "avalanche": "https://avalanche-c-chain-rpc.publicnode.com",
    "bsc": "https://bsc-rpc.publicnode.com",
}

# ``ETHEREUM_RPC_URL``, ``POLYGON_RPC_URL`` … override the defaults
RPC_URLS: dict[str, str] = {
    chain: os.getenv(f"{chain.upper()}_RPC_URL", url)
    for chain, url in _DEFAULT_RPC_URLS.items()
}

# ---------------------------------------------------------------------------
# Block explorers (Etherscan family)
# ---------------------------------------------------------------------------
ETHERSCAN_API_KEY: str = os.getenv("ETHERSCAN_API_KEY", "")

EXPLORER_API_URLS: dict[str, str] = {
    "ethereum": "https://api.etherscan.io/api",
    "polygon": "https://api.polygonscan.com/api",
    "arbitrum": "https://api.arbiscan.io/api",
    "optimism": "https://api-optimistic.etherscan.io/api",
    "base": "https://api.basescan.org/api",
    "bsc": "https://api.bscscan.com/api",
    "avalanche": "https://api.snowtrace.io/api",
}

# ---------------------------------------------------------------------------
# Wormholescan (public, no key required)
# ---------------------------------------------------------------------------
WORMHOLESCAN_BASE_URL: str = os.getenv(
    "WORMHOLESCAN_BASE_URL",
    "https://api.wormholescan.io/api/v1",
)

# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT: int = _parse_int("REQUEST_TIMEOUT", "15", minimum=1)
ANALYSIS_TIMEOUT_SECONDS: int = _parse_int("ANALYSIS_TIMEOUT_SECONDS", "45", minimum=5)
MAX_CONCURRENT_ANALYSES: int = _parse_int("MAX_CONCURRENT_ANALYSES", "3", minimum=1)
HTTP_MAX_RETRIES: int = _parse_int("HTTP_MAX_RETRIES", "3", minimum=1)

# ---------------------------------------------------------------------------
# Cost estimates
# ---------------------------------------------------------------------------
SOL_PRICE_USD: float = _parse_float("SOL_PRICE_USD", "150.0", low=0.0, high=1_000_000.0)

# ---------------------------------------------------------------------------
# Rate limiting (slowapi format, e.g. "10/minute")
# ---------------------------------------------------------------------------
RATE_LIMIT_ANALYZE: str = os.getenv("RATE_LIMIT_ANALYZE", "10/minute")
RATE_LIMIT_CANDIDATES: str = os.getenv("RATE_LIMIT_CANDIDATES", "2/minute")

# ---------------------------------------------------------------------------
# Sentry (error tracking)
# ---------------------------------------------------------------------------
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_TRACES_SAMPLE_RATE: float = _parse_float(
    "SENTRY_TRACES_SAMPLE_RATE", "0.1", low=0.0, high=1.0
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# ---------------------------------------------------------------------------
# API server
# ---------------------------------------------------------------------------
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = _parse_int("API_PORT", "8000", minimum=1)
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]
