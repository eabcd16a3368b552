"""
Centralized constants for the Daybreak analyzer.

This file contains:
- EVM protocol constants (opcodes, ERC-20 selectors, proxy templates)
- Curated lookup tables (fee / capability selectors, known bridged tokens)
- Shared thresholds that MUST stay synchronized across modules
- The NTT cost model and the curated migration-candidate list

Import from this module rather than duplicating values across services.
Every table here is immutable and built once at import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ---------------------------------------------------------------------------
# ERC-20 read selectors (eth_call data)
# ---------------------------------------------------------------------------
SELECTOR_NAME = "0x06fdde03"          # name()
SELECTOR_SYMBOL = "0x95d89b41"        # symbol()
SELECTOR_DECIMALS = "0x313ce567"      # decimals()
SELECTOR_TOTAL_SUPPLY = "0x18160ddd"  # totalSupply()

# ---------------------------------------------------------------------------
# Opcodes of interest (two-nibble hex)
# ---------------------------------------------------------------------------
OPCODE_DELEGATECALL = "f4"
OPCODE_SELFDESTRUCT = "ff"

# EIP-1167 minimal proxy runtime prefix
MINIMAL_PROXY_PREFIX = "363d3d373d3d3d363d73"

# EIP-1967 implementation slot: bytes32(uint256(keccak256("eip1967.proxy.implementation")) - 1)
EIP1967_IMPLEMENTATION_SLOT = (
    "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc"
)

# ---------------------------------------------------------------------------
# Function-selector tables
# ---------------------------------------------------------------------------

# Explicit fee setters only; transfer-path fee logic is not detectable
# without control-flow analysis.
FEE_SELECTORS: frozenset[str] = frozenset({
    "69fe0e2d",  # setFee(uint256)
    "c0b0fda2",  # setTaxFee(uint256)
    "e01af92c",  # setTaxRate(uint256)
    "f41e60c5",  # setFees(uint256)
})

CAPABILITY_SELECTORS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "mintable": (
        "40c10f19",  # mint(address,uint256)
    ),
    "burnable": (
        "42966c68",  # burn(uint256)
        "79cc6790",  # burnFrom(address,uint256)
    ),
    "pausable": (
        "8456cb59",  # pause()
        "3f4ba83a",  # unpause()
    ),
    "blacklist_capable": (
        "f9f92be4",  # blacklist(address)
        "44337ea1",  # addBlacklist(address)
    ),
    "permit_capable": (
        "d505accf",  # permit(address,address,uint256,uint256,uint8,bytes32,bytes32)
    ),
})

# ---------------------------------------------------------------------------
# Bytecode thresholds (bytes)
# ---------------------------------------------------------------------------
SIMPLE_MAX_BYTES: int = 5 * 1024
MODERATE_MAX_BYTES: int = 15 * 1024
SMALL_PROXY_MAX_BYTES: int = 1000
UPGRADEABLE_PROXY_MAX_BYTES: int = 5000

# ---------------------------------------------------------------------------
# Destination chain
# ---------------------------------------------------------------------------
DESTINATION_CHAIN = "solana"

# SPL supports 9 decimals; NTT trims to 8.
MAX_DESTINATION_DECIMALS: int = 8

# Wormhole chain id for Solana
WORMHOLE_SOLANA_CHAIN_ID: int = 1

# ---------------------------------------------------------------------------
# Curated bridge tables (keys are lowercase EVM addresses)
# ---------------------------------------------------------------------------

# address → (destination mint, provider label, bridge kind)
KNOWN_BRIDGED_TOKENS: Mapping[str, tuple[str, str, str]] = MappingProxyType({
    # USDC – native issuance on Solana
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": (
        "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", "Circle", "native",
    ),
    # USDT – Wormhole wrapped
    "0xdac17f958d2ee523a2206206994597c13d831ec7": (
        "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", "Wormhole", "wrapped",
    ),
    # WBTC – Wormhole wrapped
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599": (
        "3NZ9JMVBmGAqocybic2c7LQCJScmgsAZ6vQqTDzcqmJh", "Wormhole", "wrapped",
    ),
    # DAI – Wormhole wrapped
    "0x6b175474e89094c44da98b954eedeac495271d0f": (
        "EjmyN6qEC1Tf1JxiG1ae7UTJhUxSwk1TCCb39Aqc1ckQ", "Wormhole", "wrapped",
    ),
})

# Tokens with a Wormhole Token Bridge attestation
WORMHOLE_ATTESTED_TOKENS: frozenset[str] = frozenset({
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC
    "0xdac17f958d2ee523a2206206994597c13d831ec7",  # USDT
    "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",  # WBTC
    "0x6b175474e89094c44da98b954eedeac495271d0f",  # DAI
    "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",  # UNI
    "0x514910771af9ca656af840dff83e8264ecf986ca",  # LINK
})

# Rebasing cannot be read from bytecode; this table is the external source.
KNOWN_REBASING_TOKENS: frozenset[str] = frozenset({
    "0xae7ab96520de3a18e5e111b5eaab095312d7fe84",  # stETH
    "0xd46ba6d942050d489dbd938a2c909a5d5039a161",  # AMPL
})

# ---------------------------------------------------------------------------
# NTT cost model (USD unless noted)
# ---------------------------------------------------------------------------

# Source-side deployment gas, keyed by ``Chain.value`` (~2M gas)
EVM_DEPLOYMENT_COST_USD: Mapping[str, float] = MappingProxyType({
    "ethereum": 180.0,
    "polygon": 0.50,
    "arbitrum": 5.0,
    "optimism": 5.0,
    "base": 2.0,
    "avalanche": 3.0,
    "bsc": 1.0,
})

# Rent for the NTT manager, transceiver and token accounts
SOLANA_DEPLOYMENT_SOL = 2.5
# Relayer fee plus gas on both sides
PER_TRANSFER_COST_USD = 0.10
MONTHLY_OPERATIONAL_USD = 50.0

# ---------------------------------------------------------------------------
# Curated migration candidates (Ethereum mainnet, rank order)
# ---------------------------------------------------------------------------
CANDIDATE_TOKENS: tuple[tuple[str, str, str], ...] = (
    ("ONDO", "Ondo Finance", "0xfaba6f8e4a5e8ab82f62fe7c39859fa577269be3"),
    ("AAVE", "Aave", "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9"),
    ("UNI", "Uniswap", "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"),
    ("LINK", "Chainlink", "0x514910771af9ca656af840dff83e8264ecf986ca"),
    ("MKR", "Maker", "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"),
    ("LDO", "Lido DAO", "0x5a98fcbea516cf06857215779fd812ca3bef1b32"),
    ("CRV", "Curve DAO", "0xd533a949740bb3306d119cc777fa900ba034cd52"),
    ("APE", "ApeCoin", "0x4d224452801aced8b2f0aebe155379bb5d594381"),
    ("COMP", "Compound", "0xc00e94cb662c3520282e6f5717214004a7f26888"),
    ("SNX", "Synthetix", "0xc011a73ee8576fb46f5e1c5751ca3b9fe0af2a6f"),
    ("ENS", "Ethereum Name Service", "0xc18360217d8f7ab5e7c516566761ea12ce7f9d72"),
    ("DYDX", "dYdX", "0x92d6c1e31e14520e676a687f0a93788b716beff5"),
    ("PENDLE", "Pendle", "0x808507121b80c02388fad14726482e061b8da827"),
    ("RPL", "Rocket Pool", "0xd33526068d116ce69f19a9ee46f0bd304f21a51f"),
    ("FXS", "Frax Share", "0x3432b6a60d23ca0dfca7761b7ab56459d9c964d0"),
    ("BAL", "Balancer", "0xba100000625a3754423978a60c9317c58a424e3d"),
    ("GRT", "The Graph", "0xc944e90c64b2c07662a292be6244bdf05cda44a7"),
    ("1INCH", "1inch", "0x111111111117dc0aa78b770fa6a738034120c302"),
    ("SUSHI", "SushiSwap", "0x6b3595068778dd592e39a122f4f5a5cf09c90fe2"),
    ("YFI", "yearn.finance", "0x0bc529c00c6401aef6d220be8c6ea1667f6ad93e"),
    ("ANKR", "Ankr", "0x8290333cef9e6d528dd5618fb97a76f268f3edd4"),
    ("BLUR", "Blur", "0x5283d291dbcf85356a21ba090e6db59121208b44"),
    ("CVX", "Convex Finance", "0x4e3fbd56cd56c3e72c1403e103b45db9da5b9d2b"),
    ("LQTY", "Liquity", "0x6dea81c8171d0ba574754ef6f8b412f2ed88c54d"),
    ("CELR", "Celer Network", "0x4f9254c83eb525f9fcf346490bbb3ed28a81c667"),
    ("MASK", "Mask Network", "0x69af81e73a73b40adf4f3d4223cd9b1ece623074"),
    ("BAND", "Band Protocol", "0xba11d00c5f74255f56a5e366f4f77f5a186d7f55"),
    ("AUDIO", "Audius", "0x18aaa7115705e8be94bffebde57af9bfc265b998"),
    ("NMR", "Numeraire", "0x1776e1f26f98b1a5df9cd347953a26dd3cb46671"),
    ("PERP", "Perpetual Protocol", "0xbc396689893d065f41bc2c6ecbee5e0085233447"),
    ("SPELL", "Spell Token", "0x090185f2135308bad17527004364ebcc2d37e5f6"),
    ("ALCX", "Alchemix", "0xdbdb4d16eda451d0503b854cf79d55697f90c8df"),
    ("REN", "Ren", "0x408e41876cccdc0f92210600ef50372656052a38"),
    ("BADGER", "Badger DAO", "0x3472a5a71965499acd81997a54bba8d852c6e53d"),
    ("MPL", "Maple Finance", "0x33349b282065b0284d756f0577fb39c158f935e6"),
    ("POND", "Marlin", "0x57b946008913b82e4df85f501cbaed910e58d26c"),
    ("TRIBE", "Tribe", "0xc7283b66eb1eb5fb86327f08e1b5816b0720212b"),
    ("LOOKS", "LooksRare", "0xf4d2888d29d722226fafa5d9b24f9164c092421e"),
    ("HIGH", "Highstreet", "0x71ab77b7dbb4fa7e017bc15090b2163221420282"),
    ("AURA", "Aura Finance", "0xc0c293ce456ff0ed870add98a0828dd4d2903dbf"),
    # Already on Solana, kept for contrast
    ("USDC", "USD Coin", "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"),
    ("USDT", "Tether", "0xdac17f958d2ee523a2206206994597c13d831ec7"),
    ("DAI", "Dai", "0x6b175474e89094c44da98b954eedeac495271d0f"),
    ("WETH", "Wrapped Ether", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"),
    ("WBTC", "Wrapped Bitcoin", "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599"),
)
