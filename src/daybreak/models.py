"""
Pydantic models used throughout the Daybreak analyzer.

Every model is frozen: analysis entities are produced once per request and
are safe to share between concurrent analyses.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_address


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------
class Chain(str, Enum):
    """Supported source EVM networks."""

    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"
    AVALANCHE = "avalanche"
    BSC = "bsc"

    @classmethod
    def parse(cls, value: str) -> "Chain":
        """Parse a chain name or common alias, case-insensitively."""
        key = value.strip().lower()
        chain = _CHAIN_ALIASES.get(key)
        if chain is None:
            raise ValueError(f"Unknown chain: {value}")
        return chain

    @property
    def display_name(self) -> str:
        return "BSC" if self is Chain.BSC else self.value.capitalize()


_CHAIN_ALIASES: dict[str, Chain] = {
    "ethereum": Chain.ETHEREUM,
    "eth": Chain.ETHEREUM,
    "polygon": Chain.POLYGON,
    "matic": Chain.POLYGON,
    "arbitrum": Chain.ARBITRUM,
    "arb": Chain.ARBITRUM,
    "optimism": Chain.OPTIMISM,
    "op": Chain.OPTIMISM,
    "base": Chain.BASE,
    "avalanche": Chain.AVALANCHE,
    "avax": Chain.AVALANCHE,
    "bsc": Chain.BSC,
    "bnb": Chain.BSC,
}


# ---------------------------------------------------------------------------
# Token metadata
# ---------------------------------------------------------------------------
class TokenMetadata(_Frozen):
    """ERC-20 metadata resolved from the source chain."""

    address: str = Field(..., description="Canonical lowercase 0x-prefixed address")
    chain: Chain = Field(Chain.ETHEREUM, description="Source network")
    name: str = Field("", description="Token name")
    symbol: str = Field("", description="Ticker / symbol")
    decimals: int = Field(18, ge=0, le=255, description="Decimal precision")
    total_supply: str = Field("0", description="Raw total supply as a decimal string")

    @field_validator("address", mode="before")
    @classmethod
    def _canonical_address(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("chain", mode="before")
    @classmethod
    def _parse_chain(cls, value: object) -> object:
        if isinstance(value, str) and not isinstance(value, Chain):
            return Chain.parse(value)
        return value

    @field_validator("total_supply")
    @classmethod
    def _unsigned_decimal(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError("total_supply must be an unsigned decimal string")
        return value


class FeatureVector(_Frozen):
    """Token capabilities.  Rebasing comes from an external source only."""

    mintable: bool = False
    burnable: bool = False
    pausable: bool = False
    blacklist_capable: bool = False
    permit_capable: bool = False
    upgradeable: bool = False
    rebasing: bool = False


# ---------------------------------------------------------------------------
# Bytecode
# ---------------------------------------------------------------------------
class Complexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @property
    def label(self) -> str:
        return {
            Complexity.SIMPLE: "Simple (<5KB)",
            Complexity.MODERATE: "Moderate (5-15KB)",
            Complexity.COMPLEX: "Complex (>15KB)",
        }[self]


class ProxyKind(str, Enum):
    NONE = "none"
    MINIMAL_PROXY = "minimal_proxy"
    EIP1967 = "eip1967"
    TRANSPARENT_UPGRADEABLE = "transparent_upgradeable"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return {
            ProxyKind.NONE: "Not a proxy",
            ProxyKind.MINIMAL_PROXY: "Minimal Proxy (Clone)",
            ProxyKind.EIP1967: "EIP-1967",
            ProxyKind.TRANSPARENT_UPGRADEABLE: "Transparent Upgradeable",
            ProxyKind.UNKNOWN: "Unknown Proxy",
        }[self]


class BytecodeProfile(_Frozen):
    """Heuristic feature set derived from runtime bytecode."""

    size_bytes: int = Field(0, ge=0)
    complexity: Complexity = Complexity.SIMPLE
    is_proxy: bool = False
    proxy_kind: ProxyKind = ProxyKind.NONE
    implementation_address: Optional[str] = Field(
        None, description="Resolved EIP-1967 implementation, filled by the resolver"
    )
    has_selfdestruct: bool = False
    has_delegatecall: bool = False
    has_fee_pattern: bool = False


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------
class IssueSeverity(str, Enum):
    """Issue severity, ordered ``INFO < WARNING < ERROR``."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, IssueSeverity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: dict[IssueSeverity, int] = {
    IssueSeverity.INFO: 0,
    IssueSeverity.WARNING: 1,
    IssueSeverity.ERROR: 2,
}


class CompatibilityIssue(_Frozen):
    severity: IssueSeverity
    code: str
    title: str
    description: str
    recommendation: str


class TransferMode(str, Enum):
    """NTT operating mode on the source chain."""

    LOCKING = "locking"
    BURNING = "burning"


class CompatibilityVerdict(_Frozen):
    is_compatible: bool
    recommended_mode: TransferMode
    issues: tuple[CompatibilityIssue, ...] = ()
    decimal_trimming_required: bool = False
    destination_decimals: int = Field(..., ge=0, le=8)

    @property
    def errors(self) -> tuple[CompatibilityIssue, ...]:
        return tuple(i for i in self.issues if i.severity is IssueSeverity.ERROR)


# ---------------------------------------------------------------------------
# Bridge / holder collaborators
# ---------------------------------------------------------------------------
class BridgeStatus(_Frozen):
    """Existing cross-chain presence of the token."""

    already_on_destination: bool = False
    destination_address: Optional[str] = None
    provider: Optional[str] = None
    bridge_kind: Optional[Literal["native", "wrapped", "ntt"]] = None
    attested: bool = False


class HolderInfo(_Frozen):
    address: str
    balance: str
    percentage: float = Field(ge=0.0, le=100.0)


class HolderData(_Frozen):
    """Top-holder distribution, ordered largest first."""

    top_holders: tuple[HolderInfo, ...] = ()
    top_10_concentration: float = Field(0.0, ge=0.0, le=100.0)
    total_holders: Optional[int] = None


class RateLimitRecommendation(_Frozen):
    daily_transfers: int = Field(0, ge=0)
    recommended_daily_limit: int = Field(ge=1)
    recommended_per_tx_limit: int = Field(ge=1)
    reasoning: str
    high_volume_warning: bool = False


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------
class RiskRating(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskComponents(_Frozen):
    decimal_handling: int = Field(0, ge=0, le=20)
    token_features: int = Field(0, ge=0, le=25)
    bytecode_complexity: int = Field(0, ge=0, le=20)
    holder_concentration: int = Field(0, ge=0, le=15)
    bridge_status: int = Field(0, ge=0, le=20)


class RiskScore(_Frozen):
    """Composite migration risk (lower = safer)."""

    total: int = Field(ge=0, le=100)
    rating: RiskRating
    components: RiskComponents

    @classmethod
    def from_components(cls, components: RiskComponents) -> "RiskScore":
        total = min(
            components.decimal_handling
            + components.token_features
            + components.bytecode_complexity
            + components.holder_concentration
            + components.bridge_status,
            100,
        )
        if total <= 33:
            rating = RiskRating.LOW
        elif total <= 66:
            rating = RiskRating.MEDIUM
        else:
            rating = RiskRating.HIGH
        return cls(total=total, rating=rating, components=components)


# ---------------------------------------------------------------------------
# Analysis record  (the main output)
# ---------------------------------------------------------------------------
class AnalysisRecord(_Frozen):
    """Everything known about one token, returned by ``analyze_token``."""

    token: TokenMetadata
    features: FeatureVector
    bytecode: BytecodeProfile
    compatibility: CompatibilityVerdict
    bridge_status: BridgeStatus = Field(default_factory=BridgeStatus)
    risk_score: RiskScore
    holder_data: Optional[HolderData] = None
    rate_limit: Optional[RateLimitRecommendation] = None


# ---------------------------------------------------------------------------
# Migration planning
# ---------------------------------------------------------------------------
class MigrationMethod(str, Enum):
    NTT = "ntt"
    NEON_EVM = "neon_evm"
    NATIVE_REWRITE = "native_rewrite"


class Feasibility(str, Enum):
    RECOMMENDED = "recommended"
    VIABLE = "viable"
    NOT_RECOMMENDED = "not_recommended"


class MigrationPath(_Frozen):
    method: MigrationMethod
    feasibility: Feasibility
    estimated_cost_usd: str
    estimated_time: str
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()


class MigrationStep(_Frozen):
    order: int = Field(ge=1)
    title: str
    description: str
    command: Optional[str] = None


class ChainTokenConfig(_Frozen):
    address: Optional[str] = None
    decimals: int = Field(ge=0, le=255)
    mode: TransferMode


class ChainDeploymentConfig(_Frozen):
    chain: str
    token: ChainTokenConfig


class DeploymentConfig(_Frozen):
    """Content of the NTT ``deployment.json`` file."""

    version: str = "1.0.0"
    network: Literal["mainnet", "testnet"] = "mainnet"
    source: ChainDeploymentConfig
    destination: ChainDeploymentConfig
    daily_limit: Optional[int] = None
    per_tx_limit: Optional[int] = None


class CostEstimate(_Frozen):
    """NTT deployment and running costs in USD (deployment rent also in SOL)."""

    deployment_cost_usd: float = Field(ge=0.0)
    deployment_cost_sol: float = Field(ge=0.0)
    per_transfer_cost_usd: float = Field(ge=0.0)
    monthly_operational_usd: float = Field(ge=0.0)
    sol_price_usd: float = Field(ge=0.0)


class MigrationPlan(_Frozen):
    recommended_path: MigrationMethod
    paths: tuple[MigrationPath, ...]
    steps: tuple[MigrationStep, ...]
    deployment: DeploymentConfig
    costs: CostEstimate


# ---------------------------------------------------------------------------
# Candidate ranking
# ---------------------------------------------------------------------------
class CandidateToken(_Frozen):
    """An entry of the curated migration-candidate list."""

    symbol: str
    name: str
    address: str
    rank: int = Field(ge=1)


class CandidateRow(_Frozen):
    """One analysed candidate, as shown in the ranking table."""

    symbol: str
    address: str
    decimals: int
    risk_score: int = Field(ge=0, le=100)
    rating: RiskRating
    is_compatible: bool
    recommended_mode: TransferMode
    already_on_destination: bool = False
    provider: Optional[str] = None


# ---------------------------------------------------------------------------
# Batch request / response (for POST /analyze/batch)
# ---------------------------------------------------------------------------
class BatchAnalyzeRequest(BaseModel):
    addresses: list[str] = Field(
        ..., min_length=1, max_length=10, description="1-10 EVM token addresses"
    )
    chain: str = "ethereum"


class BatchAnalyzeResponse(BaseModel):
    results: dict[str, AnalysisRecord | str] = Field(
        ...,
        description="Mapping address → AnalysisRecord on success or error string on failure",
    )
