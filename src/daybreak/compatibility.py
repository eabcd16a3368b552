"""
NTT compatibility rule evaluator.

``evaluate`` runs a fixed, ordered list of rules over the token metadata,
feature vector and bytecode profile.  Every applicable rule fires and appends
one issue; the only state is the accumulating issue list.  The verdict is
compatible iff no ERROR issue was emitted.

Rule order (stable, so issue order is deterministic):

 1. DECIMAL_TRIM     warning  source decimals above the destination ceiling
 2. REBASING         error    balances drift between locked and minted supply
 3. FEE_ON_TRANSFER  error    fee setters present
 4. PAUSABLE         warning
 5. BLACKLIST        warning
 6. MINTABLE         info
 7. BURNABLE         info
 8. SELFDESTRUCT     warning
 9. PROXY            info     names the detected proxy kind
"""

from __future__ import annotations

import logging

from .constants import MAX_DESTINATION_DECIMALS
from .models import (
    BytecodeProfile,
    CompatibilityIssue,
    CompatibilityVerdict,
    FeatureVector,
    IssueSeverity,
    ProxyKind,
    TokenMetadata,
    TransferMode,
)

logger = logging.getLogger(__name__)


def evaluate(
    metadata: TokenMetadata,
    features: FeatureVector,
    profile: BytecodeProfile,
) -> CompatibilityVerdict:
    """Return the compatibility verdict for bridging *metadata* via NTT."""
    issues: list[CompatibilityIssue] = []

    trimming_required, destination_decimals = _check_decimals(metadata.decimals, issues)
    _check_rebasing(features, issues)
    _check_features(features, profile, issues)
    _check_bytecode(features, profile, issues)

    is_compatible = not any(i.severity is IssueSeverity.ERROR for i in issues)
    mode = recommend_mode(features)

    logger.debug(
        "compatibility %s: compatible=%s mode=%s issues=%s",
        metadata.address, is_compatible, mode.value, [i.code for i in issues],
    )
    return CompatibilityVerdict(
        is_compatible=is_compatible,
        recommended_mode=mode,
        issues=tuple(issues),
        decimal_trimming_required=trimming_required,
        destination_decimals=destination_decimals,
    )


def recommend_mode(features: FeatureVector) -> TransferMode:
    """Burning needs the NTT manager to burn on the source chain; mint is irrelevant."""
    return TransferMode.BURNING if features.burnable else TransferMode.LOCKING


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _check_decimals(decimals: int, issues: list[CompatibilityIssue]) -> tuple[bool, int]:
    if decimals <= MAX_DESTINATION_DECIMALS:
        return False, decimals

    issues.append(CompatibilityIssue(
        severity=IssueSeverity.WARNING,
        code="DECIMAL_TRIM",
        title="Decimal Trimming Required",
        description=(
            f"Token has {decimals} decimals but NTT supports max "
            f"{MAX_DESTINATION_DECIMALS}. Amounts will be trimmed, potentially "
            "causing precision loss."
        ),
        recommendation=(
            f"Solana token will use {MAX_DESTINATION_DECIMALS} decimals. Ensure your "
            "application handles the decimal difference correctly."
        ),
    ))
    return True, MAX_DESTINATION_DECIMALS


def _check_rebasing(features: FeatureVector, issues: list[CompatibilityIssue]) -> None:
    if not features.rebasing:
        return
    issues.append(CompatibilityIssue(
        severity=IssueSeverity.ERROR,
        code="REBASING",
        title="Rebasing Token Detected",
        description=(
            "This token adjusts balances without transfers. Tokens locked on the "
            "source chain will desync from tokens minted on Solana, causing loss "
            "of funds."
        ),
        recommendation=(
            "Rebasing tokens are incompatible with NTT. Wrap the token in a "
            "non-rebasing wrapper (e.g. wstETH for stETH) before bridging."
        ),
    ))


def _check_features(
    features: FeatureVector,
    profile: BytecodeProfile,
    issues: list[CompatibilityIssue],
) -> None:
    if profile.has_fee_pattern:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.ERROR,
            code="FEE_ON_TRANSFER",
            title="Fee-on-Transfer Detected",
            description=(
                "Token appears to charge fees on transfers. The fee mechanism "
                "cannot be replicated across chains."
            ),
            recommendation=(
                "Deploy a wrapper token without fees, or use a different "
                "bridging solution."
            ),
        ))

    if features.pausable:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.WARNING,
            code="PAUSABLE",
            title="Pausable Token",
            description=(
                "Token can be paused by its owner. A pause during a bridge "
                "transfer could leave funds locked."
            ),
            recommendation=(
                "Ensure pause functionality won't interfere with bridge "
                "operations. Consider governance controls."
            ),
        ))

    if features.blacklist_capable:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.WARNING,
            code="BLACKLIST",
            title="Blacklist Functionality",
            description=(
                "Token has blacklist capability. Blacklisted addresses cannot "
                "transfer tokens, which could affect bridge operations."
            ),
            recommendation=(
                "Ensure NTT contracts are not blacklistable. Document the "
                "blacklist policy for users."
            ),
        ))

    if features.mintable:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.INFO,
            code="MINTABLE",
            title="Mintable Token",
            description="Token has mint capability on the source chain.",
            recommendation=(
                "Mint capability alone does not enable burning mode. Burning mode "
                "requires burn capability so the NTT manager can burn tokens."
            ),
        ))

    if features.burnable:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.INFO,
            code="BURNABLE",
            title="Burnable Token",
            description="Token supports burning, compatible with NTT burning mode.",
            recommendation="Burning mode is the preferred NTT configuration.",
        ))


def _check_bytecode(
    features: FeatureVector,
    profile: BytecodeProfile,
    issues: list[CompatibilityIssue],
) -> None:
    if profile.has_selfdestruct:
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.WARNING,
            code="SELFDESTRUCT",
            title="Self-destruct Capability",
            description=(
                "Contract contains the selfdestruct opcode. If triggered, bridged "
                "tokens could become worthless."
            ),
            recommendation=(
                "Review the contract for selfdestruct conditions and make sure it "
                "cannot be called maliciously."
            ),
        ))

    if profile.is_proxy or features.upgradeable:
        kind = profile.proxy_kind if profile.is_proxy else ProxyKind.UNKNOWN
        issues.append(CompatibilityIssue(
            severity=IssueSeverity.INFO,
            code="PROXY",
            title="Upgradeable Proxy",
            description=(
                f"Contract is an upgradeable proxy ({kind.label}). "
                "Implementation can change over time."
            ),
            recommendation=(
                "Monitor for upgrades. NTT integration should be re-verified after "
                "any implementation change."
            ),
        ))
