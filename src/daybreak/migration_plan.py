"""
Migration plan and NTT deployment configuration.

Turns an :class:`AnalysisRecord` into:
  - a side-by-side comparison of migration paths (NTT, Neon EVM, native rewrite)
  - the recommended path and its ordered steps
  - the ``deployment.json`` content and the matching ``ntt`` CLI commands
  - an NTT cost estimate (deployment, per transfer, monthly)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from config import SOL_PRICE_USD
from .constants import (
    DESTINATION_CHAIN,
    EVM_DEPLOYMENT_COST_USD,
    MONTHLY_OPERATIONAL_USD,
    PER_TRANSFER_COST_USD,
    SOLANA_DEPLOYMENT_SOL,
)
from .models import (
    AnalysisRecord,
    ChainDeploymentConfig,
    ChainTokenConfig,
    CostEstimate,
    DeploymentConfig,
    Feasibility,
    MigrationMethod,
    MigrationPath,
    MigrationPlan,
    MigrationStep,
    TransferMode,
)

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 1_000_000
DEPLOYMENT_FILENAME = "deployment.json"
NTT_CLI_PACKAGE = "@wormhole-foundation/ntt-cli"


# ---------------------------------------------------------------------------
# Deployment config / CLI commands
# ---------------------------------------------------------------------------

def build_deployment_config(record: AnalysisRecord) -> DeploymentConfig:
    """Source keeps its decimals and recommended mode; Solana always burns."""
    rate_limit = record.rate_limit
    return DeploymentConfig(
        source=ChainDeploymentConfig(
            chain=record.token.chain.value,
            token=ChainTokenConfig(
                address=record.token.address,
                decimals=record.token.decimals,
                mode=record.compatibility.recommended_mode,
            ),
        ),
        destination=ChainDeploymentConfig(
            chain=DESTINATION_CHAIN,
            token=ChainTokenConfig(
                decimals=record.compatibility.destination_decimals,
                mode=TransferMode.BURNING,
            ),
        ),
        daily_limit=rate_limit.recommended_daily_limit if rate_limit else None,
        per_tx_limit=rate_limit.recommended_per_tx_limit if rate_limit else None,
    )


def _daily_limit(record: AnalysisRecord) -> int:
    if record.rate_limit is not None:
        return record.rate_limit.recommended_daily_limit
    return DEFAULT_DAILY_LIMIT


def generate_cli_commands(record: AnalysisRecord) -> list[str]:
    """Ordered ``ntt`` commands deploying *record* to Solana."""
    mode = record.compatibility.recommended_mode.value
    return [
        "ntt init",
        f"ntt add-chain {record.token.chain.value} --mode {mode} --token {record.token.address}",
        f"ntt add-chain {DESTINATION_CHAIN} --mode burning "
        f"--decimals {record.compatibility.destination_decimals}",
        "ntt deploy",
        f"ntt configure-limits --daily-limit {_daily_limit(record)}",
    ]


def write_deployment_json(record: AnalysisRecord, output_dir: str | Path) -> Path:
    """Write ``deployment.json`` into *output_dir* (created if missing)."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / DEPLOYMENT_FILENAME
    config = build_deployment_config(record)
    path.write_text(config.model_dump_json(indent=2, exclude_none=True) + "\n", encoding="utf-8")
    logger.info("Wrote %s", path)
    return path


# ---------------------------------------------------------------------------
# Cost estimate
# ---------------------------------------------------------------------------

def estimate_costs(record: AnalysisRecord, sol_price: Optional[float] = None) -> CostEstimate:
    """Estimate NTT costs for *record* at *sol_price* USD/SOL.

    Deployment is Solana rent priced in USD plus source-chain gas; defaults
    to ``SOL_PRICE_USD``.
    """
    price = SOL_PRICE_USD if sol_price is None else sol_price
    evm_gas = EVM_DEPLOYMENT_COST_USD[record.token.chain.value]
    return CostEstimate(
        deployment_cost_usd=SOLANA_DEPLOYMENT_SOL * price + evm_gas,
        deployment_cost_sol=SOLANA_DEPLOYMENT_SOL,
        per_transfer_cost_usd=PER_TRANSFER_COST_USD,
        monthly_operational_usd=MONTHLY_OPERATIONAL_USD,
        sol_price_usd=price,
    )


# ---------------------------------------------------------------------------
# Path comparison
# ---------------------------------------------------------------------------

def _evaluate_ntt(record: AnalysisRecord) -> MigrationPath:
    feasibility = Feasibility.RECOMMENDED
    cons: list[str] = []

    if not record.compatibility.is_compatible:
        feasibility = Feasibility.NOT_RECOMMENDED
        cons.append("Compatibility issues detected")
    if record.bytecode.has_fee_pattern:
        feasibility = Feasibility.NOT_RECOMMENDED
        cons.append("Fee-on-transfer not supported")
    if record.compatibility.decimal_trimming_required:
        cons.append(
            f"Decimal trimming: {record.token.decimals} → "
            f"{record.compatibility.destination_decimals}"
        )
    if record.bridge_status.already_on_destination:
        cons.append("Token already exists on Solana, coordination needed")
        if feasibility is Feasibility.RECOMMENDED:
            feasibility = Feasibility.VIABLE

    return MigrationPath(
        method=MigrationMethod.NTT,
        feasibility=feasibility,
        estimated_cost_usd="$50-150",
        estimated_time="1-2 weeks",
        pros=(
            "Native token on Solana",
            "Full DeFi compatibility",
            "Best user experience",
            "Wormhole security",
        ),
        cons=tuple(cons),
    )


def _evaluate_neon(record: AnalysisRecord) -> MigrationPath:
    feasibility = Feasibility.VIABLE
    pros = ["EVM compatibility maintained", "Minimal code changes", "Fast deployment"]
    cons = [
        "Not a native SPL token",
        "Limited DeFi integrations",
        "Higher per-transaction costs",
    ]
    if record.bytecode.has_fee_pattern:
        feasibility = Feasibility.RECOMMENDED
        pros.append("Fee mechanics preserved")
    if record.bytecode.size_bytes > 15_000:
        cons.append("Large contract may have high deployment cost")

    return MigrationPath(
        method=MigrationMethod.NEON_EVM,
        feasibility=feasibility,
        estimated_cost_usd="$100-500",
        estimated_time="1-3 days",
        pros=tuple(pros),
        cons=tuple(cons),
    )


def _evaluate_native() -> MigrationPath:
    return MigrationPath(
        method=MigrationMethod.NATIVE_REWRITE,
        feasibility=Feasibility.VIABLE,
        estimated_cost_usd="$5,000-50,000+",
        estimated_time="4-12 weeks",
        pros=(
            "Full Solana optimization",
            "Best performance",
            "Complete customization",
            "Native SPL token",
        ),
        cons=(
            "Significant development effort",
            "Requires Solana expertise",
            "Security audit recommended",
            "Migration complexity for existing holders",
        ),
    )


def compare_paths(record: AnalysisRecord) -> list[MigrationPath]:
    return [_evaluate_ntt(record), _evaluate_neon(record), _evaluate_native()]


def recommend_path(record: AnalysisRecord) -> MigrationMethod:
    """Neon EVM for fee-on-transfer tokens NTT cannot carry, NTT otherwise."""
    if not record.compatibility.is_compatible and record.bytecode.has_fee_pattern:
        return MigrationMethod.NEON_EVM
    return MigrationMethod.NTT


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _ntt_steps(record: AnalysisRecord) -> list[MigrationStep]:
    chain = record.token.chain
    mode = record.compatibility.recommended_mode.value
    decimals = record.compatibility.destination_decimals
    commands = generate_cli_commands(record)

    if record.rate_limit is not None:
        limit_desc = (
            "Set rate limits based on transfer volume: "
            f"{record.rate_limit.recommended_daily_limit} tokens/day recommended"
        )
    else:
        limit_desc = (
            "Set up rate limits for bridge transfers "
            "(set ETHERSCAN_API_KEY for a volume-based recommendation)"
        )

    return [
        MigrationStep(
            order=1,
            title="Install NTT CLI",
            description="Install the Wormhole NTT CLI tool",
            command=f"npm install -g {NTT_CLI_PACKAGE}",
        ),
        MigrationStep(
            order=2,
            title="Initialize NTT Project",
            description="Create a new NTT deployment configuration",
            command=commands[0],
        ),
        MigrationStep(
            order=3,
            title="Configure Source Chain",
            description=f"Add {chain.display_name} as source chain with {mode} mode",
            command=commands[1],
        ),
        MigrationStep(
            order=4,
            title="Configure Destination Chain",
            description=f"Add Solana as destination with {decimals} decimals",
            command=commands[2],
        ),
        MigrationStep(
            order=5,
            title="Deploy NTT Contracts",
            description="Deploy the NTT manager and transceiver contracts",
            command=commands[3],
        ),
        MigrationStep(
            order=6,
            title="Configure Rate Limits",
            description=limit_desc,
            command=commands[4],
        ),
        MigrationStep(
            order=7,
            title="Test Transfer",
            description="Perform a test transfer with a small amount",
            command="ntt transfer --amount 1 --to <SOLANA_ADDRESS>",
        ),
    ]


def _neon_steps(record: AnalysisRecord) -> list[MigrationStep]:
    symbol = record.token.symbol or "token"
    return [
        MigrationStep(order=1, title="Set Up Neon EVM",
                      description="Configure Neon EVM RPC endpoint"),
        MigrationStep(order=2, title="Deploy Token Contract",
                      description=f"Deploy {symbol} contract to Neon EVM"),
        MigrationStep(order=3, title="Configure Bridge",
                      description="Set up Neon-native bridge for transfers"),
    ]


def _native_steps() -> list[MigrationStep]:
    return [
        MigrationStep(order=1, title="Design Token Program",
                      description="Design native Solana token program architecture"),
        MigrationStep(order=2, title="Implement Token Program",
                      description="Write the Solana program using Anchor or native Rust"),
        MigrationStep(order=3, title="Deploy and Test",
                      description="Deploy to devnet and run comprehensive tests"),
        MigrationStep(order=4, title="Audit",
                      description="Security audit recommended for production deployment"),
    ]


def build_migration_plan(
    record: AnalysisRecord,
    sol_price: Optional[float] = None,
) -> MigrationPlan:
    """Assemble the full migration plan for *record*."""
    method = recommend_path(record)
    if method is MigrationMethod.NTT:
        steps = _ntt_steps(record)
    elif method is MigrationMethod.NEON_EVM:
        steps = _neon_steps(record)
    else:
        steps = _native_steps()

    return MigrationPlan(
        recommended_path=method,
        paths=tuple(compare_paths(record)),
        steps=tuple(steps),
        deployment=build_deployment_config(record),
        costs=estimate_costs(record, sol_price),
    )
