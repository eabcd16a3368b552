"""
Command line interface for the Daybreak analyzer.

Usage::

    python src/main.py --address <TOKEN_ADDRESS> [--chain ethereum]
    python src/main.py --list [--limit 20]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import os

# Ensure ``src/`` is on the import path
sys.path.insert(0, os.path.dirname(__file__))

from daybreak.analyzer import analyze_token, close_clients
from daybreak.candidates import rank_candidates
from daybreak.errors import DaybreakError
from daybreak.logging_config import generate_request_id, request_id_ctx, setup_logging
from daybreak.migration_plan import (
    build_migration_plan,
    generate_cli_commands,
    write_deployment_json,
)
from daybreak.models import AnalysisRecord, CandidateRow, Chain

_SEVERITY_TAGS = {"info": "INFO", "warning": "WARN", "error": "ERR "}


def _print_summary(record: AnalysisRecord, sol_price: float | None = None) -> None:
    token = record.token
    verdict = record.compatibility
    risk = record.risk_score

    print("=" * 60)
    print("  Daybreak – Solana Migration Analysis")
    print("=" * 60)
    print(f"  Token        : {token.name or '?'} ({token.symbol or '?'})")
    print(f"  Address      : {token.address}")
    print(f"  Chain        : {token.chain.display_name}")
    print(f"  Decimals     : {token.decimals} → {verdict.destination_decimals} on Solana")
    print(f"  Bytecode     : {record.bytecode.size_bytes} bytes, {record.bytecode.complexity.label}")
    if record.bytecode.is_proxy:
        impl = record.bytecode.implementation_address or "unresolved"
        print(f"  Proxy        : {record.bytecode.proxy_kind.label} (impl {impl})")
    print("-" * 60)
    print(f"  NTT compatible : {'yes' if verdict.is_compatible else 'NO'}")
    print(f"  Mode           : {verdict.recommended_mode.value}")
    print(f"  Risk score     : {risk.total}/100 ({risk.rating.value})")

    if verdict.issues:
        print("  Issues:")
        for issue in verdict.issues:
            print(f"    [{_SEVERITY_TAGS[issue.severity.value]}] {issue.title}")
    else:
        print("  No compatibility issues found.")

    bridge = record.bridge_status
    if bridge.already_on_destination:
        print(f"  Already on Solana via {bridge.provider}: {bridge.destination_address}")
    elif bridge.attested:
        print("  Attested on the Wormhole Token Bridge")

    if record.rate_limit is not None:
        print(
            f"  Rate limit     : {record.rate_limit.recommended_daily_limit} tokens/day, "
            f"{record.rate_limit.recommended_per_tx_limit} per tx"
        )

    plan = build_migration_plan(record, sol_price)
    print("-" * 60)
    print(f"  Recommended path: {plan.recommended_path.value}")
    for path in plan.paths:
        print(
            f"    {path.method.value:15s} {path.feasibility.value:16s} "
            f"{path.estimated_cost_usd:>15s}  {path.estimated_time}"
        )
    costs = plan.costs
    print("-" * 60)
    print(
        f"  NTT costs      : ~${costs.deployment_cost_usd:.0f} deployment "
        f"({costs.deployment_cost_sol:.2f} SOL + EVM gas)"
    )
    print(f"                   ~${costs.per_transfer_cost_usd:.2f} per transfer")
    print(f"                   ~${costs.monthly_operational_usd:.0f} per month")
    print("=" * 60)


def _print_candidates(rows: list[CandidateRow]) -> None:
    print("=" * 79)
    print(f"  {'Symbol':<8} {'Decimals':<9} {'Risk':<8} {'Compat':<7} {'Mode':<8} Status")
    print("-" * 79)
    ready = 0
    for row in rows:
        if row.already_on_destination:
            status = f"Already on Solana ({row.provider or 'unknown'})"
        elif not row.is_compatible:
            status = "Not on Solana, compatibility issues"
        elif row.risk_score <= 33:
            ready += 1
            status = "Not on Solana, strong candidate"
        elif row.risk_score <= 66:
            ready += 1
            status = "Not on Solana, viable"
        else:
            status = "Not on Solana, high risk"
        print(
            f"  {row.symbol:<8} {row.decimals:<9} {str(row.risk_score) + '/100':<8} "
            f"{'yes' if row.is_compatible else 'no':<7} {row.recommended_mode.value:<8} {status}"
        )
    print("=" * 79)
    print(f"  {ready} of {len(rows)} tokens are migration-ready")


async def _run_list(args: argparse.Namespace) -> int:
    try:
        rows = await rank_candidates(args.chain, args.limit, etherscan_key=args.etherscan_key)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        await close_clients()

    if args.as_json:
        print(json.dumps([row.model_dump(mode="json") for row in rows], indent=2))
    else:
        _print_candidates(rows)
    return 0


async def _run(args: argparse.Namespace) -> int:
    """Async entry point.  Returns the process exit code."""
    request_id_ctx.set(generate_request_id())
    if args.list:
        return await _run_list(args)
    try:
        record = await analyze_token(
            args.address,
            args.chain,
            skip_holders=args.skip_holders,
            etherscan_key=args.etherscan_key,
        )
    except (DaybreakError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except asyncio.TimeoutError:
        print("error: analysis timed out", file=sys.stderr)
        return 1
    finally:
        await close_clients()

    if args.as_json:
        print(record.model_dump_json(indent=2))
    else:
        _print_summary(record, args.sol_price)

    if args.output:
        path = write_deployment_json(record, args.output)
        if not args.as_json:
            print(f"  Wrote {path}")
            print("  NTT commands:")
            for command in generate_cli_commands(record):
                print(f"    {command}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Assess an ERC-20 token for migration to Solana via Wormhole NTT"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--address",
        help="Contract address of the token to analyse",
    )
    target.add_argument(
        "--list",
        action="store_true",
        help="Rank the curated migration candidates instead",
    )
    parser.add_argument(
        "--chain",
        default="ethereum",
        help=f"Source chain ({', '.join(c.value for c in Chain)}); default: ethereum",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="With --list: number of candidates to analyse (default: all)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Output result as raw JSON",
    )
    parser.add_argument(
        "--skip-holders",
        action="store_true",
        help="Skip the holder-distribution lookup",
    )
    parser.add_argument(
        "--etherscan-key",
        default=None,
        help="Block-explorer API key (default: ETHERSCAN_API_KEY)",
    )
    parser.add_argument(
        "--sol-price",
        type=float,
        default=None,
        help="SOL price in USD for cost estimates (default: SOL_PRICE_USD)",
    )
    parser.add_argument(
        "--output",
        metavar="DIR",
        default=None,
        help="Directory to write deployment.json into",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
