"""
Migration-candidate ranking.

Analyses the curated candidate list and orders it for triage: tokens not yet
on Solana come first, then lower risk before higher.  Holder lookups are
skipped; ranking needs only metadata, bytecode and bridge status.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from config import ANALYSIS_TIMEOUT_SECONDS, MAX_CONCURRENT_ANALYSES
from .analyzer import analyze_token
from .constants import CANDIDATE_TOKENS
from .errors import DaybreakError
from .models import AnalysisRecord, CandidateRow, CandidateToken, Chain

logger = logging.getLogger(__name__)


def curated_candidates(limit: Optional[int] = None) -> list[CandidateToken]:
    """Return the first *limit* curated candidates (all when ``None``)."""
    entries = CANDIDATE_TOKENS if limit is None else CANDIDATE_TOKENS[:max(limit, 0)]
    return [
        CandidateToken(symbol=symbol, name=name, address=address, rank=i)
        for i, (symbol, name, address) in enumerate(entries, start=1)
    ]


def to_row(candidate: CandidateToken, record: AnalysisRecord) -> CandidateRow:
    return CandidateRow(
        symbol=record.token.symbol or candidate.symbol,
        address=record.token.address,
        decimals=record.token.decimals,
        risk_score=record.risk_score.total,
        rating=record.risk_score.rating,
        is_compatible=record.compatibility.is_compatible,
        recommended_mode=record.compatibility.recommended_mode,
        already_on_destination=record.bridge_status.already_on_destination,
        provider=record.bridge_status.provider,
    )


def sort_rows(rows: list[CandidateRow]) -> list[CandidateRow]:
    """Not-yet-bridged first, then by ascending risk score."""
    return sorted(rows, key=lambda row: (row.already_on_destination, row.risk_score))


async def rank_candidates(
    chain: Chain | str = Chain.ETHEREUM,
    limit: Optional[int] = None,
    *,
    etherscan_key: Optional[str] = None,
    max_concurrency: int = MAX_CONCURRENT_ANALYSES,
) -> list[CandidateRow]:
    """Analyse the curated candidates and return them ranked.

    Candidates whose analysis fails are logged and left out of the table.
    """
    if not isinstance(chain, Chain):
        chain = Chain.parse(chain)
    candidates = curated_candidates(limit)
    sem = asyncio.Semaphore(max_concurrency)

    async def _analyse(candidate: CandidateToken) -> Optional[CandidateRow]:
        async with sem:
            try:
                record = await analyze_token(
                    candidate.address,
                    chain,
                    skip_holders=True,
                    etherscan_key=etherscan_key,
                    timeout=ANALYSIS_TIMEOUT_SECONDS,
                )
            except asyncio.TimeoutError:
                logger.warning("Candidate %s timed out", candidate.symbol)
                return None
            except DaybreakError as exc:
                logger.warning("Candidate %s failed: %s", candidate.symbol, exc)
                return None
        return to_row(candidate, record)

    logger.info("Ranking %d candidates on %s", len(candidates), chain.value)
    results = await asyncio.gather(*[_analyse(c) for c in candidates])
    return sort_rows([row for row in results if row is not None])
