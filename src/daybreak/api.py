"""
REST API for the Daybreak analyzer using FastAPI.

Endpoints
---------
GET  /health                                 - Health check
GET  /analyze?address=<ADDR>&chain=<CHAIN>   - Full bridge-readiness analysis
POST /analyze/batch                          - Batch analysis (up to 10 tokens)
GET  /deployment?address=<ADDR>&chain=<CHAIN> - NTT deployment config, CLI commands, costs
GET  /candidates?chain=<CHAIN>&limit=<N>      - Curated migration candidates, ranked

Security features:
- Rate limiting via slowapi (per-IP)
- EVM address validation
- Internal error details hidden from clients
- Graceful startup/shutdown of HTTP clients
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from config import (
    ANALYSIS_TIMEOUT_SECONDS,
    API_HOST,
    API_PORT,
    CORS_ORIGINS,
    MAX_CONCURRENT_ANALYSES,
    RATE_LIMIT_ANALYZE,
    RATE_LIMIT_CANDIDATES,
    RPC_URLS,
    SENTRY_DSN,
    SENTRY_ENVIRONMENT,
    SENTRY_TRACES_SAMPLE_RATE,
)
from .analyzer import analyze_token, close_clients, init_clients
from .candidates import rank_candidates
from .errors import DaybreakError, RpcError
from .logging_config import generate_request_id, request_id_ctx, setup_logging
from .migration_plan import build_migration_plan, generate_cli_commands
from .models import (
    AnalysisRecord,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
    CandidateRow,
    Chain,
)
from .utils import normalize_address

# Initialise structured logging early
setup_logging()
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Sentry – initialise before anything else so startup errors are captured
# ---------------------------------------------------------------------------
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=SENTRY_ENVIRONMENT,
        traces_sample_rate=SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
        # Don't capture 4xx client errors as Sentry events
        before_send=lambda event, hint: (
            None
            if (hint.get("exc_info") and
                isinstance(hint["exc_info"][1], HTTPException) and
                (hint["exc_info"][1].status_code or 500) < 500)
            else event
        ),
    )
    logger.info("Sentry initialised (env=%s)", SENTRY_ENVIRONMENT)
else:
    logger.info("SENTRY_DSN not set – error tracking disabled")

_start_time = time.monotonic()

# ---------------------------------------------------------------------------
# Rate limiter
# ---------------------------------------------------------------------------
limiter = Limiter(key_func=get_remote_address)


# ---------------------------------------------------------------------------
# Lifespan: startup / shutdown
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Initialise shared HTTP clients on startup, close on shutdown."""
    bad = [chain for chain, url in RPC_URLS.items() if not url.startswith("http")]
    if bad:
        logger.error("RPC URL is not a valid HTTP(S) URL for: %s", ", ".join(bad))
        raise RuntimeError("Invalid RPC URL configuration – must be HTTP(S) URLs")

    logger.info("Starting up – initialising HTTP clients …")
    await init_clients()
    yield
    logger.info("Shutting down – closing HTTP clients …")
    await close_clients()


app = FastAPI(
    title="Daybreak API",
    description="Assess ERC-20 tokens for migration to Solana via Wormhole NTT.",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept"],
)


# ---------------------------------------------------------------------------
# Request-ID & access-log middleware
# ---------------------------------------------------------------------------
class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every request for tracing."""

    async def dispatch(self, request: Request, call_next):
        rid = generate_request_id()
        request_id_ctx.set(rid)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = rid
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(RequestIdMiddleware)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _validate(address: str, chain: str) -> tuple[str, Chain]:
    """Return the canonical address and chain, or raise HTTP 400."""
    try:
        return normalize_address(address), Chain.parse(chain)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


async def _run_analysis(address: str, chain: Chain) -> AnalysisRecord:
    """Run one analysis, translating failures into HTTP errors."""
    try:
        return await analyze_token(address, chain, timeout=ANALYSIS_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=504,
            detail=f"Analysis timed out after {ANALYSIS_TIMEOUT_SECONDS}s. Try again.",
        )
    except RpcError as exc:
        logger.warning("RPC failure analysing %s on %s: %s", address, chain.value, exc)
        raise HTTPException(
            status_code=502, detail="Upstream RPC request failed"
        ) from exc
    except DaybreakError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Analysis failed for %s on %s", address, chain.value)
        raise HTTPException(
            status_code=500, detail="Internal server error"
        ) from exc


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------


@app.get("/", tags=["system"], include_in_schema=False)
async def root():
    """Redirect to Swagger UI."""
    return RedirectResponse(url="/docs")


@app.get("/health", tags=["system"])
async def health() -> dict:
    """Health check including uptime and supported chains."""
    return {
        "status": "ok",
        "uptime_seconds": round(time.monotonic() - _start_time, 1),
        "chains": [chain.value for chain in Chain],
    }


@app.get("/analyze", response_model=AnalysisRecord, tags=["analysis"])
@limiter.limit(RATE_LIMIT_ANALYZE)
async def get_analysis(
    request: Request,
    address: str = Query(..., description="ERC-20 token contract address"),
    chain: str = Query("ethereum", description="Source chain name or alias"),
) -> AnalysisRecord:
    """Return the full bridge-readiness analysis for a token."""
    address, source = _validate(address, chain)
    return await _run_analysis(address, source)


@app.post(
    "/analyze/batch",
    response_model=BatchAnalyzeResponse,
    tags=["analysis"],
)
@limiter.limit(RATE_LIMIT_ANALYZE)
async def batch_analysis(
    request: Request,
    body: BatchAnalyzeRequest,
) -> BatchAnalyzeResponse:
    """Analyse multiple tokens concurrently (max 10, a few at a time)."""
    validated = [_validate(address, body.chain) for address in body.addresses]

    sem = asyncio.Semaphore(MAX_CONCURRENT_ANALYSES)
    results: dict[str, AnalysisRecord | str] = {}

    async def _analyse(address: str, chain: Chain) -> None:
        async with sem:
            try:
                results[address] = await analyze_token(
                    address, chain, timeout=ANALYSIS_TIMEOUT_SECONDS
                )
            except asyncio.TimeoutError:
                results[address] = "Analysis timed out"
            except DaybreakError as exc:
                results[address] = str(exc)
            except Exception:
                logger.exception("Batch analysis failed for %s", address)
                results[address] = "Internal server error"

    await asyncio.gather(*[_analyse(a, c) for a, c in validated])
    return BatchAnalyzeResponse(results=results)


@app.get("/deployment", tags=["deployment"])
@limiter.limit(RATE_LIMIT_ANALYZE)
async def get_deployment(
    request: Request,
    address: str = Query(..., description="ERC-20 token contract address"),
    chain: str = Query("ethereum", description="Source chain name or alias"),
) -> dict:
    """Return the NTT deployment config, CLI commands and migration plan."""
    address, source = _validate(address, chain)
    record = await _run_analysis(address, source)
    plan = build_migration_plan(record)
    return {
        "address": record.token.address,
        "chain": record.token.chain.value,
        "deployment": plan.deployment.model_dump(mode="json", exclude_none=True),
        "commands": generate_cli_commands(record),
        "costs": plan.costs.model_dump(mode="json"),
        "migration_plan": plan.model_dump(mode="json"),
    }


@app.get("/candidates", response_model=list[CandidateRow], tags=["analysis"])
@limiter.limit(RATE_LIMIT_CANDIDATES)
async def get_candidates(
    request: Request,
    chain: str = Query("ethereum", description="Source chain name or alias"),
    limit: int = Query(10, ge=1, le=50, description="Number of curated candidates to rank"),
) -> list[CandidateRow]:
    """Analyse the curated candidate list and rank it by migration risk."""
    try:
        source = Chain.parse(chain)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return await rank_candidates(source, limit)


# ------------------------------------------------------------------
# Run with: python -m daybreak.api
# ------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "daybreak.api:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
    )
