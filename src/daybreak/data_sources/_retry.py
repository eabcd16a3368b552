"""
Shared async retry utility with exponential backoff.

Used by the EVM JSON-RPC client, the block-explorer client and the
Wormholescan lookup so that retry/backoff logic lives in one place.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from ..errors import RpcError

logger = logging.getLogger(__name__)


def _parse_retry_after(resp: httpx.Response, default: float) -> float:
    """Extract wait time from a ``Retry-After`` header, or use *default*.

    Only the integer-seconds form is handled.
    """
    raw = resp.headers.get("retry-after")
    if raw is not None:
        try:
            return max(float(raw), 0.5)
        except (ValueError, TypeError):
            pass
    return default


async def async_http_get(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[dict[str, Any]] = None,
    max_retries: int = 3,
    backoff_base: float = 1.0,
    label: str = "HTTP",
) -> Optional[Any]:
    """GET *url* with retry + exponential backoff on 429 / transient errors.

    Returns parsed JSON on success, ``None`` on exhausted retries.
    """
    for attempt in range(max_retries):
        try:
            resp = await client.get(url, params=params)
            if resp.status_code == 429:
                wait = _parse_retry_after(resp, backoff_base * (2 ** attempt))
                logger.warning("%s rate-limited, retry in %.1fs", label, wait)
                await asyncio.sleep(wait)
                continue
            if resp.status_code in (403, 404):
                logger.warning("%s %s for %s", label, resp.status_code, url)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("%s HTTP %s for %s", label, exc.response.status_code, url)
        except httpx.RequestError as exc:
            logger.warning("%s request failed: %s – %s", label, url, exc)
        except ValueError as exc:
            logger.warning("%s returned invalid JSON for %s: %s", label, url, exc)
            return None
        if attempt < max_retries - 1:
            await asyncio.sleep(backoff_base * (2 ** attempt))
    return None


async def async_rpc_call(
    client: httpx.AsyncClient,
    url: str,
    *,
    json_payload: dict[str, Any],
    max_retries: int = 3,
    backoff_base: float = 1.5,
    label: str = "RPC",
) -> Any:
    """POST a JSON-RPC request with retry + exponential backoff.

    Returns the ``result`` member.  Unlike :func:`async_http_get` there is no
    ``None`` fallback: an RPC-level error or exhausted retries raise
    :class:`RpcError`, because chain state cannot be guessed.
    """
    method = str(json_payload.get("method", label))
    last_error = "no attempt made"
    for attempt in range(max_retries):
        try:
            resp = await client.post(url, json=json_payload)
            if resp.status_code == 429:
                wait = _parse_retry_after(resp, backoff_base * (2 ** attempt))
                logger.warning("%s rate-limited, retry in %.1fs", label, wait)
                await asyncio.sleep(wait)
                last_error = "rate limited"
                continue
            resp.raise_for_status()
            body = resp.json()
            if "error" in body:
                err = body["error"]
                message = err.get("message", err) if isinstance(err, dict) else err
                raise RpcError(method, str(message))
            if "result" not in body:
                raise RpcError(method, "response has no result")
            return body["result"]
        except httpx.HTTPStatusError as exc:
            last_error = f"HTTP {exc.response.status_code}"
            logger.warning("%s %s %s", label, method, last_error)
        except httpx.RequestError as exc:
            last_error = str(exc) or type(exc).__name__
            logger.warning("%s %s request failed: %s", label, method, last_error)
        except ValueError as exc:
            raise RpcError(method, f"invalid JSON response: {exc}") from exc
        if attempt < max_retries - 1:
            await asyncio.sleep(backoff_base * (2 ** attempt))
    raise RpcError(method, f"gave up after {max_retries} attempts ({last_error})")
