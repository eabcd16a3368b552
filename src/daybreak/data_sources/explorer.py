"""
Etherscan-family block explorer client.

Every supported chain exposes the same ``module=…&action=…`` API shape, so
one client class serves Etherscan, Polygonscan, Arbiscan, Basescan, …

An API key is required; lookups without one return ``None`` immediately.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ._retry import async_http_get

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BACKOFF_BASE = 1.0  # seconds


class ExplorerClient:
    """Async wrapper around an Etherscan-compatible REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 15,
        *,
        max_retries: int = _MAX_RETRIES,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: httpx.AsyncClient | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    async def get_token_holders(self, contract: str, limit: int = 10) -> Optional[list[dict]]:
        """Return the top holders (``TokenHolderAddress`` / ``TokenHolderQuantity``)."""
        return await self._query(
            module="token",
            action="tokenholderlist",
            contractaddress=contract,
            page=1,
            offset=limit,
        )

    async def get_token_transfers(self, contract: str, limit: int = 100) -> Optional[list[dict]]:
        """Return the most recent ERC-20 transfers, newest first."""
        return await self._query(
            module="account",
            action="tokentx",
            contractaddress=contract,
            page=1,
            offset=limit,
            sort="desc",
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _query(self, **params: Any) -> Optional[list[dict]]:
        """Run one explorer query; ``None`` unless the API reports ``status == "1"``."""
        if not self._api_key:
            return None
        client = await self._get_client()
        data = await async_http_get(
            client,
            self._base_url,
            params={**params, "apikey": self._api_key},
            max_retries=self._max_retries,
            backoff_base=_BACKOFF_BASE,
            label="Explorer",
        )
        if not isinstance(data, dict):
            return None
        if data.get("status") != "1":
            logger.debug(
                "Explorer %s/%s: %s",
                params.get("module"), params.get("action"), data.get("result") or data.get("message"),
            )
            return None
        result = data.get("result")
        if not isinstance(result, list):
            return None
        return result
