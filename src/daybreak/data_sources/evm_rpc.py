"""
EVM JSON-RPC client for the Daybreak analyzer.

Covers only the read methods the analyzer needs: ``eth_call``,
``eth_getCode`` and ``eth_getStorageAt``.  Uses ``httpx`` for async HTTP
with retry + exponential backoff; failures raise :class:`RpcError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ._retry import async_rpc_call
from ..constants import EIP1967_IMPLEMENTATION_SLOT
from ..utils import strip_hex_prefix

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BACKOFF_BASE = 1.5  # seconds


class EvmRpcClient:
    """Async EVM JSON-RPC client bound to one endpoint."""

    def __init__(
        self,
        endpoint: str,
        timeout: int = 15,
        *,
        max_retries: int = _MAX_RETRIES,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._client: httpx.AsyncClient | None = None
        self._id_counter = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _call(self, method: str, params: list[Any]) -> Any:
        self._id_counter += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._id_counter,
            "method": method,
            "params": params,
        }
        client = await self._get_client()
        return await async_rpc_call(
            client,
            self._endpoint,
            json_payload=payload,
            max_retries=self._max_retries,
            backoff_base=_BACKOFF_BASE,
            label="EVM RPC",
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        """Execute a read-only call and return the raw hex result."""
        result = await self._call("eth_call", [{"to": to, "data": data}, block])
        return result or "0x"

    async def get_code(self, address: str, block: str = "latest") -> str:
        """Return the runtime bytecode at *address* (``"0x"`` for an EOA)."""
        result = await self._call("eth_getCode", [address, block])
        return result or "0x"

    async def get_storage_at(self, address: str, slot: str, block: str = "latest") -> str:
        result = await self._call("eth_getStorageAt", [address, slot, block])
        return result or "0x"

    async def get_eip1967_implementation(self, proxy_address: str) -> Optional[str]:
        """Read the EIP-1967 implementation slot of *proxy_address*.

        Returns the implementation as a lowercase 0x-address, or ``None``
        when the slot is empty.
        """
        raw = strip_hex_prefix(
            await self.get_storage_at(proxy_address, EIP1967_IMPLEMENTATION_SLOT)
        ).lower()
        if not raw.strip("0"):
            return None
        implementation = "0x" + raw.rjust(40, "0")[-40:]
        logger.debug("EIP-1967 implementation of %s: %s", proxy_address, implementation)
        return implementation
