"""Exception hierarchy for the Daybreak analyzer."""

from __future__ import annotations


class DaybreakError(Exception):
    """Base class for all analyzer errors."""


class DecodeError(DaybreakError, ValueError):
    """Call-return data could not be decoded into the requested type."""


class InvalidAddressError(DaybreakError, ValueError):
    """An EVM address is not 40 hex digits (with optional ``0x``)."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Invalid address {address!r}: {reason}")
        self.address = address
        self.reason = reason


class RpcError(DaybreakError):
    """A JSON-RPC call failed or returned an unusable result."""

    def __init__(self, method: str, message: str) -> None:
        super().__init__(f"{method} failed: {message}")
        self.method = method
