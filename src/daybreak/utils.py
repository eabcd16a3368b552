"""
Shared utilities for the Daybreak analyzer.

- ``strip_hex_prefix`` : drop an optional ``0x`` / ``0X`` prefix
- ``normalize_address`` : validate an EVM address and return its canonical form
"""

from __future__ import annotations

import re

from .errors import InvalidAddressError

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def strip_hex_prefix(value: str) -> str:
    """Return *value* without a leading ``0x`` / ``0X``."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def is_hex(value: str) -> bool:
    """True when *value* contains only hex digits (empty counts as hex)."""
    return bool(_HEX_RE.match(value))


def normalize_address(address: str) -> str:
    """Validate an EVM address and return it as lowercase ``0x`` + 40 hex.

    Accepted inputs are 40 hex digits with or without a ``0x`` prefix, in any
    case.  Surrounding whitespace is ignored.  Anything else raises
    :class:`InvalidAddressError`; nothing is guessed or padded.
    """
    if not isinstance(address, str):
        raise InvalidAddressError(str(address), "address must be a string")
    body = strip_hex_prefix(address.strip())
    if len(body) != 40:
        raise InvalidAddressError(address, f"expected 40 hex digits, got {len(body)}")
    if not is_hex(body):
        raise InvalidAddressError(address, "contains non-hex characters")
    return "0x" + body.lower()
