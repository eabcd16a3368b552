"""
ABI value decoder for ``eth_call`` return data.

Only the three shapes needed for ERC-20 metadata are supported:

- ``decode_uint``  : uint256 → exact base-10 string (``totalSupply``)
- ``decode_byte``  : uint8 → int (``decimals``)
- ``decode_string`` : dynamic ``string`` → text (``name`` / ``symbol``)

Malformed input raises :class:`~daybreak.errors.DecodeError`.  The only
lenient path is the printable-ASCII fallback for responses too short to hold
a dynamic-string header, which some legacy tokens (e.g. MKR's ``bytes32``
symbol) return.
"""

from __future__ import annotations

from .errors import DecodeError
from .utils import is_hex, strip_hex_prefix

_WORD_NIBBLES = 64

# Widest value that still fits a 128-bit machine word
_U128_NIBBLES = 32


def _clean(hex_data: str) -> str:
    body = strip_hex_prefix(hex_data.strip())
    if not is_hex(body):
        raise DecodeError(f"not a hex string: {hex_data[:80]!r}")
    return body


def decode_uint(hex_data: str) -> str:
    """Decode an unsigned integer of any width into its decimal string.

    Empty and all-zero inputs decode to ``"0"``.
    """
    trimmed = _clean(hex_data).lstrip("0")
    if not trimmed:
        return "0"
    if len(trimmed) <= _U128_NIBBLES:
        # machine-word path (u64 / u128 range)
        return str(int(trimmed, 16))
    return _hex_to_decimal(trimmed)


def _hex_to_decimal(hex_digits: str) -> str:
    """Schoolbook base conversion over a little-endian list of decimal digits."""
    digits = [0]
    for ch in hex_digits:
        carry = int(ch, 16)
        for i, d in enumerate(digits):
            val = d * 16 + carry
            digits[i] = val % 10
            carry = val // 10
        while carry:
            digits.append(carry % 10)
            carry //= 10
    return "".join(str(d) for d in reversed(digits))


def decode_byte(hex_data: str) -> int:
    """Decode a ``uint8`` return value (value sits in the last byte)."""
    trimmed = _clean(hex_data).lstrip("0")
    if not trimmed:
        return 0
    value = int(trimmed, 16)
    if value > 0xFF:
        raise DecodeError(f"value 0x{trimmed} does not fit in a uint8")
    return value


def decode_string(hex_data: str) -> str:
    """Decode an ABI dynamic string: offset word, length word, padded payload."""
    body = _clean(hex_data)

    if len(body) < 2 * _WORD_NIBBLES:
        return _extract_ascii(body)

    length = int(body[_WORD_NIBBLES:2 * _WORD_NIBBLES], 16)
    if length == 0:
        return ""

    start = 2 * _WORD_NIBBLES
    end = min(start + length * 2, len(body))
    payload = body[start:end]
    if len(payload) % 2:
        payload = payload[:-1]
    try:
        return bytes.fromhex(payload).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"string payload is not valid UTF-8: {exc}") from exc


def _extract_ascii(body: str) -> str:
    """Keep only printable ASCII bytes (0x20-0x7E) and trim."""
    raw = bytes.fromhex(body[: len(body) - len(body) % 2])
    return "".join(chr(b) for b in raw if 0x20 <= b <= 0x7E).strip()
