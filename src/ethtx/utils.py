from __future__ import annotations

import string
from typing import Optional, Union

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_HEX_DIGITS = frozenset(string.hexdigits)


class MalformedHexError(ValueError):
    pass


def int_to_big_endian(value: int) -> bytes:
    """Minimal big-endian bytes of a non-negative integer. Zero is ``b""``."""
    if value < 0:
        raise ValueError(f"Cannot encode negative integer: {value}")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def to_hex(value: int) -> str:
    """Encode an unsigned integer as 0x-prefixed hex of its minimal bytes.

    Zero encodes as ``"0x0"``; every other value has an even number of
    digits and no leading zero byte.
    """
    if value == 0:
        return "0x0"
    return "0x" + int_to_big_endian(value).hex()


def to_quantity(value: int) -> str:
    """Encode an integer as a JSON-RPC quantity (no leading zero digits)."""
    if value < 0:
        raise ValueError(f"Cannot encode negative integer: {value}")
    return hex(value)


def strip_hex_prefix(value: str) -> str:
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def from_hex(value: str) -> bytes:
    """Decode a hex string, with or without 0x prefix, into bytes.

    An odd number of digits is read as if left-padded with a zero nibble.

    Raises:
        MalformedHexError: If the input is not a string or has non-hex digits.
    """
    if not isinstance(value, str):
        raise MalformedHexError(f"Expected hex string, got {type(value).__name__}")
    digits = strip_hex_prefix(value)
    if not _HEX_DIGITS.issuperset(digits):
        raise MalformedHexError(f"Invalid hex string: {value!r}")
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


def hex_to_int(value: str) -> int:
    """Decode a 0x-prefixed quantity into an int."""
    return int.from_bytes(from_hex(value), "big")


def to_address_bytes(address: Optional[Union[str, bytes]]) -> bytes:
    """Normalize an address to its 20 raw bytes. ``None`` becomes ``b""``."""
    if address is None:
        return b""
    raw = from_hex(address) if isinstance(address, str) else bytes(address)
    if len(raw) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(raw)}")
    return raw


def to_data_bytes(data: Union[str, bytes, None]) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return from_hex(data)
    return bytes(data)
