"""
RLP - Recursive Length Prefix serialization.

Ethereum's canonical encoding for nested lists of byte strings. The signer
hashes exactly these bytes, so the encoding must be deterministic: one
logical value has one encoding.

Items are ``bytes`` or lists of items. Integers are accepted on encode and
serialized as their minimal big-endian bytes (zero is the empty string).
"""

from __future__ import annotations

from typing import Sequence, Union

from .utils import int_to_big_endian

RLPItem = Union[bytes, list["RLPItem"]]

SHORT_STRING = 0x80
LONG_STRING = 0xB7
SHORT_LIST = 0xC0
LONG_LIST = 0xF7

_MAX_SHORT_LENGTH = 55


class RLPDecodingError(ValueError):
    pass


# ============ Encoding ============


def encode(item: Union[bytes, bytearray, int, Sequence]) -> bytes:
    """
    RLP-encode a byte string, unsigned integer or (nested) list.

    Args:
        item: bytes, non-negative int, or list/tuple of such items

    Returns:
        Encoded bytes

    Raises:
        ValueError: For negative integers
        TypeError: For unsupported item types (str included; hex must be
            decoded to bytes by the caller)
    """
    if isinstance(item, (bytes, bytearray)):
        return _encode_bytes(bytes(item))
    if isinstance(item, int):
        return _encode_bytes(int_to_big_endian(item))
    if isinstance(item, (list, tuple)):
        payload = b"".join(encode(child) for child in item)
        return _length_prefix(len(payload), SHORT_LIST, LONG_LIST) + payload
    raise TypeError(f"Cannot RLP-encode {type(item).__name__}")


def _encode_bytes(data: bytes) -> bytes:
    if len(data) == 1 and data[0] < SHORT_STRING:
        return data
    return _length_prefix(len(data), SHORT_STRING, LONG_STRING) + data


def _length_prefix(length: int, short_base: int, long_base: int) -> bytes:
    if length <= _MAX_SHORT_LENGTH:
        return bytes([short_base + length])
    length_bytes = int_to_big_endian(length)
    return bytes([long_base + len(length_bytes)]) + length_bytes


# ============ Decoding ============


def decode(data: bytes) -> RLPItem:
    """Decode a single RLP item, rejecting non-canonical input and trailing bytes."""
    data = bytes(data)
    item, end = _decode_item(data, 0)
    if end != len(data):
        raise RLPDecodingError(f"Trailing bytes: consumed {end} of {len(data)}")
    return item


def _decode_item(data: bytes, offset: int) -> tuple[RLPItem, int]:
    if offset >= len(data):
        raise RLPDecodingError("Unexpected end of data")

    prefix = data[offset]
    if prefix < SHORT_STRING:
        return data[offset : offset + 1], offset + 1

    if prefix < SHORT_LIST:
        start, end = _read_length(data, offset, SHORT_STRING, LONG_STRING)
        payload = data[start:end]
        if len(payload) == 1 and payload[0] < SHORT_STRING:
            raise RLPDecodingError("Single byte below 0x80 must not be prefixed")
        return payload, end

    start, end = _read_length(data, offset, SHORT_LIST, LONG_LIST)
    items: list[RLPItem] = []
    pos = start
    while pos < end:
        child, pos = _decode_item(data, pos)
        items.append(child)
    if pos != end:
        raise RLPDecodingError("List items overran the list payload")
    return items, end


def _read_length(data: bytes, offset: int, short_base: int, long_base: int) -> tuple[int, int]:
    """Return the (start, end) span of the payload whose prefix is at offset."""
    prefix = data[offset]
    if prefix <= long_base:
        start = offset + 1
        length = prefix - short_base
    else:
        len_of_len = prefix - long_base
        start = offset + 1 + len_of_len
        if start > len(data):
            raise RLPDecodingError("Length prefix exceeds data")
        length_bytes = data[offset + 1 : start]
        if length_bytes[0] == 0:
            raise RLPDecodingError("Leading zeros in length")
        length = int.from_bytes(length_bytes, "big")
        if length <= _MAX_SHORT_LENGTH:
            raise RLPDecodingError("Short payload must use the short form")

    end = start + length
    if end > len(data):
        raise RLPDecodingError("Payload length exceeds data")
    return start, end
