"""The compact binary encoding used for values stored in the mapping database."""

from __future__ import annotations

from typing import Iterable

HASH_LENGTH = 32

_MAX_BIG_BYTES = 67


class DecodeError(ValueError):
    """Raised when stored bytes do not decode to the expected value."""


def _take(data: bytes, offset: int, length: int) -> tuple[bytes, int]:
    """Return ``length`` bytes from ``offset`` and the offset just after them."""
    end = offset + length
    if offset < 0 or end > len(data):
        raise DecodeError("Not enough data to fill buffer")
    return bytes(data[offset:end]), end


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in compact form."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("an integer was expected")
    if value < 0:
        raise ValueError("compact encoding takes non-negative integers only")
    if value < 1 << 6:
        return bytes([value << 2])
    if value < 1 << 14:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < 1 << 30:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = max(4, (value.bit_length() + 7) // 8)
    if length > _MAX_BIG_BYTES:
        raise ValueError("value too large for compact encoding")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def decode_compact(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a compact integer at ``offset``; return it and the next offset.

    Encodings that are not the shortest possible are rejected.
    """
    data = bytes(data)
    (first,), _ = _take(data, offset, 1)
    mode = first & 0b11
    if mode == 0b00:
        return first >> 2, offset + 1
    if mode == 0b01:
        raw, end = _take(data, offset, 2)
        value = int.from_bytes(raw, "little") >> 2
        if value < 1 << 6:
            raise DecodeError("out of range decoding Compact")
        return value, end
    if mode == 0b10:
        raw, end = _take(data, offset, 4)
        value = int.from_bytes(raw, "little") >> 2
        if value < 1 << 14:
            raise DecodeError("out of range decoding Compact")
        return value, end
    length = (first >> 2) + 4
    raw, end = _take(data, offset + 1, length)
    value = int.from_bytes(raw, "little")
    if length == 4 and value < 1 << 30:
        raise DecodeError("out of range decoding Compact")
    if length > 4 and value.bit_length() <= 8 * (length - 1):
        raise DecodeError("out of range decoding Compact")
    return value, end


def encode_bool(value: bool) -> bytes:
    """Encode a boolean as a single byte."""
    if not isinstance(value, bool):
        raise TypeError("a boolean was expected")
    return b"\x01" if value else b"\x00"


def decode_bool(data: bytes) -> bool:
    """Decode a boolean from its first byte."""
    (byte,), _ = _take(bytes(data), 0, 1)
    if byte == 0:
        return False
    if byte == 1:
        return True
    raise DecodeError("Invalid boolean representation")


def _check_hash(value: bytes) -> bytes:
    raw = bytes(value)
    if len(raw) != HASH_LENGTH:
        raise ValueError(f"a hash is {HASH_LENGTH} bytes, got {len(raw)}")
    return raw


def encode_hash_list(hashes: Iterable[bytes]) -> bytes:
    """Encode a list of 32-byte hashes with a compact length prefix."""
    items = [_check_hash(h) for h in hashes]
    return encode_compact(len(items)) + b"".join(items)


def decode_hash_list(data: bytes) -> list[bytes]:
    """Decode a length-prefixed list of 32-byte hashes."""
    data = bytes(data)
    count, offset = decode_compact(data, 0)
    hashes = []
    for _ in range(count):
        item, offset = _take(data, offset, HASH_LENGTH)
        hashes.append(item)
    return hashes