"""Hex encodings used on the JSON-RPC wire: byte strings, fixed hashes and quantities."""

from __future__ import annotations

import re
from dataclasses import dataclass

U256_MAX = (1 << 256) - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


@dataclass(frozen=True)
class Bytes:
    """An arbitrary byte string serialised as 0x-prefixed hex."""

    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def to_json(self) -> str:
        """Return the 0x-prefixed lowercase hex form."""
        return "0x" + self.data.hex()

    @classmethod
    def from_json(cls, value: object) -> "Bytes":
        """Parse a 0x-prefixed hex string of even length."""
        if not isinstance(value, str):
            raise ValueError("a 0x-prefixed, hex-encoded vector of bytes was expected")
        if len(value) >= 2 and value.startswith("0x") and len(value) % 2 == 0:
            digits = value[2:]
            if not _HEX_DIGITS.fullmatch(digits):
                raise ValueError(f"Invalid hex: {digits!r}")
            return cls(bytes.fromhex(digits))
        raise ValueError(
            "Invalid bytes format. Expected a 0x-prefixed hex string with even length"
        )


def parse_hash(text: object, length: int) -> bytes:
    """Parse a fixed-size hash of ``length`` bytes, with or without a 0x prefix."""
    if not isinstance(text, str):
        raise ValueError("a hex-encoded hash was expected")
    digits = text[2:] if text.startswith("0x") else text
    if len(digits) != 2 * length or not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"Invalid hash of {length} bytes: {text!r}")
    return bytes.fromhex(digits)


def format_hash(value: bytes) -> str:
    """Return the full 0x-prefixed hex form of a fixed-size hash."""
    return "0x" + bytes(value).hex()


def format_quantity(value: int) -> str:
    """Return a 256-bit unsigned quantity as minimal 0x-prefixed hex."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("an integer quantity was expected")
    if value < 0 or value > U256_MAX:
        raise ValueError(f"quantity out of range: {value}")
    return f"0x{value:x}"


def parse_quantity(value: object) -> int:
    """Parse a 0x-prefixed hex quantity that fits in 256 bits."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError("a 0x-prefixed hex quantity was expected")
    digits = value[2:]
    if not digits or len(digits) > 64 or not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"Invalid quantity: {value!r}")
    return int(digits, 16)