"""Index parameter of RPC calls, given as hex string, decimal string or number."""

from __future__ import annotations

import re

USIZE_MAX = (1 << 64) - 1

_HEX = re.compile(r"[0-9a-fA-F]+")
_DEC = re.compile(r"\+?[0-9]+")


def _checked(number: int) -> int:
    if number > USIZE_MAX:
        raise ValueError("Invalid index: number too large to fit in target type")
    return number


def parse_index(value: object) -> int:
    """Parse a hex-encoded or decimal index into an int."""
    if isinstance(value, bool):
        raise ValueError("a hex-encoded or decimal index was expected")
    if isinstance(value, int):
        if not 0 <= value <= USIZE_MAX:
            raise ValueError("a hex-encoded or decimal index was expected")
        return value
    if isinstance(value, str):
        if value.startswith("0x"):
            digits = value[2:]
            if not _HEX.fullmatch(digits):
                raise ValueError(f"Invalid index: invalid digit in {value!r}")
            return _checked(int(digits, 16))
        if not _DEC.fullmatch(value):
            raise ValueError(f"Invalid index: invalid digit in {value!r}")
        return _checked(int(value))
    raise ValueError("a hex-encoded or decimal index was expected")