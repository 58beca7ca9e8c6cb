"""The block number parameter of RPC calls: a number, a tag or a block hash."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Union

from .hexdata import parse_hash

U64_MAX = (1 << 64) - 1

_HEX = re.compile(r"[0-9a-fA-F]+")
_DEC = re.compile(r"\+?[0-9]+")


class BlockTag(enum.Enum):
    """Named block positions."""

    LATEST = "latest"
    EARLIEST = "earliest"
    PENDING = "pending"


@dataclass(frozen=True)
class BlockHashRef:
    """A block referred to by hash."""

    hash: bytes
    require_canonical: bool = False


BlockNumber = Union[int, BlockTag, BlockHashRef]


def _parse_hex_u64(digits: str) -> int:
    if not _HEX.fullmatch(digits):
        raise ValueError(f"Invalid block number: invalid digit in {digits!r}")
    number = int(digits, 16)
    if number > U64_MAX:
        raise ValueError("Invalid block number: number too large to fit in target type")
    return number


def _parse_str(value: str) -> BlockNumber:
    for tag in BlockTag:
        if value == tag.value:
            return tag
    if value.startswith("0x"):
        return _parse_hex_u64(value[2:])
    if _DEC.fullmatch(value) and int(value) <= U64_MAX:
        return int(value)
    raise ValueError("Invalid block number: non-decimal or missing 0x prefix")


def _parse_map(value: dict) -> BlockNumber:
    require_canonical = False
    block_number = None
    block_hash = None
    for key, item in value.items():
        if key == "blockNumber":
            if not isinstance(item, str):
                raise ValueError("Invalid block number: a string was expected")
            if not item.startswith("0x"):
                raise ValueError("Invalid block number: missing 0x prefix")
            block_number = _parse_hex_u64(item[2:])
            break
        if key == "blockHash":
            block_hash = parse_hash(item, 32)
        elif key == "requireCanonical":
            if not isinstance(item, bool):
                raise ValueError("requireCanonical must be a boolean")
            require_canonical = item
        else:
            raise ValueError(f"Unknown key: {key}")
    if block_number is not None:
        return block_number
    if block_hash is not None:
        return BlockHashRef(block_hash, require_canonical)
    raise ValueError("Invalid input")


def parse_block_number(value: object) -> BlockNumber:
    """Parse a decoded JSON value into a block number, tag or hash reference."""
    if isinstance(value, bool):
        raise ValueError("a block number or 'latest', 'earliest' or 'pending' was expected")
    if isinstance(value, int):
        if not 0 <= value <= U64_MAX:
            raise ValueError("a block number or 'latest', 'earliest' or 'pending' was expected")
        return value
    if isinstance(value, str):
        return _parse_str(value)
    if isinstance(value, dict):
        return _parse_map(value)
    raise ValueError("a block number or 'latest', 'earliest' or 'pending' was expected")


def _short_hash(value: bytes) -> str:
    return f"0x{value[:2].hex()}…{value[-2:].hex()}"


def block_number_to_json(value: BlockNumber) -> str:
    """Return the JSON string form of a block number."""
    if isinstance(value, BlockTag):
        return value.value
    if isinstance(value, BlockHashRef):
        canonical = "true" if value.require_canonical else "false"
        return (
            f"{{ 'hash': '{_short_hash(value.hash)}', "
            f"'requireCanonical': '{canonical}'  }}"
        )
    if isinstance(value, int) and not isinstance(value, bool):
        return f"0x{value:x}"
    raise TypeError(f"not a block number: {value!r}")


def to_min_block_num(value: BlockNumber) -> int | None:
    """Return the number when the value is a plain block number, else None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None