"""Blocks and block headers as returned by RPC calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, TypeVar

from .bloom import Bloom
from .hexdata import Bytes, format_hash, format_quantity
from .transaction import Transaction

T = TypeVar("T")


def _opt_hash(value: Optional[bytes]) -> Optional[str]:
    return None if value is None else format_hash(value)


def _opt_quantity(value: Optional[int]) -> Optional[str]:
    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class Header:
    """A block header."""

    hash: Optional[bytes] = None
    parent_hash: bytes = bytes(32)
    uncles_hash: bytes = bytes(32)
    author: bytes = bytes(20)
    miner: bytes = bytes(20)
    state_root: bytes = bytes(32)
    transactions_root: bytes = bytes(32)
    receipts_root: bytes = bytes(32)
    number: Optional[int] = None
    gas_used: int = 0
    gas_limit: int = 0
    extra_data: Bytes = field(default_factory=Bytes)
    logs_bloom: Bloom = field(default_factory=Bloom)
    timestamp: int = 0
    difficulty: int = 0
    nonce: Optional[bytes] = None
    size: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.extra_data, Bytes):
            object.__setattr__(self, "extra_data", Bytes(self.extra_data))

    def to_json(self) -> dict:
        """Return the camelCase JSON object."""
        return {
            "hash": _opt_hash(self.hash),
            "parentHash": format_hash(self.parent_hash),
            "sha3Uncles": format_hash(self.uncles_hash),
            "author": format_hash(self.author),
            "miner": format_hash(self.miner),
            "stateRoot": format_hash(self.state_root),
            "transactionsRoot": format_hash(self.transactions_root),
            "receiptsRoot": format_hash(self.receipts_root),
            "number": _opt_quantity(self.number),
            "gasUsed": format_quantity(self.gas_used),
            "gasLimit": format_quantity(self.gas_limit),
            "extraData": self.extra_data.to_json(),
            "logsBloom": format_hash(bytes(self.logs_bloom)),
            "timestamp": format_quantity(self.timestamp),
            "difficulty": format_quantity(self.difficulty),
            "nonce": _opt_hash(self.nonce),
            "size": _opt_quantity(self.size),
        }


@dataclass(frozen=True)
class BlockTransactions:
    """The transactions of a block: only their hashes, or in full."""

    hashes: Optional[tuple[bytes, ...]] = None
    full: Optional[tuple[Transaction, ...]] = None

    def __post_init__(self) -> None:
        if (self.hashes is None) == (self.full is None):
            raise ValueError("block transactions hold either hashes or full transactions")
        if self.hashes is not None:
            object.__setattr__(self, "hashes", tuple(bytes(h) for h in self.hashes))
        else:
            object.__setattr__(self, "full", tuple(self.full))

    def to_json(self) -> list:
        if self.hashes is not None:
            return [format_hash(h) for h in self.hashes]
        return [tx.to_json() for tx in self.full]


def _no_transactions() -> BlockTransactions:
    return BlockTransactions(hashes=())


@dataclass(frozen=True)
class Block:
    """A block: its header fields plus totals, uncles and transactions."""

    header: Header = field(default_factory=Header)
    total_difficulty: int = 0
    uncles: tuple[bytes, ...] = field(default_factory=tuple)
    transactions: BlockTransactions = field(default_factory=_no_transactions)
    size: Optional[int] = None
    base_fee_per_gas: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "uncles", tuple(bytes(u) for u in self.uncles))

    def to_json(self) -> dict:
        """Return the header fields flattened together with the block fields."""
        out = self.header.to_json()
        out.update(
            {
                "totalDifficulty": format_quantity(self.total_difficulty),
                "uncles": [format_hash(u) for u in self.uncles],
                "transactions": self.transactions.to_json(),
                "size": _opt_quantity(self.size),
            }
        )
        if self.base_fee_per_gas is not None:
            out["baseFeePerGas"] = format_quantity(self.base_fee_per_gas)
        return out


@dataclass(frozen=True)
class Rich(Generic[T]):
    """A value together with engine-specific extra fields."""

    inner: T
    extra_info: Mapping[str, str] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in ("inner", "extra_info"):
            raise AttributeError(name)
        return getattr(self.inner, name)

    def to_json(self) -> dict:
        """Return the inner object's JSON with the extra fields merged in."""
        value = self.inner.to_json()
        if not isinstance(value, dict):
            raise ValueError("Unserializable structures: expected objects")
        merged = dict(value)
        for key in sorted(self.extra_info):
            merged[key] = self.extra_info[key]
        return merged


RichBlock = Rich[Block]
RichHeader = Rich[Header]