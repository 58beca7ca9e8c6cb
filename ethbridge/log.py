"""Ethereum event log as returned by RPC calls."""

from __future__ import annotations

from dataclasses import dataclass, field

from .hexdata import Bytes, format_hash, format_quantity


def _opt_hash(value: bytes | None) -> str | None:
    return None if value is None else format_hash(value)


def _opt_quantity(value: int | None) -> str | None:
    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class Log:
    """A log entry emitted by a transaction."""

    address: bytes = bytes(20)
    topics: tuple[bytes, ...] = field(default_factory=tuple)
    data: Bytes = field(default_factory=Bytes)
    block_hash: bytes | None = None
    block_number: int | None = None
    transaction_hash: bytes | None = None
    transaction_index: int | None = None
    log_index: int | None = None
    transaction_log_index: int | None = None
    removed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "topics", tuple(bytes(t) for t in self.topics))
        if not isinstance(self.data, Bytes):
            object.__setattr__(self, "data", Bytes(self.data))

    def to_json(self) -> dict:
        """Return the camelCase JSON object."""
        return {
            "address": format_hash(self.address),
            "topics": [format_hash(t) for t in self.topics],
            "data": self.data.to_json(),
            "blockHash": _opt_hash(self.block_hash),
            "blockNumber": _opt_quantity(self.block_number),
            "transactionHash": _opt_hash(self.transaction_hash),
            "transactionIndex": _opt_quantity(self.transaction_index),
            "logIndex": _opt_quantity(self.log_index),
            "transactionLogIndex": _opt_quantity(self.transaction_log_index),
            "removed": self.removed,
        }