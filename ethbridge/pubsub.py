"""Subscription kinds, parameters and results of eth_subscribe."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from .block import Header, Rich
from .filter import Filter
from .hexdata import format_hash
from .log import Log


class SubscriptionKind(enum.Enum):
    """What a subscription delivers."""

    NEW_HEADS = "newHeads"
    LOGS = "logs"
    NEW_PENDING_TRANSACTIONS = "newPendingTransactions"
    SYNCING = "syncing"

    @classmethod
    def from_json(cls, value: object) -> "SubscriptionKind":
        """Parse the camelCase subscription kind."""
        if not isinstance(value, str):
            raise ValueError("a subscription kind string was expected")
        for kind in cls:
            if kind.value == value:
                return kind
        raise ValueError(f"unknown subscription kind `{value}`")


def parse_params(value: object) -> Optional[Filter]:
    """Parse subscription parameters: None for null, else a log filter."""
    if value is None:
        return None
    try:
        return Filter.from_json(value)
    except ValueError as err:
        raise ValueError(f"Invalid Pub-Sub parameters: {err}") from None


@dataclass(frozen=True)
class SyncStatusMetadata:
    """Detailed sync status pushed to subscribers."""

    syncing: bool
    starting_block: int
    current_block: int
    highest_block: Optional[int] = None

    def to_json(self) -> dict:
        out: dict = {
            "syncing": self.syncing,
            "startingBlock": self.starting_block,
            "currentBlock": self.current_block,
        }
        if self.highest_block is not None:
            out["highestBlock"] = self.highest_block
        return out


SubscriptionResult = Union[Rich, Log, bytes, bool, SyncStatusMetadata]


def subscription_result_to_json(result: SubscriptionResult) -> object:
    """Serialise a header, log, transaction hash or sync state."""
    if isinstance(result, Rich):
        if not isinstance(result.inner, Header):
            raise TypeError("only rich headers are subscription results")
        return result.to_json()
    if isinstance(result, Log):
        return result.to_json()
    if isinstance(result, bool):
        return result
    if isinstance(result, SyncStatusMetadata):
        return result.to_json()
    if isinstance(result, (bytes, bytearray)):
        if len(result) != 32:
            raise ValueError("a transaction hash is 32 bytes")
        return format_hash(bytes(result))
    raise TypeError(f"not a subscription result: {result!r}")