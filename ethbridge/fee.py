"""Fee history response and the bounded, thread-safe fee history cache."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from .hexdata import format_quantity


@dataclass(frozen=True)
class FeeHistory:
    """The eth_feeHistory response."""

    oldest_block: int = 0
    base_fee_per_gas: tuple[int, ...] = field(default_factory=tuple)
    gas_used_ratio: tuple[float, ...] = field(default_factory=tuple)
    reward: Optional[tuple[tuple[int, ...], ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_fee_per_gas", tuple(self.base_fee_per_gas))
        object.__setattr__(self, "gas_used_ratio", tuple(self.gas_used_ratio))
        if self.reward is not None:
            object.__setattr__(self, "reward", tuple(tuple(r) for r in self.reward))

    def to_json(self) -> dict:
        return {
            "oldestBlock": format_quantity(self.oldest_block),
            "baseFeePerGas": [format_quantity(fee) for fee in self.base_fee_per_gas],
            "gasUsedRatio": list(self.gas_used_ratio),
            "reward": None
            if self.reward is None
            else [[format_quantity(r) for r in block] for block in self.reward],
        }


@dataclass(frozen=True)
class FeeHistoryCacheItem:
    """Fee data of one block."""

    base_fee: int
    gas_used_ratio: float
    rewards: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rewards", tuple(self.rewards))


class FeeHistoryCache:
    """Fee data per block number, holding at most ``limit`` of the newest blocks."""

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError("the cache limit cannot be negative")
        self.limit = limit
        self._items: dict[int, FeeHistoryCacheItem] = {}
        self._lock = threading.Lock()

    def insert(self, block_number: int, item: FeeHistoryCacheItem) -> None:
        """Store ``item``, evicting the oldest blocks beyond the limit."""
        with self._lock:
            self._items[block_number] = item
            while len(self._items) > self.limit:
                del self._items[min(self._items)]

    def get(self, block_number: int) -> Optional[FeeHistoryCacheItem]:
        with self._lock:
            return self._items.get(block_number)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, block_number: object) -> bool:
        with self._lock:
            return block_number in self._items