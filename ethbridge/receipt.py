"""Transaction receipt as returned by eth_getTransactionReceipt."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .bloom import Bloom
from .hexdata import format_hash, format_quantity
from .log import Log


def _opt_hash(value: Optional[bytes]) -> Optional[str]:
    return None if value is None else format_hash(value)


def _opt_quantity(value: Optional[int]) -> Optional[str]:
    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class Receipt:
    """Outcome of an executed transaction."""

    transaction_hash: Optional[bytes] = None
    transaction_index: Optional[int] = None
    block_hash: Optional[bytes] = None
    from_: Optional[bytes] = None
    to: Optional[bytes] = None
    block_number: Optional[int] = None
    cumulative_gas_used: int = 0
    gas_used: Optional[int] = None
    contract_address: Optional[bytes] = None
    logs: tuple[Log, ...] = field(default_factory=tuple)
    state_root: Optional[bytes] = None
    logs_bloom: Bloom = field(default_factory=Bloom)
    status_code: Optional[int] = None
    effective_gas_price: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "logs", tuple(self.logs))

    def to_json(self) -> dict:
        """Return the camelCase JSON object; root and status are omitted when unknown."""
        out: dict = {
            "transactionHash": _opt_hash(self.transaction_hash),
            "transactionIndex": _opt_quantity(self.transaction_index),
            "blockHash": _opt_hash(self.block_hash),
            "from": _opt_hash(self.from_),
            "to": _opt_hash(self.to),
            "blockNumber": _opt_quantity(self.block_number),
            "cumulativeGasUsed": format_quantity(self.cumulative_gas_used),
            "gasUsed": _opt_quantity(self.gas_used),
            "contractAddress": _opt_hash(self.contract_address),
            "logs": [log.to_json() for log in self.logs],
        }
        if self.state_root is not None:
            out["root"] = format_hash(self.state_root)
        out["logsBloom"] = format_hash(bytes(self.logs_bloom))
        if self.status_code is not None:
            out["status"] = format_quantity(self.status_code)
        out["effectiveGasPrice"] = format_quantity(self.effective_gas_price)
        return out