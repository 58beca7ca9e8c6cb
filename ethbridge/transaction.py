"""Transactions as returned by RPC calls and the local transaction status."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from .call_request import AccessListItem
from .hexdata import Bytes, format_hash, format_quantity


def _opt_hash(value: Optional[bytes]) -> Optional[str]:
    return None if value is None else format_hash(value)


def _opt_quantity(value: Optional[int]) -> Optional[str]:
    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class Transaction:
    """A transaction with its signature and, once mined, its position."""

    hash: bytes = bytes(32)
    nonce: int = 0
    block_hash: Optional[bytes] = None
    block_number: Optional[int] = None
    transaction_index: Optional[int] = None
    from_: bytes = bytes(20)
    to: Optional[bytes] = None
    value: int = 0
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    gas: int = 0
    input: Bytes = field(default_factory=Bytes)
    creates: Optional[bytes] = None
    raw: Bytes = field(default_factory=Bytes)
    public_key: Optional[bytes] = None
    chain_id: Optional[int] = None
    standard_v: int = 0
    v: int = 0
    r: int = 0
    s: int = 0
    access_list: Optional[tuple[AccessListItem, ...]] = None
    transaction_type: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("input", "raw"):
            item = getattr(self, name)
            if not isinstance(item, Bytes):
                object.__setattr__(self, name, Bytes(item))
        if self.access_list is not None:
            object.__setattr__(self, "access_list", tuple(self.access_list))

    def to_json(self) -> dict:
        """Return the camelCase JSON object; absent fee fields and type are omitted."""
        out: dict = {
            "hash": format_hash(self.hash),
            "nonce": format_quantity(self.nonce),
            "blockHash": _opt_hash(self.block_hash),
            "blockNumber": _opt_quantity(self.block_number),
            "transactionIndex": _opt_quantity(self.transaction_index),
            "from": format_hash(self.from_),
            "to": _opt_hash(self.to),
            "value": format_quantity(self.value),
        }
        if self.gas_price is not None:
            out["gasPrice"] = format_quantity(self.gas_price)
        if self.max_fee_per_gas is not None:
            out["maxFeePerGas"] = format_quantity(self.max_fee_per_gas)
        if self.max_priority_fee_per_gas is not None:
            out["maxPriorityFeePerGas"] = format_quantity(self.max_priority_fee_per_gas)
        out.update(
            {
                "gas": format_quantity(self.gas),
                "input": self.input.to_json(),
                "creates": _opt_hash(self.creates),
                "raw": self.raw.to_json(),
                "publicKey": _opt_hash(self.public_key),
                "chainId": _opt_quantity(self.chain_id),
                "standardV": format_quantity(self.standard_v),
                "v": format_quantity(self.v),
                "r": format_quantity(self.r),
                "s": format_quantity(self.s),
                "accessList": None
                if self.access_list is None
                else [item.to_json() for item in self.access_list],
            }
        )
        if self.transaction_type is not None:
            out["type"] = format_quantity(self.transaction_type)
        return out


class LocalStatus(enum.Enum):
    """Where a locally submitted transaction stands."""

    PENDING = "pending"
    FUTURE = "future"
    MINED = "mined"
    CULLED = "culled"
    DROPPED = "dropped"
    REPLACED = "replaced"
    REJECTED = "rejected"
    INVALID = "invalid"
    CANCELED = "canceled"


_WITHOUT_TRANSACTION = {LocalStatus.PENDING, LocalStatus.FUTURE}


@dataclass(frozen=True)
class LocalTransactionStatus:
    """A local status with the data each status carries."""

    status: LocalStatus
    transaction: Optional[Transaction] = None
    error: Optional[str] = None
    gas_price: Optional[int] = None
    hash: Optional[bytes] = None

    def __post_init__(self) -> None:
        if self.status in _WITHOUT_TRANSACTION:
            if self.transaction is not None:
                raise ValueError(f"status {self.status.value} carries no transaction")
        elif self.transaction is None:
            raise ValueError(f"status {self.status.value} needs a transaction")
        if (self.error is not None) != (self.status is LocalStatus.REJECTED):
            raise ValueError("only a rejected status carries an error, and it must")
        replaced = self.status is LocalStatus.REPLACED
        if replaced and (self.gas_price is None or self.hash is None):
            raise ValueError("a replaced status needs the gas price and hash")
        if not replaced and (self.gas_price is not None or self.hash is not None):
            raise ValueError("only a replaced status carries a gas price and hash")

    def to_json(self) -> dict:
        out: dict = {"status": self.status.value}
        if self.transaction is not None:
            out["transaction"] = self.transaction.to_json()
        if self.status is LocalStatus.REJECTED:
            out["error"] = self.error
        elif self.status is LocalStatus.REPLACED:
            out["hash"] = format_hash(self.hash)
            out["gasPrice"] = format_quantity(self.gas_price)
        return out


@dataclass(frozen=True)
class RichRawTransaction:
    """Raw RLP bytes together with the decoded transaction."""

    raw: Bytes = field(default_factory=Bytes)
    transaction: Transaction = field(default_factory=Transaction)

    def __post_init__(self) -> None:
        if not isinstance(self.raw, Bytes):
            object.__setattr__(self, "raw", Bytes(self.raw))

    def to_json(self) -> dict:
        return {"raw": self.raw.to_json(), "tx": self.transaction.to_json()}