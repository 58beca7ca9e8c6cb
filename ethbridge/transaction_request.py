"""Transaction requests from RPC and the unsigned messages they turn into."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from .call_request import (
    AccessListItem,
    _parse_access_list,
    _parse_address,
    _parse_object,
)
from .hexdata import Bytes, format_hash, format_quantity, parse_quantity


def _opt_quantity(value: Optional[int]) -> Optional[str]:
    return None if value is None else format_quantity(value)


def _opt_hash(value: Optional[bytes]) -> Optional[str]:
    return None if value is None else format_hash(value)


_REQUEST_FIELDS: dict[str, tuple[str, Callable[[object], Any]]] = {
    "from": ("from_", _parse_address),
    "to": ("to", _parse_address),
    "gasPrice": ("gas_price", parse_quantity),
    "maxFeePerGas": ("max_fee_per_gas", parse_quantity),
    "maxPriorityFeePerGas": ("max_priority_fee_per_gas", parse_quantity),
    "gas": ("gas", parse_quantity),
    "value": ("value", parse_quantity),
    "data": ("data", Bytes.from_json),
    "nonce": ("nonce", parse_quantity),
    "accessList": ("access_list", _parse_access_list),
    "type": ("transaction_type", parse_quantity),
}


@dataclass(frozen=True)
class LegacyTransactionMessage:
    """Unsigned pre-EIP-2718 transaction; ``to`` of None creates a contract."""

    nonce: int = 0
    gas_price: int = 0
    gas_limit: int = 0
    value: int = 0
    input: bytes = b""
    to: Optional[bytes] = None
    chain_id: Optional[int] = None


@dataclass(frozen=True)
class EIP2930TransactionMessage:
    """Unsigned access-list transaction."""

    nonce: int = 0
    gas_price: int = 0
    gas_limit: int = 0
    value: int = 0
    input: bytes = b""
    to: Optional[bytes] = None
    chain_id: int = 0
    access_list: tuple[AccessListItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EIP1559TransactionMessage:
    """Unsigned dynamic-fee transaction."""

    nonce: int = 0
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    gas_limit: int = 0
    value: int = 0
    input: bytes = b""
    to: Optional[bytes] = None
    chain_id: int = 0
    access_list: tuple[AccessListItem, ...] = field(default_factory=tuple)


TransactionMessage = Union[
    LegacyTransactionMessage, EIP2930TransactionMessage, EIP1559TransactionMessage
]


@dataclass(frozen=True)
class TransactionRequest:
    """A transaction to be signed and sent, as given by an RPC caller."""

    from_: Optional[bytes] = None
    to: Optional[bytes] = None
    gas_price: Optional[int] = None
    max_fee_per_gas: Optional[int] = None
    max_priority_fee_per_gas: Optional[int] = None
    gas: Optional[int] = None
    value: Optional[int] = None
    data: Optional[Bytes] = None
    nonce: Optional[int] = None
    access_list: Optional[tuple[AccessListItem, ...]] = None
    transaction_type: Optional[int] = None

    @classmethod
    def from_json(cls, value: object) -> "TransactionRequest":
        """Parse the camelCase JSON request; unknown fields are rejected."""
        return cls(**_parse_object(value, _REQUEST_FIELDS))

    def to_json(self) -> dict:
        """Return the camelCase JSON object, with null for absent fields."""
        return {
            "from": _opt_hash(self.from_),
            "to": _opt_hash(self.to),
            "gasPrice": _opt_quantity(self.gas_price),
            "maxFeePerGas": _opt_quantity(self.max_fee_per_gas),
            "maxPriorityFeePerGas": _opt_quantity(self.max_priority_fee_per_gas),
            "gas": _opt_quantity(self.gas),
            "value": _opt_quantity(self.value),
            "data": None if self.data is None else self.data.to_json(),
            "nonce": _opt_quantity(self.nonce),
            "accessList": None
            if self.access_list is None
            else [item.to_json() for item in self.access_list],
            "type": _opt_quantity(self.transaction_type),
        }

    def to_message(self) -> Optional[TransactionMessage]:
        """Pick the message kind from the fee fields and access list.

        A gas price alone gives a legacy message, an access list without a
        max fee gives an EIP-2930 message, and a max fee without a gas price
        (or no fee fields at all) gives an EIP-1559 message. A request that
        sets both a gas price and a max fee gives None.
        """
        data = b"" if self.data is None else bytes(self.data)
        gas_limit = self.gas or 0
        value = self.value or 0
        access_list = tuple(self.access_list or ())
        has_price = self.gas_price is not None
        has_max_fee = self.max_fee_per_gas is not None
        has_list = self.access_list is not None

        if has_price and not has_max_fee and not has_list:
            return LegacyTransactionMessage(
                gas_price=self.gas_price or 0,
                gas_limit=gas_limit,
                value=value,
                input=data,
                to=self.to,
            )
        if not has_max_fee and has_list:
            return EIP2930TransactionMessage(
                gas_price=self.gas_price or 0,
                gas_limit=gas_limit,
                value=value,
                input=data,
                to=self.to,
                access_list=access_list,
            )
        if not has_price:
            return EIP1559TransactionMessage(
                max_fee_per_gas=self.max_fee_per_gas or 0,
                max_priority_fee_per_gas=self.max_priority_fee_per_gas or 0,
                gas_limit=gas_limit,
                value=value,
                input=data,
                to=self.to,
                access_list=access_list,
            )
        return None