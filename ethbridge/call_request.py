"""Access list entries and the eth_call / eth_estimateGas request object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from .hexdata import Bytes, format_hash, parse_hash, parse_quantity


def _prefixed_hash(length: int) -> Callable[[object], bytes]:
    def parse(value: object) -> bytes:
        if not isinstance(value, str) or not value.startswith("0x"):
            raise ValueError(f"a 0x-prefixed hash of {length} bytes was expected")
        return parse_hash(value, length)

    return parse


_parse_address = _prefixed_hash(20)
_parse_h256 = _prefixed_hash(32)


def _parse_object(
    value: object, fields: Mapping[str, tuple[str, Callable[[object], Any]]]
) -> dict[str, Any]:
    """Map a JSON object onto keyword arguments; unknown keys are rejected."""
    if not isinstance(value, dict):
        raise ValueError("a JSON object was expected")
    kwargs: dict[str, Any] = {}
    for key, item in value.items():
        if key not in fields:
            raise ValueError(f"unknown field `{key}`")
        name, parser = fields[key]
        kwargs[name] = None if item is None else parser(item)
    return kwargs


def _opt_quantity_json(value: Optional[int]) -> Optional[str]:
    from .hexdata import format_quantity

    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class AccessListItem:
    """An address and the storage keys a transaction pre-pays to access."""

    address: bytes = bytes(20)
    storage_keys: tuple[bytes, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", bytes(self.address))
        object.__setattr__(self, "storage_keys", tuple(bytes(k) for k in self.storage_keys))

    @classmethod
    def from_json(cls, value: object) -> "AccessListItem":
        """Parse ``{"address": ..., "storageKeys": [...]}``."""
        if not isinstance(value, dict):
            raise ValueError("an access list item object was expected")
        if "address" not in value:
            raise ValueError("missing field `address`")
        if "storageKeys" not in value:
            raise ValueError("missing field `storageKeys`")
        keys = value["storageKeys"]
        if not isinstance(keys, list):
            raise ValueError("`storageKeys` must be a list")
        return cls(_parse_address(value["address"]), tuple(_parse_h256(k) for k in keys))

    def to_json(self) -> dict:
        """Return the camelCase JSON object."""
        return {
            "address": format_hash(self.address),
            "storageKeys": [format_hash(k) for k in self.storage_keys],
        }


def _parse_access_list(value: object) -> tuple[AccessListItem, ...]:
    if not isinstance(value, list):
        raise ValueError("an access list must be a list")
    return tuple(AccessListItem.from_json(item) for item in value)


_CALL_FIELDS: dict[str, tuple[str, Callable[[object], Any]]] = {
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
class CallRequest:
    """Parameters of a read-only contract call or a gas estimate."""

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
    def from_json(cls, value: object) -> "CallRequest":
        """Parse the camelCase JSON request; unknown fields are rejected."""
        return cls(**_parse_object(value, _CALL_FIELDS))