"""Account information returned by RPC calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .hexdata import Bytes, format_hash, format_quantity


def _bytes_list(items: tuple[Bytes, ...]) -> list[str]:
    return [item.to_json() for item in items]


def _as_bytes_tuple(items) -> tuple[Bytes, ...]:
    return tuple(item if isinstance(item, Bytes) else Bytes(item) for item in items)


@dataclass(frozen=True)
class AccountInfo:
    """An account's name."""

    name: str = ""

    def to_json(self) -> dict:
        return {"name": self.name}


@dataclass(frozen=True)
class StorageProof:
    """Proof for a single storage entry."""

    key: int = 0
    value: int = 0
    proof: tuple[Bytes, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "proof", _as_bytes_tuple(self.proof))

    def to_json(self) -> dict:
        return {
            "key": format_quantity(self.key),
            "value": format_quantity(self.value),
            "proof": _bytes_list(self.proof),
        }


@dataclass(frozen=True)
class EthAccount:
    """An account's state together with its proofs."""

    address: bytes = bytes(20)
    balance: int = 0
    nonce: int = 0
    code_hash: bytes = bytes(32)
    storage_hash: bytes = bytes(32)
    account_proof: tuple[Bytes, ...] = field(default_factory=tuple)
    storage_proof: tuple[StorageProof, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_proof", _as_bytes_tuple(self.account_proof))
        object.__setattr__(self, "storage_proof", tuple(self.storage_proof))

    def to_json(self) -> dict:
        return {
            "address": format_hash(self.address),
            "balance": format_quantity(self.balance),
            "nonce": format_quantity(self.nonce),
            "codeHash": format_hash(self.code_hash),
            "storageHash": format_hash(self.storage_hash),
            "accountProof": _bytes_list(self.account_proof),
            "storageProof": [proof.to_json() for proof in self.storage_proof],
        }


@dataclass(frozen=True)
class ExtAccountInfo:
    """Extended account information; the UUID is absent for address book entries."""

    name: str = ""
    meta: str = ""
    uuid: Optional[str] = None

    def to_json(self) -> dict:
        out = {"name": self.name, "meta": self.meta}
        if self.uuid is not None:
            out["uuid"] = self.uuid
        return out


@dataclass(frozen=True)
class RecoveredAccount:
    """An account recovered from a signature."""

    address: bytes = bytes(20)
    public_key: bytes = bytes(64)
    is_valid_for_current_chain: bool = False

    def to_json(self) -> dict:
        return {
            "address": format_hash(self.address),
            "publicKey": format_hash(self.public_key),
            "isValidForCurrentChain": self.is_valid_for_current_chain,
        }