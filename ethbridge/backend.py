"""The mapping database between Ethereum and native block and transaction hashes."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .kvstore import (
    BLOCK_MAPPING,
    META,
    SYNCED_MAPPING,
    TRANSACTION_MAPPING,
    Database,
    DatabaseSettings,
    DatabaseSource,
    SourceKind,
    Transaction,
    open_database,
)
from .scale import (
    HASH_LENGTH,
    DecodeError,
    _check_hash,
    _take,
    decode_bool,
    decode_compact,
    decode_hash_list,
    encode_bool,
    encode_compact,
    encode_hash_list,
)

CURRENT_SYNCING_TIPS = b"CURRENT_SYNCING_TIPS"
PALLET_ETHEREUM_SCHEMA_CACHE = b":ethereum_schema_cache"

_SCHEMA_KEY = encode_compact(len(PALLET_ETHEREUM_SCHEMA_CACHE)) + PALLET_ETHEREUM_SCHEMA_CACHE


class EthereumStorageSchema(enum.IntEnum):
    """Versions of the on-chain Ethereum storage layout."""

    UNDEFINED = 0
    V1 = 1
    V2 = 2
    V3 = 3


@dataclass(frozen=True)
class MappingCommitment:
    """A block's hash together with the Ethereum block and transaction hashes it holds."""

    block_hash: bytes
    ethereum_block_hash: bytes
    ethereum_transaction_hashes: tuple[bytes, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "block_hash", _check_hash(self.block_hash))
        object.__setattr__(self, "ethereum_block_hash", _check_hash(self.ethereum_block_hash))
        object.__setattr__(
            self,
            "ethereum_transaction_hashes",
            tuple(_check_hash(h) for h in self.ethereum_transaction_hashes),
        )


@dataclass(frozen=True)
class TransactionMetadata:
    """Where an Ethereum transaction sits: its block and index in that block."""

    block_hash: bytes
    ethereum_block_hash: bytes
    ethereum_index: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "block_hash", _check_hash(self.block_hash))
        object.__setattr__(self, "ethereum_block_hash", _check_hash(self.ethereum_block_hash))
        if not 0 <= self.ethereum_index < 1 << 32:
            raise ValueError(f"transaction index out of range: {self.ethereum_index}")

    def _encode(self) -> bytes:
        return self.block_hash + self.ethereum_block_hash + self.ethereum_index.to_bytes(4, "little")


def _encode_metadata_list(items: list[TransactionMetadata]) -> bytes:
    return encode_compact(len(items)) + b"".join(item._encode() for item in items)


def _decode_metadata_list(data: bytes) -> list[TransactionMetadata]:
    count, offset = decode_compact(data, 0)
    items = []
    for _ in range(count):
        block_hash, offset = _take(data, offset, HASH_LENGTH)
        ethereum_block_hash, offset = _take(data, offset, HASH_LENGTH)
        index, offset = _take(data, offset, 4)
        items.append(
            TransactionMetadata(block_hash, ethereum_block_hash, int.from_bytes(index, "little"))
        )
    return items


def _encode_schema_list(items: list[tuple[EthereumStorageSchema, bytes]]) -> bytes:
    parts = [encode_compact(len(items))]
    for schema, block_hash in items:
        parts.append(bytes([EthereumStorageSchema(schema)]))
        parts.append(_check_hash(block_hash))
    return b"".join(parts)


def _decode_schema_list(data: bytes) -> list[tuple[EthereumStorageSchema, bytes]]:
    count, offset = decode_compact(data, 0)
    items = []
    for _ in range(count):
        (tag,), offset = _take(data, offset, 1)
        try:
            schema = EthereumStorageSchema(tag)
        except ValueError:
            raise DecodeError(f"unknown storage schema {tag}") from None
        block_hash, offset = _take(data, offset, HASH_LENGTH)
        items.append((schema, block_hash))
    return items


class MetaDb:
    """Sync tips and the storage schema cache."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def current_syncing_tips(self) -> list[bytes]:
        raw = self.db.get(META, CURRENT_SYNCING_TIPS)
        return [] if raw is None else decode_hash_list(raw)

    def write_current_syncing_tips(self, tips: Iterable[bytes]) -> None:
        transaction = Transaction()
        transaction.set(META, CURRENT_SYNCING_TIPS, encode_hash_list(tips))
        self.db.commit(transaction)

    def ethereum_schema(self) -> Optional[list[tuple[EthereumStorageSchema, bytes]]]:
        raw = self.db.get(META, _SCHEMA_KEY)
        return None if raw is None else _decode_schema_list(raw)

    def write_ethereum_schema(
        self, new_cache: Iterable[tuple[EthereumStorageSchema, bytes]]
    ) -> None:
        transaction = Transaction()
        transaction.set(META, _SCHEMA_KEY, _encode_schema_list(list(new_cache)))
        self.db.commit(transaction)


class MappingDb:
    """Mappings from Ethereum block and transaction hashes to native blocks."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self._write_lock = threading.Lock()

    def is_synced(self, block_hash: bytes) -> bool:
        raw = self.db.get(SYNCED_MAPPING, _check_hash(block_hash))
        return False if raw is None else decode_bool(raw)

    def block_hash(self, ethereum_block_hash: bytes) -> Optional[bytes]:
        raw = self.db.get(BLOCK_MAPPING, _check_hash(ethereum_block_hash))
        if raw is None:
            return None
        value, _ = _take(raw, 0, HASH_LENGTH)
        return value

    def transaction_metadata(self, ethereum_transaction_hash: bytes) -> list[TransactionMetadata]:
        raw = self.db.get(TRANSACTION_MAPPING, _check_hash(ethereum_transaction_hash))
        return [] if raw is None else _decode_metadata_list(raw)

    def write_none(self, block_hash: bytes) -> None:
        """Mark a block as synced without any Ethereum data."""
        key = _check_hash(block_hash)
        with self._write_lock:
            transaction = Transaction()
            transaction.set(SYNCED_MAPPING, key, encode_bool(True))
            self.db.commit(transaction)

    def write_hashes(self, commitment: MappingCommitment) -> None:
        """Record a block's mappings and mark it as synced, in one commit."""
        with self._write_lock:
            transaction = Transaction()
            transaction.set(BLOCK_MAPPING, commitment.ethereum_block_hash, commitment.block_hash)
            for index, tx_hash in enumerate(commitment.ethereum_transaction_hashes):
                metadata = self.transaction_metadata(tx_hash)
                metadata.append(
                    TransactionMetadata(
                        commitment.block_hash, commitment.ethereum_block_hash, index
                    )
                )
                transaction.set(TRANSACTION_MAPPING, tx_hash, _encode_metadata_list(metadata))
            transaction.set(SYNCED_MAPPING, commitment.block_hash, encode_bool(True))
            self.db.commit(transaction)


def frontier_database_dir(db_config_dir: Path | str, db_path: str) -> Path:
    """Return the directory of the mapping database under a node's database directory."""
    return Path(db_config_dir) / "frontier" / db_path


class Backend:
    """The mapping database with its meta and mapping views."""

    def __init__(self, settings: DatabaseSettings) -> None:
        self.db = open_database(settings)
        self.meta = MetaDb(self.db)
        self.mapping = MappingDb(self.db)

    @classmethod
    def open(cls, database: DatabaseSource, db_config_dir: Path | str) -> "Backend":
        """Open the mapping database next to a node database of the given kind."""
        if database.kind is SourceKind.ROCKSDB:
            source = DatabaseSource.rocksdb(frontier_database_dir(db_config_dir, "db"))
        elif database.kind is SourceKind.PARITYDB:
            source = DatabaseSource.paritydb(frontier_database_dir(db_config_dir, "paritydb"))
        elif database.kind is SourceKind.AUTO:
            source = DatabaseSource.auto(
                frontier_database_dir(db_config_dir, "db"),
                frontier_database_dir(db_config_dir, "paritydb"),
            )
        else:
            raise ValueError("Supported db sources: `rocksdb` | `paritydb` | `auto`")
        return cls(DatabaseSettings(source))

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "Backend":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()