"""Column-keyed key/value stores with atomic transactions."""

from __future__ import annotations

import abc
import enum
import sqlite3
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

NUM_COLUMNS = 4
META = 0
BLOCK_MAPPING = 1
TRANSACTION_MAPPING = 2
SYNCED_MAPPING = 3

_FILE_NAME = "frontier.sqlite3"


def _check_column(column: int) -> int:
    if isinstance(column, bool) or not isinstance(column, int) or not 0 <= column < NUM_COLUMNS:
        raise ValueError(f"no such column: {column!r}")
    return column


@dataclass(frozen=True)
class Change:
    """One write of a transaction; a value of None removes the key."""

    column: int
    key: bytes
    value: Optional[bytes] = None

    @property
    def is_removal(self) -> bool:
        return self.value is None


class Transaction:
    """An ordered batch of changes committed together."""

    def __init__(self) -> None:
        self.changes: list[Change] = []

    def set(self, column: int, key: bytes, value: bytes) -> None:
        self.changes.append(Change(column, bytes(key), bytes(value)))

    def remove(self, column: int, key: bytes) -> None:
        self.changes.append(Change(column, bytes(key), None))

    def __iter__(self) -> Iterator[Change]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)


class Database(abc.ABC):
    """A store of byte values by column and key."""

    @abc.abstractmethod
    def get(self, column: int, key: bytes) -> Optional[bytes]:
        """Return the value under ``key`` in ``column``, or None."""

    @abc.abstractmethod
    def commit(self, transaction: Transaction) -> None:
        """Apply every change of ``transaction``, all or none."""

    def contains(self, column: int, key: bytes) -> bool:
        return self.get(column, key) is not None

    def value_size(self, column: int, key: bytes) -> Optional[int]:
        value = self.get(column, key)
        return None if value is None else len(value)

    def close(self) -> None:
        """Release the store's resources."""

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MemoryDatabase(Database):
    """A store held in memory."""

    def __init__(self) -> None:
        self._data: dict[tuple[int, bytes], bytes] = {}
        self._lock = threading.Lock()

    def get(self, column: int, key: bytes) -> Optional[bytes]:
        _check_column(column)
        with self._lock:
            return self._data.get((column, bytes(key)))

    def commit(self, transaction: Transaction) -> None:
        changes = list(transaction)
        for change in changes:
            _check_column(change.column)
        with self._lock:
            for change in changes:
                slot = (change.column, change.key)
                if change.value is None:
                    self._data.pop(slot, None)
                else:
                    self._data[slot] = change.value


class SqliteDatabase(Database):
    """A store kept in an SQLite file inside the directory ``path``."""

    def __init__(self, path: Path | str, create: bool) -> None:
        self.path = Path(path)
        file = self.path / _FILE_NAME
        if not file.exists():
            if not create:
                raise FileNotFoundError(f"no database at {self.path}")
            self.path.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(file), check_same_thread=False)
        try:
            with self._conn:
                self._conn.execute(
                    "CREATE TABLE IF NOT EXISTS kv ("
                    "col INTEGER NOT NULL, key BLOB NOT NULL, value BLOB NOT NULL, "
                    "PRIMARY KEY (col, key))"
                )
        except sqlite3.Error:
            self._conn.close()
            raise

    def get(self, column: int, key: bytes) -> Optional[bytes]:
        _check_column(column)
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM kv WHERE col = ? AND key = ?", (column, bytes(key))
            ).fetchone()
        return None if row is None else bytes(row[0])

    def commit(self, transaction: Transaction) -> None:
        changes = list(transaction)
        for change in changes:
            _check_column(change.column)
        with self._lock, self._conn:
            for change in changes:
                if change.value is None:
                    self._conn.execute(
                        "DELETE FROM kv WHERE col = ? AND key = ?", (change.column, change.key)
                    )
                else:
                    self._conn.execute(
                        "INSERT OR REPLACE INTO kv (col, key, value) VALUES (?, ?, ?)",
                        (change.column, change.key, change.value),
                    )

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class SourceKind(enum.Enum):
    """How the database location is given."""

    ROCKSDB = "rocksdb"
    PARITYDB = "paritydb"
    AUTO = "auto"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DatabaseSource:
    """Where to find the database."""

    kind: SourceKind
    path: Optional[Path] = None
    rocksdb_path: Optional[Path] = None
    paritydb_path: Optional[Path] = None
    cache_size: int = 0

    def __post_init__(self) -> None:
        if self.kind in (SourceKind.ROCKSDB, SourceKind.PARITYDB) and self.path is None:
            raise ValueError(f"a {self.kind.value} source needs a path")
        if self.kind is SourceKind.AUTO and (self.rocksdb_path is None or self.paritydb_path is None):
            raise ValueError("an auto source needs both paths")

    @classmethod
    def rocksdb(cls, path: Path | str, cache_size: int = 0) -> "DatabaseSource":
        return cls(SourceKind.ROCKSDB, path=Path(path), cache_size=cache_size)

    @classmethod
    def paritydb(cls, path: Path | str) -> "DatabaseSource":
        return cls(SourceKind.PARITYDB, path=Path(path))

    @classmethod
    def auto(
        cls, rocksdb_path: Path | str, paritydb_path: Path | str, cache_size: int = 0
    ) -> "DatabaseSource":
        return cls(
            SourceKind.AUTO,
            rocksdb_path=Path(rocksdb_path),
            paritydb_path=Path(paritydb_path),
            cache_size=cache_size,
        )

    @classmethod
    def custom(cls) -> "DatabaseSource":
        return cls(SourceKind.CUSTOM)


@dataclass(frozen=True)
class DatabaseSettings:
    """Database settings."""

    source: DatabaseSource = field(default_factory=DatabaseSource.custom)


def open_database(settings: DatabaseSettings) -> Database:
    """Open the database the settings point to.

    An auto source opens an existing database at its first path and
    otherwise opens or creates one at its second path.
    """
    source = settings.source
    if source.kind is SourceKind.PARITYDB:
        return SqliteDatabase(source.path, True)
    if source.kind is SourceKind.ROCKSDB:
        return SqliteDatabase(source.path, True)
    if source.kind is SourceKind.AUTO:
        try:
            return SqliteDatabase(source.rocksdb_path, False)
        except (OSError, sqlite3.Error):
            return SqliteDatabase(source.paritydb_path, True)
    raise ValueError(f"Unsupported database source: {source.kind.value}")