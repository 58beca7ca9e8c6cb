"""Commands on the block and transaction mapping columns."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .backend import Backend, MappingCommitment
from .dbcmd_common import (
    _FAILED,
    Column,
    CommandError,
    Operation,
    _debug,
    key_column_error,
    key_not_empty_error,
    key_value_error,
)
from .hexdata import parse_hash


class TransactionStatusSource(Protocol):
    """Reads the Ethereum transaction hashes stored in the state of a block."""

    def current_transaction_statuses(self, block_hash: bytes) -> Optional[Sequence[bytes]]:
        """Return the transaction hashes at ``block_hash``, or None if none are stored."""


def parse_mapping_value(raw: object) -> Optional[bytes]:
    """Turn decoded JSON into a native block hash."""
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.startswith("0x"):
        raise CommandError(_FAILED)
    try:
        return bytes(parse_hash(raw, 32))
    except ValueError:
        raise CommandError(_FAILED) from None


class MappingCommand:
    """Runs one operation against the mapping columns."""

    def __init__(
        self, operation: Operation, client: TransactionStatusSource, backend: Backend
    ) -> None:
        self.operation = operation
        self.client = client
        self.backend = backend

    def _commit(self, ethereum_block_hash: bytes, block_hash: bytes) -> None:
        statuses = self.client.current_transaction_statuses(block_hash)
        hashes = tuple(statuses) if statuses is not None else ()
        self.backend.mapping.write_hashes(
            MappingCommitment(block_hash, ethereum_block_hash, hashes)
        )

    def query(self, column: Column, key: bytes, value: Optional[bytes]) -> Any:
        """Carry out the operation; a read prints and returns the stored value."""
        mapping = self.backend.mapping
        operation = self.operation

        if operation is Operation.CREATE:
            if value is None:
                raise key_value_error(key, value)
            if mapping.block_hash(key) is not None:
                raise key_not_empty_error(key)
            self._commit(key, value)
            return None

        if operation is Operation.READ:
            if column is Column.BLOCK:
                result: Any = mapping.block_hash(key)
            elif column is Column.TRANSACTION:
                result = mapping.transaction_metadata(key)
            else:
                raise key_column_error(key, column)
            print(_debug(result))
            return result

        if operation is Operation.UPDATE:
            if value is None:
                raise key_value_error(key, value)
            if mapping.block_hash(key) is not None:
                self._commit(key, value)
            return None

        raise CommandError("Delete operation is not supported for non-static keys")