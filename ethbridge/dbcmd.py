"""The command that reads and edits the mapping database, and its command line."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Callable, Optional

from .backend import Backend
from .dbcmd_common import (
    Column,
    CommandError,
    Operation,
    confirmation_prompt,
    maybe_deserialize_value,
)
from .hexdata import parse_hash
from .kvstore import DatabaseSource
from .mapping_cmd import MappingCommand, TransactionStatusSource, parse_mapping_value
from .meta_cmd import MetaCommand, MetaKey, parse_meta_value


def _parse_key(text: str) -> bytes:
    try:
        return bytes(parse_hash(text, 32))
    except ValueError:
        raise CommandError(f"`{text}` is not a 32-byte hash key") from None


@dataclass
class FrontierDbCmd:
    """One operation on one column of the mapping database."""

    operation: Operation
    column: Column
    key: str
    value: Optional[Path] = None
    stdin: Optional[IO[str]] = None
    confirm: Optional[Callable[[Operation, Any, Any, Any], None]] = None

    def _prompt(self, operation: Operation, key: Any, existing: Any, new: Any) -> None:
        confirmation_prompt(operation, key, existing, new, self.stdin)

    def run(self, client: TransactionStatusSource, backend: Backend) -> Any:
        """Run the command; a read returns what it printed."""
        if self.column is Column.META:
            meta = MetaCommand(self.operation, backend, self.confirm or self._prompt)
            key = MetaKey.parse(self.key)
            value = parse_meta_value(
                maybe_deserialize_value(self.operation, self.value, self.stdin)
            )
            return meta.query(key, value)
        mapping = MappingCommand(self.operation, client, backend)
        hash_key = _parse_key(self.key)
        block_hash = parse_mapping_value(
            maybe_deserialize_value(self.operation, self.value, self.stdin)
        )
        return mapping.query(self.column, hash_key, block_hash)


class _NoRuntime:
    """Client for the command line, where no chain state can be read."""

    def current_transaction_statuses(self, block_hash: bytes) -> None:
        raise CommandError(
            f"No runtime available to read transaction statuses at 0x{block_hash.hex()}"
        )


_SOURCES: dict[str, Callable[[Path], DatabaseSource]] = {
    "rocksdb": DatabaseSource.rocksdb,
    "paritydb": DatabaseSource.paritydb,
    "auto": lambda path: DatabaseSource.auto(path, path),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frontier-db", description="Interact with the Ethereum mapping database."
    )
    parser.add_argument(
        "operation", type=Operation, help="one of create | read | update | delete"
    )
    parser.add_argument("column", type=Column, help="one of meta | block | transaction")
    parser.add_argument("-k", "--key", required=True, help="the key to read or write")
    parser.add_argument(
        "--value", type=Path, help="file holding the JSON value; standard input when absent"
    )
    parser.add_argument(
        "--base-path", type=Path, required=True, help="the node's database directory"
    )
    parser.add_argument("--database", choices=sorted(_SOURCES), default="rocksdb")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    source = _SOURCES[args.database](args.base_path)
    cmd = FrontierDbCmd(args.operation, args.column, args.key, args.value)
    try:
        with Backend.open(source, args.base_path) as backend:
            cmd.run(_NoRuntime(), backend)
    except (CommandError, ValueError, OSError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0