"""Commands on the meta column: sync tips and the storage schema cache."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Callable, Optional, Union

from .backend import (
    CURRENT_SYNCING_TIPS,
    PALLET_ETHEREUM_SCHEMA_CACHE,
    Backend,
    EthereumStorageSchema,
)
from .dbcmd_common import (
    _FAILED,
    CommandError,
    Operation,
    _debug,
    confirmation_prompt,
    key_not_empty_error,
    key_value_error,
)
from .hexdata import parse_hash

MetaValue = Union[list, dict]
Confirm = Callable[[Operation, Any, Any, Any], None]

_SCHEMAS = {schema.name.title(): schema for schema in EthereumStorageSchema}


class MetaKey(Enum):
    """The static keys of the meta column."""

    TIPS = CURRENT_SYNCING_TIPS.decode()
    SCHEMA = PALLET_ETHEREUM_SCHEMA_CACHE.decode()

    @classmethod
    def parse(cls, text: str) -> "MetaKey":
        """Return the key named ``text``; raise CommandError for an unknown one."""
        for key in cls:
            if key.value == text:
                return key
        raise CommandError(f"`{json.dumps(text)}` is not a meta column static key")


def _parse_h256(item: object) -> bytes:
    if not isinstance(item, str) or not item.startswith("0x"):
        raise CommandError(_FAILED)
    try:
        return bytes(parse_hash(item, 32))
    except ValueError:
        raise CommandError(_FAILED) from None


def parse_meta_value(raw: object) -> Optional[MetaValue]:
    """Turn decoded JSON into sync tips (a list) or a schema map (a dict)."""
    if raw is None:
        return None
    if isinstance(raw, list):
        return [_parse_h256(item) for item in raw]
    if isinstance(raw, dict):
        schemas: dict[bytes, EthereumStorageSchema] = {}
        for block_hash, name in raw.items():
            if not isinstance(name, str) or name not in _SCHEMAS:
                raise CommandError(_FAILED)
            schemas[_parse_h256(block_hash)] = _SCHEMAS[name]
        return schemas
    raise CommandError(f"Unexpected `{_debug(raw)}` value")


def _schema_entries(schemas: dict) -> list[tuple[EthereumStorageSchema, bytes]]:
    return [(schema, block_hash) for block_hash, schema in schemas.items()]


class MetaCommand:
    """Runs one operation against the meta column."""

    def __init__(
        self, operation: Operation, backend: Backend, confirm: Optional[Confirm] = None
    ) -> None:
        self.operation = operation
        self.backend = backend
        self.confirm: Confirm = confirm if confirm is not None else confirmation_prompt

    def query(self, key: MetaKey, value: Optional[MetaValue]) -> Any:
        """Carry out the operation; a read prints and returns the stored value."""
        meta = self.backend.meta
        operation = self.operation

        if operation is Operation.CREATE:
            if key is MetaKey.TIPS and isinstance(value, list):
                if meta.current_syncing_tips():
                    raise key_not_empty_error(key)
                meta.write_current_syncing_tips(value)
            elif key is MetaKey.SCHEMA and isinstance(value, dict):
                if meta.ethereum_schema() is not None:
                    raise key_not_empty_error(key)
                meta.write_ethereum_schema(_schema_entries(value))
            else:
                raise key_value_error(key, value)
            return None

        if operation is Operation.READ:
            if key is MetaKey.TIPS:
                current: Any = meta.current_syncing_tips()
            else:
                current = meta.ethereum_schema()
            print(_debug(current))
            return current

        if operation is Operation.UPDATE:
            if key is MetaKey.TIPS and isinstance(value, list):
                existing = meta.current_syncing_tips()
                self.confirm(operation, key, existing, value)
                meta.write_current_syncing_tips(value)
            elif key is MetaKey.SCHEMA and isinstance(value, dict):
                existing_schema = meta.ethereum_schema()
                new_value = _schema_entries(value)
                self.confirm(operation, key, existing_schema, new_value)
                meta.write_ethereum_schema(new_value)
            else:
                raise key_value_error(key, value)
            return None

        if key is MetaKey.TIPS:
            self.confirm(operation, key, meta.current_syncing_tips(), [])
            meta.write_current_syncing_tips([])
        else:
            self.confirm(operation, key, meta.ethereum_schema(), [])
            meta.write_ethereum_schema([])
        return None