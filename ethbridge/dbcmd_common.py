"""Operations, columns, value input and messages shared by the database commands."""

from __future__ import annotations

import dataclasses
import enum
import json
import sys
from pathlib import Path
from typing import IO, Any, Optional

from .hexdata import format_hash

_FAILED = "Failed to deserialize value data"


class CommandError(Exception):
    """Raised when a database command cannot be carried out."""


class _CaseInsensitiveEnum(enum.Enum):
    @classmethod
    def _missing_(cls, value: object) -> Optional["_CaseInsensitiveEnum"]:
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Operation(_CaseInsensitiveEnum):
    """What a command does to the stored value."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Column(_CaseInsensitiveEnum):
    """Which part of the database a command addresses."""

    META = "meta"
    BLOCK = "block"
    TRANSACTION = "transaction"


def _debug(value: Any) -> str:
    """Render a value for messages and command output."""
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return format_hash(bytes(value))
    if isinstance(value, enum.Enum):
        return value.name.title()
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, list):
        return "[" + ", ".join(_debug(v) for v in value) + "]"
    if isinstance(value, tuple):
        return "(" + ", ".join(_debug(v) for v in value) + ")"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{_debug(k)}: {_debug(v)}" for k, v in value.items()) + "}"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        parts = ", ".join(
            f"{f.name}: {_debug(getattr(value, f.name))}" for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__} {{ {parts} }}"
    return repr(value)


def maybe_deserialize_value(
    operation: Operation,
    value_path: Optional[Path | str] = None,
    stdin: Optional[IO[str]] = None,
) -> Any:
    """Read the JSON value of a create or update from a file or standard input.

    Other operations take no value and give None. Only the first JSON value
    of the input is used.
    """
    if operation not in (Operation.CREATE, Operation.UPDATE):
        return None
    if value_path is not None:
        try:
            text = Path(value_path).read_text(encoding="utf-8")
        except OSError as err:
            raise CommandError(f"Cannot read value file `{value_path}`: {err}") from err
    else:
        text = (sys.stdin if stdin is None else stdin).read()
    try:
        value, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except json.JSONDecodeError:
        raise CommandError(_FAILED) from None
    if value is None:
        raise CommandError(_FAILED)
    return value


def key_value_error(key: Any, value: Any) -> CommandError:
    return CommandError(
        f"Key `{_debug(key)}` and Value `{_debug(value)}` are not compatible with this operation"
    )


def key_column_error(key: Any, value: Any) -> CommandError:
    return CommandError(
        f"Key `{_debug(key)}` and Column `{_debug(value)}` are not compatible with this operation"
    )


def key_not_empty_error(key: Any) -> CommandError:
    return CommandError(f"Operation not allowed for non-empty Key `{_debug(key)}`")


def confirmation_prompt(
    operation: Operation,
    key: Any,
    existing_value: Any,
    new_value: Any,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> None:
    """Show the change and raise CommandError unless the user types `confirm`."""
    out = sys.stdout if stdout is None else stdout
    inp = sys.stdin if stdin is None else stdin
    out.write(
        "\n---------------------------------------------\n"
        f"Operation: {_debug(operation)}\n"
        f"Key: {_debug(key)}\n"
        f"Existing value: {_debug(existing_value)}\n"
        f"New value: {_debug(new_value)}\n"
        "---------------------------------------------\n"
        "Type `confirm` and press [Enter] to confirm:\n"
    )
    out.flush()
    if inp.readline().strip() != "confirm":
        raise CommandError("-- Cancel exit --")