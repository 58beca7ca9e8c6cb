"""Log filters: parsing, bloom pre-filtering and exact matching of logs."""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from .block_number import BlockNumber, BlockTag, parse_block_number
from .bloom import Bloom
from .hexdata import format_hash, parse_hash
from .log import Log


class Variadic(enum.Enum):
    """The shape of a variadic value."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    NULL = "null"


@dataclass(frozen=True)
class VariadicValue:
    """A single value, a list of values, or null."""

    kind: Variadic
    value: Any = None

    @classmethod
    def single(cls, value: Any) -> "VariadicValue":
        return cls(Variadic.SINGLE, value)

    @classmethod
    def multiple(cls, values: Iterable[Any]) -> "VariadicValue":
        return cls(Variadic.MULTIPLE, tuple(values))

    @classmethod
    def null(cls) -> "VariadicValue":
        return cls(Variadic.NULL)


def parse_variadic(value: object, item_parser: Callable[[object], Any]) -> VariadicValue:
    """Parse null, a single item, or a list of items."""
    if value is None:
        return VariadicValue.null()
    try:
        return VariadicValue.single(item_parser(value))
    except (ValueError, TypeError) as single_error:
        if not isinstance(value, list):
            raise ValueError(f"Invalid variadic value type: {single_error}") from None
    try:
        return VariadicValue.multiple(item_parser(item) for item in value)
    except (ValueError, TypeError) as err:
        raise ValueError(f"Invalid variadic value type: {err}") from None


def _json_hash(length: int) -> Callable[[object], bytes]:
    def parse(value: object) -> bytes:
        if not isinstance(value, str) or not value.startswith("0x"):
            raise ValueError("a 0x-prefixed hash was expected")
        return parse_hash(value, length)

    return parse


def _optional(parser: Callable[[object], Any]) -> Callable[[object], Any]:
    def parse(value: object) -> Any:
        return None if value is None else parser(value)

    return parse


_parse_h160 = _json_hash(20)
_parse_h256 = _json_hash(32)
_parse_topic_item = _optional(lambda v: parse_variadic(v, _optional(_parse_h256)))


def _parse_address(value: object) -> VariadicValue:
    return parse_variadic(value, _parse_h160)


def _parse_topic(value: object) -> VariadicValue:
    return parse_variadic(value, _parse_topic_item)


_FIELDS: dict[str, tuple[str, Callable[[object], Any]]] = {
    "fromBlock": ("from_block", parse_block_number),
    "toBlock": ("to_block", parse_block_number),
    "blockHash": ("block_hash", _parse_h256),
    "address": ("address", _parse_address),
    "topics": ("topics", _parse_topic),
}


@dataclass(frozen=True)
class Filter:
    """Log filter criteria of eth_newFilter and eth_getLogs."""

    from_block: Optional[BlockNumber] = None
    to_block: Optional[BlockNumber] = None
    block_hash: Optional[bytes] = None
    address: Optional[VariadicValue] = None
    topics: Optional[VariadicValue] = None

    @classmethod
    def from_json(cls, value: object) -> "Filter":
        """Parse the camelCase JSON filter object; unknown fields are rejected."""
        if not isinstance(value, dict):
            raise ValueError("a filter object was expected")
        kwargs: dict[str, Any] = {}
        for key, item in value.items():
            if key not in _FIELDS:
                raise ValueError(f"unknown field `{key}`")
            name, parser = _FIELDS[key]
            kwargs[name] = None if item is None else parser(item)
        return cls(**kwargs)


BloomFilter = list  # list[Optional[Bloom]]


def _optional_bloom(item: Optional[bytes]) -> Optional[Bloom]:
    return None if item is None else Bloom.from_input(item)


def _variadic_blooms(value: VariadicValue) -> list[Optional[Bloom]]:
    if value.kind is Variadic.SINGLE:
        return [_optional_bloom(value.value)]
    if value.kind is Variadic.MULTIPLE and value.value:
        return [_optional_bloom(item) for item in value.value]
    return [None]


def _starts_with(topics: Sequence[bytes], prefix: Sequence[bytes]) -> bool:
    return tuple(topics[: len(prefix)]) == tuple(prefix)


def _flatten(topic: VariadicValue) -> list[VariadicValue]:
    """Cartesian product of conditional topics: ``[A,[B,C]]`` to ``[[A,B],[A,C]]``."""
    if topic.kind is Variadic.MULTIPLE:
        values: list[list[Optional[bytes]]] = []
        for item in topic.value:
            if item is None or item.kind is Variadic.NULL:
                values.append([None])
            elif item.kind is Variadic.SINGLE:
                values.append([item.value])
            else:
                values.append(list(item.value))
        if not values:
            return []
        return [VariadicValue.multiple(combo) for combo in itertools.product(*values)]
    if topic.kind is Variadic.SINGLE:
        return [] if topic.value is None else [topic.value]
    return [VariadicValue.null()]


class FilteredParams:
    """Filter matching helper supporting wildcards and conditional topics."""

    def __init__(self, filter: Optional[Filter] = None) -> None:
        self.filter = filter
        if filter is not None and filter.topics is not None:
            self.flat_topics: list[VariadicValue] = _flatten(filter.topics)
        else:
            self.flat_topics = []

    @staticmethod
    def addresses_bloom_filter(address: Optional[VariadicValue]) -> list[Optional[Bloom]]:
        """Build the address bloom filter; empty when no address is given."""
        if address is None:
            return []
        return _variadic_blooms(address)

    @staticmethod
    def topics_bloom_filter(
        topics: Optional[Sequence[VariadicValue]],
    ) -> list[list[Optional[Bloom]]]:
        """Build one bloom filter per flattened topic sequence."""
        if topics is None:
            return []
        return [_variadic_blooms(flat) for flat in topics]

    @staticmethod
    def topics_in_bloom(bloom: Bloom, topic_bloom_filters: Sequence[Sequence[Optional[Bloom]]]) -> bool:
        """True when any topic sequence is wholly contained in the bloom."""
        if not topic_bloom_filters:
            return True
        for subset in topic_bloom_filters:
            matches = False
            for element in subset:
                matches = element is None or bloom.contains_bloom(element)
                if not matches:
                    break
            if matches:
                return True
        return False

    @staticmethod
    def address_in_bloom(bloom: Bloom, address_bloom_filter: Sequence[Optional[Bloom]]) -> bool:
        """True when any of the addresses (or a wildcard) is in the bloom."""
        if not address_bloom_filter:
            return True
        return any(element is None or bloom.contains_bloom(element) for element in address_bloom_filter)

    def replace(self, log: Log, topic: VariadicValue) -> Optional[list[bytes]]:
        """Replace wildcards with the log's topic at the same position."""
        out: list[bytes] = []
        if topic.kind is Variadic.SINGLE and topic.value is not None:
            out.append(topic.value)
        elif topic.kind is Variadic.MULTIPLE:
            for position, value in enumerate(topic.value):
                out.append(log.topics[position] if value is None else value)
        return out or None

    def _require_filter(self) -> Filter:
        if self.filter is None:
            raise ValueError("no filter is set")
        return self.filter

    def filter_block_range(self, block_number: int) -> bool:
        filt = self._require_filter()
        result = True
        from_block = filt.from_block
        if isinstance(from_block, int) and from_block > block_number:
            result = False
        to_block = filt.to_block
        if isinstance(to_block, int):
            if to_block < block_number:
                result = False
        elif to_block is BlockTag.EARLIEST:
            result = False
        return result

    def filter_block_hash(self, block_hash: bytes) -> bool:
        wanted = self._require_filter().block_hash
        return wanted is None or wanted == block_hash

    def filter_address(self, log: Log) -> bool:
        address = self._require_filter().address
        if address is None:
            return True
        if address.kind is Variadic.SINGLE:
            return log.address == address.value
        if address.kind is Variadic.MULTIPLE:
            return log.address in address.value
        return True

    def filter_topics(self, log: Log) -> bool:
        result = True
        for topic in self.flat_topics:
            if topic.kind is Variadic.SINGLE:
                if topic.value is not None and not _starts_with(log.topics, [topic.value]):
                    result = False
            elif topic.kind is Variadic.MULTIPLE:
                trimmed = list(topic.value)
                while trimmed and trimmed[-1] is None:
                    trimmed.pop()
                if len(trimmed) > len(log.topics):
                    result = False
                    break
                replaced = self.replace(log, VariadicValue.multiple(trimmed))
                if replaced is not None:
                    result = False
                    if _starts_with(log.topics, replaced):
                        result = True
                        break
            else:
                result = True
        return result


@dataclass(frozen=True)
class FilterChanges:
    """Result of eth_getFilterChanges: logs, hashes, or nothing."""

    logs: Optional[tuple[Log, ...]] = None
    hashes: Optional[tuple[bytes, ...]] = None

    def __post_init__(self) -> None:
        if self.logs is not None and self.hashes is not None:
            raise ValueError("filter changes hold either logs or hashes")
        if self.logs is not None:
            object.__setattr__(self, "logs", tuple(self.logs))
        if self.hashes is not None:
            object.__setattr__(self, "hashes", tuple(bytes(h) for h in self.hashes))

    def to_json(self) -> list:
        if self.logs is not None:
            return [log.to_json() for log in self.logs]
        if self.hashes is not None:
            return [format_hash(h) for h in self.hashes]
        return []


class FilterKind(enum.Enum):
    """What a pooled filter watches."""

    BLOCK = "block"
    PENDING_TRANSACTION = "pending_transaction"
    LOG = "log"


@dataclass
class FilterPoolItem:
    """A filter held in memory between polls."""

    last_poll: BlockNumber
    filter_type: FilterKind
    at_block: int
    filter: Optional[Filter] = None

    def __post_init__(self) -> None:
        if self.filter_type is FilterKind.LOG and self.filter is None:
            raise ValueError("a log filter needs its filter criteria")
        if self.filter_type is not FilterKind.LOG and self.filter is not None:
            raise ValueError("only log filters carry filter criteria")