"""Sync status, peer and chain information types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .hexdata import format_hash, format_quantity

U32_MAX = (1 << 32) - 1


def _opt_quantity(value: Optional[int]) -> Optional[str]:
    return None if value is None else format_quantity(value)


@dataclass(frozen=True)
class SyncInfo:
    """Progress of an ongoing sync."""

    starting_block: int = 0
    current_block: int = 0
    highest_block: int = 0
    warp_chunks_amount: Optional[int] = None
    warp_chunks_processed: Optional[int] = None

    def to_json(self) -> dict:
        return {
            "startingBlock": format_quantity(self.starting_block),
            "currentBlock": format_quantity(self.current_block),
            "highestBlock": format_quantity(self.highest_block),
            "warpChunksAmount": _opt_quantity(self.warp_chunks_amount),
            "warpChunksProcessed": _opt_quantity(self.warp_chunks_processed),
        }


def sync_status_to_json(status: Optional[SyncInfo]) -> Union[dict, bool]:
    """Return the sync info object, or False when not syncing."""
    if status is None:
        return False
    return status.to_json()


def peer_count_to_json(count: Union[int, str]) -> Union[int, str]:
    """Return a peer count as a plain number or string."""
    if isinstance(count, str):
        return count
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError("a peer count is a number or a string")
    if not 0 <= count <= U32_MAX:
        raise ValueError(f"peer count out of range: {count}")
    return count


@dataclass(frozen=True)
class PeerNetworkInfo:
    """Endpoints of a peer connection."""

    remote_address: str = ""
    local_address: str = ""


@dataclass(frozen=True)
class EthProtocolInfo:
    """Ethereum protocol state of a peer."""

    version: int = 0
    difficulty: Optional[int] = None
    head: str = ""


@dataclass(frozen=True)
class PipProtocolInfo:
    """PIP protocol state of a peer."""

    version: int = 0
    difficulty: int = 0
    head: str = ""


@dataclass(frozen=True)
class PeerProtocolsInfo:
    """Protocols a peer speaks."""

    eth: Optional[EthProtocolInfo] = None
    pip: Optional[PipProtocolInfo] = None


def _eth_json(info: Optional[EthProtocolInfo]) -> Optional[dict]:
    if info is None:
        return None
    return {
        "version": info.version,
        "difficulty": _opt_quantity(info.difficulty),
        "head": info.head,
    }


def _pip_json(info: Optional[PipProtocolInfo]) -> Optional[dict]:
    if info is None:
        return None
    return {
        "version": info.version,
        "difficulty": format_quantity(info.difficulty),
        "head": info.head,
    }


@dataclass(frozen=True)
class PeerInfo:
    """Connection information about one peer."""

    id: Optional[str] = None
    name: str = ""
    caps: tuple[str, ...] = field(default_factory=tuple)
    network: PeerNetworkInfo = field(default_factory=PeerNetworkInfo)
    protocols: PeerProtocolsInfo = field(default_factory=PeerProtocolsInfo)

    def __post_init__(self) -> None:
        object.__setattr__(self, "caps", tuple(self.caps))

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "caps": list(self.caps),
            "network": {
                "remoteAddress": self.network.remote_address,
                "localAddress": self.network.local_address,
            },
            "protocols": {
                "eth": _eth_json(self.protocols.eth),
                "pip": _pip_json(self.protocols.pip),
            },
        }


@dataclass(frozen=True)
class Peers:
    """Peer counts and details."""

    active: int = 0
    connected: int = 0
    max: int = 0
    peers: tuple[PeerInfo, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "peers", tuple(self.peers))

    def to_json(self) -> dict:
        return {
            "active": self.active,
            "connected": self.connected,
            "max": self.max,
            "peers": [peer.to_json() for peer in self.peers],
        }


@dataclass(frozen=True)
class TransactionStats:
    """Propagation statistics of a pending transaction."""

    first_seen: int = 0
    propagated_to: dict[bytes, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for node in self.propagated_to:
            if len(node) != 64:
                raise ValueError("peer ids are 64 bytes")

    def to_json(self) -> dict:
        return {
            "firstSeen": self.first_seen,
            "propagatedTo": {
                format_hash(node): count for node, count in sorted(self.propagated_to.items())
            },
        }


@dataclass(frozen=True)
class ChainStatus:
    """The gap in the chain, as (first, last), if there is one."""

    block_gap: Optional[tuple[int, int]] = None

    def to_json(self) -> dict:
        if self.block_gap is None:
            return {"blockGap": None}
        first, last = self.block_gap
        return {"blockGap": [format_quantity(first), format_quantity(last)]}