"""Result of the eth_getWork call."""

from __future__ import annotations

from dataclasses import dataclass

from .hexdata import format_hash, format_quantity


@dataclass(frozen=True)
class Work:
    """Proof-of-work hash, seed hash, target and optionally the block number."""

    pow_hash: bytes = bytes(32)
    seed_hash: bytes = bytes(32)
    target: bytes = bytes(32)
    number: int | None = None

    def to_json(self) -> list:
        """Return the JSON array form; the number is appended only when known."""
        out = [format_hash(self.pow_hash), format_hash(self.seed_hash), format_hash(self.target)]
        if self.number is not None:
            out.append(format_quantity(self.number))
        return out