"""Keccak hashing and the 2048-bit log bloom used to pre-filter logs."""

from __future__ import annotations

from Crypto.Hash import keccak

BLOOM_SIZE = 256
_BIT_MASK = BLOOM_SIZE * 8 - 1


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


class Bloom:
    """A 256-byte bloom filter with three bits set per accrued input."""

    __slots__ = ("_bits",)

    def __init__(self, data: bytes | None = None) -> None:
        if data is None:
            self._bits = bytearray(BLOOM_SIZE)
        else:
            raw = bytes(data)
            if len(raw) != BLOOM_SIZE:
                raise ValueError(f"a bloom is {BLOOM_SIZE} bytes, got {len(raw)}")
            self._bits = bytearray(raw)

    @classmethod
    def from_input(cls, data: bytes) -> "Bloom":
        """Return a bloom holding only the raw input ``data``."""
        bloom = cls()
        bloom.accrue(data)
        return bloom

    def accrue(self, data: bytes) -> None:
        """Add the raw input ``data`` to the bloom."""
        digest = keccak256(data)
        for i in (0, 2, 4):
            bit = ((digest[i] << 8) | digest[i + 1]) & _BIT_MASK
            self._bits[BLOOM_SIZE - 1 - bit // 8] |= 1 << (bit % 8)

    def accrue_bloom(self, other: "Bloom") -> None:
        """Merge every bit of ``other`` into this bloom."""
        for i, byte in enumerate(other._bits):
            self._bits[i] |= byte

    def contains_bloom(self, other: "Bloom") -> bool:
        """Return True when every bit set in ``other`` is set here too."""
        return all(mine & theirs == theirs for mine, theirs in zip(self._bits, other._bits))

    def is_empty(self) -> bool:
        return not any(self._bits)

    def __bytes__(self) -> bytes:
        return bytes(self._bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bloom):
            return NotImplemented
        return self._bits == other._bits

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Bloom(0x{self._bits.hex()})"