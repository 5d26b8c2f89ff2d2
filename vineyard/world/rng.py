"""Deterministic seeded random number generator.

Every generator builds its own ``SeededRNG`` from a string seed, so identical
seeds always replay identical draws. There is no module-level RNG state.

The seed string is folded into 32 bits with a two-accumulator multiply/xor
hash, and draws come from a Mulberry32 state machine. Both operate on
unsigned 32-bit integers.
"""
from __future__ import annotations

import hashlib
from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def hash_seed(seed: str) -> int:
    """Fold a seed string into an unsigned 32-bit integer.

    Characters are hashed as UTF-16 code units, so characters outside the
    Basic Multilingual Plane contribute their two surrogate halves.
    """
    h1 = 0xDEADBEEF
    h2 = 0x41C6CE57
    data = seed.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h1 = _imul(h1 ^ code, 2654435761)
        h2 = _imul(h2 ^ code, 1597334677)
    h1 = _imul(h1 ^ (h1 >> 16), 2246822507)
    h1 ^= _imul(h2 ^ (h2 >> 13), 3266489909)
    return (h1 ^ h2) & _MASK32


def short_hash(*parts: object, length: int = 6) -> str:
    """Stable short hex id fragment for the given parts."""
    base = "-".join(str(p) for p in parts)
    return hashlib.sha256(base.encode("utf-8")).hexdigest()[:length]


class SeededRNG:
    """Mulberry32 stream seeded from a string."""

    def __init__(self, seed: str) -> None:
        self.seed = seed
        self._state = hash_seed(seed)

    def next(self) -> float:
        """Return a float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = _imul(self._state ^ (self._state >> 15), self._state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def next_int(self, lo: int, hi: int) -> int:
        """Return an integer in [lo, hi], both ends inclusive."""
        return lo + int(self.next() * (hi - lo + 1))

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[int(self.next() * len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list; the input is left untouched."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out


def create_rng(seed: str) -> SeededRNG:
    return SeededRNG(seed)
