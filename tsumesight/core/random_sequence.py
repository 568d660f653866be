"""Deterministic pseudo-random sequence for question scheduling.

Every draw the scheduler makes comes from a RandomSequence owned by one
engine, seeded from the record text, so two engines over the same record
draw the same values in the same order.
"""

from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def hash_string(text: str) -> int:
    """32-bit rolling string hash (``h = h * 31 + ord(c)``), as a signed int."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & _MASK32
    return h - (1 << 32) if h & 0x80000000 else h


class RandomSequence:
    """Mulberry32 generator."""

    def __init__(self, seed: int):
        self._state = seed & _MASK32

    def random(self) -> float:
        """Next value in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    def index(self, n: int) -> int:
        """Uniform index in [0, n)."""
        if n <= 0:
            raise ValueError("index() needs a positive bound")
        return int(self.random() * n)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]
