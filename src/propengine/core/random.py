"""Seeded pseudo-random source for reproducible test generation.

SeededRandom is a 32-bit linear congruential generator:

    state = (state * 1664525 + 1013904223) mod 2**32

It is NOT cryptographically secure and is not meant to be. Two instances built
from the same seed and driven with the same call sequence produce
bit-identical outputs on every platform.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2**32

DEFAULT_CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class SeededRandom:
    """Deterministic random source driven by an integer seed."""

    def __init__(self, seed: int) -> None:
        """Initialize the generator.

        Args:
            seed: Any integer. It is reduced modulo 2**32, so negative seeds
                and seeds wider than 32 bits are accepted.
        """
        self._seed = seed
        self._state = seed % _MODULUS

    @property
    def seed(self) -> int:
        """The seed this instance was constructed with."""
        return self._seed

    @property
    def state(self) -> int:
        """Current internal state (for diagnostics and replay assertions)."""
        return self._state

    def next(self) -> float:
        """Advance the recurrence and return a float in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def integer(self, min_value: int, max_value: int) -> int:
        """Return an integer in [min_value, max_value], inclusive.

        Raises:
            ValueError: If max_value < min_value.
        """
        if max_value < min_value:
            raise ValueError(f"integer() requires min_value <= max_value, got {min_value} > {max_value}")
        span = max_value - min_value + 1
        return min_value + math.floor(self.next() * span)

    def float(self, min_value: float = 0.0, max_value: float = 1.0) -> float:
        """Return a float in [min_value, max_value)."""
        if max_value < min_value:
            raise ValueError(f"float() requires min_value <= max_value, got {min_value} > {max_value}")
        return min_value + self.next() * (max_value - min_value)

    def boolean(self) -> bool:
        return self.next() < 0.5

    def element(self, items: Sequence[T]) -> T:
        """Return one element of ``items``, chosen uniformly.

        Raises:
            ValueError: If items is empty.
        """
        if not items:
            raise ValueError("element() requires a non-empty sequence")
        return items[self.integer(0, len(items) - 1)]

    def string(self, length: int, charset: str = DEFAULT_CHARSET) -> str:
        """Return a string of exactly ``length`` characters drawn from ``charset``."""
        if length < 0:
            raise ValueError(f"string() length must be >= 0, got {length}")
        return "".join(self.element(charset) for _ in range(length))

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self._seed}, state={self._state})"
