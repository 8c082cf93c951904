"""Deterministic stand-ins used across engine tests.

ScaledIntGenerator mirrors the classic "integers grow with size" generator;
FakeClock lets sync-timeout behavior be tested without sleeping.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from propengine import SeededRandom


class ScaledIntGenerator:
    """Integers in [0, size * scale], shrinking toward 0 by halving."""

    def __init__(self, scale: int = 10) -> None:
        self.scale = scale
        self.shrink_calls = 0

    def generate(self, rng: SeededRandom, size: int) -> int:
        return rng.integer(0, size * self.scale)

    def shrink(self, value: int) -> Sequence[int]:
        self.shrink_calls += 1
        if value <= 0:
            return []
        return [0, value // 2]

    def is_valid(self, value: Any) -> bool:
        return isinstance(value, int) and value >= 0


class FixedGenerator:
    """Always generates the same value; never shrinks."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def generate(self, rng: SeededRandom, size: int) -> Any:
        return self.value

    def shrink(self, value: Any) -> Sequence[Any]:
        return []

    def is_valid(self, value: Any) -> bool:
        return True


class RaisingGenerator:
    """generate() always raises."""

    def generate(self, rng: SeededRandom, size: int) -> Any:
        raise RuntimeError("generator exploded")

    def shrink(self, value: Any) -> Sequence[Any]:
        return []

    def is_valid(self, value: Any) -> bool:
        return True


class FakeClock:
    """Timer that only moves when advanced explicitly."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000
