"""Built-in generators for primitive and container values.

All generators draw randomness only from the SeededRandom passed to
generate(), so a seed fully determines every value. Unbounded ranges scale
with the size hint, so early test cases are small and later ones larger.

Shrink candidates are ordered simplest first.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from propengine.core.random import DEFAULT_CHARSET
from propengine.generators.base import Generator

if TYPE_CHECKING:
    from propengine.core.random import SeededRandom

T = TypeVar("T")


def _halving_candidates(value: int, target: int) -> list[int]:
    """target, then values approaching ``value`` by halving the remaining distance."""
    if value == target:
        return []
    candidates = [target]
    distance = value - target
    sign = 1 if distance > 0 else -1
    delta = abs(distance) // 2
    while delta > 0:
        candidate = value - sign * delta
        if candidate != candidates[-1]:
            candidates.append(candidate)
        delta //= 2
    return candidates


class IntegerGenerator(Generator[int]):
    """Integers in [min_value, max_value].

    With max_value omitted the upper bound is ``min_value + size``. Shrinking
    moves toward zero when zero is in range, otherwise toward the nearest
    bound.
    """

    def __init__(self, min_value: int = 0, max_value: int | None = None) -> None:
        if max_value is not None and max_value < min_value:
            raise ValueError(f"integers() requires min_value <= max_value, got {min_value} > {max_value}")
        self.min_value = min_value
        self.max_value = max_value

    def _upper(self, size: int) -> int:
        if self.max_value is not None:
            return self.max_value
        return self.min_value + max(size, 0)

    def _target(self) -> int:
        if self.min_value >= 0:
            return self.min_value
        if self.max_value is not None and self.max_value < 0:
            return self.max_value
        return 0

    def generate(self, rng: SeededRandom, size: int) -> int:
        return rng.integer(self.min_value, self._upper(size))

    def shrink(self, value: int) -> Sequence[int]:
        return _halving_candidates(value, self._target())

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        if value < self.min_value:
            return False
        return self.max_value is None or value <= self.max_value


class FloatGenerator(Generator[float]):
    """Finite floats in [min_value, max_value)."""

    def __init__(self, min_value: float = 0.0, max_value: float | None = None) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def generate(self, rng: SeededRandom, size: int) -> float:
        upper = self.max_value if self.max_value is not None else self.min_value + max(size, 0)
        return rng.float(self.min_value, upper)

    def shrink(self, value: float) -> Sequence[float]:
        target = self.min_value if self.min_value > 0 else 0.0
        if value == target:
            return []
        candidates = [target, float(math.trunc(value)), target + (value - target) / 2]
        seen: list[float] = []
        for candidate in candidates:
            if candidate != value and candidate not in seen and self.is_valid(candidate):
                seen.append(candidate)
        return seen

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, float) or not math.isfinite(value):
            return False
        if value < self.min_value:
            return False
        return self.max_value is None or value <= self.max_value


class BooleanGenerator(Generator[bool]):
    def generate(self, rng: SeededRandom, size: int) -> bool:
        return rng.boolean()

    def shrink(self, value: bool) -> Sequence[bool]:
        return [False] if value else []

    def is_valid(self, value: Any) -> bool:
        return isinstance(value, bool)


class TextGenerator(Generator[str]):
    """Strings over ``alphabet`` with length in [min_length, max_length]."""

    def __init__(self, alphabet: str = DEFAULT_CHARSET, min_length: int = 0, max_length: int | None = None) -> None:
        if not alphabet:
            raise ValueError("text() requires a non-empty alphabet")
        self.alphabet = alphabet
        self.min_length = min_length
        self.max_length = max_length

    def generate(self, rng: SeededRandom, size: int) -> str:
        upper = self.max_length if self.max_length is not None else max(self.min_length, size)
        return rng.string(rng.integer(self.min_length, upper), self.alphabet)

    def shrink(self, value: str) -> Sequence[str]:
        candidates = [
            value[: self.min_length],
            value[: len(value) // 2],
            value[1:],
            value[:-1],
        ]
        simplest = self.alphabet[0]
        for index, char in enumerate(value):
            if char != simplest:
                candidates.append(value[:index] + simplest + value[index + 1 :])
        unique: list[str] = []
        for candidate in candidates:
            if candidate != value and candidate not in unique and len(candidate) >= self.min_length:
                unique.append(candidate)
        return unique

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str) or len(value) < self.min_length:
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        return all(char in self.alphabet for char in value)


class ListGenerator(Generator[list[T]]):
    """Lists of ``element`` values with length in [min_length, max_length]."""

    def __init__(self, element: Generator[T], min_length: int = 0, max_length: int | None = None) -> None:
        self.element = element
        self.min_length = min_length
        self.max_length = max_length

    def generate(self, rng: SeededRandom, size: int) -> list[T]:
        upper = self.max_length if self.max_length is not None else max(self.min_length, size)
        length = rng.integer(self.min_length, upper)
        return [self.element.generate(rng, size) for _ in range(length)]

    def shrink(self, value: list[T]) -> Sequence[list[T]]:
        candidates: list[list[T]] = []
        half = len(value) // 2
        if half:
            candidates.extend([value[:half], value[half:]])
        for index in range(len(value)):
            candidates.append(value[:index] + value[index + 1 :])
        candidates = [c for c in candidates if len(c) >= self.min_length]

        # Element-wise shrinks keep the length
        for index, item in enumerate(value):
            for smaller in self.element.shrink(item):
                candidates.append(value[:index] + [smaller] + value[index + 1 :])
        return candidates

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, list) or len(value) < self.min_length:
            return False
        if self.max_length is not None and len(value) > self.max_length:
            return False
        return all(self.element.is_valid(item) for item in value)


class SampledFromGenerator(Generator[T]):
    """Values chosen from a fixed sequence; shrinks toward earlier entries."""

    def __init__(self, values: Sequence[T]) -> None:
        if not values:
            raise ValueError("sampled_from() requires at least one value")
        self.values = tuple(values)

    def generate(self, rng: SeededRandom, size: int) -> T:
        return rng.element(self.values)

    def shrink(self, value: T) -> Sequence[T]:
        for index, candidate in enumerate(self.values):
            if candidate == value:
                return list(self.values[:index])
        return []

    def is_valid(self, value: Any) -> bool:
        return value in self.values


class OneOfGenerator(Generator[Any]):
    """Delegates each draw to one of several generators, chosen uniformly."""

    def __init__(self, *generators: Generator[Any]) -> None:
        if not generators:
            raise ValueError("one_of() requires at least one generator")
        self.generators = generators

    def generate(self, rng: SeededRandom, size: int) -> Any:
        return rng.element(self.generators).generate(rng, size)

    def shrink(self, value: Any) -> Sequence[Any]:
        for generator in self.generators:
            if generator.is_valid(value):
                return generator.shrink(value)
        return []

    def is_valid(self, value: Any) -> bool:
        return any(generator.is_valid(value) for generator in self.generators)


class ConstantGenerator(Generator[T]):
    def __init__(self, value: T) -> None:
        self.value = value

    def generate(self, rng: SeededRandom, size: int) -> T:
        return self.value

    def is_valid(self, value: Any) -> bool:
        return bool(value == self.value)


class TupleGenerator(Generator[tuple[Any, ...]]):
    """Fixed-length tuples, one position per generator."""

    def __init__(self, *generators: Generator[Any]) -> None:
        self.generators = generators

    def generate(self, rng: SeededRandom, size: int) -> tuple[Any, ...]:
        return tuple(generator.generate(rng, size) for generator in self.generators)

    def shrink(self, value: tuple[Any, ...]) -> Sequence[tuple[Any, ...]]:
        candidates: list[tuple[Any, ...]] = []
        for index, (generator, item) in enumerate(zip(self.generators, value, strict=True)):
            for smaller in generator.shrink(item):
                candidates.append(value[:index] + (smaller,) + value[index + 1 :])
        return candidates

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, tuple) or len(value) != len(self.generators):
            return False
        return all(generator.is_valid(item) for generator, item in zip(self.generators, value, strict=True))


def integers(min_value: int = 0, max_value: int | None = None) -> IntegerGenerator:
    return IntegerGenerator(min_value, max_value)


def floats(min_value: float = 0.0, max_value: float | None = None) -> FloatGenerator:
    return FloatGenerator(min_value, max_value)


def booleans() -> BooleanGenerator:
    return BooleanGenerator()


def text(alphabet: str = DEFAULT_CHARSET, *, min_length: int = 0, max_length: int | None = None) -> TextGenerator:
    return TextGenerator(alphabet, min_length, max_length)


def lists(element: Generator[T], *, min_length: int = 0, max_length: int | None = None) -> ListGenerator[T]:
    return ListGenerator(element, min_length, max_length)


def sampled_from(values: Sequence[T]) -> SampledFromGenerator[T]:
    return SampledFromGenerator(values)


def one_of(*generators: Generator[Any]) -> OneOfGenerator:
    return OneOfGenerator(*generators)


def constant(value: T) -> ConstantGenerator[T]:
    return ConstantGenerator(value)


def tuples(*generators: Generator[Any]) -> TupleGenerator:
    return TupleGenerator(*generators)
