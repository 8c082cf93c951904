"""Generator base classes and adapters.

Generator is an optional convenience base: the engine accepts any object
satisfying GeneratorProtocol. Subclasses implement generate() and inherit a
"no candidates" shrink(), an always-true is_valid(), and map().
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from propengine.core.random import SeededRandom

T = TypeVar("T")
U = TypeVar("U")


class Generator(Generic[T]):
    """Base class for value generators."""

    def generate(self, rng: SeededRandom, size: int) -> T:
        raise NotImplementedError

    def shrink(self, value: T) -> Sequence[T]:
        return []

    def is_valid(self, value: T) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> MappedGenerator[T, U]:
        """Transform every generated value with ``fn``."""
        return MappedGenerator(self, fn)


class FunctionGenerator(Generator[T]):
    """Adapt plain callables to the generator protocol.

    Example:
        evens = FunctionGenerator(
            lambda rng, size: 2 * rng.integer(0, size),
            shrink=lambda v: [0, v // 2] if v else [],
            is_valid=lambda v: v % 2 == 0,
        )
    """

    def __init__(
        self,
        generate: Callable[[SeededRandom, int], T],
        shrink: Callable[[T], Sequence[T]] | None = None,
        is_valid: Callable[[T], bool] | None = None,
    ) -> None:
        self._generate = generate
        self._shrink = shrink
        self._is_valid = is_valid

    def generate(self, rng: SeededRandom, size: int) -> T:
        return self._generate(rng, size)

    def shrink(self, value: T) -> Sequence[T]:
        if self._shrink is None:
            return []
        return self._shrink(value)

    def is_valid(self, value: T) -> bool:
        if self._is_valid is None:
            return True
        return bool(self._is_valid(value))


class MappedGenerator(Generator[U], Generic[T, U]):
    """Generator whose values are ``fn(source value)``.

    Mapped values cannot be shrunk because fn has no inverse. Validity is
    checked with the optional ``is_valid`` predicate only.
    """

    def __init__(
        self,
        source: Generator[T],
        fn: Callable[[T], U],
        is_valid: Callable[[U], bool] | None = None,
    ) -> None:
        self._source = source
        self._fn = fn
        self._is_valid = is_valid

    def generate(self, rng: SeededRandom, size: int) -> U:
        return self._fn(self._source.generate(rng, size))

    def is_valid(self, value: Any) -> bool:
        if self._is_valid is None:
            return True
        return bool(self._is_valid(value))
