"""Protocol definitions for test-data generators and invariants.

Callers supply domain-specific implementations of these protocols; the engine
only ever talks to them through the methods below. Both are runtime checkable
so the builder can reject objects that do not implement them.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from propengine.contracts.enums import InvariantCategory
    from propengine.core.random import SeededRandom

T = TypeVar("T")


@runtime_checkable
class GeneratorProtocol(Protocol[T]):
    """Protocol for producers of test data.

    Contract:
        - generate() MUST draw randomness only from ``rng``. The same RNG state
          and size always produce the same value.
        - shrink() returns zero or more simpler candidates. Each candidate
          should itself satisfy is_valid(); an empty list means the value is
          already minimal.
        - is_valid() is total and side-effect free.

    Exceptions raised by any of these methods are caught by the runner and
    reported as INTERNAL_ERROR failures (generate) or treated as "no
    candidates"/"invalid" (shrink/is_valid).
    """

    def generate(self, rng: "SeededRandom", size: int) -> T:
        """Produce a value whose magnitude/complexity is bounded by ``size``."""
        ...

    def shrink(self, value: T) -> Sequence[T]:
        """Return candidate simplifications of ``value``, simplest first."""
        ...

    def is_valid(self, value: T) -> bool:
        """Return True if ``value`` is an acceptable input."""
        ...


@runtime_checkable
class InvariantProtocol(Protocol):
    """Protocol for named, categorized correctness conditions.

    check() receives the input tuple and, for post-execution categories, the
    property output. It may return a bool, an Outcome, or an awaitable of
    either. Raising is equivalent to returning False.
    """

    @property
    def name(self) -> str:
        """Short identifier used in violation records."""
        ...

    @property
    def description(self) -> str:
        """Human-readable statement of the rule."""
        ...

    @property
    def category(self) -> "InvariantCategory":
        """When the invariant is evaluated."""
        ...

    @property
    def critical(self) -> bool:
        """Whether a violation fails the test case."""
        ...

    def check(self, inputs: tuple[Any, ...], output: Any = None) -> Any:
        """Evaluate the invariant."""
        ...
