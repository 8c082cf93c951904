"""Fluent assembly of immutable property test configurations.

Usage:
    result = await (
        runner.property("quorum-bounds", "Quorum never exceeds board size")
        .with_generator("organization", organizations)
        .with_invariant(quorum_within_board)
        .with_example(Organization(board_size=5, quorum_requirement=3))
        .with_max_tests(150)
        .with_timeout(8000)
        .check(lambda org: org.board_size >= 3)
        .run()
    )

Both PropertyTestBuilder and PropertyTest are frozen: every with_* call
returns a NEW builder, so a partially configured builder can be shared and
specialized without aliasing. build() validates everything up front and
raises ConfigurationError for an incomplete or inconsistent test, instead of
deferring the problem to run().
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from propengine.contracts.errors import ConfigurationError
from propengine.contracts.protocols import GeneratorProtocol, InvariantProtocol
from propengine.core.config import EngineSettings

if TYPE_CHECKING:
    from propengine.contracts.results import PropertyTestResult
    from propengine.engine.runner import PropertyTestRunner

PropertyFn = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class PropertyTest:
    """Immutable, fully validated configuration for one property.

    The property function is called as ``property_fn(*inputs)`` with one
    positional argument per generator, in declaration order. Re-running the
    same PropertyTest is safe: runners keep all mutable state per run.
    """

    __test__ = False  # not a pytest test class

    name: str
    property_fn: PropertyFn
    description: str = ""
    generators: tuple[GeneratorProtocol[Any], ...] = ()
    generator_names: tuple[str, ...] = ()
    invariants: tuple[InvariantProtocol, ...] = ()
    examples: tuple[tuple[Any, ...], ...] = ()
    max_tests: int = 100
    max_shrinks: int = 100
    timeout_ms: int = 5000
    min_size: int = 1
    max_size: int = 200
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate invariants - an invalid PropertyTest can never exist."""
        if not callable(self.property_fn):
            raise ConfigurationError(
                f"Property test '{self.name}' has no property function. Call .check(fn) before build()/run().",
                field="property_fn",
            )
        if len(self.generator_names) != len(self.generators):
            raise ConfigurationError(
                f"Property test '{self.name}': {len(self.generators)} generators but {len(self.generator_names)} names.",
                field="generator_names",
            )
        if len(set(self.generator_names)) != len(self.generator_names):
            raise ConfigurationError(
                f"Property test '{self.name}': duplicate generator names {list(self.generator_names)}.",
                field="generator_names",
            )
        for gen_name, generator in zip(self.generator_names, self.generators, strict=True):
            if not isinstance(generator, GeneratorProtocol):
                raise ConfigurationError(
                    f"Generator '{gen_name}' ({type(generator).__name__}) does not implement generate/shrink/is_valid.",
                    field="generators",
                )
        for invariant in self.invariants:
            if not isinstance(invariant, InvariantProtocol):
                raise ConfigurationError(
                    f"{type(invariant).__name__} does not implement the invariant protocol "
                    "(name, description, category, critical, check).",
                    field="invariants",
                )
        for index, example in enumerate(self.examples):
            if len(example) != len(self.generators):
                raise ConfigurationError(
                    f"Example #{index} has {len(example)} value(s) but the test has {len(self.generators)} generator(s).",
                    field="examples",
                )
        self._validate_limits()

    def _validate_limits(self) -> None:
        if self.max_tests < 0:
            raise ConfigurationError(f"max_tests must be >= 0, got {self.max_tests}", field="max_tests")
        if self.max_shrinks < 0:
            raise ConfigurationError(f"max_shrinks must be >= 0, got {self.max_shrinks}", field="max_shrinks")
        if self.timeout_ms <= 0:
            raise ConfigurationError(f"timeout_ms must be > 0, got {self.timeout_ms}", field="timeout_ms")
        if not 0 <= self.min_size <= self.max_size:
            raise ConfigurationError(
                f"size range must satisfy 0 <= min_size <= max_size, got [{self.min_size}, {self.max_size}]",
                field="max_size",
            )


@dataclass(frozen=True, slots=True)
class PropertyTestBuilder:
    """Value builder for PropertyTest. Every method returns a new builder."""

    name: str
    description: str = ""
    generators: tuple[tuple[str, GeneratorProtocol[Any]], ...] = ()
    invariants: tuple[InvariantProtocol, ...] = ()
    examples: tuple[tuple[Any, ...], ...] = ()
    property_fn: PropertyFn | None = None
    max_tests: int = 100
    max_shrinks: int = 100
    timeout_ms: int = 5000
    min_size: int = 1
    max_size: int = 200
    seed: int | None = None
    runner: PropertyTestRunner | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_settings(
        cls,
        name: str,
        description: str = "",
        *,
        settings: EngineSettings,
        runner: PropertyTestRunner | None = None,
    ) -> PropertyTestBuilder:
        """Create a builder whose limits default to ``settings``."""
        return cls(
            name=name,
            description=description,
            max_tests=settings.max_tests,
            max_shrinks=settings.max_shrinks,
            timeout_ms=settings.timeout_ms,
            min_size=settings.min_size,
            max_size=settings.max_size,
            seed=settings.seed,
            runner=runner,
        )

    def with_generator(self, name: str, generator: GeneratorProtocol[Any]) -> PropertyTestBuilder:
        """Append a named generator; the property receives its value positionally."""
        return replace(self, generators=(*self.generators, (name, generator)))

    def with_invariant(self, invariant: InvariantProtocol) -> PropertyTestBuilder:
        return replace(self, invariants=(*self.invariants, invariant))

    def with_example(self, *values: Any) -> PropertyTestBuilder:
        """Add a literal input tuple, one value per generator, run before generation."""
        return replace(self, examples=(*self.examples, tuple(values)))

    def with_max_tests(self, max_tests: int) -> PropertyTestBuilder:
        return replace(self, max_tests=max_tests)

    def with_max_shrinks(self, max_shrinks: int) -> PropertyTestBuilder:
        return replace(self, max_shrinks=max_shrinks)

    def with_timeout(self, timeout_ms: int) -> PropertyTestBuilder:
        return replace(self, timeout_ms=timeout_ms)

    def with_size_range(self, min_size: int, max_size: int) -> PropertyTestBuilder:
        return replace(self, min_size=min_size, max_size=max_size)

    def with_seed(self, seed: int | None) -> PropertyTestBuilder:
        return replace(self, seed=seed)

    def check(self, property_fn: PropertyFn) -> PropertyTestBuilder:
        """Set the property function (sync or async)."""
        return replace(self, property_fn=property_fn)

    def build(self) -> PropertyTest:
        """Validate and freeze the configuration.

        Raises:
            ConfigurationError: If the property function is missing or any
                part of the configuration is inconsistent.
        """
        if self.property_fn is None:
            raise ConfigurationError(
                f"Property test '{self.name}' has no property function. Call .check(fn) before build()/run().",
                field="property_fn",
            )
        return PropertyTest(
            name=self.name,
            description=self.description,
            property_fn=self.property_fn,
            generators=tuple(generator for _, generator in self.generators),
            generator_names=tuple(name for name, _ in self.generators),
            invariants=self.invariants,
            examples=self.examples,
            max_tests=self.max_tests,
            max_shrinks=self.max_shrinks,
            timeout_ms=self.timeout_ms,
            min_size=self.min_size,
            max_size=self.max_size,
            seed=self.seed,
        )

    async def run(self) -> PropertyTestResult:
        """Build and run with the bound runner (or a default one)."""
        test = self.build()
        runner = self.runner
        if runner is None:
            from propengine.engine.runner import PropertyTestRunner

            runner = PropertyTestRunner()
        return await runner.run(test)

    def run_sync(self) -> PropertyTestResult:
        """Build and run to completion from synchronous code."""
        test = self.build()
        runner = self.runner
        if runner is None:
            from propengine.engine.runner import PropertyTestRunner

            runner = PropertyTestRunner()
        return runner.run_sync(test)
