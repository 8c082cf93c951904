"""Operation outcomes and run results.

These types answer: "What did a property run produce?"

IMPORTANT:
- Outcome.status uses Literal["success", "error"], NOT an enum
- Every record here is frozen; a PropertyTestResult is built once per run()
- PropertyFailure.inputs always holds the ORIGINAL failing inputs; shrinking
  adds minimal_counterexample alongside, it never overwrites inputs
- to_dict() output is JSON-serializable (counterexample values are
  normalized, falling back to repr() for opaque objects)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from propengine.contracts.enums import ErrorCode, InvariantCategory
from propengine.core.canonical import to_serializable

# Sentinel test_case index for literal examples supplied via with_example()
EXAMPLE_CASE = -1


@dataclass(frozen=True, slots=True)
class EngineError:
    """Type-safe error details carried by a failed Outcome.

    Fields:
        code: Classification of the failure
        message: Human-readable error message
        exception_type: The exception class name, when an exception was caught
    """

    code: ErrorCode
    message: str
    exception_type: str | None = None

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        context: str | None = None,
    ) -> EngineError:
        """Create an EngineError from a caught exception.

        Args:
            exc: The caught exception
            code: Classification (INTERNAL_ERROR unless the caller knows better)
            context: Optional prefix naming the callback that raised
        """
        detail = str(exc) or type(exc).__name__
        message = f"{context}: {detail}" if context else detail
        return cls(code=code, message=message, exception_type=type(exc).__name__)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "exception_type": self.exception_type,
        }


@dataclass(frozen=True, slots=True)
class Outcome:
    """Success/failure value returned by every fallible engine operation.

    Use the factory methods to create instances.

    A property or invariant callback may return an Outcome directly. The
    engine treats ``Outcome.ok(False)`` as a falsified verdict and any other
    success value as a pass whose value is the property output.
    """

    status: Literal["success", "error"]
    value: Any = None
    error: EngineError | None = None

    def __post_init__(self) -> None:
        """Validate invariants - error outcomes MUST carry an error, success outcomes MUST NOT."""
        if self.status == "error" and self.error is None:
            raise ValueError("Outcome with status='error' MUST provide an EngineError.")
        if self.status == "success" and self.error is not None:
            raise ValueError("Outcome with status='success' MUST NOT carry an error.")

    @classmethod
    def ok(cls, value: Any = True) -> Outcome:
        return cls(status="success", value=value)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        *,
        exception_type: str | None = None,
    ) -> Outcome:
        return cls(
            status="error",
            error=EngineError(code=code, message=message, exception_type=exception_type),
        )

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        context: str | None = None,
    ) -> Outcome:
        return cls(status="error", error=EngineError.from_exception(exc, code=code, context=context))

    @property
    def is_success(self) -> bool:
        """True if this outcome is a success (regardless of its value)."""
        return self.status == "success"

    @property
    def holds(self) -> bool:
        """True if this outcome is a success whose value is not False."""
        return self.status == "success" and self.value is not False


@dataclass(frozen=True, slots=True)
class PropertyFailure:
    """A single failing test case.

    Fields:
        test_case: Generation index, or EXAMPLE_CASE (-1) for literal examples
        inputs: The original failing input tuple (never altered by shrinking)
        error: Why the case failed
        output: Property output, when the property itself succeeded
        shrunk: True if shrinking produced a smaller failing tuple
        minimal_counterexample: The shrunk tuple, when shrunk is True
    """

    test_case: int
    inputs: tuple[Any, ...]
    error: EngineError
    output: Any = None
    shrunk: bool = False
    minimal_counterexample: tuple[Any, ...] | None = None

    @property
    def is_example(self) -> bool:
        return self.test_case == EXAMPLE_CASE

    @property
    def counterexample(self) -> tuple[Any, ...]:
        """The simplest known failing inputs for this case."""
        if self.minimal_counterexample is not None:
            return self.minimal_counterexample
        return self.inputs

    def with_minimal_counterexample(self, minimal: tuple[Any, ...]) -> PropertyFailure:
        """Return a copy that records ``minimal`` alongside the original inputs."""
        return replace(self, shrunk=True, minimal_counterexample=minimal)

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_case": self.test_case,
            "inputs": to_serializable(self.inputs),
            "output": to_serializable(self.output),
            "error": self.error.to_dict(),
            "shrunk": self.shrunk,
            "minimal_counterexample": (
                to_serializable(self.minimal_counterexample) if self.minimal_counterexample is not None else None
            ),
        }


@dataclass(frozen=True, slots=True)
class InvariantViolation:
    """Record of an invariant whose check failed (returned False or raised)."""

    invariant_name: str
    category: InvariantCategory
    critical: bool
    test_case: int
    inputs: tuple[Any, ...]
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "invariant_name": self.invariant_name,
            "category": self.category.value,
            "critical": self.critical,
            "test_case": self.test_case,
            "inputs": to_serializable(self.inputs),
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class ShrinkingResult:
    """Outcome of one shrinking pass over a failing input tuple.

    Fields:
        test_case: Index of the failure this pass shrank
        success: True if at least one shrink step was accepted
        original_inputs: The failing tuple shrinking started from
        shrunk_inputs: The smallest failing tuple found (== original if no progress)
        steps: Number of accepted shrink steps
        attempts: Number of probe executions (always <= max_shrinks)
        budget_exhausted: True if the search stopped because attempts hit max_shrinks
        error: The error observed for shrunk_inputs
    """

    test_case: int
    success: bool
    original_inputs: tuple[Any, ...]
    shrunk_inputs: tuple[Any, ...]
    steps: int
    attempts: int
    budget_exhausted: bool
    error: EngineError

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_case": self.test_case,
            "success": self.success,
            "original_inputs": to_serializable(self.original_inputs),
            "shrunk_inputs": to_serializable(self.shrunk_inputs),
            "steps": self.steps,
            "attempts": self.attempts,
            "budget_exhausted": self.budget_exhausted,
            "error": self.error.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class GenerationStats:
    """Counters describing value generation across a run."""

    total_generated: int = 0
    valid_accepted: int = 0
    rejected: int = 0
    retries: int = 0
    size_distribution: dict[int, int] = field(default_factory=dict)

    @property
    def rejection_rate(self) -> float:
        if self.total_generated == 0:
            return 0.0
        return self.rejected / self.total_generated

    @property
    def average_size(self) -> float:
        cases = sum(self.size_distribution.values())
        if cases == 0:
            return 0.0
        return sum(size * count for size, count in self.size_distribution.items()) / cases

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_generated": self.total_generated,
            "valid_accepted": self.valid_accepted,
            "rejected": self.rejected,
            "retries": self.retries,
            "rejection_rate": self.rejection_rate,
            # JSON object keys must be strings
            "size_distribution": {str(size): count for size, count in sorted(self.size_distribution.items())},
            "average_size": self.average_size,
        }


@dataclass(frozen=True, slots=True)
class TestStatistics:
    """Aggregate counters for one run. All counts are non-negative."""

    __test__ = False  # not a pytest test class

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    discarded: int = 0
    examples_run: int = 0
    examples_failed: int = 0
    cache_hits: int = 0
    cache_lookups: int = 0
    shrink_attempts: int = 0
    shrink_steps: int = 0
    generation: GenerationStats = field(default_factory=GenerationStats)

    @property
    def cache_hit_rate(self) -> float:
        if self.cache_lookups == 0:
            return 0.0
        return self.cache_hits / self.cache_lookups

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "discarded": self.discarded,
            "examples_run": self.examples_run,
            "examples_failed": self.examples_failed,
            "cache_hits": self.cache_hits,
            "cache_lookups": self.cache_lookups,
            "cache_hit_rate": self.cache_hit_rate,
            "shrink_attempts": self.shrink_attempts,
            "shrink_steps": self.shrink_steps,
            "generation": self.generation.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class PropertyTestResult:
    """Result of one PropertyTestRunner.run() invocation.

    Created once at the end of a run and never mutated. ``success`` is True
    iff ``failures`` is empty; non-critical invariant violations do not
    affect it.
    """

    __test__ = False  # not a pytest test class

    test_name: str
    success: bool
    total_tests: int
    failures: tuple[PropertyFailure, ...]
    statistics: TestStatistics
    shrinking_results: tuple[ShrinkingResult, ...]
    invariant_violations: tuple[InvariantViolation, ...]
    execution_time_ms: float
    seed: int
    max_tests: int

    def __post_init__(self) -> None:
        if self.success == bool(self.failures):
            raise ValueError(
                f"PropertyTestResult.success={self.success} contradicts {len(self.failures)} recorded failure(s)."
            )
        if not 0 <= self.total_tests <= self.max_tests:
            raise ValueError(f"total_tests ({self.total_tests}) must be within [0, max_tests={self.max_tests}].")

    @property
    def first_failure(self) -> PropertyFailure | None:
        return self.failures[0] if self.failures else None

    def reproduction(self) -> str:
        """One-line hint for replaying this exact run."""
        return f"{self.test_name}: replay with .with_seed({self.seed}).with_max_tests({self.max_tests})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_name": self.test_name,
            "success": self.success,
            "total_tests": self.total_tests,
            "seed": self.seed,
            "max_tests": self.max_tests,
            "execution_time_ms": self.execution_time_ms,
            "failures": [f.to_dict() for f in self.failures],
            "statistics": self.statistics.to_dict(),
            "shrinking_results": [s.to_dict() for s in self.shrinking_results],
            "invariant_violations": [v.to_dict() for v in self.invariant_violations],
        }


@dataclass(frozen=True, slots=True)
class PropertyTestSummary:
    """Aggregate over several PropertyTestResults (see engine.reporting.summarize)."""

    total_properties: int
    passed_properties: int
    failed_properties: int
    total_cases: int
    total_execution_time_ms: float
    counterexamples: dict[str, tuple[Any, ...]]

    @property
    def success(self) -> bool:
        return self.failed_properties == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_properties": self.total_properties,
            "passed_properties": self.passed_properties,
            "failed_properties": self.failed_properties,
            "total_cases": self.total_cases,
            "total_execution_time_ms": self.total_execution_time_ms,
            "counterexamples": {name: to_serializable(value) for name, value in self.counterexamples.items()},
        }
