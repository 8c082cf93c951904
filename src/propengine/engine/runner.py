"""PropertyTestRunner: orchestrates one property test run.

Run phases:
1. Example phase - each literal example is executed once (no generation,
   no preconditions). Failures are recorded with test_case = -1 and never
   shrunk. Example failures do not stop the generation phase.
2. Generation phase - up to max_tests cycles. Each cycle computes a size,
   generates one value per generator, gates on preconditions, consults the
   input cache, then executes the property and post-execution invariants.
   The first failure is shrunk and ends the phase (fail-fast).
3. Finalize - freeze statistics and assemble the PropertyTestResult.

All mutable state (RNG, cache, counters, abandoned timeout tasks) lives in a
_PropertyRun created per run() call, so one runner can execute the same
PropertyTest repeatedly, or several tests concurrently, without leakage.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from propengine.contracts.enums import POST_EXECUTION_CATEGORIES, ErrorCode
from propengine.contracts.results import (
    EXAMPLE_CASE,
    EngineError,
    InvariantViolation,
    Outcome,
    PropertyFailure,
    PropertyTestResult,
    ShrinkingResult,
)
from propengine.core.canonical import input_key
from propengine.core.config import EngineSettings
from propengine.core.logging import get_logger, run_context
from propengine.core.random import SeededRandom
from propengine.engine.builder import PropertyTest, PropertyTestBuilder
from propengine.engine.execution import PropertyExecutor, call_sync_safely
from propengine.engine.invariants import InvariantChecker
from propengine.engine.shrinker import Shrinker
from propengine.engine.statistics import StatisticsCollector

logger = get_logger(__name__)

_SEED_MODULUS = 2**32


def compute_size(test_case: int, max_tests: int, min_size: int, max_size: int) -> int:
    """Size hint for a generation cycle.

    Ramps linearly from min_size at case 0 to exactly max_size at the last
    case (max_tests - 1).
    """
    if max_tests <= 0:
        return min_size
    return min_size + ((max_size - min_size) * test_case) // max(max_tests - 1, 1)


@dataclass
class _CaseEvaluation:
    """Verdict for one input tuple. outcome is None when a precondition skipped it."""

    outcome: Outcome | None
    output: Any = None
    violations: list[InvariantViolation] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.outcome is None


@dataclass
class _GeneratedInputs:
    """Result of generating one tuple: inputs, a discard (None), or an error."""

    inputs: tuple[Any, ...] | None
    error: EngineError | None = None


class _PropertyRun:
    """Run-scoped state and phases for a single run() invocation."""

    def __init__(self, test: PropertyTest, seed: int, time_func: Callable[[], float] | None) -> None:
        self.test = test
        self.seed = seed
        self.rng = SeededRandom(seed)
        self.stats = StatisticsCollector()
        self.executor = PropertyExecutor(test.property_fn, test.timeout_ms, time_func=time_func)
        self.checker = InvariantChecker(test.invariants)
        self.shrinker = Shrinker(
            test.generators,
            self._probe,
            test.max_shrinks,
            generator_names=test.generator_names,
        )
        self.cache: dict[str, Any] = {}
        self.failures: list[PropertyFailure] = []
        self.violations: list[InvariantViolation] = []
        self.shrinking_results: list[ShrinkingResult] = []

    async def evaluate(
        self,
        inputs: tuple[Any, ...],
        test_case: int,
        *,
        check_preconditions: bool,
    ) -> _CaseEvaluation:
        """Evaluate one tuple: preconditions, property, then post-execution invariants.

        A critical post-execution violation turns an otherwise passing case
        into a BUSINESS_RULE_VIOLATION failure.
        """
        if check_preconditions and not await self.checker.preconditions_hold(inputs, test_case=test_case):
            return _CaseEvaluation(outcome=None)

        outcome = await self.executor.execute(inputs)
        if not outcome.is_success:
            return _CaseEvaluation(outcome=outcome)

        output = outcome.value
        violations = await self.checker.check(POST_EXECUTION_CATEGORIES, inputs, output, test_case=test_case)
        critical = [v.invariant_name for v in violations if v.critical]
        if critical:
            failed = Outcome.fail(
                ErrorCode.BUSINESS_RULE_VIOLATION,
                f"Critical invariant(s) violated: {', '.join(critical)}",
            )
            return _CaseEvaluation(outcome=failed, output=output, violations=violations)
        return _CaseEvaluation(outcome=outcome, output=output, violations=violations)

    async def _probe(self, inputs: tuple[Any, ...]) -> Outcome | None:
        evaluation = await self.evaluate(inputs, EXAMPLE_CASE, check_preconditions=True)
        return evaluation.outcome

    def _is_valid(self, name: str, generator: Any, value: Any) -> bool:
        return call_sync_safely(generator.is_valid, value, context=f"is_valid '{name}'").holds

    def generate_inputs(self, size: int) -> _GeneratedInputs:
        """Draw one value per generator, retrying once at reduced size if invalid."""
        values: list[Any] = []
        for name, generator in zip(self.test.generator_names, self.test.generators, strict=True):
            drawn = call_sync_safely(generator.generate, self.rng, size, context=f"generate '{name}'")
            if drawn.error is not None:
                return _GeneratedInputs(inputs=tuple(values), error=drawn.error)
            valid = self._is_valid(name, generator, drawn.value)
            self.stats.record_generated(valid=valid)

            if not valid:
                self.stats.retries += 1
                retry_size = max(self.test.min_size, size // 2)
                drawn = call_sync_safely(generator.generate, self.rng, retry_size, context=f"generate '{name}'")
                if drawn.error is not None:
                    return _GeneratedInputs(inputs=tuple(values), error=drawn.error)
                valid = self._is_valid(name, generator, drawn.value)
                self.stats.record_generated(valid=valid)
                if not valid:
                    logger.debug("Generated value invalid after retry, discarding case", generator=name, size=size)
                    return _GeneratedInputs(inputs=None)

            values.append(drawn.value)
        return _GeneratedInputs(inputs=tuple(values))

    async def run_examples(self) -> None:
        for example in self.test.examples:
            self.stats.examples_run += 1
            evaluation = await self.evaluate(example, EXAMPLE_CASE, check_preconditions=False)
            self.violations.extend(evaluation.violations)
            outcome = evaluation.outcome
            if outcome is not None and outcome.error is not None:
                self.stats.examples_failed += 1
                logger.warning("Example failed", code=outcome.error.code, message=outcome.error.message)
                self.failures.append(
                    PropertyFailure(
                        test_case=EXAMPLE_CASE,
                        inputs=example,
                        error=outcome.error,
                        output=evaluation.output,
                    )
                )

    async def run_generated(self) -> None:
        test = self.test
        for test_case in range(test.max_tests):
            size = compute_size(test_case, test.max_tests, test.min_size, test.max_size)
            self.stats.record_size(size)

            generated = self.generate_inputs(size)
            if generated.error is not None:
                self.stats.failed += 1
                logger.warning("Generator raised, stopping run", test_case=test_case, message=generated.error.message)
                self.failures.append(
                    PropertyFailure(test_case=test_case, inputs=generated.inputs or (), error=generated.error)
                )
                return
            if generated.inputs is None:
                self.stats.discarded += 1
                continue
            inputs = generated.inputs

            if not await self.checker.preconditions_hold(inputs, test_case=test_case):
                self.stats.skipped += 1
                continue

            key = input_key(inputs)
            if key in self.cache:
                self.stats.record_cache_lookup(hit=True)
                self.stats.passed += 1
                logger.debug("Input cache hit", test_case=test_case)
                continue
            self.stats.record_cache_lookup(hit=False)

            evaluation = await self.evaluate(inputs, test_case, check_preconditions=False)
            self.violations.extend(evaluation.violations)
            outcome = evaluation.outcome
            if outcome is not None and outcome.error is None:
                self.stats.passed += 1
                self.cache[key] = evaluation.output
                continue

            self.stats.failed += 1
            assert outcome is not None and outcome.error is not None
            logger.warning(
                "Falsifying example found",
                test_case=test_case,
                size=size,
                code=outcome.error.code,
                message=outcome.error.message,
            )
            await self._record_failure(test_case, inputs, outcome.error, evaluation.output)
            return

    async def _record_failure(self, test_case: int, inputs: tuple[Any, ...], error: EngineError, output: Any) -> None:
        failure = PropertyFailure(test_case=test_case, inputs=inputs, error=error, output=output)
        if self.test.max_shrinks > 0:
            shrink = await self.shrinker.shrink(inputs, error, test_case=test_case)
            self.shrinking_results.append(shrink)
            self.stats.shrink_attempts += shrink.attempts
            self.stats.shrink_steps += shrink.steps
            if shrink.success:
                failure = failure.with_minimal_counterexample(shrink.shrunk_inputs)
        self.failures.append(failure)

    async def execute(self) -> PropertyTestResult:
        started = time.perf_counter()
        logger.info("Property test started", max_tests=self.test.max_tests, examples=len(self.test.examples))

        await self.run_examples()
        await self.run_generated()

        if self.executor.abandoned_count:
            logger.warning("Timed-out property tasks still running", count=self.executor.abandoned_count)

        result = PropertyTestResult(
            test_name=self.test.name,
            success=not self.failures,
            total_tests=self.stats.executed,
            failures=tuple(self.failures),
            statistics=self.stats.snapshot(),
            shrinking_results=tuple(self.shrinking_results),
            invariant_violations=tuple(self.violations),
            execution_time_ms=(time.perf_counter() - started) * 1000,
            seed=self.seed,
            max_tests=self.test.max_tests,
        )
        logger.info(
            "Property test finished",
            success=result.success,
            total_tests=result.total_tests,
            failures=len(result.failures),
            execution_time_ms=round(result.execution_time_ms, 2),
        )
        return result


class PropertyTestRunner:
    """Entry point for running property tests.

    The runner itself is stateless apart from its settings, which provide
    default limits for builders created via property().
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        time_func: Callable[[], float] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Default limits and seed (default: EngineSettings()).
            time_func: Monotonic timer used for sync timeouts (default: time.perf_counter).
            clock: Wall clock used to derive a seed when none is configured (default: time.time).
        """
        self._settings = settings if settings is not None else EngineSettings()
        self._time_func = time_func
        self._clock = clock if clock is not None else time.time

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def property(self, name: str, description: str = "") -> PropertyTestBuilder:
        """Start a fluent builder bound to this runner."""
        return PropertyTestBuilder.from_settings(name, description, settings=self._settings, runner=self)

    def resolve_seed(self, test: PropertyTest) -> int:
        """The seed a run of ``test`` will use: explicit, else clock-derived."""
        if test.seed is not None:
            return test.seed
        return int(self._clock() * 1000) % _SEED_MODULUS

    async def run(self, test: PropertyTest) -> PropertyTestResult:
        """Run ``test`` once. Never raises for failures inside user callbacks."""
        seed = self.resolve_seed(test)
        with run_context(test.name, seed):
            return await _PropertyRun(test, seed, self._time_func).execute()

    def run_sync(self, test: PropertyTest) -> PropertyTestResult:
        """Run ``test`` from synchronous code (must not be called inside a running loop)."""
        return asyncio.run(self.run(test))
