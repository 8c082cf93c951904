"""Human-readable reports and multi-result summaries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from propengine.contracts.results import PropertyFailure, PropertyTestResult, PropertyTestSummary

_MAX_VALUE_REPR = 200


def _short_repr(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_VALUE_REPR:
        return text[: _MAX_VALUE_REPR - 3] + "..."
    return text


def _format_failure(failure: PropertyFailure) -> list[str]:
    label = "example" if failure.is_example else f"case #{failure.test_case}"
    lines = [
        f"  {label}: [{failure.error.code}] {failure.error.message}",
        f"    inputs:  {_short_repr(failure.inputs)}",
    ]
    if failure.shrunk:
        lines.append(f"    minimal: {_short_repr(failure.minimal_counterexample)}")
    return lines


def format_report(result: PropertyTestResult) -> str:
    """Render a multi-line report for one result.

    The report always includes the seed, so a failure seen in CI can be
    replayed locally with the reproduction hint on the last line.
    """
    stats = result.statistics
    status = "PASSED" if result.success else "FAILED"
    lines = [
        f"{result.test_name}: {status} ({result.total_tests}/{result.max_tests} cases, "
        f"{result.execution_time_ms:.1f}ms, seed={result.seed})",
        f"  passed={stats.passed} failed={stats.failed} skipped={stats.skipped} discarded={stats.discarded}",
    ]
    if stats.examples_run:
        lines.append(f"  examples: {stats.examples_run} run, {stats.examples_failed} failed")
    if stats.cache_lookups:
        lines.append(f"  cache: {stats.cache_hits}/{stats.cache_lookups} hits")
    if stats.shrink_attempts:
        lines.append(f"  shrinking: {stats.shrink_steps} steps in {stats.shrink_attempts} attempts")

    if result.failures:
        lines.append("Failures:")
        for failure in result.failures:
            lines.extend(_format_failure(failure))

    if result.invariant_violations:
        lines.append(f"Invariant violations ({len(result.invariant_violations)}):")
        for violation in result.invariant_violations:
            marker = " [critical]" if violation.critical else ""
            lines.append(
                f"  {violation.invariant_name} ({violation.category}){marker} "
                f"case #{violation.test_case}: {violation.message}"
            )

    if not result.success:
        lines.append(f"Reproduce: {result.reproduction()}")
    return "\n".join(lines)


def summarize(results: Iterable[PropertyTestResult]) -> PropertyTestSummary:
    """Aggregate several results.

    counterexamples maps each failed property to the simplest known failing
    inputs of its first failure (the shrunk tuple when shrinking succeeded).
    """
    collected = list(results)
    counterexamples: dict[str, tuple[Any, ...]] = {}
    for result in collected:
        failure = result.first_failure
        if failure is not None:
            counterexamples[result.test_name] = failure.counterexample

    failed = sum(1 for result in collected if not result.success)
    return PropertyTestSummary(
        total_properties=len(collected),
        passed_properties=len(collected) - failed,
        failed_properties=failed,
        total_cases=sum(result.total_tests for result in collected),
        total_execution_time_ms=sum(result.execution_time_ms for result in collected),
        counterexamples=counterexamples,
    )
