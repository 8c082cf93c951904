"""Run-scoped statistics collection.

A StatisticsCollector lives for exactly one run() call. It only ever
increments, so any snapshot taken mid-run is a lower bound of the final one.
"""

from __future__ import annotations

from collections import Counter

from propengine.contracts.results import GenerationStats, TestStatistics


class StatisticsCollector:
    """Mutable counters behind an immutable TestStatistics snapshot."""

    def __init__(self) -> None:
        self.passed = 0
        self.failed = 0
        self.skipped = 0
        self.discarded = 0
        self.examples_run = 0
        self.examples_failed = 0
        self.cache_hits = 0
        self.cache_lookups = 0
        self.shrink_attempts = 0
        self.shrink_steps = 0
        self.total_generated = 0
        self.valid_accepted = 0
        self.rejected = 0
        self.retries = 0
        self._sizes: Counter[int] = Counter()

    @property
    def executed(self) -> int:
        """Generated cases that produced a verdict (pass or fail)."""
        return self.passed + self.failed

    def record_size(self, size: int) -> None:
        self._sizes[size] += 1

    def record_generated(self, *, valid: bool) -> None:
        self.total_generated += 1
        if valid:
            self.valid_accepted += 1
        else:
            self.rejected += 1

    def record_cache_lookup(self, *, hit: bool) -> None:
        self.cache_lookups += 1
        if hit:
            self.cache_hits += 1

    def snapshot(self) -> TestStatistics:
        return TestStatistics(
            passed=self.passed,
            failed=self.failed,
            skipped=self.skipped,
            discarded=self.discarded,
            examples_run=self.examples_run,
            examples_failed=self.examples_failed,
            cache_hits=self.cache_hits,
            cache_lookups=self.cache_lookups,
            shrink_attempts=self.shrink_attempts,
            shrink_steps=self.shrink_steps,
            generation=GenerationStats(
                total_generated=self.total_generated,
                valid_accepted=self.valid_accepted,
                rejected=self.rejected,
                retries=self.retries,
                size_distribution=dict(self._sizes),
            ),
        )
