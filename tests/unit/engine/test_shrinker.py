# tests/unit/engine/test_shrinker.py
"""Tests for the greedy Shrinker, driven by a synchronous fake probe."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from propengine.contracts import EngineError, ErrorCode, Outcome
from propengine.engine.shrinker import Shrinker
from propengine.generators import integers, lists
from tests.helpers.engine_fakes import ScaledIntGenerator

FALSIFIED = EngineError(ErrorCode.PROPERTY_FALSIFIED, "Property returned False")


def probe_for(fails: Callable[..., bool], code: ErrorCode = ErrorCode.PROPERTY_FALSIFIED):
    """Build a probe that reports ``code`` when ``fails(*inputs)`` is true."""
    calls: list[tuple[Any, ...]] = []

    async def probe(inputs: tuple[Any, ...]) -> Outcome | None:
        calls.append(inputs)
        if fails(*inputs):
            return Outcome.fail(code, "failed")
        return Outcome.ok(True)

    probe.calls = calls  # type: ignore[attr-defined]
    return probe


class TestGreedySearch:
    @pytest.mark.asyncio
    async def test_halving_stops_at_local_minimum(self) -> None:
        """x < 1000 falsified at 2500: halving toward 0 stops at the first value whose candidates all pass."""
        shrinker = Shrinker([ScaledIntGenerator()], probe_for(lambda x: x >= 1000), max_shrinks=100)
        result = await shrinker.shrink((2500,), FALSIFIED, test_case=4)

        assert result.success
        assert result.original_inputs == (2500,)
        assert result.shrunk_inputs == (1250,)
        [shrunk] = result.shrunk_inputs
        assert shrunk >= 1000
        # Locally minimal: neither candidate of the final value still fails
        assert all(candidate < 1000 for candidate in ScaledIntGenerator().shrink(shrunk))

    @pytest.mark.asyncio
    async def test_integers_generator_finds_exact_boundary(self) -> None:
        shrinker = Shrinker([integers(0)], probe_for(lambda x: x >= 1000), max_shrinks=500)
        result = await shrinker.shrink((5000,), FALSIFIED, test_case=0)
        assert result.shrunk_inputs == (1000,)
        assert not result.budget_exhausted

    @pytest.mark.asyncio
    async def test_left_to_right_then_restart(self) -> None:
        shrinker = Shrinker([integers(0), integers(0)], probe_for(lambda a, b: a + b >= 10), max_shrinks=500)
        result = await shrinker.shrink((40, 40), FALSIFIED, test_case=0)
        a, b = result.shrunk_inputs
        assert a + b == 10
        assert a == 0  # the first position is shrunk as far as it goes first

    @pytest.mark.asyncio
    async def test_no_progress_when_already_minimal(self) -> None:
        shrinker = Shrinker([integers(0)], probe_for(lambda x: True), max_shrinks=10)
        result = await shrinker.shrink((0,), FALSIFIED, test_case=0)
        assert not result.success
        assert result.steps == 0
        assert result.attempts == 0
        assert result.shrunk_inputs == (0,)

    @pytest.mark.asyncio
    async def test_list_shrinks_to_single_offending_element(self) -> None:
        shrinker = Shrinker(
            [lists(integers(0, 100))],
            probe_for(lambda xs: any(x >= 50 for x in xs)),
            max_shrinks=1000,
        )
        result = await shrinker.shrink(([3, 99, 7, 12],), FALSIFIED, test_case=0)
        assert result.shrunk_inputs == ([50],)


class TestReproductionCriterion:
    @pytest.mark.asyncio
    async def test_different_error_code_does_not_reproduce(self) -> None:
        """Candidates that now time out instead of being falsified are rejected."""

        async def probe(inputs: tuple[Any, ...]) -> Outcome | None:
            if inputs[0] < 500:
                return Outcome.fail(ErrorCode.TIMEOUT, "slow")
            return Outcome.fail(ErrorCode.PROPERTY_FALSIFIED, "no")

        shrinker = Shrinker([integers(0)], probe, max_shrinks=200)
        result = await shrinker.shrink((900,), FALSIFIED, test_case=0)
        assert result.shrunk_inputs == (500,)
        assert result.error.code == ErrorCode.PROPERTY_FALSIFIED

    @pytest.mark.asyncio
    async def test_precondition_rejection_does_not_reproduce(self) -> None:
        async def probe(inputs: tuple[Any, ...]) -> Outcome | None:
            if inputs[0] % 2:
                return None  # precondition: only even values
            return Outcome.fail(ErrorCode.PROPERTY_FALSIFIED, "no") if inputs[0] >= 10 else Outcome.ok()

        shrinker = Shrinker([integers(0)], probe, max_shrinks=200)
        result = await shrinker.shrink((64,), FALSIFIED, test_case=0)
        [value] = result.shrunk_inputs
        assert value % 2 == 0
        assert value >= 10

    @pytest.mark.asyncio
    async def test_invalid_candidates_skipped_without_probing(self) -> None:
        class PickyGenerator(ScaledIntGenerator):
            def shrink(self, value: int) -> Sequence[int]:
                return [-1, value - 1] if value > 0 else []

        probe = probe_for(lambda x: x >= 3)
        shrinker = Shrinker([PickyGenerator()], probe, max_shrinks=100)
        result = await shrinker.shrink((5,), FALSIFIED, test_case=0)
        assert result.shrunk_inputs == (3,)
        assert all(inputs[0] >= 0 for inputs in probe.calls)

    @pytest.mark.asyncio
    async def test_candidate_equal_to_current_skipped(self) -> None:
        class StuckGenerator(ScaledIntGenerator):
            def shrink(self, value: int) -> Sequence[int]:
                return [value]

        probe = probe_for(lambda x: True)
        result = await Shrinker([StuckGenerator()], probe, max_shrinks=10).shrink((7,), FALSIFIED, test_case=0)
        assert result.attempts == 0
        assert probe.calls == []

    @pytest.mark.asyncio
    async def test_raising_shrink_treated_as_minimal(self) -> None:
        class BrokenShrink(ScaledIntGenerator):
            def shrink(self, value: int) -> Sequence[int]:
                raise RuntimeError("no shrinking today")

        result = await Shrinker([BrokenShrink()], probe_for(lambda x: True), max_shrinks=10).shrink(
            (7,), FALSIFIED, test_case=0
        )
        assert not result.success
        assert result.shrunk_inputs == (7,)


class TestBudget:
    @pytest.mark.asyncio
    async def test_attempts_never_exceed_budget(self) -> None:
        probe = probe_for(lambda x: x >= 1)
        shrinker = Shrinker([integers(0)], probe, max_shrinks=3)
        result = await shrinker.shrink((10**9,), FALSIFIED, test_case=0)
        assert result.attempts == 3
        assert len(probe.calls) == 3
        assert result.budget_exhausted

    @pytest.mark.asyncio
    async def test_zero_budget_probes_nothing(self) -> None:
        probe = probe_for(lambda x: True)
        result = await Shrinker([integers(0)], probe, max_shrinks=0).shrink((10,), FALSIFIED, test_case=0)
        assert result.attempts == 0
        assert result.shrunk_inputs == (10,)
        assert probe.calls == []
