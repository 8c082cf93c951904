"""Greedy shrinking of failing input tuples.

Algorithm:
    Scan tuple positions left to right. At each position ask that position's
    generator for shrink candidates of the current value and probe them in
    order. The first candidate that still fails replaces the value and the
    scan restarts from position 0, since a simpler value at one position can
    unlock further shrinks at earlier ones. The search ends when a full scan
    makes no progress or the probe budget (max_shrinks) is spent.

The result is locally minimal with respect to each generator's shrink()
function, not globally minimal.

A candidate "still fails" when it passes every precondition and fails with
the same ErrorCode as the original failure. Candidates that fail differently
(e.g. now time out) do not reproduce and are discarded.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from propengine.contracts.protocols import GeneratorProtocol
from propengine.contracts.results import EngineError, Outcome, ShrinkingResult
from propengine.core.logging import get_logger
from propengine.engine.execution import call_sync_safely

logger = get_logger(__name__)

Probe = Callable[[tuple[Any, ...]], Awaitable[Outcome | None]]


class Shrinker:
    """Shrinks one failing tuple per shrink() call.

    The probe evaluates a candidate tuple through the same path as the main
    loop (preconditions, property with timeout, critical invariants). It
    returns None when a precondition rejects the candidate, otherwise the
    case Outcome.
    """

    def __init__(
        self,
        generators: Sequence[GeneratorProtocol[Any]],
        probe: Probe,
        max_shrinks: int,
        *,
        generator_names: Sequence[str] | None = None,
    ) -> None:
        self._generators = tuple(generators)
        self._probe = probe
        self._max_shrinks = max_shrinks
        if generator_names is None:
            generator_names = [f"arg{i}" for i in range(len(self._generators))]
        self._names = tuple(generator_names)

    def _candidates(self, position: int, value: Any) -> list[Any]:
        generator = self._generators[position]
        outcome = call_sync_safely(generator.shrink, value, context=f"shrink '{self._names[position]}'")
        if not outcome.is_success or outcome.value is None:
            if outcome.error is not None:
                logger.warning(
                    "Generator shrink raised, treating value as minimal",
                    generator=self._names[position],
                    error=outcome.error.message,
                )
            return []
        return list(outcome.value)

    def _is_valid(self, position: int, candidate: Any) -> bool:
        generator = self._generators[position]
        return call_sync_safely(generator.is_valid, candidate, context=f"is_valid '{self._names[position]}'").holds

    async def shrink(self, inputs: tuple[Any, ...], error: EngineError, *, test_case: int) -> ShrinkingResult:
        """Search for a smaller tuple that fails with ``error.code``.

        Args:
            inputs: The original failing tuple, one value per generator
            error: The original failure
            test_case: Index of the failing case (for the result record)

        Returns:
            ShrinkingResult; shrunk_inputs == inputs when no step succeeded.
        """
        current = tuple(inputs)
        current_error = error
        attempts = 0
        steps = 0
        exhausted = False

        progress = True
        while progress and not exhausted:
            progress = False
            for position in range(len(current)):
                value = current[position]
                for candidate in self._candidates(position, value):
                    if attempts >= self._max_shrinks:
                        exhausted = True
                        break
                    if candidate == value or not self._is_valid(position, candidate):
                        continue
                    trial = current[:position] + (candidate,) + current[position + 1 :]
                    attempts += 1
                    outcome = await self._probe(trial)
                    if outcome is None or outcome.error is None or outcome.error.code != error.code:
                        continue
                    current = trial
                    current_error = outcome.error
                    steps += 1
                    progress = True
                    logger.debug("Shrink step accepted", test_case=test_case, position=self._names[position], steps=steps)
                    break
                if progress or exhausted:
                    break

        logger.info(
            "Shrinking complete",
            test_case=test_case,
            steps=steps,
            attempts=attempts,
            budget_exhausted=exhausted,
        )
        return ShrinkingResult(
            test_case=test_case,
            success=steps > 0,
            original_inputs=tuple(inputs),
            shrunk_inputs=current,
            steps=steps,
            attempts=attempts,
            budget_exhausted=exhausted,
            error=current_error,
        )
