"""Invariants: named, categorized predicates checked alongside the property.

An invariant holds or is violated independently of the property's own
verdict. A check that raises or returns an error Outcome is treated exactly
like one that returns False: it is a violation, never a crash of the run.

Usage:
    quorum = Invariant.business_rule(
        "quorum-within-board",
        lambda inputs, output: inputs[0].quorum_requirement <= inputs[0].board_size,
        critical=True,
    )
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any

from propengine.contracts.enums import InvariantCategory
from propengine.contracts.protocols import InvariantProtocol
from propengine.contracts.results import InvariantViolation
from propengine.core.logging import get_logger
from propengine.engine.execution import call_safely

logger = get_logger(__name__)

CheckFn = Callable[[tuple[Any, ...], Any], Any]


@dataclass(frozen=True, slots=True)
class Invariant:
    """Concrete InvariantProtocol implementation backed by a function.

    check_fn receives ``(inputs, output)``; output is None for preconditions.
    It may be sync or async and may return a bool or an Outcome.
    """

    name: str
    check_fn: CheckFn
    category: InvariantCategory = InvariantCategory.BUSINESS_RULE
    critical: bool = False
    description: str = ""

    def check(self, inputs: tuple[Any, ...], output: Any = None) -> Any:
        return self.check_fn(inputs, output)

    @classmethod
    def precondition(cls, name: str, check_fn: CheckFn, *, description: str = "") -> Invariant:
        """A gate for generated cases; violations skip the case silently."""
        return cls(name, check_fn, InvariantCategory.PRECONDITION, False, description)

    @classmethod
    def postcondition(cls, name: str, check_fn: CheckFn, *, critical: bool = False, description: str = "") -> Invariant:
        return cls(name, check_fn, InvariantCategory.POSTCONDITION, critical, description)

    @classmethod
    def business_rule(cls, name: str, check_fn: CheckFn, *, critical: bool = False, description: str = "") -> Invariant:
        return cls(name, check_fn, InvariantCategory.BUSINESS_RULE, critical, description)

    @classmethod
    def data_integrity(cls, name: str, check_fn: CheckFn, *, critical: bool = False, description: str = "") -> Invariant:
        return cls(name, check_fn, InvariantCategory.DATA_INTEGRITY, critical, description)


class InvariantChecker:
    """Evaluates a fixed list of invariants, filtered by category.

    Invariants are awaited one at a time in declaration order, never
    concurrently.
    """

    def __init__(self, invariants: Sequence[InvariantProtocol]) -> None:
        self._invariants = tuple(invariants)

    def select(self, categories: Collection[InvariantCategory]) -> tuple[InvariantProtocol, ...]:
        return tuple(inv for inv in self._invariants if inv.category in categories)

    async def check(
        self,
        categories: Collection[InvariantCategory],
        inputs: tuple[Any, ...],
        output: Any,
        *,
        test_case: int,
    ) -> list[InvariantViolation]:
        """Evaluate every invariant in ``categories`` and collect violations.

        Returns:
            One InvariantViolation per invariant that did not hold, in
            declaration order. Empty if all hold.
        """
        violations: list[InvariantViolation] = []
        for invariant in self.select(categories):
            outcome = await call_safely(invariant.check, inputs, output, context=f"invariant '{invariant.name}'")
            if outcome.holds:
                continue
            message = outcome.error.message if outcome.error is not None else "Invariant returned False"
            violations.append(
                InvariantViolation(
                    invariant_name=invariant.name,
                    category=invariant.category,
                    critical=invariant.critical,
                    test_case=test_case,
                    inputs=inputs,
                    message=message,
                )
            )
        return violations

    async def preconditions_hold(self, inputs: tuple[Any, ...], *, test_case: int) -> bool:
        """True if every precondition holds for ``inputs``.

        Stops at the first violated precondition; the remaining ones cannot
        change the verdict.
        """
        for invariant in self.select((InvariantCategory.PRECONDITION,)):
            outcome = await call_safely(invariant.check, inputs, None, context=f"precondition '{invariant.name}'")
            if not outcome.holds:
                logger.debug("Precondition not met, skipping case", precondition=invariant.name, test_case=test_case)
                return False
        return True
