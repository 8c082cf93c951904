"""Callback boundary: every call into user code goes through here.

User-supplied callbacks (property, invariant checks, generator methods) may
raise anything. This module converts those exceptions into error Outcomes
tagged INTERNAL_ERROR so they never escape into the runner loop.

Timeout model:
    Async properties are raced against timeout_ms with asyncio.wait(). On
    timeout the task is ABANDONED, not cancelled: it keeps running, the
    executor holds a reference until it finishes and then retrieves its
    exception so asyncio never reports it as unretrieved. Callers that need
    true cancellation must make the operation under test abortable.

    Synchronous properties cannot be interrupted on a single thread. Their
    elapsed time is measured and a call that overran is classified TIMEOUT
    after it returns.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable
from typing import Any

from propengine.contracts.enums import ErrorCode
from propengine.contracts.results import Outcome
from propengine.core.logging import get_logger

logger = get_logger(__name__)


def as_outcome(value: Any) -> Outcome:
    """Wrap a raw callback return value in an Outcome (Outcomes pass through)."""
    if isinstance(value, Outcome):
        return value
    return Outcome.ok(value)


async def call_safely(fn: Callable[..., Any], *args: Any, context: str) -> Outcome:
    """Call ``fn(*args)``, awaiting the result if needed, without raising.

    Args:
        fn: Sync or async callable
        *args: Positional arguments
        context: Name of the callback for error messages (e.g. "invariant 'quorum'")

    Returns:
        The callback's Outcome, or an INTERNAL_ERROR Outcome if it raised.
    """
    try:
        value = fn(*args)
        if inspect.isawaitable(value):
            value = await value
    except Exception as exc:
        logger.debug("Callback raised", callback=context, exc_type=type(exc).__name__, error=str(exc))
        return Outcome.from_exception(exc, context=context)
    return as_outcome(value)


def call_sync_safely(fn: Callable[..., Any], *args: Any, context: str) -> Outcome:
    """Synchronous variant of call_safely() for generator methods."""
    try:
        value = fn(*args)
    except Exception as exc:
        logger.debug("Callback raised", callback=context, exc_type=type(exc).__name__, error=str(exc))
        return Outcome.from_exception(exc, context=context)
    return Outcome.ok(value)


class PropertyExecutor:
    """Executes the property function for one run, enforcing the timeout.

    Instances are run-scoped: the runner creates one per run() call, so the
    set of abandoned (timed-out) tasks never leaks between runs.

    execute() returns:
        - Outcome.ok(output) when the property holds
        - Outcome error PROPERTY_FALSIFIED when it returned False
        - Outcome error TIMEOUT when it exceeded timeout_ms
        - Outcome error INTERNAL_ERROR when it raised
        - the property's own error Outcome, unchanged, if it returned one
    """

    def __init__(
        self,
        property_fn: Callable[..., Any],
        timeout_ms: int,
        *,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        self._property_fn = property_fn
        self._timeout_ms = timeout_ms
        self._time_func = time_func if time_func is not None else time.perf_counter
        self._abandoned: set[asyncio.Future[Any]] = set()
        self.executions = 0

    @property
    def abandoned_count(self) -> int:
        """Number of timed-out tasks still running."""
        return len(self._abandoned)

    def _release(self, task: asyncio.Future[Any]) -> None:
        self._abandoned.discard(task)
        if not task.cancelled():
            # Mark the exception as retrieved; the case was already reported as TIMEOUT
            task.exception()

    def _timeout_outcome(self) -> Outcome:
        return Outcome.fail(ErrorCode.TIMEOUT, f"Property exceeded timeout of {self._timeout_ms}ms")

    async def execute(self, inputs: tuple[Any, ...]) -> Outcome:
        self.executions += 1
        started = self._time_func()
        try:
            value = self._property_fn(*inputs)
        except Exception as exc:
            return Outcome.from_exception(exc, context="property")

        if inspect.isawaitable(value):
            task = asyncio.ensure_future(value)
            done, _pending = await asyncio.wait({task}, timeout=self._timeout_ms / 1000)
            if not done:
                self._abandoned.add(task)
                task.add_done_callback(self._release)
                logger.debug("Property timed out, task abandoned", timeout_ms=self._timeout_ms)
                return self._timeout_outcome()
            try:
                value = task.result()
            except Exception as exc:
                return Outcome.from_exception(exc, context="property")
        elif (self._time_func() - started) * 1000 > self._timeout_ms:
            return self._timeout_outcome()

        outcome = as_outcome(value)
        if outcome.is_success and outcome.value is False:
            return Outcome.fail(ErrorCode.PROPERTY_FALSIFIED, "Property returned False")
        return outcome
