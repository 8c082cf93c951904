"""Property test engine: execution, invariants, shrinking, running and reporting."""

from propengine.engine.builder import PropertyTest, PropertyTestBuilder
from propengine.engine.execution import PropertyExecutor, call_safely, call_sync_safely
from propengine.engine.invariants import Invariant, InvariantChecker
from propengine.engine.reporting import format_report, summarize
from propengine.engine.runner import PropertyTestRunner, compute_size
from propengine.engine.shrinker import Shrinker
from propengine.engine.statistics import StatisticsCollector

__all__ = [
    "Invariant",
    "InvariantChecker",
    "PropertyExecutor",
    "PropertyTest",
    "PropertyTestBuilder",
    "PropertyTestRunner",
    "Shrinker",
    "StatisticsCollector",
    "call_safely",
    "call_sync_safely",
    "compute_size",
    "format_report",
    "summarize",
]
