"""
propengine: Deterministic property-based testing for async Python code.

Generates seeded random inputs, runs a property against them, checks
categorized invariants, and shrinks failing inputs to a minimal counterexample.
"""

__version__ = "0.1.0"

from propengine.contracts import (
    ConfigurationError,
    EngineError,
    ErrorCode,
    GeneratorProtocol,
    InvariantCategory,
    InvariantProtocol,
    InvariantViolation,
    Outcome,
    PropertyFailure,
    PropertyTestResult,
    PropertyTestSummary,
    ShrinkingResult,
)
from propengine.core.config import EngineSettings, load_settings
from propengine.core.random import SeededRandom
from propengine.engine import (
    Invariant,
    PropertyTest,
    PropertyTestBuilder,
    PropertyTestRunner,
    format_report,
    summarize,
)

__all__ = [
    "ConfigurationError",
    "EngineError",
    "EngineSettings",
    "ErrorCode",
    "GeneratorProtocol",
    "Invariant",
    "InvariantCategory",
    "InvariantProtocol",
    "InvariantViolation",
    "Outcome",
    "PropertyFailure",
    "PropertyTest",
    "PropertyTestBuilder",
    "PropertyTestResult",
    "PropertyTestRunner",
    "PropertyTestSummary",
    "SeededRandom",
    "ShrinkingResult",
    "__version__",
    "format_report",
    "load_settings",
    "summarize",
]
