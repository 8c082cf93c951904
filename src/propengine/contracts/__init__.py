"""Shared contracts: enums, errors, protocols, and result records.

Nothing in this package executes user code; it only describes the shapes
that flow between the builder, the runner, and callers.
"""

from propengine.contracts.enums import (
    POST_EXECUTION_CATEGORIES,
    ErrorCode,
    InvariantCategory,
)
from propengine.contracts.errors import ConfigurationError
from propengine.contracts.protocols import GeneratorProtocol, InvariantProtocol
from propengine.contracts.results import (
    EXAMPLE_CASE,
    EngineError,
    GenerationStats,
    InvariantViolation,
    Outcome,
    PropertyFailure,
    PropertyTestResult,
    PropertyTestSummary,
    ShrinkingResult,
    TestStatistics,
)

__all__ = [
    "EXAMPLE_CASE",
    "POST_EXECUTION_CATEGORIES",
    "ConfigurationError",
    "EngineError",
    "ErrorCode",
    "GenerationStats",
    "GeneratorProtocol",
    "InvariantCategory",
    "InvariantProtocol",
    "InvariantViolation",
    "Outcome",
    "PropertyFailure",
    "PropertyTestResult",
    "PropertyTestSummary",
    "ShrinkingResult",
    "TestStatistics",
]
