"""Status codes, categories, and error kinds used across engine boundaries.

All values are StrEnums so they serialize directly into result dicts and
compare equal to their string form in reports.
"""

from enum import StrEnum


class InvariantCategory(StrEnum):
    """When an invariant is evaluated relative to the property.

    Values:
        PRECONDITION: Gates whether a generated case is attempted at all.
            A violation silently skips the case.
        POSTCONDITION: Checked after a successful property execution.
        BUSINESS_RULE: Domain rule checked after a successful execution.
        DATA_INTEGRITY: Consistency of inputs/outputs checked after a
            successful execution.
    """

    PRECONDITION = "precondition"
    POSTCONDITION = "postcondition"
    BUSINESS_RULE = "business-rule"
    DATA_INTEGRITY = "data-integrity"


# Categories evaluated only after the property itself succeeded
POST_EXECUTION_CATEGORIES: frozenset[InvariantCategory] = frozenset(
    {
        InvariantCategory.POSTCONDITION,
        InvariantCategory.BUSINESS_RULE,
        InvariantCategory.DATA_INTEGRITY,
    }
)


class ErrorCode(StrEnum):
    """Classification of a failed operation.

    Values:
        PROPERTY_FALSIFIED: The property returned a false verdict.
        TIMEOUT: The property (or a shrink probe) exceeded timeout_ms.
        BUSINESS_RULE_VIOLATION: A critical invariant failed after an
            otherwise-successful property execution.
        VALIDATION_ERROR: Builder or configuration misuse.
        INTERNAL_ERROR: An uncaught exception escaped a user callback.
    """

    PROPERTY_FALSIFIED = "PROPERTY_FALSIFIED"
    TIMEOUT = "TIMEOUT"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
