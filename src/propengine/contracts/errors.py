"""Exceptions raised at configuration time.

Runtime failures inside a property run never raise; they are carried as
Outcome/EngineError values. The only exception the engine raises on purpose is
ConfigurationError, for a test that cannot be built.
"""

from propengine.contracts.enums import ErrorCode


class ConfigurationError(ValueError):
    """Raised when a PropertyTest cannot be built from the supplied parts.

    Examples: no property function, duplicate generator names, an example
    whose arity does not match the generators, negative limits.

    Attributes:
        code: Always ErrorCode.VALIDATION_ERROR.
        field: Name of the offending configuration field, if known.
    """

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
