"""
Error types for the dynaform engine.

Configuration errors are raised at build time. Validation failures are
never raised; they are returned as values by the validation pipeline.
"""


class DynaformError(Exception):
    """Base class for all engine errors."""


class FormConfigurationError(DynaformError):
    """Raised when a form, field or accessor is configured incorrectly."""


class DependencyCycleError(DynaformError):
    """Raised when dependency notifications nest deeper than the configured cap."""

    def __init__(self, field_name: str, depth: int):
        self.field_name = field_name
        self.depth = depth
        super().__init__(
            f"Dependency notifications for '{field_name}' exceeded depth {depth}; "
            "check for cyclic field dependencies"
        )


class LovConfigurationError(FormConfigurationError):
    """Raised when a list-of-values field has no usable data source."""


class OperationCancelledError(DynaformError):
    """Raised when a cancellation token is checked after cancellation."""
