"""
Validation result models.

``ValidationResult`` is the outcome of one validator call.
``FormValidationResult`` collects the failures of a whole validation pass.
"""

from typing import Any

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of a single validator."""

    is_valid: bool = Field(..., description="Whether the value passed")
    error_message: str | None = Field(
        default=None, description="Failure message; may be None even when invalid"
    )

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failure(cls, error_message: str | None = None) -> "ValidationResult":
        return cls(is_valid=False, error_message=error_message)


class FieldValidationError(BaseModel):
    """Validation error for a specific field."""

    field_name: str = Field(..., description="Name of the field with error")
    error_type: str = Field(..., description="Validator that produced the error")
    message: str | None = Field(default=None, description="Human-readable error message")
    received: Any | None = Field(default=None, description="Received value")


class FormValidationResult(BaseModel):
    """Result of validating a whole form."""

    is_valid: bool = Field(..., description="Whether the model is valid")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="List of validation errors"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Non-blocking warnings"
    )

    @classmethod
    def from_errors(
        cls, errors: list[FieldValidationError], warnings: list[str] | None = None
    ) -> "FormValidationResult":
        return cls(is_valid=not errors, errors=errors, warnings=warnings or [])

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_name: str) -> list[FieldValidationError]:
        """Get all errors for a specific field."""
        return [e for e in self.errors if e.field_name == field_name]

    def to_error_dict(self) -> dict[str, list[str]]:
        """Convert errors to a dict mapping field names to error messages."""
        result: dict[str, list[str]] = {}
        for error in self.errors:
            if error.field_name not in result:
                result[error.field_name] = []
            if error.message is not None:
                result[error.field_name].append(error.message)
        return result

    def summary(self) -> list[str]:
        """Messages for a validation summary, in error order."""
        return [e.message for e in self.errors if e.message]
