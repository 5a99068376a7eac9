"""Pydantic models for validation results, rendered fields and schema export."""

from dynaform.models.validation_result import (
    FieldValidationError,
    FormValidationResult,
    ValidationResult,
)
from dynaform.models.render_output import RenderedField, SelectOption

__all__ = [
    "ValidationResult",
    "FieldValidationError",
    "FormValidationResult",
    "RenderedField",
    "SelectOption",
]
