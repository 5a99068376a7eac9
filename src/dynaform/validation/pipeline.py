"""
Validation pipeline.

Runs every validator of a field in order and collects every failure.
Different fields are validated concurrently.
"""

import asyncio
import logging
from typing import Any

from dynaform.config import get_config
from dynaform.core.erasure import ErasedField
from dynaform.core.field import CollectionFieldDescriptor
from dynaform.core.form import FormConfiguration
from dynaform.models.validation_result import FieldValidationError, FormValidationResult
from dynaform.tracing import trace_validation
from dynaform.validation.collection import CollectionFieldValidator

logger = logging.getLogger("dynaform.validation")


class ValidationPipeline:
    """
    Validates fields and whole forms.

    Usage:
        pipeline = ValidationPipeline()
        errors = await pipeline.validate_field(order, form.get_field("name"))
        result = await pipeline.validate(order, form)
        if not result.is_valid:
            print(result.to_error_dict())
    """

    def __init__(self, validate_hidden_fields: bool | None = None):
        """
        Initialize the pipeline.

        Args:
            validate_hidden_fields: Whether fields hidden for the current
                model are validated. If None, uses config.validate_hidden_fields.
        """
        if validate_hidden_fields is None:
            validate_hidden_fields = get_config().validate_hidden_fields
        self.validate_hidden_fields = validate_hidden_fields

    async def validate_field(
        self,
        model: Any,
        field: ErasedField,
        services: Any = None,
    ) -> list[FieldValidationError]:
        """Run all of a field's validators in order without stopping at the first failure."""
        value = field.get_value(model)
        errors: list[FieldValidationError] = []
        for validator in field.validators:
            result = await validator.validate(model, value, services)
            if not result.is_valid:
                errors.append(
                    FieldValidationError(
                        field_name=field.field_name,
                        error_type=validator.inner.error_type,
                        message=result.error_message,
                        received=value,
                    )
                )
        return errors

    async def validate_collection(
        self,
        model: Any,
        collection: CollectionFieldDescriptor,
        services: Any = None,
    ) -> list[FieldValidationError]:
        messages = await CollectionFieldValidator(collection).validate(model, services)
        return [
            FieldValidationError(
                field_name=collection.field_name,
                error_type="CollectionFieldValidator",
                message=message,
            )
            for message in messages
        ]

    @trace_validation
    async def validate(
        self,
        model: Any,
        configuration: FormConfiguration,
        services: Any = None,
    ) -> FormValidationResult:
        """Validate every field and collection field of the form."""
        fields = [
            f for f in configuration.fields
            if self.validate_hidden_fields or f.is_visible_for(model)
        ]
        collections = [
            c for c in configuration.collection_fields
            if self.validate_hidden_fields or c.is_visible
        ]

        results = await asyncio.gather(
            *(self.validate_field(model, f, services) for f in fields),
            *(self.validate_collection(model, c, services) for c in collections),
        )

        errors = [error for field_errors in results for error in field_errors]
        if errors:
            logger.info(f"Validation found {len(errors)} error(s) in {configuration.model_type.__name__}")
        return FormValidationResult.from_errors(errors)
