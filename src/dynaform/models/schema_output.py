"""
JSON Schema export for built forms.

Turns a ``FormConfiguration`` into JSON Schema + UI Schema dicts that
client-side form libraries like react-jsonschema-form can consume.
Constraints are read back from the fields' validators; widgets come
from the same renderer the dispatcher would pick.
"""

import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dynaform.constants import ATTR_LINES, ATTR_MULTI_SELECT, ATTR_OPTIONS
from dynaform.core.erasure import ErasedField
from dynaform.core.form import FormConfiguration
from dynaform.rendering.dispatcher import RenderDispatcher
from dynaform.validation.validators import (
    EmailValidator,
    MaxLengthValidator,
    MinLengthValidator,
    PatternValidator,
    RangeValidator,
)

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


class PropertySchema(BaseModel):
    """One JSON Schema property; dumps with JSON Schema keyword names."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="JSON Schema type: string, number, integer, boolean, array")
    title: str = Field(..., description="Human-readable label")
    description: str | None = Field(default=None, description="Help text")
    format: str | None = Field(default=None, description="Format: email, date, date-time, password, etc.")
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    minimum: Any = None
    maximum: Any = None
    pattern: str | None = None
    enum: list[Any] | None = Field(default=None, description="Allowed values for select")
    read_only: bool | None = Field(default=None, alias="readOnly")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FormFieldSchema(BaseModel):
    """Exported view of one form field."""

    name: str = Field(..., description="Field name/key")
    required: bool = Field(default=False, description="Whether field is required")
    definition: PropertySchema = Field(..., description="JSON Schema property")
    widget: str = Field(default="text", description="Widget the render dispatcher picks")
    placeholder: str | None = Field(default=None, description="Placeholder text")

    def to_ui_dict(self) -> dict[str, Any]:
        ui: dict[str, Any] = {"ui:widget": self.widget}
        if self.placeholder:
            ui["ui:placeholder"] = self.placeholder
        return ui


def _json_type(field_type: type) -> tuple[str, str | None]:
    if field_type is bool:
        return "boolean", None
    if issubclass(field_type, int):
        return "integer", None
    if issubclass(field_type, (float, Decimal)):
        return "number", None
    if issubclass(field_type, datetime.datetime):
        return "string", "date-time"
    if issubclass(field_type, datetime.date):
        return "string", "date"
    if issubclass(field_type, datetime.time):
        return "string", "time"
    if issubclass(field_type, (list, tuple, set)):
        return "array", None
    return "string", None


def _constraints(field: ErasedField) -> dict[str, Any]:
    found: dict[str, Any] = {}
    for adapter in field.validators:
        validator = adapter.inner
        if isinstance(validator, MinLengthValidator):
            found["min_length"] = validator.min_length
        elif isinstance(validator, MaxLengthValidator):
            found["max_length"] = validator.max_length
        elif isinstance(validator, RangeValidator):
            found["minimum"] = validator.minimum
            found["maximum"] = validator.maximum
        elif isinstance(validator, PatternValidator) and not isinstance(validator, EmailValidator):
            found["pattern"] = validator.pattern.pattern
    return found


def _widget(field: ErasedField, field_type: type, dispatcher: RenderDispatcher) -> str:
    attrs = field.additional_attributes
    if attrs.get(ATTR_LINES):
        return "textarea"
    if attrs.get(ATTR_MULTI_SELECT):
        return "multiselect"
    widget = dispatcher.resolve(field, field_type).widget
    if widget == "text" and field.input_type:
        return field.input_type
    return widget


def describe_field(field: ErasedField, dispatcher: RenderDispatcher) -> FormFieldSchema:
    field_type = field.actual_field_type()
    json_type, json_format = _json_type(field_type)
    if field.input_type in ("email", "password", "uri"):
        json_format = field.input_type

    options = field.additional_attributes.get(ATTR_OPTIONS)
    definition = PropertySchema(
        type=json_type,
        title=field.label,
        description=field.help_text,
        format=json_format,
        enum=[o.value for o in options] if options else None,
        read_only=True if field.is_read_only else None,
        **_constraints(field),
    )
    return FormFieldSchema(
        name=field.field_name,
        required=field.is_required,
        definition=definition,
        widget=_widget(field, field_type, dispatcher),
        placeholder=field.placeholder,
    )


class FormSchema(BaseModel):
    """
    Complete exported form schema.

    Usage:
        schema = FormSchema.from_configuration(form, title="Customer")
        json_schema = schema.to_json_schema()
        ui_schema = schema.to_ui_schema()
    """

    form_id: str = Field(..., description="Form identifier")
    title: str = Field(..., description="Form title")
    description: str | None = Field(default=None, description="Form description")
    fields: list[FormFieldSchema] = Field(..., description="List of form fields")
    submit_button_text: str = Field(default="Submit", description="Submit button text")

    @classmethod
    def from_configuration(
        cls,
        configuration: FormConfiguration,
        title: str | None = None,
        form_id: str | None = None,
        description: str | None = None,
        dispatcher: RenderDispatcher | None = None,
    ) -> "FormSchema":
        dispatcher = dispatcher or RenderDispatcher()
        name = configuration.model_type.__name__
        return cls(
            form_id=form_id or name,
            title=title or name,
            description=description,
            fields=[describe_field(f, dispatcher) for f in configuration.fields],
        )

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "$schema": JSON_SCHEMA_DIALECT,
            "type": "object",
            "title": self.title,
            "description": self.description,
            "properties": {f.name: f.definition.to_dict() for f in self.fields},
            "required": [f.name for f in self.fields if f.required],
        }

    def to_ui_schema(self) -> dict[str, Any]:
        ui_schema: dict[str, Any] = {"ui:order": [f.name for f in self.fields]}
        ui_schema.update({f.name: f.to_ui_dict() for f in self.fields})
        return ui_schema

    def to_form_config(self) -> dict[str, Any]:
        """Schema, UI schema and submit text in the shape client form libraries load."""
        return {
            "formId": self.form_id,
            "schema": self.to_json_schema(),
            "uiSchema": self.to_ui_schema(),
            "submitButtonText": self.submit_button_text,
        }
