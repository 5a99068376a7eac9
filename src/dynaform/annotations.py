"""
Field markers for declaring forms on the model itself.

Put a marker in an attribute's ``Annotated[...]`` metadata and let
``FormBuilder.add_fields_from_annotations()`` add the field:

    @dataclass
    class Contact:
        name: Annotated[str, TextField("Full name"), Required(), MinLen(2)] = ""
        email: Annotated[str, EmailField("Email"), Required()] = ""
        age: Annotated[int, NumberField("Age", step=1), Interval(ge=18, le=99)] = 18
        newsletter: Annotated[bool, CheckboxField("Newsletter", text="Send me news")] = False

    form = FormBuilder(Contact).add_fields_from_annotations().build()

Length and range constraints use the ``annotated_types`` objects pydantic
itself understands, so a pydantic model can declare them with
``Field(min_length=2)`` or ``Field(ge=0, le=10)`` instead.
"""

import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Iterable, get_args, get_origin, get_type_hints

import annotated_types
from pydantic.fields import FieldInfo

from dynaform.constants import (
    ATTR_CHECKBOX_TEXT,
    ATTR_DATE_FORMAT,
    ATTR_MAX,
    ATTR_MIN,
    ATTR_PATTERN,
    ATTR_STEP,
)
from dynaform.core.accessor import PropertyAccessor, unwrap_optional

if TYPE_CHECKING:
    from dynaform.builders.field_builder import FieldBuilder
    from dynaform.builders.form_builder import FormBuilder

logger = logging.getLogger("dynaform.builders")

NUMERIC_TYPES = (int, float, Decimal)


def _is_type(value_type: Any, *types: type) -> bool:
    return isinstance(value_type, type) and issubclass(value_type, types) and value_type is not bool


class FieldMarker:
    """Base for markers that choose a field's widget."""

    label: str
    placeholder: str | None = None

    def accepts(self, value_type: Any) -> bool:
        return True

    def configure(self, field: "FieldBuilder") -> None:
        field.with_label(self.label)
        if self.placeholder:
            field.with_placeholder(self.placeholder)


@dataclass(frozen=True)
class TextField(FieldMarker):
    label: str
    placeholder: str | None = None

    def accepts(self, value_type: Any) -> bool:
        return _is_type(value_type, str)

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        field.with_input_type("text")


@dataclass(frozen=True)
class EmailField(FieldMarker):
    label: str
    placeholder: str | None = None
    validate_format: bool = True

    def accepts(self, value_type: Any) -> bool:
        return _is_type(value_type, str)

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        field.with_input_type("email")
        if self.validate_format:
            field.with_email_validation()


@dataclass(frozen=True)
class TextArea(FieldMarker):
    label: str
    placeholder: str | None = None
    rows: int = 4
    max_length: int | None = None

    def accepts(self, value_type: Any) -> bool:
        return _is_type(value_type, str)

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        field.as_text_area(self.rows)
        if self.max_length is not None:
            field.with_max_length(self.max_length)


@dataclass(frozen=True)
class NumberField(FieldMarker):
    label: str
    placeholder: str | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None

    def accepts(self, value_type: Any) -> bool:
        return _is_type(value_type, *NUMERIC_TYPES)

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        field.with_input_type("number")
        for key, value in ((ATTR_MIN, self.min), (ATTR_MAX, self.max), (ATTR_STEP, self.step)):
            if value is not None:
                field.with_attribute(key, value)


@dataclass(frozen=True)
class DateField(FieldMarker):
    label: str
    placeholder: str | None = None
    min_date: datetime.date | None = None
    max_date: datetime.date | None = None
    format: str | None = None

    def accepts(self, value_type: Any) -> bool:
        return isinstance(value_type, type) and issubclass(value_type, datetime.date)

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        field.with_input_type("date")
        if self.min_date is not None:
            field.with_attribute(ATTR_MIN, self.min_date.isoformat())
        if self.max_date is not None:
            field.with_attribute(ATTR_MAX, self.max_date.isoformat())
        if self.format:
            field.with_attribute(ATTR_DATE_FORMAT, self.format)


@dataclass(frozen=True)
class SelectField(FieldMarker):
    """Fixed options; plain strings are used as both value and label."""

    label: str
    options: tuple[Any, ...] = ()
    placeholder: str | None = "Select an option"
    allow_multiple: bool = False

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        options = [o if isinstance(o, tuple) else (o, o) for o in self.options]
        if self.allow_multiple:
            field.as_multi_select(options)
        else:
            field.with_options(options)


@dataclass(frozen=True)
class CheckboxField(FieldMarker):
    label: str
    text: str | None = None

    def accepts(self, value_type: Any) -> bool:
        return value_type is bool

    def configure(self, field: "FieldBuilder") -> None:
        super().configure(field)
        if self.text:
            field.with_attribute(ATTR_CHECKBOX_TEXT, self.text)


@dataclass(frozen=True)
class Required:
    message: str | None = None


@dataclass(frozen=True)
class Pattern:
    regex: str
    message: str | None = None


@dataclass
class _Constraints:
    min_length: int | None = None
    max_length: int | None = None
    minimum: Any = None
    maximum: Any = None
    extras: list[Any] = field(default_factory=list)


def _flatten(metadata: Iterable[Any]) -> list[Any]:
    """Expand ``Interval``, ``Len`` and pydantic ``FieldInfo`` into single constraints."""
    flat: list[Any] = []
    for item in metadata:
        if isinstance(item, FieldInfo):
            flat.extend(_flatten(item.metadata))
        elif isinstance(item, annotated_types.GroupedMetadata):
            flat.extend(_flatten(item))
        else:
            flat.append(item)
    return flat


def _collect(metadata: list[Any]) -> _Constraints:
    constraints = _Constraints()
    for item in metadata:
        if isinstance(item, annotated_types.MinLen):
            constraints.min_length = item.min_length
        elif isinstance(item, annotated_types.MaxLen):
            constraints.max_length = item.max_length
        elif isinstance(item, annotated_types.Ge):
            constraints.minimum = item.ge
        elif isinstance(item, annotated_types.Le):
            constraints.maximum = item.le
        else:
            constraints.extras.append(item)
    return constraints


def annotation_metadata(model_type: type) -> dict[str, list[Any]]:
    """Flattened ``Annotated`` metadata per attribute, in declaration order."""
    pydantic_fields: dict[str, FieldInfo] | None = getattr(model_type, "model_fields", None)
    if pydantic_fields is not None:
        # pydantic already folds Annotated metadata and Field() constraints into FieldInfo
        raw = {name: info.metadata for name, info in pydantic_fields.items()}
    else:
        hints = get_type_hints(model_type, include_extras=True)
        raw = {name: get_args(hint)[1:] for name, hint in hints.items() if get_origin(hint) is Annotated}
    return {name: _flatten(items) for name, items in raw.items() if items}


def _apply_constraints(field: "FieldBuilder", constraints: _Constraints, label: str) -> None:
    for item in constraints.extras:
        if isinstance(item, Required):
            field.required(item.message or f"{label} is required")

    if _is_type(unwrap_optional(field.field.value_type), str):
        if constraints.min_length is not None:
            field.with_min_length(constraints.min_length)
        if constraints.max_length is not None:
            field.with_max_length(constraints.max_length)

    if constraints.minimum is not None and constraints.maximum is not None:
        field.with_range(constraints.minimum, constraints.maximum)
    elif constraints.minimum is not None:
        field.with_attribute(ATTR_MIN, constraints.minimum)
    elif constraints.maximum is not None:
        field.with_attribute(ATTR_MAX, constraints.maximum)

    for item in constraints.extras:
        if isinstance(item, Pattern):
            field.with_attribute(ATTR_PATTERN, item.regex)
            field.with_pattern(item.regex, item.message or "Invalid format")


def add_fields_from_annotations(builder: "FormBuilder") -> "FormBuilder":
    """Add a field for every attribute of ``builder.model_type`` carrying a ``FieldMarker``."""
    for name, metadata in annotation_metadata(builder.model_type).items():
        marker = next((m for m in metadata if isinstance(m, FieldMarker)), None)
        if marker is None:
            continue

        value_type = unwrap_optional(PropertyAccessor(builder.model_type, name).value_type)
        if not marker.accepts(value_type):
            logger.warning(
                f"Skipping {builder.model_type.__name__}.{name}: "
                f"{type(marker).__name__} does not fit type {value_type!r}"
            )
            continue

        field = builder.add_field(name)
        marker.configure(field)
        _apply_constraints(field, _collect(metadata), marker.label)
    return builder
