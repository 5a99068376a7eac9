"""
Built-in field renderers.

Each renderer answers ``can_render(field_type, field)`` and turns a
``FieldRenderContext`` into a ``RenderedField``. The dispatcher asks them
in registration order and uses the first that accepts.
"""

import datetime
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

from dynaform.constants import (
    ATTR_ACCEPTED_FILE_TYPES,
    ATTR_CHECKBOX_TEXT,
    ATTR_DATE_FORMAT,
    ATTR_FILE_UPLOAD,
    ATTR_LINES,
    ATTR_LOV_CONFIGURATION,
    ATTR_MAX,
    ATTR_MAX_FILE_SIZE,
    ATTR_MIN,
    ATTR_MULTI_SELECT,
    ATTR_MULTIPLE_FILES,
    ATTR_OPTIONS,
    ATTR_SLIDER,
    ATTR_STEP,
)
from dynaform.core.erasure import ErasedField
from dynaform.models.render_output import RenderedField, SelectOption
from dynaform.rendering.context import FieldRenderContext


class FieldRenderer(ABC):
    """Base class for renderers."""

    widget: str = "text"

    @abstractmethod
    def can_render(self, field_type: type, field: ErasedField) -> bool:
        ...

    def render(self, context: FieldRenderContext) -> RenderedField:
        return self.describe(context, self.widget)

    def describe(self, context: FieldRenderContext, widget: str, **extra: Any) -> RenderedField:
        """Common field description; ``extra`` overrides or adds attributes."""
        field = context.field
        model = context.model
        return RenderedField(
            field_name=field.field_name,
            widget=widget,
            label=field.label,
            value=context.current_value,
            value_type=context.actual_field_type.__name__,
            placeholder=field.placeholder,
            help_text=field.help_text,
            css_class=field.css_class,
            input_type=field.input_type,
            required=field.is_required_for(model),
            disabled=field.is_disabled_for(model),
            read_only=field.is_read_only_for(model),
            errors=list(context.errors),
            **extra,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _is_subclass(field_type: type, *bases: type) -> bool:
    return isinstance(field_type, type) and issubclass(field_type, bases)


class FileUploadFieldRenderer(FieldRenderer):
    widget = "file"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return bool(field.additional_attributes.get(ATTR_FILE_UPLOAD))

    def render(self, context: FieldRenderContext) -> RenderedField:
        attrs = context.field.additional_attributes
        return self.describe(
            context,
            self.widget,
            attributes={
                "accept": attrs.get(ATTR_ACCEPTED_FILE_TYPES),
                "max_file_size": attrs.get(ATTR_MAX_FILE_SIZE),
                "multiple": attrs.get(ATTR_MULTIPLE_FILES, False),
            },
        )


class SelectFieldRenderer(FieldRenderer):
    widget = "select"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return ATTR_OPTIONS in field.additional_attributes

    def render(self, context: FieldRenderContext) -> RenderedField:
        options = [
            o if isinstance(o, SelectOption) else SelectOption(value=o[0], label=str(o[1]))
            for o in context.field.additional_attributes[ATTR_OPTIONS]
        ]
        widget = "multiselect" if context.field.additional_attributes.get(ATTR_MULTI_SELECT) else self.widget
        return self.describe(context, widget, options=options)


class LovFieldRenderer(FieldRenderer):
    """Describes a list-of-values picker from the field's LOV configuration."""

    widget = "lov"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return ATTR_LOV_CONFIGURATION in field.additional_attributes

    def render(self, context: FieldRenderContext) -> RenderedField:
        lov = context.field.additional_attributes[ATTR_LOV_CONFIGURATION]
        return self.describe(context, self.widget, attributes=lov.describe())


class TextFieldRenderer(FieldRenderer):
    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return _is_subclass(field_type, str)

    def render(self, context: FieldRenderContext) -> RenderedField:
        lines = context.field.additional_attributes.get(ATTR_LINES)
        if lines:
            return self.describe(context, "textarea", attributes={"lines": lines})
        input_type = context.field.input_type
        widget = input_type if input_type in ("password", "email", "tel", "url") else "text"
        return self.describe(context, widget)


class BooleanFieldRenderer(FieldRenderer):
    widget = "checkbox"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return field_type is bool

    def render(self, context: FieldRenderContext) -> RenderedField:
        text = context.field.additional_attributes.get(ATTR_CHECKBOX_TEXT)
        return self.describe(context, self.widget, attributes={"text": text} if text else {})


class IntegerFieldRenderer(FieldRenderer):
    widget = "number"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return _is_subclass(field_type, int) and field_type is not bool

    def render(self, context: FieldRenderContext) -> RenderedField:
        return self.describe(context, self.widget, attributes=_numeric_attributes(context.field, step=1))


class DecimalFieldRenderer(FieldRenderer):
    """Floats and decimals; a slider when the field asks for one."""

    widget = "number"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return _is_subclass(field_type, float, Decimal)

    def render(self, context: FieldRenderContext) -> RenderedField:
        attrs = _numeric_attributes(context.field, step=None)
        widget = "slider" if context.field.additional_attributes.get(ATTR_SLIDER) else self.widget
        return self.describe(context, widget, attributes=attrs)


class DateTimeFieldRenderer(FieldRenderer):
    widget = "date"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return _is_subclass(field_type, datetime.date, datetime.time)

    def render(self, context: FieldRenderContext) -> RenderedField:
        field_type = context.actual_field_type
        if issubclass(field_type, datetime.datetime):
            widget = "datetime"
        elif issubclass(field_type, datetime.date):
            widget = "date"
        else:
            widget = "time"
        attrs = context.field.additional_attributes
        bounds = {key: attrs[key] for key in (ATTR_MIN, ATTR_MAX, ATTR_DATE_FORMAT) if key in attrs}
        return self.describe(context, widget, attributes=bounds)


class UnsupportedFieldRenderer(FieldRenderer):
    """Diagnostic placeholder for fields no renderer accepts."""

    widget = "unsupported"

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return True

    def render(self, context: FieldRenderContext) -> RenderedField:
        return self.describe(
            context,
            self.widget,
            message=(
                f"Unsupported field type: {context.actual_field_type.__name__} "
                f"for field: {context.field.field_name}"
            ),
        )


def _numeric_attributes(field: ErasedField, step: Any) -> dict[str, Any]:
    attrs = field.additional_attributes
    result = {key: attrs[key] for key in (ATTR_MIN, ATTR_MAX, ATTR_STEP) if key in attrs}
    if step is not None:
        result.setdefault(ATTR_STEP, step)
    return result


def default_renderers() -> list[FieldRenderer]:
    """Built-in renderers in resolution order; attribute-driven ones come first."""
    return [
        FileUploadFieldRenderer(),
        LovFieldRenderer(),
        SelectFieldRenderer(),
        TextFieldRenderer(),
        BooleanFieldRenderer(),
        IntegerFieldRenderer(),
        DecimalFieldRenderer(),
        DateTimeFieldRenderer(),
    ]
