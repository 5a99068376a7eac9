"""
Custom field renderers.

A custom renderer declares the value type it can edit. The dispatcher only
uses a field's custom renderer when the field's runtime type is a subclass
of that declared type.
"""

from typing import Any

from dynaform.constants import ATTR_MAX, ATTR_MIN, ATTR_STEP
from dynaform.core.accessor import coerce_value
from dynaform.core.erasure import ErasedField
from dynaform.models.render_output import RenderedField
from dynaform.rendering.context import FieldRenderContext
from dynaform.rendering.renderers import FieldRenderer


class CustomFieldRenderer(FieldRenderer):
    """Base class for renderers attached to a field with ``with_custom_renderer``."""

    value_type: type = object

    def can_render(self, field_type: type, field: ErasedField) -> bool:
        return isinstance(field_type, type) and issubclass(field_type, self.value_type)

    def get_value(self, context: FieldRenderContext) -> Any:
        return coerce_value(context.current_value, self.value_type)

    async def set_value(self, context: FieldRenderContext, value: Any) -> None:
        await context.on_value_changed(value)


class ColorPickerRenderer(CustomFieldRenderer):
    value_type = str
    widget = "color"

    def __init__(self, palette: list[str] | None = None):
        self.palette = palette or ["#000000", "#FFFFFF", "#F44336", "#4CAF50", "#2196F3", "#FFEB3B"]

    def render(self, context: FieldRenderContext) -> RenderedField:
        value = self.get_value(context) or "#000000"
        rendered = self.describe(context, self.widget, attributes={"palette": self.palette})
        rendered.value = value
        return rendered


class RatingRenderer(CustomFieldRenderer):
    value_type = int
    widget = "rating"

    def __init__(self, max_rating: int = 5):
        self.max_rating = max_rating

    def render(self, context: FieldRenderContext) -> RenderedField:
        max_rating = context.field.additional_attributes.get(ATTR_MAX, self.max_rating)
        return self.describe(context, self.widget, attributes={"max_rating": max_rating})


class SliderRenderer(CustomFieldRenderer):
    value_type = float
    widget = "slider"

    def render(self, context: FieldRenderContext) -> RenderedField:
        attrs = context.field.additional_attributes
        return self.describe(
            context,
            self.widget,
            attributes={
                ATTR_MIN: attrs.get(ATTR_MIN, 0.0),
                ATTR_MAX: attrs.get(ATTR_MAX, 100.0),
                ATTR_STEP: attrs.get(ATTR_STEP, 1.0),
            },
        )
