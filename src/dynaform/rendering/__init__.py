"""Render dispatch: renderer resolution, built-in and custom renderers."""

from dynaform.rendering.context import FieldEditBuffer, FieldRenderContext
from dynaform.rendering.renderers import (
    BooleanFieldRenderer,
    DateTimeFieldRenderer,
    DecimalFieldRenderer,
    FieldRenderer,
    FileUploadFieldRenderer,
    IntegerFieldRenderer,
    LovFieldRenderer,
    SelectFieldRenderer,
    TextFieldRenderer,
    UnsupportedFieldRenderer,
    default_renderers,
)
from dynaform.rendering.custom import (
    ColorPickerRenderer,
    CustomFieldRenderer,
    RatingRenderer,
    SliderRenderer,
)
from dynaform.rendering.dispatcher import RenderDispatcher

__all__ = [
    "FieldRenderContext",
    "FieldEditBuffer",
    "FieldRenderer",
    "FileUploadFieldRenderer",
    "LovFieldRenderer",
    "SelectFieldRenderer",
    "TextFieldRenderer",
    "BooleanFieldRenderer",
    "IntegerFieldRenderer",
    "DecimalFieldRenderer",
    "DateTimeFieldRenderer",
    "UnsupportedFieldRenderer",
    "default_renderers",
    "CustomFieldRenderer",
    "ColorPickerRenderer",
    "RatingRenderer",
    "SliderRenderer",
    "RenderDispatcher",
]
