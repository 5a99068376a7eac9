"""
Type-erased field adapter.

A form holds fields of many value types in one ordered tuple. ``ErasedField``
wraps a typed ``FieldDescriptor`` and forwards every property to it, so
writes through the adapter land on the original descriptor.
"""

from typing import Any

from dynaform.core.accessor import coerce_value, concrete_type
from dynaform.core.field import FieldDescriptor


def _delegated(name: str, doc: str | None = None) -> property:
    def fget(self):
        return getattr(self._field, name)

    def fset(self, value):
        setattr(self._field, name, value)

    return property(fget, fset, doc=doc)


class ValidatorAdapter:
    """
    Wraps a typed validator so it can be called with an erased value.

    The incoming value is converted to the field's value type before the
    inner validator sees it; unconvertible values become the type default.
    """

    def __init__(self, inner: Any, value_type: Any):
        self.inner = inner
        self.value_type = value_type

    @property
    def error_message(self) -> str | None:
        return self.inner.error_message

    async def validate(self, model: Any, value: Any, services: Any = None):
        return await self.inner.validate(model, coerce_value(value, self.value_type), services)

    def __repr__(self) -> str:
        return f"ValidatorAdapter({self.inner!r})"


class ErasedField:
    """Erased view over a ``FieldDescriptor``; every attribute delegates."""

    def __init__(self, field: FieldDescriptor):
        self._field = field

    label = _delegated("label")
    placeholder = _delegated("placeholder")
    help_text = _delegated("help_text")
    css_class = _delegated("css_class")
    input_type = _delegated("input_type")
    is_required = _delegated("is_required")
    is_visible = _delegated("is_visible")
    is_disabled = _delegated("is_disabled")
    is_read_only = _delegated("is_read_only")
    required_condition = _delegated("required_condition")
    visibility_condition = _delegated("visibility_condition")
    disabled_condition = _delegated("disabled_condition")
    read_only_condition = _delegated("read_only_condition")
    order = _delegated("order")
    additional_attributes = _delegated("additional_attributes")
    dependencies = _delegated("dependencies")
    custom_renderer_type = _delegated("custom_renderer_type")

    @property
    def field_name(self) -> str:
        return self._field.field_name

    @property
    def path(self) -> str:
        return self._field.path

    @property
    def value_type(self) -> Any:
        return self._field.value_type

    @property
    def typed_descriptor(self) -> FieldDescriptor:
        """The original typed descriptor."""
        return self._field

    @property
    def validators(self) -> list[ValidatorAdapter]:
        """The typed validators, each wrapped to accept erased values."""
        return [ValidatorAdapter(v, self._field.value_type) for v in self._field.validators]

    def actual_field_type(self) -> type:
        """Concrete runtime class of the field's value (``int | None`` -> ``int``)."""
        return concrete_type(self._field.value_type)

    def get_value(self, model: Any) -> Any:
        return self._field.get_value(model)

    def set_value(self, model: Any, value: Any) -> None:
        """Convert and write ``value``."""
        self._field.set_value(model, coerce_value(value, self._field.value_type))

    def is_required_for(self, model: Any) -> bool:
        return self._field.is_required_for(model)

    def is_visible_for(self, model: Any) -> bool:
        return self._field.is_visible_for(model)

    def is_disabled_for(self, model: Any) -> bool:
        return self._field.is_disabled_for(model)

    def is_read_only_for(self, model: Any) -> bool:
        return self._field.is_read_only_for(model)

    def __repr__(self) -> str:
        return f"ErasedField({self._field!r})"
