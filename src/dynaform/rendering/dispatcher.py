"""
Render dispatcher.

Resolves the renderer for a field in three steps:

1. the field's custom renderer, if its declared value type accepts the
   field's runtime type;
2. the first registered renderer whose ``can_render`` accepts;
3. a diagnostic placeholder naming the unsupported type and field.

The dispatcher holds no per-field state; every call resolves afresh.
"""

import logging
from typing import Any

from dynaform.constants import ATTR_RENDERER_INSTANCE
from dynaform.core.erasure import ErasedField
from dynaform.core.field import CollectionFieldDescriptor
from dynaform.models.render_output import RenderedField
from dynaform.rendering.context import (
    DependencyChangedCallback,
    FieldRenderContext,
    ValueChangedCallback,
    _noop_dependency_changed,
    _noop_value_changed,
)
from dynaform.rendering.custom import CustomFieldRenderer
from dynaform.rendering.renderers import FieldRenderer, UnsupportedFieldRenderer, default_renderers

logger = logging.getLogger("dynaform.rendering")


class RenderDispatcher:
    """
    Picks a renderer per field and produces its ``RenderedField``.

    Usage:
        dispatcher = RenderDispatcher(services=services)
        dispatcher.register(MoneyRenderer())
        rendered = dispatcher.render(order, form.get_field("total"))
    """

    def __init__(self, renderers: list[FieldRenderer] | None = None, services: Any = None):
        self._renderers: list[FieldRenderer] = list(renderers) if renderers is not None else default_renderers()
        self.services = services

    @property
    def renderers(self) -> list[FieldRenderer]:
        return list(self._renderers)

    def register(self, renderer: FieldRenderer, first: bool = False) -> "RenderDispatcher":
        """Add a renderer at the end of the list, or at the front when ``first``."""
        if first:
            self._renderers.insert(0, renderer)
        else:
            self._renderers.append(renderer)
        return self

    def _custom_renderer(self, field: ErasedField) -> CustomFieldRenderer | None:
        instance = field.additional_attributes.get(ATTR_RENDERER_INSTANCE)
        if instance is not None:
            return instance

        renderer_type = field.custom_renderer_type
        if renderer_type is None:
            return None

        if self.services is not None:
            instance = self.services.get(renderer_type)
            if instance is not None:
                return instance

        try:
            return renderer_type()
        except TypeError as e:
            logger.warning(f"Cannot construct renderer {renderer_type.__name__} for '{field.field_name}': {e}")
            return None

    def resolve(self, field: ErasedField, runtime_type: type | None = None) -> FieldRenderer:
        """Return the renderer for ``field`` at ``runtime_type``."""
        if runtime_type is None:
            runtime_type = field.actual_field_type()

        custom = self._custom_renderer(field)
        if custom is not None:
            if isinstance(runtime_type, type) and issubclass(runtime_type, custom.value_type):
                return custom
            logger.debug(
                f"Custom renderer {type(custom).__name__} handles {custom.value_type.__name__}, "
                f"not {runtime_type.__name__}; using standard renderers for '{field.field_name}'"
            )

        for renderer in self._renderers:
            if renderer.can_render(runtime_type, field):
                return renderer

        return UnsupportedFieldRenderer()

    def render(
        self,
        model: Any,
        field: ErasedField,
        on_value_changed: ValueChangedCallback | None = None,
        on_dependency_changed: DependencyChangedCallback | None = None,
        errors: list[str] | None = None,
    ) -> RenderedField:
        """Describe ``field`` for the current state of ``model``."""
        value = field.get_value(model)
        runtime_type = field.actual_field_type()
        if runtime_type is object and value is not None:
            runtime_type = type(value)

        context = FieldRenderContext(
            model=model,
            field=field,
            actual_field_type=runtime_type,
            current_value=value,
            on_value_changed=on_value_changed or _noop_value_changed,
            on_dependency_changed=on_dependency_changed or _noop_dependency_changed,
            services=self.services,
            errors=list(errors or []),
        )
        return self.resolve(field, runtime_type).render(context)

    def render_collection(self, model: Any, collection: CollectionFieldDescriptor) -> RenderedField:
        """Describe a collection field with one rendered item form per item."""
        items = collection.get_items(model)
        children: list[list[RenderedField]] = []
        if collection.item_configuration is not None:
            for item in items:
                children.append([
                    self.render(item, f)
                    for f in collection.item_configuration.get_visible_fields(item)
                ])

        return RenderedField(
            field_name=collection.field_name,
            widget="collection",
            label=collection.label,
            value_type="list",
            attributes={
                "can_add": collection.can_add,
                "can_remove": collection.can_remove,
                "can_reorder": collection.can_reorder,
                "min_items": collection.min_items,
                "max_items": collection.max_items,
                "add_button_text": collection.add_button_text,
                "empty_text": collection.empty_text,
                "item_count": len(items),
            },
            children=children,
        )
