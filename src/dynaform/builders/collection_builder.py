"""
Builders for collection fields and field groups.
"""

from typing import TYPE_CHECKING, Any, Callable

from dynaform.core.field import CollectionFieldDescriptor
from dynaform.core.form import FieldGroup

if TYPE_CHECKING:
    from dynaform.builders.form_builder import FormBuilder


class CollectionFieldBuilder:
    """
    Configures a list-valued field and the form used for its items.

    Usage:
        form.add_collection_field("lines", OrderLine, lambda c: (
            c.with_label("Lines").with_min_items(1).with_max_items(10)
             .with_item_form(lambda item: item.add_field("product_name").required())
        ))
    """

    def __init__(self, collection: CollectionFieldDescriptor):
        self._collection = collection

    @property
    def collection(self) -> CollectionFieldDescriptor:
        return self._collection

    def with_label(self, label: str) -> "CollectionFieldBuilder":
        self._collection.label = label
        return self

    def with_order(self, order: int) -> "CollectionFieldBuilder":
        self._collection.order = order
        return self

    def with_min_items(self, count: int) -> "CollectionFieldBuilder":
        self._collection.min_items = count
        return self

    def with_max_items(self, count: int) -> "CollectionFieldBuilder":
        self._collection.max_items = count
        return self

    def allow_add(self, allowed: bool = True, button_text: str | None = None) -> "CollectionFieldBuilder":
        self._collection.can_add = allowed
        if button_text:
            self._collection.add_button_text = button_text
        return self

    def allow_remove(self, allowed: bool = True) -> "CollectionFieldBuilder":
        self._collection.can_remove = allowed
        return self

    def allow_reorder(self, allowed: bool = True) -> "CollectionFieldBuilder":
        self._collection.can_reorder = allowed
        return self

    def with_empty_text(self, text: str) -> "CollectionFieldBuilder":
        self._collection.empty_text = text
        return self

    def hidden(self) -> "CollectionFieldBuilder":
        self._collection.is_visible = False
        return self

    def with_item_form(self, configure: Callable[["FormBuilder"], Any]) -> "CollectionFieldBuilder":
        """Build the item form with a nested ``FormBuilder`` for the item type."""
        from dynaform.builders.form_builder import FormBuilder

        item_builder = FormBuilder(self._collection.item_type)
        configure(item_builder)
        self._collection.item_configuration = item_builder.build()
        return self


class FieldGroupBuilder:
    """Configures a ``FieldGroup``."""

    def __init__(self, group: FieldGroup):
        self._group = group

    @property
    def group(self) -> FieldGroup:
        return self._group

    def with_name(self, name: str) -> "FieldGroupBuilder":
        self._group.name = name
        return self

    def include(self, *field_names: str) -> "FieldGroupBuilder":
        self._group.field_names.extend(field_names)
        return self

    def with_columns(self, columns: int) -> "FieldGroupBuilder":
        self._group.columns = columns
        return self

    def with_css_class(self, css_class: str) -> "FieldGroupBuilder":
        self._group.css_class = css_class
        return self

    def with_order(self, order: int) -> "FieldGroupBuilder":
        self._group.order = order
        return self

    def show_in_card(self, elevation: int = 1) -> "FieldGroupBuilder":
        self._group.show_card = True
        self._group.card_elevation = elevation
        return self
