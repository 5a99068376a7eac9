"""
Form configuration.

The immutable result of ``FormBuilder.build()``: ordered erased fields,
the dependency graph, collection fields, field groups, layout flags and
optional security settings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable

from dynaform.core.dependency import DependencyGraph
from dynaform.core.erasure import ErasedField
from dynaform.core.field import CollectionFieldDescriptor

if TYPE_CHECKING:
    from dynaform.security.models import FormSecurity


class FormLayout(str, Enum):
    """How fields are arranged by the host."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    INLINE = "inline"
    GRID = "grid"


@dataclass
class FieldGroup:
    """Named group of fields rendered together."""

    name: str
    field_names: list[str] = field(default_factory=list)
    columns: int = 1
    css_class: str | None = None
    order: int = 0
    show_card: bool = False
    card_elevation: int = 1


class FormConfiguration:
    """
    Built form for one model type.

    ``fields`` is sorted by ``order``; fields sharing an order keep the
    order in which they were added. The set of fields is fixed once built,
    although each field's flags may still be changed at runtime.
    """

    def __init__(
        self,
        model_type: type,
        fields: Iterable[ErasedField],
        dependency_graph: DependencyGraph | None = None,
        collection_fields: Iterable[CollectionFieldDescriptor] = (),
        field_groups: Iterable[FieldGroup] = (),
        layout: FormLayout = FormLayout.VERTICAL,
        css_class: str | None = None,
        show_validation_summary: bool = True,
        show_required_indicator: bool = True,
        required_indicator: str = "*",
        security: "FormSecurity | None" = None,
    ):
        indexed = list(enumerate(fields))
        indexed.sort(key=lambda pair: (pair[1].order, pair[0]))

        self.model_type = model_type
        self._fields: tuple[ErasedField, ...] = tuple(f for _, f in indexed)
        self._by_name = {f.field_name: f for f in self._fields}
        self.dependency_graph = dependency_graph or DependencyGraph()
        self._collection_fields: tuple[CollectionFieldDescriptor, ...] = tuple(
            sorted(collection_fields, key=lambda c: c.order)
        )
        self._field_groups: tuple[FieldGroup, ...] = tuple(sorted(field_groups, key=lambda g: g.order))
        self.layout = layout
        self.css_class = css_class
        self.show_validation_summary = show_validation_summary
        self.show_required_indicator = show_required_indicator
        self.required_indicator = required_indicator
        self.security = security

    @property
    def fields(self) -> tuple[ErasedField, ...]:
        return self._fields

    @property
    def collection_fields(self) -> tuple[CollectionFieldDescriptor, ...]:
        return self._collection_fields

    @property
    def field_groups(self) -> tuple[FieldGroup, ...]:
        return self._field_groups

    @property
    def has_security(self) -> bool:
        return self.security is not None

    def get_field(self, field_name: str) -> ErasedField | None:
        return self._by_name.get(field_name)

    def get_collection_field(self, field_name: str) -> CollectionFieldDescriptor | None:
        for collection in self._collection_fields:
            if collection.field_name == field_name:
                return collection
        return None

    def get_required_fields(self) -> list[ErasedField]:
        return [f for f in self._fields if f.is_required]

    def get_visible_fields(self, model: Any) -> list[ErasedField]:
        return [f for f in self._fields if f.is_visible_for(model)]

    def get_ungrouped_fields(self) -> list[ErasedField]:
        grouped = {name for group in self._field_groups for name in group.field_names}
        return [f for f in self._fields if f.field_name not in grouped]

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"FormConfiguration({self.model_type.__name__}, fields={[f.field_name for f in self._fields]})"
