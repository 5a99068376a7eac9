"""
Fluent form builder.

Collects field descriptors, collection fields, groups and settings and
turns them into an immutable ``FormConfiguration``.
"""

import logging
from typing import Any, Callable, Generic, TypeVar

from dynaform.annotations import add_fields_from_annotations
from dynaform.builders.collection_builder import CollectionFieldBuilder, FieldGroupBuilder
from dynaform.builders.field_builder import FieldBuilder
from dynaform.builders.fluent import FluentFieldsMixin
from dynaform.builders.security_builder import SecurityBuilder
from dynaform.core.dependency import DependencyGraph
from dynaform.core.erasure import ErasedField
from dynaform.core.field import CollectionFieldDescriptor, FieldDescriptor
from dynaform.core.form import FieldGroup, FormConfiguration, FormLayout
from dynaform.errors import FormConfigurationError
from dynaform.lov.cascade import LovCascade
from dynaform.security.models import FormSecurity

logger = logging.getLogger("dynaform.builders")

TModel = TypeVar("TModel")


class FormBuilder(FluentFieldsMixin, Generic[TModel]):
    """
    Builds a form for ``model_type``.

    Usage:
        form = (
            FormBuilder(Customer)
            .add_field("name").with_label("Name").required()
            .add_field("country_code").as_lov(Country, configure_country)
            .build()
        )
    """

    def __init__(self, model_type: type[TModel]):
        self.model_type = model_type
        self._fields: list[FieldDescriptor] = []
        self._collections: list[CollectionFieldDescriptor] = []
        self._groups: list[FieldGroup] = []
        self._layout = FormLayout.VERTICAL
        self._css_class: str | None = None
        self._show_validation_summary = True
        self._show_required_indicator = True
        self._required_indicator = "*"
        self._security: FormSecurity | None = None
        self._built = False

    @classmethod
    def create(cls, model_type: type[TModel]) -> "FormBuilder[TModel]":
        return cls(model_type)

    def _check_open(self) -> None:
        if self._built:
            raise FormConfigurationError(
                f"Form for {self.model_type.__name__} is already built; use a new FormBuilder"
            )

    def _check_unique(self, name: str) -> None:
        self._check_open()
        taken = {f.field_name for f in self._fields} | {c.field_name for c in self._collections}
        if name in taken:
            raise FormConfigurationError(f"Field '{name}' is already configured on {self.model_type.__name__}")

    def add_field(
        self, path: str, configure: Callable[[FieldBuilder], Any] | None = None
    ) -> FieldBuilder:
        """
        Add a field for ``path`` and return its builder.

        Raises:
            FormConfigurationError: If the path does not resolve or the
                field name is already used.
        """
        field = FieldDescriptor(self.model_type, path)
        self._check_unique(field.field_name)
        self._fields.append(field)
        builder = FieldBuilder(self, field)
        if configure is not None:
            configure(builder)
        return builder

    def add_fields_from_annotations(self) -> "FormBuilder[TModel]":
        """
        Add the fields declared with markers from ``dynaform.annotations``.

        Attributes without a field marker are left out; call ``add_field``
        for those, or to configure an annotated field further.
        """
        return add_fields_from_annotations(self)

    def add_collection_field(
        self,
        path: str,
        item_type: type,
        configure: Callable[[CollectionFieldBuilder], Any] | None = None,
    ) -> "FormBuilder[TModel]":
        collection = CollectionFieldDescriptor(self.model_type, path, item_type)
        self._check_unique(collection.field_name)
        self._collections.append(collection)
        if configure is not None:
            configure(CollectionFieldBuilder(collection))
        return self

    def add_field_group(self, configure: Callable[[FieldGroupBuilder], Any]) -> "FormBuilder[TModel]":
        group = FieldGroup(name=f"group_{len(self._groups) + 1}", order=len(self._groups))
        configure(FieldGroupBuilder(group))
        self._groups.append(group)
        return self

    def with_layout(self, layout: FormLayout) -> "FormBuilder[TModel]":
        self._layout = layout
        return self

    def with_css_class(self, css_class: str) -> "FormBuilder[TModel]":
        self._css_class = css_class
        return self

    def show_validation_summary(self, show: bool = True) -> "FormBuilder[TModel]":
        self._show_validation_summary = show
        return self

    def show_required_indicator(self, show: bool = True, indicator: str = "*") -> "FormBuilder[TModel]":
        self._show_required_indicator = show
        self._required_indicator = indicator
        return self

    def with_security(self, configure: Callable[[SecurityBuilder], Any]) -> "FormBuilder[TModel]":
        builder = SecurityBuilder(self.model_type)
        configure(builder)
        self._security = builder.build()
        return self

    def build(self) -> FormConfiguration:
        """
        Finalize the form.

        A builder builds one configuration: the built form owns the
        builder's field descriptors, so a second call is rejected.

        Raises:
            FormConfigurationError: If a field group names an unknown field
                or the builder was already built.
        """
        self._check_open()
        names = {f.field_name for f in self._fields}
        for group in self._groups:
            unknown = [n for n in group.field_names if n not in names]
            if unknown:
                raise FormConfigurationError(f"Field group '{group.name}' names unknown fields: {unknown}")

        graph = DependencyGraph()
        for field in self._fields:
            for dependency in field.dependencies:
                if isinstance(dependency.on_changed, LovCascade):
                    dependency.on_changed.graph = graph
                graph.register(dependency)

        configuration = FormConfiguration(
            model_type=self.model_type,
            fields=[ErasedField(f) for f in self._fields],
            dependency_graph=graph,
            collection_fields=self._collections,
            field_groups=self._groups,
            layout=self._layout,
            css_class=self._css_class,
            show_validation_summary=self._show_validation_summary,
            show_required_indicator=self._show_required_indicator,
            required_indicator=self._required_indicator,
            security=self._security,
        )
        self._built = True
        logger.debug(f"Built {configuration!r} with {len(graph)} dependencies")
        return configuration
