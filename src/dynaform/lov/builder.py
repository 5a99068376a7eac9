"""
Fluent LOV builder.

Used through ``FieldBuilder.as_lov``:

    form.add_field("state_code").as_lov(State, lambda lov: (
        lov.with_items(states, search_fields=["name"])
           .with_key("code")
           .with_display(lambda s: s.name)
           .depends_on("country_code", "country_code")
           .map_field("name", "state_name")
    ))
"""

from typing import Any, Callable

from dynaform.constants import ATTR_LOV_CONFIGURATION, ATTR_LOV_ITEM_TYPE
from dynaform.core.accessor import PropertyAccessor
from dynaform.core.dependency import FieldDependency
from dynaform.core.field import FieldDescriptor
from dynaform.errors import LovConfigurationError
from dynaform.lov.cascade import LovCascade
from dynaform.lov.configuration import (
    LovColumnDefinition,
    LovConfiguration,
    LovDependencyInfo,
    ModalSize,
    SelectionMode,
    read_property,
)
from dynaform.lov.mapping import AsyncLovFieldMapping, LovFieldMapping, MappingAction, SourceSelector
from dynaform.lov.providers import LambdaLovDataProvider, QueryFunction


def _selector(selector: str | Callable[[Any], Any]) -> Callable[[Any], Any]:
    if isinstance(selector, str):
        return lambda item: read_property(item, selector)
    return selector


class LovBuilder:
    """Builds the ``LovConfiguration`` of one field."""

    def __init__(self, model_type: type, item_type: type):
        self.model_type = model_type
        self._configuration = LovConfiguration(item_type=item_type)
        self._items: Any = None
        self._search_fields: list[str] | None = None

    @property
    def configuration(self) -> LovConfiguration:
        return self._configuration

    # Data source

    def with_data_source(self, fetch: QueryFunction) -> "LovBuilder":
        """Use ``fetch(query, token)`` returning a ``LovDataResult``."""
        self._configuration.data_provider = fetch
        self._items = None
        return self

    def with_items(
        self,
        items: Any,
        search_fields: list[str] | None = None,
    ) -> "LovBuilder":
        """Use an in-memory collection, or a callable returning one, as the data source."""
        if search_fields:
            self._configuration.search_options.search_fields = list(search_fields)
        self._items = items
        self._search_fields = search_fields
        return self

    def with_data_service(self, key: Any) -> "LovBuilder":
        """Use the provider registered under ``key`` in the service registry."""
        self._configuration.data_service_key = key
        return self

    def with_catalog_id(self, lov_id: str) -> "LovBuilder":
        """Use the provider registered under ``lov_id`` in the ``LovProviderCatalog`` service."""
        self._configuration.catalog_id = lov_id
        return self

    # Value and display

    def with_key(self, selector: str | Callable[[Any], Any]) -> "LovBuilder":
        self._configuration.value_selector = _selector(selector)
        return self

    def with_display(self, selector: str | Callable[[Any], str]) -> "LovBuilder":
        self._configuration.display_selector = _selector(selector)
        return self

    def add_column(
        self,
        header: str,
        property_name: str,
        value_selector: Callable[[Any], Any] | None = None,
        sortable: bool = True,
        filterable: bool = True,
        width: str | None = None,
        format: str | None = None,
    ) -> "LovBuilder":
        self._configuration.columns.append(
            LovColumnDefinition(
                header=header,
                property_name=property_name,
                value_selector=value_selector,
                sortable=sortable,
                filterable=filterable,
                width=width,
                format=format,
            )
        )
        return self

    # Mappings

    def map_field(self, source: SourceSelector, target_path: str) -> "LovBuilder":
        """Copy ``source`` of the selected item to ``target_path`` of the model."""
        target = PropertyAccessor(self.model_type, target_path)
        self._configuration.field_mappings.append(LovFieldMapping(source, target))
        return self

    def map_field_async(self, source: SourceSelector, target_path: str, action: MappingAction) -> "LovBuilder":
        """Like ``map_field``, then await ``action(item, model, services, token)``."""
        target = PropertyAccessor(self.model_type, target_path)
        self._configuration.field_mappings.append(AsyncLovFieldMapping(source, target, action))
        return self

    # Cascading

    def depends_on(
        self,
        source_path: str,
        context_key: str | None = None,
        clear_on_change: bool = True,
    ) -> "LovBuilder":
        """Pass ``source_path``'s value to the provider as ``query.context[context_key]``."""
        source = PropertyAccessor(self.model_type, source_path)
        self._configuration.dependencies.append(
            LovDependencyInfo(source=source, context_key=context_key or source.name, clear_on_change=clear_on_change)
        )
        return self

    # Display options

    def allow_multiple_selection(self) -> "LovBuilder":
        self._configuration.selection_mode = SelectionMode.MULTIPLE
        return self

    def with_modal_title(self, title: str) -> "LovBuilder":
        self._configuration.modal_options.title = title
        return self

    def with_modal_size(self, size: ModalSize) -> "LovBuilder":
        self._configuration.modal_options.size = size
        return self

    def with_grid_height(self, height: str) -> "LovBuilder":
        self._configuration.modal_options.grid_height = height
        return self

    def disable_search(self) -> "LovBuilder":
        self._configuration.search_options.enabled = False
        return self

    def with_search_placeholder(self, placeholder: str) -> "LovBuilder":
        self._configuration.search_options.placeholder = placeholder
        return self

    def with_search_debounce(self, milliseconds: int) -> "LovBuilder":
        self._configuration.search_options.debounce_ms = milliseconds
        return self

    def with_min_search_length(self, length: int) -> "LovBuilder":
        self._configuration.search_options.min_search_length = length
        return self

    def build(self, field: FieldDescriptor) -> LovConfiguration:
        """
        Attach the configuration to ``field``.

        Raises:
            LovConfigurationError: If no data source or key selector was configured.
        """
        configuration = self._configuration
        if self._items is not None:
            provider = LambdaLovDataProvider.from_collection(
                self._items,
                value_selector=configuration.value_selector,
                search_fields=self._search_fields,
                display_selector=configuration.display_selector,
            )
            configuration.data_provider = provider.get_items

        if not configuration.has_data_source:
            raise LovConfigurationError(f"No data source configured for LOV field '{field.field_name}'")
        if configuration.value_selector is None:
            raise LovConfigurationError(f"LOV field '{field.field_name}' needs a key selector (with_key)")

        field.additional_attributes[ATTR_LOV_CONFIGURATION] = configuration
        field.additional_attributes[ATTR_LOV_ITEM_TYPE] = configuration.item_type

        for dependency in configuration.dependencies:
            if dependency.clear_on_change:
                field.dependencies.append(
                    FieldDependency(
                        dependency.source,
                        LovCascade(field.accessor, configuration),
                        dependent_field_name=field.field_name,
                    )
                )
        return configuration
