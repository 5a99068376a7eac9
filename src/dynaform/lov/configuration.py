"""
LOV configuration.

Describes where a list-of-values field gets its data from, how items are
shown and which model attributes a selection fills in.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from dynaform.config import get_config
from dynaform.core.accessor import PropertyAccessor


class SelectionMode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


class ModalSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"


@dataclass
class LovModalOptions:
    """Picker dialog settings."""

    title: str = "Select Item"
    size: ModalSize = ModalSize.LARGE
    grid_height: str = "400px"
    close_on_backdrop_click: bool = True
    close_on_escape: bool = True
    item_size: int = 52


@dataclass
class LovSearchOptions:
    """Search box settings."""

    enabled: bool = True
    placeholder: str = "Search..."
    debounce_ms: int = field(default_factory=lambda: get_config().lov_debounce_ms)
    min_search_length: int = 0
    search_fields: list[str] = field(default_factory=list)


@dataclass
class LovDependencyInfo:
    """
    Cascading link to a parent field.

    The parent's current value is placed in the query context under
    ``context_key``; with ``clear_on_change`` the LOV's selection is
    cleared whenever the parent changes.
    """

    source: PropertyAccessor
    context_key: str
    clear_on_change: bool = True

    @property
    def source_field_name(self) -> str:
        return self.source.name


@dataclass
class LovColumnDefinition:
    """One column of the picker grid."""

    header: str
    property_name: str
    value_selector: Callable[[Any], Any] | None = None
    sortable: bool = True
    filterable: bool = True
    width: str | None = None
    format: str | None = None

    def cell_value(self, item: Any) -> Any:
        if self.value_selector is not None:
            return self.value_selector(item)
        return read_property(item, self.property_name)

    def cell_text(self, item: Any) -> str:
        value = self.cell_value(item)
        if value is None:
            return ""
        if self.format:
            return format(value, self.format)
        return str(value)


@dataclass
class LovConfiguration:
    """Everything a LOV field needs at runtime."""

    item_type: type
    value_selector: Callable[[Any], Any] | None = None
    display_selector: Callable[[Any], str] | None = None
    data_provider: Callable[..., Any] | None = None
    data_service_key: Any = None
    catalog_id: str | None = None
    columns: list[LovColumnDefinition] = field(default_factory=list)
    field_mappings: list[Any] = field(default_factory=list)
    dependencies: list[LovDependencyInfo] = field(default_factory=list)
    selection_mode: SelectionMode = SelectionMode.SINGLE
    modal_options: LovModalOptions = field(default_factory=LovModalOptions)
    search_options: LovSearchOptions = field(default_factory=LovSearchOptions)

    @property
    def is_multiple(self) -> bool:
        return self.selection_mode is SelectionMode.MULTIPLE

    @property
    def has_data_source(self) -> bool:
        return any(
            source is not None
            for source in (self.data_provider, self.data_service_key, self.catalog_id)
        )

    def key_of(self, item: Any) -> Any:
        return self.value_selector(item) if self.value_selector is not None else item

    def display_of(self, item: Any) -> str:
        if item is None:
            return ""
        if self.display_selector is not None:
            return self.display_selector(item)
        return str(self.key_of(item))

    def describe(self) -> dict[str, Any]:
        """Serializable summary used by the LOV renderer."""
        return {
            "item_type": self.item_type.__name__,
            "selection_mode": self.selection_mode.value,
            "columns": [
                {
                    "header": c.header,
                    "property_name": c.property_name,
                    "sortable": c.sortable,
                    "filterable": c.filterable,
                    "width": c.width,
                }
                for c in self.columns
            ],
            "modal": {
                "title": self.modal_options.title,
                "size": self.modal_options.size.value,
                "grid_height": self.modal_options.grid_height,
            },
            "search": {
                "enabled": self.search_options.enabled,
                "placeholder": self.search_options.placeholder,
                "debounce_ms": self.search_options.debounce_ms,
            },
            "depends_on": [d.source_field_name for d in self.dependencies],
        }


def read_property(item: Any, name: str) -> Any:
    """Read ``name`` from an item object or mapping."""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)
