"""
Field descriptors.

A ``FieldDescriptor`` is the per-property configuration unit of a form:
label, flags, validators, dependencies and renderer hints for one model
attribute. ``CollectionFieldDescriptor`` describes a list-valued attribute
whose items are edited with their own item form.
"""

from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from dynaform.core.accessor import PropertyAccessor

if TYPE_CHECKING:
    from dynaform.core.dependency import FieldDependency
    from dynaform.core.form import FormConfiguration
    from dynaform.validation.validators import FieldValidator

TModel = TypeVar("TModel")
TValue = TypeVar("TValue")

ModelPredicate = Callable[[Any], bool]


class FieldDescriptor(Generic[TModel, TValue]):
    """
    Configuration for one model attribute.

    The accessor path is resolved once at construction; ``field_name`` is
    its last segment and never changes afterwards.

    Usage:
        field = FieldDescriptor(Customer, "address.street")
        field.label = "Street"
        field.is_required = True
        field.get_value(customer)
    """

    def __init__(self, model_type: type[TModel], path: str | PropertyAccessor):
        self.accessor = path if isinstance(path, PropertyAccessor) else PropertyAccessor(model_type, path)
        self.model_type = model_type

        self.label: str = self.accessor.name
        self.placeholder: str | None = None
        self.help_text: str | None = None
        self.css_class: str | None = None
        self.input_type: str | None = None

        self.is_required: bool = False
        self.is_visible: bool = True
        self.is_disabled: bool = False
        self.is_read_only: bool = False

        self.required_condition: ModelPredicate | None = None
        self.visibility_condition: ModelPredicate | None = None
        self.disabled_condition: ModelPredicate | None = None
        self.read_only_condition: ModelPredicate | None = None

        self.order: int = 0
        self.additional_attributes: dict[str, Any] = {}
        self.validators: list["FieldValidator"] = []
        self.dependencies: list["FieldDependency"] = []
        self.custom_renderer_type: type | None = None

    @property
    def field_name(self) -> str:
        return self.accessor.name

    @property
    def path(self) -> str:
        return self.accessor.path

    @property
    def value_type(self) -> Any:
        return self.accessor.value_type

    def get_value(self, model: TModel) -> TValue:
        return self.accessor.get(model)

    def set_value(self, model: TModel, value: TValue) -> None:
        self.accessor.set(model, value)

    def is_required_for(self, model: TModel) -> bool:
        if self.required_condition is not None:
            return bool(self.required_condition(model))
        return self.is_required

    def is_visible_for(self, model: TModel) -> bool:
        if self.visibility_condition is not None:
            return bool(self.visibility_condition(model))
        return self.is_visible

    def is_disabled_for(self, model: TModel) -> bool:
        if self.disabled_condition is not None:
            return bool(self.disabled_condition(model))
        return self.is_disabled

    def is_read_only_for(self, model: TModel) -> bool:
        if self.read_only_condition is not None:
            return bool(self.read_only_condition(model))
        return self.is_read_only

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.model_type.__name__}.{self.path})"


class CollectionFieldDescriptor(Generic[TModel]):
    """
    A list-valued attribute edited as a repeating group.

    ``item_configuration`` is the form used to edit each item; its fields'
    validators are run against every item by the collection validator.
    """

    def __init__(self, model_type: type[TModel], path: str, item_type: type):
        self.accessor = PropertyAccessor(model_type, path)
        self.model_type = model_type
        self.item_type = item_type

        self.label: str = self.accessor.name
        self.order: int = 0
        self.is_visible: bool = True
        self.can_add: bool = True
        self.can_remove: bool = True
        self.can_reorder: bool = False
        self.min_items: int = 0
        self.max_items: int = 0
        self.add_button_text: str = "Add Item"
        self.empty_text: str | None = None
        self.item_configuration: "FormConfiguration | None" = None

    @property
    def field_name(self) -> str:
        return self.accessor.name

    def get_items(self, model: TModel) -> list[Any]:
        items = self.accessor.get(model)
        return list(items) if items is not None else []

    def set_items(self, model: TModel, items: list[Any]) -> None:
        self.accessor.set(model, items)

    def __repr__(self) -> str:
        return f"CollectionFieldDescriptor({self.model_type.__name__}.{self.accessor.path})"
