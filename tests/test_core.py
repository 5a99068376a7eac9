"""Tests for accessors, field descriptors, type erasure and the dependency graph."""

from decimal import Decimal

import pytest
from pydantic import BaseModel

from dynaform.core.accessor import PropertyAccessor, coerce_value, concrete_type, default_value
from dynaform.core.dependency import DependencyGraph, FieldDependency
from dynaform.core.erasure import ErasedField
from dynaform.core.field import FieldDescriptor
from dynaform.core.form import FormConfiguration
from dynaform.errors import DependencyCycleError, FormConfigurationError
from dynaform.validation.validators import CustomValidator

from sample_models import Address, Customer


class PydanticCustomer(BaseModel):
    name: str = ""
    score: int | None = None


class PlainProduct:
    title: str

    def __init__(self):
        self.title = ""
        self._price = 0.0

    @property
    def price(self) -> float:
        return self._price

    @price.setter
    def price(self, value: float) -> None:
        self._price = value


class TestPropertyAccessor:
    """Tests for PropertyAccessor."""

    def test_simple_path(self):
        accessor = PropertyAccessor(Customer, "name")
        assert accessor.name == "name"
        assert accessor.value_type is str

    def test_nested_path_name_is_last_segment(self):
        accessor = PropertyAccessor(Customer, "address.street")
        assert accessor.name == "street"
        assert accessor.path == "address.street"
        assert accessor.value_type is str

    def test_get_and_set_nested(self):
        customer = Customer(address=Address(street="Main"))
        accessor = PropertyAccessor(Customer, "address.street")
        assert accessor.get(customer) == "Main"
        accessor.set(customer, "High")
        assert customer.address.street == "High"

    def test_unknown_attribute_raises(self):
        with pytest.raises(FormConfigurationError):
            PropertyAccessor(Customer, "missing")

    def test_malformed_path_raises(self):
        with pytest.raises(FormConfigurationError):
            PropertyAccessor(Customer, "address..street")

    def test_empty_path_raises(self):
        with pytest.raises(FormConfigurationError):
            PropertyAccessor(Customer, "")

    def test_pydantic_model(self):
        accessor = PropertyAccessor(PydanticCustomer, "score")
        model = PydanticCustomer()
        accessor.set(model, 5)
        assert accessor.get(model) == 5
        assert concrete_type(accessor.value_type) is int

    def test_typed_property(self):
        accessor = PropertyAccessor(PlainProduct, "price")
        product = PlainProduct()
        accessor.set(product, 9.5)
        assert accessor.get(product) == 9.5
        assert accessor.value_type is float


class TestConversion:
    """Tests for default_value and coerce_value."""

    @pytest.mark.parametrize(
        "tp, expected",
        [
            (str, ""),
            (int, 0),
            (float, 0.0),
            (bool, False),
            (Decimal, Decimal(0)),
            (list[str], []),
            (dict[str, int], {}),
            (int | None, None),
        ],
    )
    def test_default_value(self, tp, expected):
        assert default_value(tp) == expected

    def test_none_becomes_default(self):
        assert coerce_value(None, int) == 0

    def test_empty_string_becomes_default(self):
        assert coerce_value("", int) == 0

    def test_convertible_value(self):
        assert coerce_value("42", int) == 42

    def test_unconvertible_value_becomes_default(self):
        assert coerce_value("not a number", int) == 0

    def test_instance_passes_through(self):
        address = Address(street="x")
        assert coerce_value(address, Address) is address


class TestFieldDescriptor:
    """Tests for FieldDescriptor."""

    def test_defaults(self):
        field = FieldDescriptor(Customer, "email")
        assert field.field_name == "email"
        assert field.label == "email"
        assert field.is_visible is True
        assert field.is_required is False
        assert field.validators == []

    def test_field_name_is_stable(self):
        field = FieldDescriptor(Customer, "address.city")
        field.label = "City"
        assert field.field_name == "city"
        with pytest.raises(AttributeError):
            field.field_name = "other"

    def test_conditions_override_flags(self):
        field = FieldDescriptor(Customer, "nickname")
        field.visibility_condition = lambda c: c.is_active
        assert field.is_visible_for(Customer(is_active=False)) is False
        assert field.is_visible_for(Customer(is_active=True)) is True


class TestErasedField:
    """Tests for the type-erased adapter."""

    def test_writes_reach_typed_descriptor(self):
        typed = FieldDescriptor(Customer, "age")
        erased = ErasedField(typed)
        erased.label = "Age"
        erased.is_disabled = True
        erased.additional_attributes["min"] = 0
        assert typed.label == "Age"
        assert typed.is_disabled is True
        assert typed.additional_attributes == {"min": 0}

    def test_actual_field_type(self):
        assert ErasedField(FieldDescriptor(Customer, "age")).actual_field_type() is int
        assert ErasedField(FieldDescriptor(Customer, "nickname")).actual_field_type() is str
        assert ErasedField(FieldDescriptor(Customer, "tags")).actual_field_type() is list

    def test_typed_descriptor(self):
        typed = FieldDescriptor(Customer, "age")
        assert ErasedField(typed).typed_descriptor is typed

    @pytest.mark.asyncio
    async def test_validator_receives_converted_value(self):
        seen = []
        typed = FieldDescriptor(Customer, "age")
        typed.validators.append(CustomValidator(lambda v: seen.append(v) or True))
        erased = ErasedField(typed)

        await erased.validators[0].validate(Customer(), "17")
        await erased.validators[0].validate(Customer(), "seventeen")

        assert seen == [17, 0]

    def test_set_value_converts(self):
        erased = ErasedField(FieldDescriptor(Customer, "age"))
        customer = Customer()
        erased.set_value(customer, "33")
        assert customer.age == 33


class TestFormConfiguration:
    """Tests for FormConfiguration ordering and lookups."""

    def _fields(self):
        first = FieldDescriptor(Customer, "name")
        second = FieldDescriptor(Customer, "email")
        third = FieldDescriptor(Customer, "age")
        third.order = -1
        second.is_required = True
        return [ErasedField(f) for f in (first, second, third)]

    def test_sorted_by_order_then_insertion(self):
        form = FormConfiguration(Customer, self._fields())
        assert [f.field_name for f in form.fields] == ["age", "name", "email"]

    def test_fields_are_immutable(self):
        form = FormConfiguration(Customer, self._fields())
        assert isinstance(form.fields, tuple)

    def test_required_and_visible(self):
        form = FormConfiguration(Customer, self._fields())
        form.get_field("name").visibility_condition = lambda c: bool(c.email)
        assert [f.field_name for f in form.get_required_fields()] == ["email"]
        assert [f.field_name for f in form.get_visible_fields(Customer())] == ["age", "email"]

    def test_defaults(self):
        form = FormConfiguration(Customer, [])
        assert form.show_validation_summary is True
        assert form.show_required_indicator is True
        assert form.required_indicator == "*"
        assert form.has_security is False


class TestDependencyGraph:
    """Tests for DependencyGraph."""

    @pytest.mark.asyncio
    async def test_notify_runs_only_matching_callbacks_in_order(self):
        calls = []
        graph = DependencyGraph()
        name = PropertyAccessor(Customer, "name")
        email = PropertyAccessor(Customer, "email")
        graph.register(FieldDependency(name, lambda m, v: calls.append(("first", v))))
        graph.register(FieldDependency(email, lambda m, v: calls.append(("unrelated", v))))
        graph.register(FieldDependency(name, lambda m, v: calls.append(("second", v))))

        await graph.notify("name", Customer(name="Ada"))

        assert calls == [("first", "Ada"), ("second", "Ada")]

    @pytest.mark.asyncio
    async def test_async_callback(self):
        calls = []

        async def on_changed(model, value):
            calls.append(value)

        graph = DependencyGraph()
        graph.register(FieldDependency(PropertyAccessor(Customer, "age"), on_changed))
        await graph.notify("age", Customer(age=4))
        assert calls == [4]

    @pytest.mark.asyncio
    async def test_callback_errors_propagate(self):
        def broken(model, value):
            raise RuntimeError("boom")

        graph = DependencyGraph()
        graph.register(FieldDependency(PropertyAccessor(Customer, "name"), broken))
        with pytest.raises(RuntimeError):
            await graph.notify("name", Customer())

    @pytest.mark.asyncio
    async def test_cycle_hits_depth_cap(self):
        graph = DependencyGraph(max_depth=5)
        name = PropertyAccessor(Customer, "name")
        email = PropertyAccessor(Customer, "email")

        async def name_changed(model, value):
            await graph.notify("email", model)

        async def email_changed(model, value):
            await graph.notify("name", model)

        graph.register(FieldDependency(name, name_changed))
        graph.register(FieldDependency(email, email_changed))

        with pytest.raises(DependencyCycleError):
            await graph.notify("name", Customer())

    @pytest.mark.asyncio
    async def test_unknown_name_is_noop(self):
        await DependencyGraph().notify("nothing", Customer())
