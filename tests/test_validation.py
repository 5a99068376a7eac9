"""Tests for validators, rule sets, collection validation and the pipeline."""

import asyncio

import pytest
from pydantic import BaseModel, Field

from dynaform.builders import FormBuilder
from dynaform.services import ServiceRegistry
from dynaform.validation import (
    CustomValidator,
    EmailValidator,
    MaxLengthValidator,
    MinLengthValidator,
    ModelValidator,
    PatternValidator,
    PydanticRuleSet,
    RangeValidator,
    RequiredValidator,
    RuleSetValidator,
    SafeTextValidator,
    ValidationPipeline,
    rule_set_key,
)

from sample_models import Address, Customer, Order, OrderLine


class AddressRules(BaseModel):
    street: str = Field(min_length=1)
    city: str = ""


class CustomerRules(BaseModel):
    name: str = ""
    address: AddressRules


class TestRequiredValidator:
    """Tests for RequiredValidator."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, "", "   ", False, [], {}])
    async def test_missing_values_fail(self, value):
        result = await RequiredValidator().validate(Customer(), value)
        assert result.is_valid is False
        assert result.error_message == "This field is required."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, "x", True, ["a"], 0.0])
    async def test_present_values_pass(self, value):
        result = await RequiredValidator().validate(Customer(), value)
        assert result.is_valid is True

    @pytest.mark.asyncio
    async def test_condition_disables_check(self):
        validator = RequiredValidator(condition=lambda c: c.is_active)
        assert (await validator.validate(Customer(is_active=False), "")).is_valid is True
        assert (await validator.validate(Customer(is_active=True), "")).is_valid is False

    @pytest.mark.asyncio
    async def test_custom_message(self):
        result = await RequiredValidator("Name please").validate(Customer(), None)
        assert result.error_message == "Name please"

    @pytest.mark.asyncio
    async def test_raising_condition_is_a_failure(self):
        def broken(customer):
            raise RuntimeError("bad condition")

        result = await RequiredValidator("Nickname please", condition=broken).validate(Customer(), "Ace")
        assert result.is_valid is False
        assert result.error_message == "Nickname please"


class TestLengthAndRangeValidators:
    """Tests for length, range and pattern validators."""

    @pytest.mark.asyncio
    async def test_min_length(self):
        validator = MinLengthValidator(3)
        assert (await validator.validate(None, "abc")).is_valid is True
        assert (await validator.validate(None, "ab")).is_valid is False
        assert (await validator.validate(None, "")).is_valid is False
        assert (await validator.validate(None, None)).is_valid is False
        assert (await validator.validate(None, "ab")).error_message == "Must be at least 3 characters long"

    @pytest.mark.asyncio
    async def test_max_length(self):
        validator = MaxLengthValidator(3)
        assert (await validator.validate(None, "abc")).is_valid is True
        assert (await validator.validate(None, "abcd")).is_valid is False
        assert (await validator.validate(None, None)).is_valid is True

    @pytest.mark.asyncio
    async def test_range(self):
        validator = RangeValidator(18, 99)
        assert (await validator.validate(None, 18)).is_valid is True
        assert (await validator.validate(None, 100)).is_valid is False
        assert (await validator.validate(None, None)).is_valid is True
        assert (await validator.validate(None, "abc")).is_valid is False
        assert validator.error_message == "Must be between 18 and 99"

    @pytest.mark.asyncio
    async def test_pattern_uses_full_match(self):
        validator = PatternValidator(r"[A-Z]{2}")
        assert (await validator.validate(None, "FR")).is_valid is True
        assert (await validator.validate(None, "FRA")).is_valid is False
        assert (await validator.validate(None, "")).is_valid is True

    @pytest.mark.asyncio
    async def test_email(self):
        validator = EmailValidator()
        assert (await validator.validate(None, "ada@example.com")).is_valid is True
        assert (await validator.validate(None, "not-an-email")).is_valid is False

    @pytest.mark.asyncio
    async def test_safe_text(self):
        validator = SafeTextValidator()
        assert (await validator.validate(None, "Hello there")).is_valid is True
        assert (await validator.validate(None, "<script>alert(1)</script>")).is_valid is False


class TestPredicateValidators:
    """Tests for predicate-based validators."""

    @pytest.mark.asyncio
    async def test_raising_predicate_is_a_failure(self):
        def broken(value):
            raise ValueError("boom")

        result = await CustomValidator(broken, "Broken").validate(None, "x")
        assert result.is_valid is False
        assert result.error_message == "Broken"

    @pytest.mark.asyncio
    async def test_model_validator_sees_model(self):
        validator = ModelValidator(lambda c, v: v != c.name, "Must differ from name")
        assert (await validator.validate(Customer(name="ada"), "ada")).is_valid is False
        assert (await validator.validate(Customer(name="ada"), "bob")).is_valid is True

    @pytest.mark.asyncio
    async def test_async_model_validator(self):
        async def check(model, value):
            await asyncio.sleep(0)
            return value > model.age

        validator = ModelValidator(check, "Too small")
        assert (await validator.validate(Customer(age=5), 6)).is_valid is True
        assert (await validator.validate(Customer(age=5), 4)).is_valid is False


class TestRuleSetValidator:
    """Tests for rule-set validation by property path."""

    @pytest.mark.asyncio
    async def test_violation_is_reported_only_on_its_path(self):
        rules = PydanticRuleSet(CustomerRules)
        customer = Customer(address=Address(street="", city="Paris"))

        street = await RuleSetValidator("address.street", rules).validate(customer, "")
        city = await RuleSetValidator("address.city", rules).validate(customer, "Paris")

        assert street.is_valid is False
        assert street.error_message
        assert city.is_valid is True

    @pytest.mark.asyncio
    async def test_rule_set_from_services(self):
        services = ServiceRegistry()
        services.register(rule_set_key(Customer), PydanticRuleSet(CustomerRules))
        customer = Customer(address=Address(street=""))

        result = await RuleSetValidator("address.street", error_message="Street needed").validate(
            customer, "", services
        )
        assert result.is_valid is False
        assert result.error_message == "Street needed"

    @pytest.mark.asyncio
    async def test_no_rule_set_is_valid(self):
        result = await RuleSetValidator("address.street").validate(Customer(), "", ServiceRegistry())
        assert result.is_valid is True


class TestCollectionValidation:
    """Tests for collection field validation."""

    def _form(self, min_items=0, max_items=0):
        return (
            FormBuilder(Order)
            .add_collection_field(
                "lines",
                OrderLine,
                lambda c: (
                    c.with_label("Lines")
                    .with_min_items(min_items)
                    .with_max_items(max_items)
                    .with_item_form(
                        lambda item: item.add_field("product_name").with_label("ProductName").required()
                    )
                ),
            )
            .build()
        )

    @pytest.mark.asyncio
    async def test_min_items(self):
        form = self._form(min_items=1)
        errors = await ValidationPipeline().validate_collection(Order(), form.collection_fields[0])
        assert len(errors) == 1
        assert errors[0].message == "Lines requires at least 1 item(s)."

    @pytest.mark.asyncio
    async def test_max_items(self):
        form = self._form(max_items=2)
        order = Order(lines=[OrderLine("a"), OrderLine("b"), OrderLine("c")])
        errors = await ValidationPipeline().validate_collection(order, form.collection_fields[0])
        assert [e.message for e in errors] == ["Lines allows at most 2 item(s)."]

    @pytest.mark.asyncio
    async def test_item_errors_name_index_and_field(self):
        form = self._form()
        order = Order(lines=[OrderLine(""), OrderLine("Widget")])
        errors = await ValidationPipeline().validate_collection(order, form.collection_fields[0])
        assert len(errors) == 1
        assert "[1]" in errors[0].message
        assert "ProductName" in errors[0].message
        assert errors[0].field_name == "lines"


class TestValidationPipeline:
    """Tests for ValidationPipeline."""

    @pytest.fixture
    def form(self):
        return (
            FormBuilder(Customer)
            .add_field("name").required().with_min_length(3)
            .add_field("email").with_email_validation()
            .add_field("nickname").hidden().required()
            .build()
        )

    @pytest.mark.asyncio
    async def test_all_validators_run(self, form):
        pipeline = ValidationPipeline()
        name = form.get_field("name")

        assert len(await pipeline.validate_field(Customer(name=""), name)) == 2
        assert len(await pipeline.validate_field(Customer(name="ab"), name)) == 1
        assert len(await pipeline.validate_field(Customer(name="abc"), name)) == 0

    @pytest.mark.asyncio
    async def test_error_type_is_validator_name(self, form):
        errors = await ValidationPipeline().validate_field(Customer(), form.get_field("name"))
        assert [e.error_type for e in errors] == ["RequiredValidator", "MinLengthValidator"]

    @pytest.mark.asyncio
    async def test_remaining_validators_run_after_a_faulty_one(self):
        def broken(value):
            raise RuntimeError("boom")

        form = (
            FormBuilder(Customer)
            .add_field("name").with_validation(broken, "Broken").with_min_length(3)
            .build()
        )
        errors = await ValidationPipeline().validate_field(Customer(name="ab"), form.get_field("name"))
        assert [e.message for e in errors] == ["Broken", "Must be at least 3 characters long"]

    @pytest.mark.asyncio
    async def test_faulty_required_condition_does_not_abort_the_form(self):
        def broken(customer):
            raise RuntimeError("bad condition")

        form = (
            FormBuilder(Customer)
            .add_field("nickname").required_when(broken, "Nickname please")
            .add_field("email").required("Email please")
            .build()
        )
        result = await ValidationPipeline().validate(Customer(), form)
        assert result.to_error_dict() == {"nickname": ["Nickname please"], "email": ["Email please"]}

    @pytest.mark.asyncio
    async def test_form_validation(self, form):
        result = await ValidationPipeline().validate(Customer(name="Ada", email="bad"), form)
        assert result.is_valid is False
        assert set(result.to_error_dict()) == {"email", "nickname"}

    @pytest.mark.asyncio
    async def test_hidden_fields_can_be_skipped(self, form):
        pipeline = ValidationPipeline(validate_hidden_fields=False)
        result = await pipeline.validate(Customer(name="Ada", email="ada@example.com"), form)
        assert result.is_valid is True

    @pytest.mark.asyncio
    async def test_rule_set_through_pipeline(self):
        services = ServiceRegistry()
        services.register(rule_set_key(Customer), PydanticRuleSet(CustomerRules))
        form = (
            FormBuilder(Customer)
            .add_field("address.street").with_rule_set()
            .add_field("address.city").with_rule_set()
            .build()
        )
        result = await ValidationPipeline().validate(Customer(), form, services)
        assert list(result.to_error_dict()) == ["street"]
