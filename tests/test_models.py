"""Tests for dynaform data models."""

import pytest
from pydantic import ValidationError

from dynaform.builders import FormBuilder
from dynaform.lov.query import LovDataResult, LovQuery, SortDefinition
from dynaform.models.render_output import RenderedField, SelectOption
from dynaform.models.schema_output import FormFieldSchema, FormSchema, PropertySchema
from dynaform.models.validation_result import (
    FieldValidationError,
    FormValidationResult,
    ValidationResult,
)

from sample_models import Customer


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_success(self):
        """Test the success factory."""
        result = ValidationResult.success()
        assert result.is_valid is True
        assert result.error_message is None

    def test_failure_with_message(self):
        """Test the failure factory."""
        result = ValidationResult.failure("Too short")
        assert result.is_valid is False
        assert result.error_message == "Too short"

    def test_failure_without_message(self):
        """A failure may carry no message."""
        result = ValidationResult.failure()
        assert result.is_valid is False
        assert result.error_message is None


class TestFormValidationResult:
    """Tests for FormValidationResult model."""

    def test_valid_result(self):
        """Test valid validation result."""
        result = FormValidationResult.from_errors([])
        assert result.is_valid is True
        assert result.error_count == 0

    def test_invalid_result(self):
        """Test invalid validation result."""
        result = FormValidationResult.from_errors(
            [
                FieldValidationError(
                    field_name="email",
                    error_type="EmailValidator",
                    message="Invalid email format",
                    received="not-an-email",
                ),
            ]
        )
        assert result.is_valid is False
        assert result.error_count == 1

    def test_get_field_errors(self):
        """Test getting errors for specific field."""
        result = FormValidationResult.from_errors(
            [
                FieldValidationError(field_name="email", error_type="required", message="Required"),
                FieldValidationError(field_name="email", error_type="format", message="Invalid"),
                FieldValidationError(field_name="name", error_type="required", message="Required"),
            ]
        )
        assert len(result.get_field_errors("email")) == 2
        assert len(result.get_field_errors("name")) == 1

    def test_to_error_dict(self):
        """Test converting errors to dict."""
        result = FormValidationResult.from_errors(
            [
                FieldValidationError(field_name="email", error_type="required", message="Email is required"),
                FieldValidationError(field_name="age", error_type="range", message=None),
            ]
        )
        error_dict = result.to_error_dict()
        assert error_dict["email"] == ["Email is required"]
        assert error_dict["age"] == []
        assert result.summary() == ["Email is required"]


class TestRenderedField:
    """Tests for RenderedField model."""

    def test_defaults(self):
        rendered = RenderedField(field_name="name", widget="text", label="Name")
        assert rendered.required is False
        assert rendered.attributes == {}
        assert rendered.is_supported is True

    def test_unsupported(self):
        rendered = RenderedField(field_name="x", widget="unsupported", label="X", message="nope")
        assert rendered.is_supported is False

    def test_options(self):
        rendered = RenderedField(
            field_name="size",
            widget="select",
            label="Size",
            options=[SelectOption(value="s", label="Small")],
        )
        assert rendered.options[0].label == "Small"


class TestLovQuery:
    """Tests for LovQuery and LovDataResult."""

    def test_defaults(self):
        query = LovQuery()
        assert query.start_index == 0
        assert query.count == 50
        assert query.context == {}

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            LovQuery(start_index=-1)

    def test_zero_count_rejected(self):
        with pytest.raises(ValidationError):
            LovQuery(count=0)

    def test_total_count_cannot_be_smaller_than_page(self):
        with pytest.raises(ValidationError):
            LovDataResult(items=[1, 2, 3], total_count=2)

    def test_from_collection_pages(self):
        query = LovQuery(start_index=2, count=2, sort_definitions=[SortDefinition(property_name="x")])
        result = LovDataResult.from_collection(list(range(5)), query)
        assert result.items == [2, 3]
        assert result.total_count == 5
        assert result.has_more is True

    def test_last_page_has_no_more(self):
        result = LovDataResult.from_collection(list(range(5)), LovQuery(start_index=4, count=2))
        assert result.items == [4]
        assert result.has_more is False

    def test_empty(self):
        result = LovDataResult.empty()
        assert result.items == []
        assert result.total_count == 0


class TestFormFieldSchema:
    """Tests for FormFieldSchema model."""

    def test_basic_field(self):
        """Test creating a basic field schema."""
        field = FormFieldSchema(
            name="email",
            definition=PropertySchema(type="string", title="Email Address", format="email"),
        )
        assert field.name == "email"
        assert field.required is False
        assert field.to_ui_dict() == {"ui:widget": "text"}

    def test_property_dumps_json_schema_keywords(self):
        """Test constraint names follow JSON Schema and unset keys are dropped."""
        definition = PropertySchema(type="string", title="Name", min_length=2, read_only=True)
        assert definition.to_dict() == {"type": "string", "title": "Name", "minLength": 2, "readOnly": True}


class TestFormSchema:
    """Tests for FormSchema export."""

    @pytest.fixture
    def schema(self):
        form = (
            FormBuilder(Customer)
            .add_field("name").with_label("Name").required().with_min_length(3).with_max_length(40)
            .add_field("email").with_label("Email").with_email_validation().with_placeholder("you@example.com")
            .add_field("age").with_label("Age").with_range(18, 99)
            .add_field("is_active").with_label("Active")
            .add_field("birth_date").with_label("Born")
            .add_field("favorite_color").with_options([("red", "Red"), ("blue", "Blue")])
            .build()
        )
        return FormSchema.from_configuration(form, title="Customer")

    def test_json_schema_types(self, schema):
        """Test exported property types and formats."""
        json_schema = schema.to_json_schema()
        props = json_schema["properties"]
        assert json_schema["type"] == "object"
        assert props["name"]["type"] == "string"
        assert props["age"]["type"] == "integer"
        assert props["is_active"]["type"] == "boolean"
        assert props["birth_date"]["format"] == "date"
        assert props["email"]["format"] == "email"

    def test_json_schema_constraints(self, schema):
        """Test validators are exported as constraints."""
        props = schema.to_json_schema()["properties"]
        assert props["name"]["minLength"] == 3
        assert props["name"]["maxLength"] == 40
        assert props["age"]["minimum"] == 18
        assert props["age"]["maximum"] == 99
        assert props["favorite_color"]["enum"] == ["red", "blue"]
        assert schema.to_json_schema()["required"] == ["name"]

    def test_ui_schema_export(self, schema):
        """Test exporting UI schema."""
        ui_schema = schema.to_ui_schema()
        assert ui_schema["email"]["ui:widget"] == "email"
        assert ui_schema["email"]["ui:placeholder"] == "you@example.com"
        assert ui_schema["is_active"]["ui:widget"] == "checkbox"
        assert ui_schema["favorite_color"]["ui:widget"] == "select"
        assert ui_schema["ui:order"][0] == "name"

    def test_form_config_export(self, schema):
        """Test exporting form configuration."""
        config = schema.to_form_config()
        assert config["formId"] == "Customer"
        assert "schema" in config
        assert "uiSchema" in config
