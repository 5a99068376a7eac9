"""
Fluent field builder.

Every configuration method returns the same builder so calls chain:

    FormBuilder(Customer)
        .add_field("name").with_label("Full name").required().with_min_length(3)
        .add_field("email").with_email_validation()
        .build()
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, Iterable, TypeVar

from dynaform.builders.fluent import FluentFieldsMixin
from dynaform.constants import (
    ATTR_ACCEPTED_FILE_TYPES,
    ATTR_FILE_UPLOAD,
    ATTR_LINES,
    ATTR_MAX,
    ATTR_MAX_FILE_SIZE,
    ATTR_MIN,
    ATTR_MULTI_SELECT,
    ATTR_MULTIPLE_FILES,
    ATTR_OPTIONS,
    ATTR_RENDERER_INSTANCE,
    ATTR_SLIDER,
    ATTR_STEP,
)
from dynaform.core.accessor import PropertyAccessor
from dynaform.core.dependency import FieldDependency
from dynaform.core.field import FieldDescriptor
from dynaform.lov.builder import LovBuilder
from dynaform.models.render_output import SelectOption
from dynaform.validation.rules import RuleSet, RuleSetValidator
from dynaform.validation.validators import (
    AsyncValidator,
    CustomValidator,
    EmailValidator,
    FieldValidator,
    MaxLengthValidator,
    MinLengthValidator,
    ModelValidator,
    PatternValidator,
    RangeValidator,
    RequiredValidator,
    SafeTextValidator,
)

if TYPE_CHECKING:
    from dynaform.builders.form_builder import FormBuilder
    from dynaform.core.form import FormConfiguration, FormLayout

TModel = TypeVar("TModel")
TValue = TypeVar("TValue")


class FieldBuilder(FluentFieldsMixin, Generic[TModel, TValue]):
    """
    Configures one ``FieldDescriptor``.

    Form-level methods (``add_field``, ``add_collection_field``, the
    presets, ``with_security``, ``build`` and so on) are forwarded to the
    owning ``FormBuilder`` so one chain can describe the whole form.
    """

    def __init__(self, form_builder: "FormBuilder[TModel]", field: FieldDescriptor[TModel, TValue]):
        self._form_builder = form_builder
        self._field = field

    @property
    def field(self) -> FieldDescriptor[TModel, TValue]:
        return self._field

    # Display

    def with_label(self, label: str) -> "FieldBuilder[TModel, TValue]":
        self._field.label = label
        return self

    def with_placeholder(self, placeholder: str) -> "FieldBuilder[TModel, TValue]":
        self._field.placeholder = placeholder
        return self

    def with_help_text(self, help_text: str) -> "FieldBuilder[TModel, TValue]":
        self._field.help_text = help_text
        return self

    def with_css_class(self, css_class: str) -> "FieldBuilder[TModel, TValue]":
        self._field.css_class = css_class
        return self

    def with_input_type(self, input_type: str) -> "FieldBuilder[TModel, TValue]":
        self._field.input_type = input_type
        return self

    def with_order(self, order: int) -> "FieldBuilder[TModel, TValue]":
        self._field.order = order
        return self

    def with_attribute(self, key: str, value: Any) -> "FieldBuilder[TModel, TValue]":
        self._field.additional_attributes[key] = value
        return self

    # Flags and conditions

    def required(self, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        self._field.is_required = True
        self._field.validators.append(RequiredValidator(message))
        return self

    def required_when(
        self, condition: Callable[[TModel], bool], message: str | None = None
    ) -> "FieldBuilder[TModel, TValue]":
        """Required only while ``condition(model)`` holds."""
        self._field.required_condition = condition
        self._field.validators.append(RequiredValidator(message, condition=condition))
        return self

    def visible_when(self, condition: Callable[[TModel], bool]) -> "FieldBuilder[TModel, TValue]":
        self._field.visibility_condition = condition
        return self

    def hidden(self) -> "FieldBuilder[TModel, TValue]":
        self._field.is_visible = False
        return self

    def disabled(self, disabled: bool = True) -> "FieldBuilder[TModel, TValue]":
        self._field.is_disabled = disabled
        return self

    def disabled_when(self, condition: Callable[[TModel], bool]) -> "FieldBuilder[TModel, TValue]":
        self._field.disabled_condition = condition
        return self

    def read_only(self, read_only: bool = True) -> "FieldBuilder[TModel, TValue]":
        self._field.is_read_only = read_only
        return self

    def read_only_when(self, condition: Callable[[TModel], bool]) -> "FieldBuilder[TModel, TValue]":
        self._field.read_only_condition = condition
        return self

    # Validation

    def with_validator(self, validator: FieldValidator) -> "FieldBuilder[TModel, TValue]":
        self._field.validators.append(validator)
        return self

    def with_validation(
        self, predicate: Callable[[TValue], bool], message: str | None = None
    ) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(CustomValidator(predicate, message))

    def with_async_validation(
        self, predicate: Callable[[TValue], Awaitable[bool]], message: str | None = None
    ) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(AsyncValidator(predicate, message))

    def with_model_validation(
        self, predicate: Callable[[TModel, TValue], Any], message: str | None = None
    ) -> "FieldBuilder[TModel, TValue]":
        """Validate against other fields of the model."""
        return self.with_validator(ModelValidator(predicate, message))

    def with_min_length(self, min_length: int, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(MinLengthValidator(min_length, message))

    def with_max_length(self, max_length: int, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(MaxLengthValidator(max_length, message))

    def with_range(self, minimum: Any, maximum: Any, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        self._field.additional_attributes.setdefault(ATTR_MIN, minimum)
        self._field.additional_attributes.setdefault(ATTR_MAX, maximum)
        return self.with_validator(RangeValidator(minimum, maximum, message))

    def with_pattern(self, pattern: str, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(PatternValidator(pattern, message))

    def with_email_validation(self, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        if self._field.input_type is None:
            self._field.input_type = "email"
        return self.with_validator(EmailValidator(message))

    def with_safe_text(self, message: str | None = None) -> "FieldBuilder[TModel, TValue]":
        return self.with_validator(SafeTextValidator(message))

    def with_rule_set(
        self, rule_set: RuleSet | None = None, message: str | None = None
    ) -> "FieldBuilder[TModel, TValue]":
        """Report this field's violations from a model-level rule set."""
        return self.with_validator(RuleSetValidator(self._field.path, rule_set, message))

    # Dependencies

    def depends_on(
        self,
        source_path: str,
        on_changed: Callable[[TModel, Any], Any],
    ) -> "FieldBuilder[TModel, TValue]":
        """Run ``on_changed(model, source_value)`` whenever ``source_path`` is committed."""
        source = PropertyAccessor(self._field.model_type, source_path)
        self._field.dependencies.append(FieldDependency(source, on_changed, self._field.field_name))
        return self

    # Widgets

    def with_custom_renderer(self, renderer: Any) -> "FieldBuilder[TModel, TValue]":
        """Use a ``CustomFieldRenderer`` class or instance for this field."""
        if isinstance(renderer, type):
            self._field.custom_renderer_type = renderer
        else:
            self._field.custom_renderer_type = type(renderer)
            self._field.additional_attributes[ATTR_RENDERER_INSTANCE] = renderer
        return self

    def with_options(self, options: Iterable[Any]) -> "FieldBuilder[TModel, TValue]":
        """Render as a select; options are ``SelectOption`` or ``(value, label)`` pairs."""
        self._field.additional_attributes[ATTR_OPTIONS] = [
            o if isinstance(o, SelectOption) else SelectOption(value=o[0], label=str(o[1]))
            for o in options
        ]
        return self

    def as_multi_select(self, options: Iterable[Any]) -> "FieldBuilder[TModel, TValue]":
        """Fixed options for a list-valued field; the value is the list of chosen values."""
        self.with_options(options)
        self._field.additional_attributes[ATTR_MULTI_SELECT] = True
        return self

    def as_text_area(self, lines: int = 4) -> "FieldBuilder[TModel, TValue]":
        self._field.additional_attributes[ATTR_LINES] = lines
        return self

    def as_password(self) -> "FieldBuilder[TModel, TValue]":
        return self.with_input_type("password")

    def as_slider(self, minimum: float, maximum: float, step: float = 1.0) -> "FieldBuilder[TModel, TValue]":
        attrs = self._field.additional_attributes
        attrs[ATTR_SLIDER] = True
        attrs[ATTR_MIN] = minimum
        attrs[ATTR_MAX] = maximum
        attrs[ATTR_STEP] = step
        return self

    def as_file_upload(
        self,
        accepted_file_types: str | None = None,
        max_file_size: int | None = None,
        multiple: bool = False,
    ) -> "FieldBuilder[TModel, TValue]":
        attrs = self._field.additional_attributes
        attrs[ATTR_FILE_UPLOAD] = True
        attrs[ATTR_ACCEPTED_FILE_TYPES] = accepted_file_types
        attrs[ATTR_MAX_FILE_SIZE] = max_file_size
        attrs[ATTR_MULTIPLE_FILES] = multiple
        return self

    def as_lov(
        self, item_type: type, configure: Callable[[LovBuilder], Any]
    ) -> "FieldBuilder[TModel, TValue]":
        """
        Back this field with a list-of-values picker.

        Raises:
            LovConfigurationError: If ``configure`` sets no data source or key.
        """
        builder = LovBuilder(self._field.model_type, item_type)
        configure(builder)
        builder.build(self._field)
        return self

    def as_multi_select_lov(
        self, item_type: type, configure: Callable[[LovBuilder], Any]
    ) -> "FieldBuilder[TModel, TValue]":
        def configure_multiple(builder: LovBuilder) -> None:
            configure(builder)
            builder.allow_multiple_selection()

        return self.as_lov(item_type, configure_multiple)

    # Continuation: form-level calls go back to the form builder

    def add_field(
        self, path: str, configure: Callable[["FieldBuilder"], Any] | None = None
    ) -> "FieldBuilder":
        return self._form_builder.add_field(path, configure)

    def add_collection_field(
        self, path: str, item_type: type, configure: Callable[..., Any] | None = None
    ) -> "FormBuilder[TModel]":
        return self._form_builder.add_collection_field(path, item_type, configure)

    def add_field_group(self, configure: Callable[..., Any]) -> "FormBuilder[TModel]":
        return self._form_builder.add_field_group(configure)

    def add_fields_from_annotations(self) -> "FormBuilder[TModel]":
        return self._form_builder.add_fields_from_annotations()

    def with_layout(self, layout: "FormLayout") -> "FormBuilder[TModel]":
        return self._form_builder.with_layout(layout)

    def with_form_css_class(self, css_class: str) -> "FormBuilder[TModel]":
        """Form-level CSS class; ``with_css_class`` styles this field."""
        return self._form_builder.with_css_class(css_class)

    def show_validation_summary(self, show: bool = True) -> "FormBuilder[TModel]":
        return self._form_builder.show_validation_summary(show)

    def show_required_indicator(self, show: bool = True, indicator: str = "*") -> "FormBuilder[TModel]":
        return self._form_builder.show_required_indicator(show, indicator)

    def with_security(self, configure: Callable[..., Any]) -> "FormBuilder[TModel]":
        return self._form_builder.with_security(configure)

    def build(self) -> "FormConfiguration":
        return self._form_builder.build()
