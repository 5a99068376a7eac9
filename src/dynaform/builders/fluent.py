"""
Shortcuts for common field shapes.

Mixed into ``FormBuilder`` so forms can be written as:

    FormBuilder(Contact).add_required_text_field("name", "Name", min_length=2)
"""

from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from dynaform.builders.field_builder import FieldBuilder

PHONE_PATTERN = r"^\+?[0-9 ()\-]{7,20}$"


class FluentFieldsMixin:
    """Preset field configurations; each returns the new field's builder."""

    def add_required_text_field(
        self,
        path: str,
        label: str,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> "FieldBuilder":
        field = self.add_field(path).with_label(label).required(f"{label} is required")
        if placeholder:
            field.with_placeholder(placeholder)
        if min_length is not None:
            field.with_min_length(min_length)
        if max_length is not None:
            field.with_max_length(max_length)
        return field

    def add_email_field(self, path: str, label: str = "Email", required: bool = True) -> "FieldBuilder":
        field = self.add_field(path).with_label(label).with_placeholder("name@example.com")
        if required:
            field.required(f"{label} is required")
        return field.with_email_validation()

    def add_numeric_field(
        self,
        path: str,
        label: str,
        minimum: Any = None,
        maximum: Any = None,
        required: bool = False,
    ) -> "FieldBuilder":
        field = self.add_field(path).with_label(label)
        if required:
            field.required(f"{label} is required")
        if minimum is not None and maximum is not None:
            field.with_range(minimum, maximum)
        return field

    def add_dropdown_field(
        self, path: str, label: str, options: Iterable[Any], required: bool = False
    ) -> "FieldBuilder":
        field = self.add_field(path).with_label(label).with_options(options)
        if required:
            field.required(f"Please select {label.lower()}")
        return field

    def add_phone_field(self, path: str, label: str = "Phone", required: bool = False) -> "FieldBuilder":
        field = self.add_field(path).with_label(label).with_input_type("tel")
        if required:
            field.required(f"{label} is required")
        return field.with_pattern(PHONE_PATTERN, "Please enter a valid phone number")

    def add_password_field(self, path: str, label: str = "Password", min_length: int = 8) -> "FieldBuilder":
        return (
            self.add_field(path)
            .with_label(label)
            .as_password()
            .required(f"{label} is required")
            .with_min_length(min_length, f"{label} must be at least {min_length} characters")
        )

    def add_checkbox_field(self, path: str, label: str, must_be_checked: bool = False) -> "FieldBuilder":
        field = self.add_field(path).with_label(label)
        if must_be_checked:
            field.required(f"{label} must be checked")
        return field
