"""
Render output models.

A ``RenderedField`` is the toolkit-neutral UI description a renderer
produces for one field. Hosts map ``widget`` onto their own components.
"""

from typing import Any

from pydantic import BaseModel, Field


class SelectOption(BaseModel):
    """One choice of a select field."""

    value: Any = Field(..., description="Value written to the model")
    label: str = Field(..., description="Text shown to the user")


class RenderedField(BaseModel):
    """UI description of one field."""

    field_name: str = Field(..., description="Field name/key")
    widget: str = Field(..., description="Widget kind: text, number, checkbox, select, lov, ...")
    label: str = Field(..., description="Human-readable label")
    value: Any | None = Field(default=None, description="Current model value")
    value_type: str | None = Field(default=None, description="Name of the field's runtime type")

    placeholder: str | None = Field(default=None, description="Placeholder text")
    help_text: str | None = Field(default=None, description="Help text")
    css_class: str | None = Field(default=None, description="Extra CSS class")
    input_type: str | None = Field(default=None, description="Input type hint: password, email, tel, ...")

    required: bool = Field(default=False, description="Whether field is required")
    disabled: bool = Field(default=False, description="Whether field is disabled")
    read_only: bool = Field(default=False, description="Whether field is read-only")

    attributes: dict[str, Any] = Field(default_factory=dict, description="Widget specific settings")
    options: list[SelectOption] | None = Field(default=None, description="Choices for select widgets")
    children: list[list["RenderedField"]] | None = Field(
        default=None, description="Rendered item forms of a collection field"
    )
    errors: list[str] = Field(default_factory=list, description="Current validation messages")
    message: str | None = Field(default=None, description="Diagnostic message")

    @property
    def is_supported(self) -> bool:
        return self.widget != "unsupported"
