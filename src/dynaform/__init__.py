"""
dynaform: Declarative forms for Python models.

Describe the fields of a model once and get rendering descriptions,
async validation, field dependencies and list-of-values lookups.

Simple Usage:
    from dynaform import FormBuilder, FormSession

    form = (
        FormBuilder(Customer)
        .add_field("name").with_label("Name").required().with_min_length(3)
        .add_field("email").with_email_validation()
        .build()
    )

    session = FormSession(form, Customer())
    errors = await session.set_value("name", "Ada")
    rendered = session.render()
    result = await session.validate()

Cascading lookups:
    form = (
        FormBuilder(Address)
        .add_field("country_code").as_lov(Country, lambda lov: (
            lov.with_items(countries).with_key("code").with_display("name")
        ))
        .add_field("state_code").as_lov(State, lambda lov: (
            lov.with_items(states).with_key("code").with_display("name")
               .depends_on("country_code")
               .map_field("name", "state_name")
        ))
        .build()
    )

    states = session.lov("state_code")
    page = await states.open()         # filtered by the current country
    await states.select([page.items[0]])

Logging:
    from dynaform.tracing import setup_logging

    setup_logging(level="DEBUG")
"""

from dynaform.builders import (
    CollectionFieldBuilder,
    FieldBuilder,
    FieldGroupBuilder,
    FormBuilder,
    SecurityBuilder,
)
from dynaform.core import (
    CollectionFieldDescriptor,
    DependencyGraph,
    ErasedField,
    FieldDependency,
    FieldDescriptor,
    FieldGroup,
    FormConfiguration,
    FormLayout,
    PropertyAccessor,
)
from dynaform.errors import (
    DependencyCycleError,
    DynaformError,
    FormConfigurationError,
    LovConfigurationError,
    OperationCancelledError,
)
from dynaform.lov import (
    LovController,
    LovDataResult,
    LovProviderCatalog,
    LovQuery,
)
from dynaform.models import (
    FieldValidationError,
    FormValidationResult,
    RenderedField,
    SelectOption,
    ValidationResult,
)
from dynaform.rendering import CustomFieldRenderer, RenderDispatcher
from dynaform.services import ServiceRegistry
from dynaform.session import FormSession, SubmissionResult
from dynaform.tracing import (
    setup_logging,
    disable_logging,
    enable_logging,
)
from dynaform.validation import ValidationPipeline

__all__ = [
    # Main interface
    "FormBuilder",
    "FormSession",
    "SubmissionResult",
    "ServiceRegistry",
    # Builders
    "FieldBuilder",
    "CollectionFieldBuilder",
    "FieldGroupBuilder",
    "SecurityBuilder",
    # Core
    "PropertyAccessor",
    "FieldDescriptor",
    "CollectionFieldDescriptor",
    "ErasedField",
    "FieldDependency",
    "DependencyGraph",
    "FieldGroup",
    "FormConfiguration",
    "FormLayout",
    # Validation
    "ValidationPipeline",
    "ValidationResult",
    "FieldValidationError",
    "FormValidationResult",
    # Rendering
    "RenderDispatcher",
    "CustomFieldRenderer",
    "RenderedField",
    "SelectOption",
    # LOV
    "LovController",
    "LovQuery",
    "LovDataResult",
    "LovProviderCatalog",
    # Errors
    "DynaformError",
    "FormConfigurationError",
    "DependencyCycleError",
    "LovConfigurationError",
    "OperationCancelledError",
    # Logging
    "setup_logging",
    "disable_logging",
    "enable_logging",
]

__version__ = "0.1.0"
