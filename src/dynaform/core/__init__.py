"""Core form model: accessors, field descriptors, erasure, dependencies and form configuration."""

from dynaform.core.accessor import PropertyAccessor, coerce_value, default_value
from dynaform.core.field import CollectionFieldDescriptor, FieldDescriptor
from dynaform.core.erasure import ErasedField, ValidatorAdapter
from dynaform.core.dependency import DependencyGraph, FieldDependency
from dynaform.core.form import FieldGroup, FormConfiguration, FormLayout

__all__ = [
    "PropertyAccessor",
    "coerce_value",
    "default_value",
    "FieldDescriptor",
    "CollectionFieldDescriptor",
    "ErasedField",
    "ValidatorAdapter",
    "FieldDependency",
    "DependencyGraph",
    "FieldGroup",
    "FormConfiguration",
    "FormLayout",
]
