"""Fluent builders for forms, fields, collections, groups and security settings."""

from dynaform.builders.field_builder import FieldBuilder
from dynaform.builders.form_builder import FormBuilder
from dynaform.builders.collection_builder import CollectionFieldBuilder, FieldGroupBuilder
from dynaform.builders.security_builder import SecurityBuilder

__all__ = [
    "FormBuilder",
    "FieldBuilder",
    "CollectionFieldBuilder",
    "FieldGroupBuilder",
    "SecurityBuilder",
]
