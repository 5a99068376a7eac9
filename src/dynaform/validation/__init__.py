"""Validators, the rule-set adapter and the validation pipeline."""

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
    has_value,
)
from dynaform.validation.rules import (
    PydanticRuleSet,
    RuleSet,
    RuleSetValidator,
    RuleViolation,
    rule_set_key,
)
from dynaform.validation.collection import CollectionFieldValidator
from dynaform.validation.pipeline import ValidationPipeline

__all__ = [
    "FieldValidator",
    "RequiredValidator",
    "CustomValidator",
    "AsyncValidator",
    "ModelValidator",
    "MinLengthValidator",
    "MaxLengthValidator",
    "RangeValidator",
    "PatternValidator",
    "EmailValidator",
    "SafeTextValidator",
    "has_value",
    "RuleSet",
    "RuleViolation",
    "RuleSetValidator",
    "PydanticRuleSet",
    "rule_set_key",
    "CollectionFieldValidator",
    "ValidationPipeline",
]
