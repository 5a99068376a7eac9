"""
External rule-set adapter.

A rule set validates a whole model and reports violations by dotted
property path. ``RuleSetValidator`` runs the rule set for its model and
keeps only the violation that belongs to its own field path, so a
failure on ``address.street`` never shows up on ``address.city``.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from dynaform.models.validation_result import ValidationResult
from dynaform.validation.validators import FieldValidator

logger = logging.getLogger("dynaform.validation")


@dataclass(frozen=True)
class RuleViolation:
    """One rule failure at a dotted property path."""

    path: str
    message: str


@runtime_checkable
class RuleSet(Protocol):
    """Anything that validates a whole model and reports violations by path."""

    def validate(self, model: Any) -> list[RuleViolation] | Awaitable[list[RuleViolation]]:
        ...


def rule_set_key(model_type: type) -> tuple[type, type]:
    """Service registry key under which the rule set for ``model_type`` is registered."""
    return (RuleSet, model_type)


class PydanticRuleSet:
    """
    Uses a pydantic model class as a rule set.

    The form model is validated against ``schema`` (by attribute); each
    pydantic error becomes a violation whose path is its ``loc`` joined
    with dots.

    Usage:
        class AddressRules(BaseModel):
            street: str = Field(min_length=1)

        services.register(rule_set_key(Address), PydanticRuleSet(AddressRules))
    """

    def __init__(self, schema: type[BaseModel]):
        self.schema = schema

    def validate(self, model: Any) -> list[RuleViolation]:
        try:
            if isinstance(model, dict):
                self.schema.model_validate(model)
            else:
                self.schema.model_validate(model, from_attributes=True)
        except ValidationError as e:
            return [
                RuleViolation(path=".".join(str(part) for part in error["loc"]), message=error["msg"])
                for error in e.errors()
            ]
        return []


class RuleSetValidator(FieldValidator):
    """
    Validates one field path using a model-level rule set.

    Args:
        path: Dotted path of the field this validator reports for.
        rule_set: Explicit rule set; when omitted the rule set registered
            for the model's type is looked up in the services.

    A field with no resolvable rule set is valid.
    """

    def __init__(self, path: str, rule_set: RuleSet | None = None, error_message: str | None = None):
        super().__init__(error_message)
        self.path = path
        self.rule_set = rule_set

    def _resolve(self, model: Any, services: Any) -> RuleSet | None:
        if self.rule_set is not None:
            return self.rule_set
        if services is None:
            return None
        return services.get(rule_set_key(type(model)))

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        rule_set = self._resolve(model, services)
        if rule_set is None:
            return ValidationResult.success()

        violations = rule_set.validate(model)
        if inspect.isawaitable(violations):
            violations = await violations

        for violation in violations:
            if violation.path == self.path:
                return ValidationResult.failure(self.error_message or violation.message)
        return ValidationResult.success()
