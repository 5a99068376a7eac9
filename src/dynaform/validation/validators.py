"""
Field validators.

Each validator checks one field value and returns a ``ValidationResult``.
Validators never raise for bad input: predicate errors are caught here
and turned into failures carrying the validator's message.
"""

import inspect
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sized
from typing import Any, Awaitable, Callable

from dynaform.constants import (
    EMAIL_MESSAGE,
    EMAIL_PATTERN,
    REQUIRED_MESSAGE,
    SAFE_TEXT_MESSAGE,
    SUSPICIOUS_PATTERNS,
)
from dynaform.models.validation_result import ValidationResult

logger = logging.getLogger("dynaform.validation")


class FieldValidator(ABC):
    """Base class for field validators."""

    def __init__(self, error_message: str | None = None):
        self.error_message = error_message

    @property
    def error_type(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        """Validate ``value`` of ``model``."""

    def _result(self, passed: bool) -> ValidationResult:
        if passed:
            return ValidationResult.success()
        return ValidationResult.failure(self.error_message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_message!r})"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _length(value: Any) -> int:
    return len(value) if isinstance(value, Sized) else len(str(value))


def has_value(value: Any) -> bool:
    """Whether ``value`` counts as filled in for a required field."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, bool):
        return value
    if isinstance(value, Sized):
        return len(value) > 0
    return True


class RequiredValidator(FieldValidator):
    """
    Fails on None, blank strings, ``False`` and empty collections.

    Every other value passes, including ``0``. With a ``condition`` the
    check only applies while ``condition(model)`` is true.
    """

    def __init__(self, error_message: str | None = None, condition: Callable[[Any], bool] | None = None):
        super().__init__(error_message or REQUIRED_MESSAGE)
        self.condition = condition

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if self.condition is not None:
            try:
                applies = bool(self.condition(model))
            except Exception as e:
                logger.warning(f"Required condition raised {type(e).__name__}: {e}")
                return self._result(False)
            if not applies:
                return ValidationResult.success()
        return self._result(has_value(value))


class CustomValidator(FieldValidator):
    """Synchronous predicate over the value."""

    def __init__(self, predicate: Callable[[Any], bool], error_message: str | None = None):
        super().__init__(error_message)
        self.predicate = predicate

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        try:
            return self._result(bool(self.predicate(value)))
        except Exception as e:
            logger.warning(f"Validator predicate raised {type(e).__name__}: {e}")
            return self._result(False)


class AsyncValidator(FieldValidator):
    """Asynchronous predicate over the value."""

    def __init__(self, predicate: Callable[[Any], Awaitable[bool]], error_message: str | None = None):
        super().__init__(error_message)
        self.predicate = predicate

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        try:
            return self._result(bool(await self.predicate(value)))
        except Exception as e:
            logger.warning(f"Async validator predicate raised {type(e).__name__}: {e}")
            return self._result(False)


class ModelValidator(FieldValidator):
    """
    Predicate over the whole model and the value, for cross-field rules.

    The predicate may be a plain function or a coroutine function.
    """

    def __init__(self, predicate: Callable[[Any, Any], Any], error_message: str | None = None):
        super().__init__(error_message)
        self.predicate = predicate

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        try:
            outcome = self.predicate(model, value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return self._result(bool(outcome))
        except Exception as e:
            logger.warning(f"Model validator raised {type(e).__name__}: {e}")
            return self._result(False)


class MinLengthValidator(FieldValidator):
    """Minimum length; a missing value counts as length zero."""

    def __init__(self, min_length: int, error_message: str | None = None):
        super().__init__(error_message or f"Must be at least {min_length} characters long")
        self.min_length = min_length

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if value is None:
            return self._result(self.min_length <= 0)
        return self._result(_length(value) >= self.min_length)


class MaxLengthValidator(FieldValidator):
    def __init__(self, max_length: int, error_message: str | None = None):
        super().__init__(error_message or f"Must be no more than {max_length} characters")
        self.max_length = max_length

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if _is_blank(value):
            return self._result(True)
        return self._result(_length(value) <= self.max_length)


class RangeValidator(FieldValidator):
    """Inclusive numeric range. ``None`` passes."""

    def __init__(self, minimum: Any, maximum: Any, error_message: str | None = None):
        super().__init__(error_message or f"Must be between {minimum} and {maximum}")
        self.minimum = minimum
        self.maximum = maximum

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if value is None:
            return self._result(True)
        try:
            return self._result(self.minimum <= value <= self.maximum)
        except TypeError:
            return self._result(False)


class PatternValidator(FieldValidator):
    def __init__(self, pattern: str | re.Pattern, error_message: str | None = None):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        super().__init__(error_message or f"Must match the pattern {self.pattern.pattern}")

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if _is_blank(value):
            return self._result(True)
        return self._result(self.pattern.fullmatch(str(value)) is not None)


class EmailValidator(PatternValidator):
    def __init__(self, error_message: str | None = None):
        super().__init__(EMAIL_PATTERN, error_message or EMAIL_MESSAGE)


class SafeTextValidator(FieldValidator):
    """Rejects text containing script or template injection patterns."""

    def __init__(self, error_message: str | None = None, patterns: list[str] | None = None):
        super().__init__(error_message or SAFE_TEXT_MESSAGE)
        self.patterns = [re.compile(p, re.IGNORECASE) for p in (patterns or SUSPICIOUS_PATTERNS)]

    async def validate(self, model: Any, value: Any, services: Any = None) -> ValidationResult:
        if not isinstance(value, str):
            return self._result(True)
        return self._result(not any(p.search(value) for p in self.patterns))
