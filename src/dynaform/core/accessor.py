"""
Compiled property accessors.

A ``PropertyAccessor`` turns a dotted attribute path such as
``"address.street"`` into a name, a value type, a getter and a setter.
The path is resolved once against the model's type hints when the form is
configured, so every later read or write is a plain attribute walk.
"""

import functools
import inspect
import logging
import types
from decimal import Decimal
from typing import Any, Callable, Union, get_args, get_origin, get_type_hints

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from dynaform.constants import VALID_FIELD_NAME
from dynaform.errors import FormConfigurationError

logger = logging.getLogger("dynaform.core")

_CONTAINER_TYPES = (list, set, frozenset, dict, tuple)


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def is_optional(tp: Any) -> bool:
    """Whether ``tp`` admits ``None`` (``X | None``, ``Optional[X]``, ``Any``)."""
    if tp is Any or tp is None or tp is type(None):
        return True
    return _is_union(tp) and type(None) in get_args(tp)


def unwrap_optional(tp: Any) -> Any:
    """Strip ``None`` from a two-member union, leaving ``tp`` otherwise unchanged."""
    if _is_union(tp):
        args = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def concrete_type(tp: Any) -> Any:
    """
    Runtime class for a type hint.

    ``int | None`` becomes ``int``, ``list[Item]`` becomes ``list`` and
    ``Any`` becomes ``object``.
    """
    tp = unwrap_optional(tp)
    if tp is Any:
        return object
    origin = get_origin(tp)
    if origin is not None and isinstance(origin, type):
        return origin
    return tp if isinstance(tp, type) else object


def default_value(tp: Any) -> Any:
    """Default value for a type hint, used when a value is missing or cannot be converted."""
    if is_optional(tp):
        return None
    target = concrete_type(tp)
    if target in _CONTAINER_TYPES:
        return target()
    if target is bool:
        return False
    if target is int:
        return 0
    if target is float:
        return 0.0
    if target is Decimal:
        return Decimal(0)
    if target is str:
        return ""
    return None


@functools.lru_cache(maxsize=256)
def _type_adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def coerce_value(value: Any, tp: Any) -> Any:
    """
    Convert ``value`` to the type described by ``tp``.

    ``None`` and empty strings become the type's default. Values that are
    already instances pass through. Anything else goes through pydantic;
    if that fails the type's default is returned instead of raising.
    """
    if value is None or (isinstance(value, str) and value == "" and concrete_type(tp) is not str):
        return default_value(tp)
    if tp is Any:
        return value

    target = concrete_type(tp)
    if target is not object and get_origin(unwrap_optional(tp)) is None and isinstance(value, target):
        return value

    try:
        return _type_adapter(tp).validate_python(value)
    except (ValidationError, PydanticSchemaGenerationError, TypeError, ValueError) as e:
        logger.debug(f"Could not convert {value!r} to {tp}: {e}")
        return default_value(tp)


def _resolve_hint(owner: type, segment: str) -> Any:
    """Type hint of attribute ``segment`` on ``owner`` (annotations or typed properties)."""
    try:
        hints = get_type_hints(owner)
    except (NameError, TypeError) as e:
        raise FormConfigurationError(f"Cannot read type hints of {owner.__name__}: {e}") from e

    if segment in hints:
        return hints[segment]

    attr = inspect.getattr_static(owner, segment, None)
    if isinstance(attr, property) and attr.fget is not None:
        return get_type_hints(attr.fget).get("return", Any)

    raise FormConfigurationError(
        f"'{segment}' is not an annotated attribute of {owner.__name__}"
    )


class PropertyAccessor:
    """
    Name, value type, getter and setter for one (possibly nested) attribute.

    Args:
        model_type: The class the path starts from.
        path: Attribute path, e.g. ``"name"`` or ``"address.street"``.

    Raises:
        FormConfigurationError: If the path is empty, malformed, or does not
            resolve against the model's annotations.
    """

    def __init__(self, model_type: type, path: str):
        if not path or not isinstance(path, str):
            raise FormConfigurationError("Accessor path cannot be empty")

        segments = path.split(".")
        owner: Any = model_type
        value_type: Any = Any
        for segment in segments:
            if not VALID_FIELD_NAME.match(segment):
                raise FormConfigurationError(f"Invalid segment '{segment}' in accessor path '{path}'")
            if not isinstance(owner, type):
                raise FormConfigurationError(
                    f"Cannot resolve '{segment}' in '{path}': parent is not a class"
                )
            value_type = _resolve_hint(owner, segment)
            owner = unwrap_optional(value_type)

        self.model_type = model_type
        self.path = path
        self.segments: tuple[str, ...] = tuple(segments)
        self.value_type = value_type
        self._parents = self.segments[:-1]
        self._leaf = self.segments[-1]

    @property
    def name(self) -> str:
        """Last path segment."""
        return self._leaf

    def get(self, model: Any) -> Any:
        """Read the value; a ``None`` intermediate object reads as ``None``."""
        current = model
        for segment in self.segments:
            if current is None:
                return None
            current = getattr(current, segment)
        return current

    def set(self, model: Any, value: Any) -> None:
        """Write the value in place."""
        parent = model
        for segment in self._parents:
            parent = getattr(parent, segment)
            if parent is None:
                raise ValueError(f"Cannot set '{self.path}': '{segment}' is None")
        setattr(parent, self._leaf, value)

    @property
    def getter(self) -> Callable[[Any], Any]:
        return self.get

    @property
    def setter(self) -> Callable[[Any, Any], None]:
        return self.set

    def __repr__(self) -> str:
        return f"PropertyAccessor({self.model_type.__name__}.{self.path}: {self.value_type})"
