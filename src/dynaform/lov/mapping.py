"""
LOV field mappings.

A mapping copies one property of the selected LOV item onto one model
attribute. Async mappings may run a follow-up action (for example
fetching details from a service) after the copy.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable

from dynaform.core.accessor import PropertyAccessor, coerce_value, default_value
from dynaform.lov.cancellation import CancellationToken
from dynaform.lov.configuration import read_property

logger = logging.getLogger("dynaform.lov")

SourceSelector = str | Callable[[Any], Any]
MappingAction = Callable[[Any, Any, Any, CancellationToken], Awaitable[None]]


class LovFieldMapping:
    """Copies ``source`` of the selected item to ``target`` of the model."""

    is_async = False

    def __init__(self, source: SourceSelector, target: PropertyAccessor):
        self.source = source
        self.target = target

    @property
    def source_property(self) -> str:
        return self.source if isinstance(self.source, str) else getattr(self.source, "__name__", "<selector>")

    @property
    def target_property(self) -> str:
        return self.target.path

    def read(self, item: Any) -> Any:
        if isinstance(self.source, str):
            return read_property(item, self.source)
        return self.source(item)

    def apply(self, item: Any, model: Any) -> None:
        self.target.set(model, coerce_value(self.read(item), self.target.value_type))

    def clear(self, model: Any) -> None:
        self.target.set(model, default_value(self.target.value_type))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source_property} -> {self.target_property})"


class AsyncLovFieldMapping(LovFieldMapping):
    """Mapping whose copy is followed by ``action(item, model, services, token)``."""

    is_async = True

    def __init__(self, source: SourceSelector, target: PropertyAccessor, action: MappingAction | None = None):
        super().__init__(source, target)
        self.action = action

    async def apply_async(
        self,
        item: Any,
        model: Any,
        services: Any = None,
        token: CancellationToken | None = None,
    ) -> None:
        self.apply(item, model)
        if self.action is not None:
            result = self.action(item, model, services, token or CancellationToken.none())
            if inspect.isawaitable(result):
                await result


class LovMappingProcessor:
    """
    Applies and clears mappings.

    A failing mapping is logged and skipped; the remaining mappings still
    run.
    """

    def __init__(self, services: Any = None):
        self.services = services

    def apply_mappings(self, model: Any, item: Any, mappings: list[LovFieldMapping]) -> None:
        """Apply the synchronous mappings."""
        if model is None or item is None:
            return
        for mapping in mappings:
            if mapping.is_async:
                continue
            try:
                mapping.apply(item, model)
                logger.debug(f"Applied LOV mapping {mapping!r}")
            except Exception as e:
                logger.warning(f"Failed to apply LOV mapping {mapping!r}: {e}")

    async def apply_mappings_async(
        self,
        model: Any,
        item: Any,
        mappings: list[LovFieldMapping],
        token: CancellationToken | None = None,
    ) -> None:
        """Apply synchronous mappings first, then the async ones in order."""
        if model is None or item is None:
            return
        self.apply_mappings(model, item, mappings)
        for mapping in mappings:
            if not mapping.is_async:
                continue
            try:
                await mapping.apply_async(item, model, self.services, token)
                logger.debug(f"Applied async LOV mapping {mapping!r}")
            except Exception as e:
                logger.warning(f"Failed to apply async LOV mapping {mapping!r}: {e}")

    def clear_mappings(self, model: Any, mappings: list[LovFieldMapping]) -> None:
        """Reset every mapped target to its type's default."""
        if model is None:
            return
        for mapping in mappings:
            try:
                mapping.clear(model)
            except Exception as e:
                logger.warning(f"Failed to clear LOV mapping target {mapping.target_property}: {e}")
