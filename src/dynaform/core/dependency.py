"""
Field dependency graph.

Maps a source field name to the callbacks that react when that field's
value is committed. Callbacks run in registration order. Exceptions raised
by callbacks propagate to the caller.
"""

import inspect
import logging
from typing import Any, Callable

from dynaform.config import get_config
from dynaform.core.accessor import PropertyAccessor
from dynaform.errors import DependencyCycleError

logger = logging.getLogger("dynaform.core")

DependencyCallback = Callable[[Any, Any], Any]


class FieldDependency:
    """
    Reaction of one field to changes of another.

    Args:
        source: Accessor of the field being watched.
        on_changed: ``callback(model, source_value)``; may be a coroutine function.
        dependent_field_name: Name of the field that reacts, for diagnostics.
    """

    def __init__(
        self,
        source: PropertyAccessor,
        on_changed: DependencyCallback,
        dependent_field_name: str | None = None,
    ):
        self.source = source
        self.on_changed = on_changed
        self.dependent_field_name = dependent_field_name

    @property
    def source_field_name(self) -> str:
        return self.source.name

    async def on_dependency_changed(self, model: Any) -> None:
        result = self.on_changed(model, self.source.get(model))
        if inspect.isawaitable(result):
            await result

    def __repr__(self) -> str:
        return f"FieldDependency({self.source_field_name} -> {self.dependent_field_name})"


class DependencyGraph:
    """
    Name-keyed multi-map of field dependencies.

    ``notify`` calls nested through value commits are counted; once the
    nesting reaches ``max_depth`` a ``DependencyCycleError`` is raised.
    """

    def __init__(self, max_depth: int | None = None):
        self.max_depth = max_depth if max_depth is not None else get_config().max_dependency_depth
        self._dependencies: dict[str, list[FieldDependency]] = {}
        self._depth = 0

    def register(self, dependency: FieldDependency) -> None:
        self._dependencies.setdefault(dependency.source_field_name, []).append(dependency)

    def get(self, field_name: str) -> list[FieldDependency]:
        return list(self._dependencies.get(field_name, ()))

    @property
    def source_names(self) -> list[str]:
        return list(self._dependencies)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._dependencies

    def __len__(self) -> int:
        return sum(len(deps) for deps in self._dependencies.values())

    async def notify(self, field_name: str, model: Any) -> None:
        """Run every dependency registered under ``field_name`` in order."""
        dependencies = self._dependencies.get(field_name)
        if not dependencies:
            return

        if self._depth >= self.max_depth:
            raise DependencyCycleError(field_name, self.max_depth)

        self._depth += 1
        try:
            for dependency in list(dependencies):
                logger.debug(f"Dependency {dependency!r} triggered")
                await dependency.on_dependency_changed(model)
        finally:
            self._depth -= 1
