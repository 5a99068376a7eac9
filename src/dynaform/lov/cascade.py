"""
Cascading LOV clearing.

Registered in the form's dependency graph under the parent field. When
the parent changes, the child LOV's value and its mapped targets are
reset, and the child's own dependents are notified in turn.
"""

import logging
from typing import TYPE_CHECKING, Any

from dynaform.core.accessor import PropertyAccessor, default_value
from dynaform.lov.configuration import LovConfiguration
from dynaform.lov.mapping import LovMappingProcessor

if TYPE_CHECKING:
    from dynaform.core.dependency import DependencyGraph

logger = logging.getLogger("dynaform.lov")


class LovCascade:
    """Dependency callback that clears a child LOV when its parent changes."""

    def __init__(self, target: PropertyAccessor, configuration: LovConfiguration):
        self.target = target
        self.configuration = configuration
        self.graph: "DependencyGraph | None" = None
        self._processor = LovMappingProcessor()

    async def __call__(self, model: Any, parent_value: Any) -> None:
        if self.target.get(model) == default_value(self.target.value_type):
            return
        logger.debug(f"Clearing LOV '{self.target.path}' after parent changed to {parent_value!r}")
        self.target.set(model, default_value(self.target.value_type))
        self._processor.clear_mappings(model, self.configuration.field_mappings)
        if self.graph is not None:
            await self.graph.notify(self.target.name, model)
