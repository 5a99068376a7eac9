"""
Render context and per-widget edit buffer.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from dynaform.core.erasure import ErasedField

ValueChangedCallback = Callable[[Any], Awaitable[None]]
DependencyChangedCallback = Callable[[], Awaitable[None]]


async def _noop_value_changed(value: Any) -> None:
    return None


async def _noop_dependency_changed() -> None:
    return None


@dataclass
class FieldRenderContext:
    """Everything a renderer needs to describe one field."""

    model: Any
    field: ErasedField
    actual_field_type: type
    current_value: Any
    on_value_changed: ValueChangedCallback = _noop_value_changed
    on_dependency_changed: DependencyChangedCallback = _noop_dependency_changed
    services: Any = None
    errors: list[str] = field(default_factory=list)


class FieldEditBuffer:
    """
    In-progress text of one input widget.

    Keystrokes go into the buffer; the model is only written on ``commit``.
    ``sync`` refreshes the buffer from the model unless the user has
    uncommitted edits, so an external re-render never reverts typing.
    """

    def __init__(self, initial: Any = None):
        self.text = "" if initial is None else str(initial)
        self.dirty = False

    def edit(self, text: str) -> None:
        self.text = text
        self.dirty = True

    def sync(self, model_value: Any) -> None:
        if not self.dirty:
            self.text = "" if model_value is None else str(model_value)

    async def commit(self, context: FieldRenderContext) -> None:
        await context.on_value_changed(self.text)
        self.dirty = False
