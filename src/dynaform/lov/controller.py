"""
LOV runtime controller.

One controller per LOV field per session. It issues queries (debounced,
each with a fresh cancellation token), discards superseded results,
applies selections and clears them again.
"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

from dynaform.config import get_config
from dynaform.core.erasure import ErasedField
from dynaform.errors import OperationCancelledError
from dynaform.lov.cancellation import CancellationToken
from dynaform.lov.configuration import LovConfiguration
from dynaform.lov.mapping import LovMappingProcessor
from dynaform.lov.providers import LovDataProvider, LovDataProviderFactory
from dynaform.lov.query import FilterDefinition, LovDataResult, LovQuery, SortDefinition
from dynaform.tracing import trace_lov_query

logger = logging.getLogger("dynaform.lov")

ValueChanged = Callable[[Any, Any], Awaitable[None]]
ErrorNotify = Callable[[str], Any]


async def _noop(old_value: Any, new_value: Any) -> None:
    return None


class LovController:
    """
    Drives one LOV picker.

    Args:
        model: The form model being edited.
        field: The LOV field.
        configuration: The field's LOV configuration.
        services: Service registry used to resolve providers and run async mappings.
        on_value_changed: Awaited with ``(old_value, new_value)`` after a
            selection or clear actually changed the field's value.
        on_error: Called with a message when a query fails.
        debounce_ms: Search debounce; defaults to the configuration's search options.

    Usage:
        lov = session.lov("country_code")
        page = await lov.open()
        page = await lov.search("fra")
        await lov.select([page.items[0]])
        lov.display_text
    """

    def __init__(
        self,
        model: Any,
        field: ErasedField,
        configuration: LovConfiguration,
        services: Any = None,
        on_value_changed: ValueChanged | None = None,
        on_error: ErrorNotify | None = None,
        debounce_ms: int | None = None,
    ):
        self.model = model
        self.field = field
        self.configuration = configuration
        self.services = services
        self.on_value_changed = on_value_changed or _noop
        self.on_error = on_error
        if debounce_ms is None:
            debounce_ms = configuration.search_options.debounce_ms
        self.debounce_ms = debounce_ms

        self._provider: LovDataProvider | None = None
        self._processor = LovMappingProcessor(services)
        self._token: CancellationToken | None = None
        self._selected: list[Any] = []

        self.is_open = False
        self.is_loading = False
        self.search_text = ""
        self.current_query: LovQuery | None = None
        self.result: LovDataResult = LovDataResult.empty()

    @property
    def provider(self) -> LovDataProvider:
        if self._provider is None:
            self._provider = LovDataProviderFactory(self.services).create(self.configuration)
        return self._provider

    def build_query(
        self,
        search_text: str | None = None,
        start_index: int = 0,
        count: int | None = None,
        sort_definitions: list[SortDefinition] | None = None,
        filter_definitions: list[FilterDefinition] | None = None,
    ) -> LovQuery:
        """Query with the current values of the LOV's parent fields in its context."""
        context = {
            dependency.context_key: dependency.source.get(self.model)
            for dependency in self.configuration.dependencies
        }
        return LovQuery(
            search_text=search_text or None,
            start_index=start_index,
            count=count or get_config().lov_page_size,
            sort_definitions=sort_definitions or [],
            filter_definitions=filter_definitions or [],
            context=context,
        )

    def _new_token(self) -> CancellationToken:
        if self._token is not None:
            self._token.cancel()
        self._token = CancellationToken()
        return self._token

    async def _notify_error(self, message: str) -> None:
        if self.on_error is None:
            return
        result = self.on_error(message)
        if inspect.isawaitable(result):
            await result

    @trace_lov_query
    async def _run(self, query: LovQuery, debounce: bool = False) -> LovDataResult | None:
        """Run ``query``; returns None when a newer query superseded it."""
        token = self._new_token()

        if debounce and self.debounce_ms > 0:
            await asyncio.sleep(self.debounce_ms / 1000)
            if token.is_cancelled:
                return None

        self.is_loading = True
        try:
            result = await self.provider.get_items(query, token)
        except OperationCancelledError:
            if token.is_cancelled:
                return None
            logger.info(f"LOV query for '{self.field.field_name}' was cancelled by its provider")
            await self._notify_error("Loading was cancelled")
            result = LovDataResult.empty()
        except Exception as e:
            logger.warning(f"LOV query for '{self.field.field_name}' failed: {e}")
            await self._notify_error(f"Error loading data: {e}")
            result = LovDataResult.empty()
        finally:
            if self._token is token:
                self.is_loading = False

        if token.is_cancelled:
            logger.debug(f"Discarding superseded LOV result for '{self.field.field_name}'")
            return None

        self.current_query = query
        self.result = result
        return result

    async def open(self) -> LovDataResult | None:
        """Open the picker and load the first page with no search text."""
        self.is_open = True
        self.search_text = ""
        return await self._run(self.build_query())

    def close(self) -> None:
        self.is_open = False
        if self._token is not None:
            self._token.cancel()

    async def search(self, text: str) -> LovDataResult | None:
        """Debounced search from the first page; None if superseded or too short."""
        options = self.configuration.search_options
        self.search_text = text
        if text and len(text) < options.min_search_length:
            return None

        previous = self.current_query
        query = self.build_query(
            search_text=text,
            start_index=0,
            count=previous.count if previous else None,
            sort_definitions=previous.sort_definitions if previous else None,
            filter_definitions=previous.filter_definitions if previous else None,
        )
        return await self._run(query, debounce=True)

    async def load_page(
        self,
        start_index: int,
        count: int | None = None,
        sort_definitions: list[SortDefinition] | None = None,
        filter_definitions: list[FilterDefinition] | None = None,
    ) -> LovDataResult | None:
        """Load another page, keeping the current search text."""
        query = self.build_query(
            search_text=self.search_text,
            start_index=start_index,
            count=count,
            sort_definitions=sort_definitions,
            filter_definitions=filter_definitions,
        )
        return await self._run(query)

    async def _notify_if_changed(self, old_value: Any) -> None:
        new_value = self.field.get_value(self.model)
        if new_value != old_value:
            await self.on_value_changed(old_value, new_value)

    async def select(self, items: list[Any]) -> None:
        """
        Apply a selection.

        Single mode writes the item's key and applies the field mappings.
        Multiple mode adds the items to the current selection and writes
        the list of keys. Either way ``on_value_changed`` only runs when
        the stored value differs from before, so re-picking the current
        parent leaves dependent LOVs alone.
        """
        if not items:
            await self.clear()
            return

        old_value = self.field.get_value(self.model)
        if self.configuration.is_multiple:
            selected = list(self.selected_items)
            keys = {self.configuration.key_of(i) for i in selected}
            for item in items:
                if self.configuration.key_of(item) not in keys:
                    selected.append(item)
                    keys.add(self.configuration.key_of(item))
            self._selected = selected
            self.field.set_value(self.model, [self.configuration.key_of(i) for i in selected])
        else:
            item = items[0]
            self._selected = [item]
            self.field.set_value(self.model, self.configuration.key_of(item))
            await self._processor.apply_mappings_async(
                self.model, item, self.configuration.field_mappings, self._token
            )

        self.is_open = False
        await self._notify_if_changed(old_value)

    async def remove(self, item: Any) -> None:
        """Drop one item from a multiple selection."""
        key = self.configuration.key_of(item)
        remaining = [i for i in self.selected_items if self.configuration.key_of(i) != key]
        if not remaining:
            await self.clear()
            return
        old_value = self.field.get_value(self.model)
        self._selected = remaining
        self.field.set_value(self.model, [self.configuration.key_of(i) for i in remaining])
        await self._notify_if_changed(old_value)

    async def clear(self) -> None:
        """Reset the value and every mapped target to their defaults."""
        old_value = self.field.get_value(self.model)
        self._selected = []
        self.field.set_value(self.model, None)
        self._processor.clear_mappings(self.model, self.configuration.field_mappings)
        await self._notify_if_changed(old_value)

    async def load_selected(self) -> list[Any]:
        """Look up the items behind the model's current value."""
        value = self.field.get_value(self.model)
        keys = value if self.configuration.is_multiple else [value]
        items = []
        for key in keys or []:
            if key in (None, ""):
                continue
            item = await self.provider.get_item_by_key(key)
            if item is not None:
                items.append(item)
        self._selected = items
        return items

    @property
    def selected_items(self) -> list[Any]:
        """Selected items still matching the model's value."""
        value = self.field.get_value(self.model)
        if self.configuration.is_multiple:
            keys = set(value or [])
            self._selected = [i for i in self._selected if self.configuration.key_of(i) in keys]
        else:
            self._selected = [i for i in self._selected if self.configuration.key_of(i) == value]
        return list(self._selected)

    @property
    def display_text(self) -> str:
        selected = self.selected_items
        if self.configuration.is_multiple:
            return f"{len(selected)} item(s) selected" if selected else ""
        if selected:
            return self.configuration.display_of(selected[0])
        value = self.field.get_value(self.model)
        return "" if value in (None, "") else str(value)
