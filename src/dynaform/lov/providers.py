"""
LOV data providers.

A provider answers paged ``LovQuery`` requests. Providers can wrap an
async function, an in-memory collection, a service registered with the
host, or an entry of a ``LovProviderCatalog``.
"""

import inspect
import logging
import operator
from typing import Any, Awaitable, Callable, Iterable, Protocol, runtime_checkable

from dynaform.errors import LovConfigurationError
from dynaform.lov.cancellation import CancellationToken
from dynaform.lov.configuration import LovConfiguration, read_property
from dynaform.lov.query import FilterDefinition, LovDataResult, LovQuery

logger = logging.getLogger("dynaform.lov")

QueryFunction = Callable[[LovQuery, CancellationToken], Awaitable[LovDataResult]]


@runtime_checkable
class LovDataProvider(Protocol):
    async def get_items(self, query: LovQuery, token: CancellationToken | None = None) -> LovDataResult:
        ...

    async def get_item_by_key(self, key: Any, token: CancellationToken | None = None) -> Any | None:
        ...


def _contains(actual: Any, expected: Any) -> bool:
    return str(expected).lower() in str(actual).lower()


def _startswith(actual: Any, expected: Any) -> bool:
    return str(actual).lower().startswith(str(expected).lower())


def _endswith(actual: Any, expected: Any) -> bool:
    return str(actual).lower().endswith(str(expected).lower())


FILTER_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "contains": _contains,
    "equals": operator.eq,
    "startswith": _startswith,
    "endswith": _endswith,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


def _matches_filter(item: Any, definition: FilterDefinition) -> bool:
    if definition.value is None:
        return True
    compare = FILTER_OPERATORS.get(definition.operator.lower())
    if compare is None:
        raise ValueError(f"Unknown filter operator '{definition.operator}'")
    actual = read_property(item, definition.property_name)
    if actual is None:
        return False
    try:
        return bool(compare(actual, definition.value))
    except TypeError:
        return False


class LambdaLovDataProvider:
    """
    Provider backed by a query function.

    Usage:
        provider = LambdaLovDataProvider.from_collection(
            lambda: countries,
            value_selector=lambda c: c.code,
            search_fields=["code", "name"],
        )
        page = await provider.get_items(LovQuery(search_text="fr"))
    """

    def __init__(
        self,
        fetch: QueryFunction,
        value_selector: Callable[[Any], Any] | None = None,
    ):
        self._fetch = fetch
        self.value_selector = value_selector

    async def get_items(self, query: LovQuery, token: CancellationToken | None = None) -> LovDataResult:
        token = token or CancellationToken.none()
        result = self._fetch(query, token)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def get_item_by_key(self, key: Any, token: CancellationToken | None = None) -> Any | None:
        if self.value_selector is None:
            return None
        start = 0
        while True:
            page = await self.get_items(LovQuery(start_index=start), token)
            for item in page.items:
                if self.value_selector(item) == key:
                    return item
            if not page.has_more or not page.items:
                return None
            start += len(page.items)

    @classmethod
    def from_collection(
        cls,
        source: Iterable[Any] | Callable[[], Iterable[Any]],
        value_selector: Callable[[Any], Any] | None = None,
        search_fields: list[str] | None = None,
        search_predicate: Callable[[Any, str], bool] | None = None,
        display_selector: Callable[[Any], str] | None = None,
    ) -> "LambdaLovDataProvider":
        """
        Provider over an in-memory collection.

        Args:
            source: The items, or a callable returning them on every query.
            value_selector: Key of an item, used by ``get_item_by_key``.
            search_fields: Item properties searched (case-insensitive substring).
            search_predicate: ``predicate(item, text)``; overrides ``search_fields``.
            display_selector: Text searched when no search fields are given.

        Query handling order: search text, context values (equality on the
        item property named like the context key), filter definitions,
        sort definitions, then paging.
        """

        def matches_search(item: Any, text: str) -> bool:
            if search_predicate is not None:
                return search_predicate(item, text)
            if search_fields:
                return any(_contains(read_property(item, name) or "", text) for name in search_fields)
            shown = display_selector(item) if display_selector is not None else item
            return _contains(shown, text)

        def fetch(query: LovQuery, token: CancellationToken) -> LovDataResult:
            token.raise_if_cancelled()
            items = list(source() if callable(source) else source)

            if query.search_text:
                items = [i for i in items if matches_search(i, query.search_text)]

            for key, value in query.context.items():
                if value is not None:
                    items = [i for i in items if read_property(i, key) == value]

            for definition in query.filter_definitions:
                items = [i for i in items if _matches_filter(i, definition)]

            for sort in reversed(query.sort_definitions):
                items.sort(
                    key=lambda i, name=sort.property_name: (read_property(i, name) is None, read_property(i, name)),
                    reverse=sort.descending,
                )

            return LovDataResult.from_collection(items, query)

        return cls(fetch, value_selector=value_selector)


class LovProviderCatalog:
    """Named LOV providers, looked up by catalog id."""

    def __init__(self):
        self._providers: dict[str, LovDataProvider] = {}

    def register(self, lov_id: str, provider: LovDataProvider) -> "LovProviderCatalog":
        self._providers[lov_id] = provider
        return self

    def get(self, lov_id: str) -> LovDataProvider | None:
        return self._providers.get(lov_id)

    def __contains__(self, lov_id: str) -> bool:
        return lov_id in self._providers


class LovDataProviderFactory:
    """Builds the provider for a LOV configuration."""

    def __init__(self, services: Any = None):
        self.services = services

    def create(self, configuration: LovConfiguration) -> LovDataProvider:
        """
        Resolve the provider.

        Order: direct query function, registered service, catalog id.

        Raises:
            LovConfigurationError: If nothing is configured or the
                configured service or catalog entry cannot be found.
        """
        if configuration.data_provider is not None:
            return LambdaLovDataProvider(configuration.data_provider, configuration.value_selector)

        if configuration.data_service_key is not None:
            service = self.services.get(configuration.data_service_key) if self.services is not None else None
            if service is None:
                raise LovConfigurationError(
                    f"LOV data service {configuration.data_service_key!r} is not registered"
                )
            if not isinstance(service, LovDataProvider):
                raise LovConfigurationError(
                    f"LOV data service {configuration.data_service_key!r} is a {type(service).__name__}, "
                    f"which does not implement get_items and get_item_by_key"
                )
            return service

        if configuration.catalog_id is not None:
            catalog = self.services.get(LovProviderCatalog) if self.services is not None else None
            provider = catalog.get(configuration.catalog_id) if catalog is not None else None
            if provider is None:
                raise LovConfigurationError(f"LOV catalog id '{configuration.catalog_id}' is not registered")
            return provider

        raise LovConfigurationError(
            f"No data source configured for LOV of {configuration.item_type.__name__}"
        )
