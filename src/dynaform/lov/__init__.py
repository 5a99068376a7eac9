"""List-of-values fields: configuration, providers, mappings, cascading and the runtime controller."""

from dynaform.lov.cancellation import CancellationToken
from dynaform.lov.query import FilterDefinition, LovDataResult, LovQuery, SortDefinition
from dynaform.lov.configuration import (
    LovColumnDefinition,
    LovConfiguration,
    LovDependencyInfo,
    LovModalOptions,
    LovSearchOptions,
    ModalSize,
    SelectionMode,
)
from dynaform.lov.providers import (
    LambdaLovDataProvider,
    LovDataProvider,
    LovDataProviderFactory,
    LovProviderCatalog,
)
from dynaform.lov.mapping import AsyncLovFieldMapping, LovFieldMapping, LovMappingProcessor
from dynaform.lov.cascade import LovCascade
from dynaform.lov.builder import LovBuilder
from dynaform.lov.controller import LovController

__all__ = [
    "CancellationToken",
    "LovQuery",
    "LovDataResult",
    "SortDefinition",
    "FilterDefinition",
    "LovConfiguration",
    "LovColumnDefinition",
    "LovDependencyInfo",
    "LovModalOptions",
    "LovSearchOptions",
    "ModalSize",
    "SelectionMode",
    "LovDataProvider",
    "LambdaLovDataProvider",
    "LovDataProviderFactory",
    "LovProviderCatalog",
    "LovFieldMapping",
    "AsyncLovFieldMapping",
    "LovMappingProcessor",
    "LovCascade",
    "LovBuilder",
    "LovController",
]
