"""
LOV query and result models.
"""

from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dynaform.config import get_config

TItem = TypeVar("TItem")


class SortDefinition(BaseModel):
    """Sort by one item property."""

    property_name: str = Field(..., description="Item property to sort by")
    descending: bool = Field(default=False, description="Sort descending")


class FilterDefinition(BaseModel):
    """Filter on one item property."""

    property_name: str = Field(..., description="Item property to filter on")
    operator: str = Field(
        default="contains",
        description="contains, equals, startswith, endswith, gt, gte, lt, lte",
    )
    value: Any | None = Field(default=None, description="Value to compare against")


class LovQuery(BaseModel):
    """One page request against a LOV data provider."""

    search_text: str | None = Field(default=None, description="Free-text search")
    start_index: int = Field(default=0, ge=0, description="Zero-based index of the first item")
    count: int = Field(
        default_factory=lambda: get_config().lov_page_size,
        gt=0,
        description="Page size",
    )
    sort_definitions: list[SortDefinition] = Field(default_factory=list, description="Ordered sort keys")
    filter_definitions: list[FilterDefinition] = Field(default_factory=list, description="Column filters")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Values of parent fields for cascading lookups"
    )


class LovDataResult(BaseModel, Generic[TItem]):
    """
    One page of LOV items.

    ``total_count`` is the number of items matching the query across all
    pages, so it is never smaller than the page.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[TItem] = Field(default_factory=list, description="Items of this page")
    total_count: int = Field(default=0, ge=0, description="Total matching items")
    has_more: bool = Field(default=False, description="Whether items follow this page")

    @model_validator(mode="after")
    def _check_total(self) -> "LovDataResult":
        if self.total_count < len(self.items):
            raise ValueError(
                f"total_count ({self.total_count}) is smaller than the page ({len(self.items)} items)"
            )
        return self

    @classmethod
    def empty(cls) -> "LovDataResult":
        return cls(items=[], total_count=0, has_more=False)

    @classmethod
    def from_collection(cls, items: Sequence[Any], query: LovQuery) -> "LovDataResult":
        """Page an in-memory, already filtered and sorted sequence."""
        total = len(items)
        page = list(items[query.start_index:query.start_index + query.count])
        return cls(items=page, total_count=total, has_more=query.start_index + len(page) < total)
