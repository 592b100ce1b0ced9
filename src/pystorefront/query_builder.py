"""Translate a :class:`~pystorefront.filters.FilterState` into shop API inputs.

Everything here is a pure function of its arguments. A listing issues two
queries: the primary one carries the user's facet and price selections,
the options query carries only the scope (collection and search term) so
the sidebar keeps offering values the user just deselected.
"""

from __future__ import annotations

import dataclasses
import enum
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pystorefront._constants import (
    BRAND_FACET_CODE,
    DEFAULT_PAGE_SIZE,
    EMPTY_PRICE_RANGE_MAX,
    FACET_LIST_TAKE,
    PRICE_FILTER_MAX,
    PRODUCT_TYPE_FACET_CODE,
    ROOT_COLLECTION_NAME,
)
from pystorefront.filters import FilterState, PriceBounds, SortKey
from pystorefront.models.catalog import CollectionNode, FacetValueResult, SearchResultItem


class LogicalOperator(enum.StrEnum):
    AND = "AND"
    OR = "OR"


# ------------------------------------------------------------------
# Paging and scope
# ------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class Pagination:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size

    @classmethod
    def from_state(cls, state: FilterState, page_size: int = DEFAULT_PAGE_SIZE) -> Pagination:
        return cls(page=state.page, page_size=page_size)


@dataclasses.dataclass(frozen=True)
class Scope:
    """What is being browsed: a collection, a search term, or everything."""

    collection_id: str | None = None
    collection_slug: str | None = None
    search_term: str | None = None

    @classmethod
    def from_state(cls, state: FilterState, collection_slug: str | None = None) -> Scope:
        return cls(
            collection_id=state.collection_id,
            collection_slug=collection_slug,
            search_term=state.search_term,
        )

    def to_search_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        if self.search_term:
            fields["term"] = self.search_term
        if self.collection_id:
            fields["collectionId"] = self.collection_id
        if self.collection_slug:
            fields["collectionSlug"] = self.collection_slug
        return fields


@dataclasses.dataclass(frozen=True)
class PageInfo:
    current_page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @classmethod
    def from_totals(cls, total_items: int, pagination: Pagination) -> PageInfo:
        total_pages = max(1, math.ceil(max(total_items, 0) / pagination.page_size))
        return cls(
            current_page=pagination.page,
            total_pages=total_pages,
            total_items=max(total_items, 0),
            page_size=pagination.page_size,
        )


# ------------------------------------------------------------------
# Sorting
# ------------------------------------------------------------------

DEFAULT_SORT: dict[str, str] = {"createdAt": "DESC"}

SORT_TABLE: dict[SortKey, dict[str, str]] = {
    SortKey.PRICE_ASC: {"price": "ASC"},
    SortKey.PRICE_DESC: {"price": "DESC"},
    SortKey.NEWEST: {"createdAt": "DESC"},
    SortKey.OLDEST: {"createdAt": "ASC"},
    SortKey.NAME_ASC: {"name": "ASC"},
    SortKey.NAME_DESC: {"name": "DESC"},
}

# The search index only sorts by name and price.
SEARCH_SORT_TABLE: dict[SortKey, dict[str, str]] = {
    key: value for key, value in SORT_TABLE.items() if "createdAt" not in value
}


def _sort_key(value: SortKey | str | None) -> SortKey | None:
    if value is None:
        return None
    try:
        return SortKey(value)
    except ValueError:
        return None


def build_sort(sort_key: SortKey | str | None) -> dict[str, str]:
    """Remote sort object for *sort_key*; unknown or absent keys sort newest first."""
    key = _sort_key(sort_key)
    if key is None:
        return dict(DEFAULT_SORT)
    return dict(SORT_TABLE[key])


def build_search_sort(sort_key: SortKey | str | None) -> dict[str, str] | None:
    """Search sort for *sort_key*, or ``None`` to keep relevance order."""
    key = _sort_key(sort_key)
    if key is None or key not in SEARCH_SORT_TABLE:
        return None
    return dict(SEARCH_SORT_TABLE[key])


# ------------------------------------------------------------------
# Predicates
# ------------------------------------------------------------------


def build_price_filter(price_min: int | None, price_max: int | None) -> dict[str, Any] | None:
    """``priceWithTax`` between-predicate, or ``None`` when neither bound is set."""
    if price_min is None and price_max is None:
        return None
    return {
        "priceWithTax": {
            "between": {
                "start": price_min or 0,
                "end": price_max or PRICE_FILTER_MAX,
            }
        }
    }


def aggregate_facet_ids(state: FilterState) -> list[str]:
    """Brand, product-type and generic selections in one de-duplicated list."""
    return state.selected_facet_ids


class ListQueryOptions(BaseModel):
    """List options for product and variant listings."""

    model_config = ConfigDict(frozen=True)

    take: int
    skip: int
    sort: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SORT))
    filter: dict[str, Any] | None = None
    facet_value_ids: list[str] = Field(default_factory=list)
    facet_value_operator: LogicalOperator | None = None

    def to_variables(self, *, include_price: bool = True) -> dict[str, Any]:
        """Remote ``ListOptions`` dict.

        Facet selections become a ``facetValueId in [...]`` predicate, which
        matches any of the ids. Product lists have no price field, so
        callers listing products pass ``include_price=False``.
        """
        predicate: dict[str, Any] = {}
        if include_price and self.filter:
            predicate.update(self.filter)
        if self.facet_value_ids:
            predicate["facetValueId"] = {"in": list(self.facet_value_ids)}
        variables: dict[str, Any] = {"take": self.take, "skip": self.skip, "sort": dict(self.sort)}
        if predicate:
            variables["filter"] = predicate
        return variables


def build_list_options(
    state: FilterState,
    pagination: Pagination,
    scope: Scope | None = None,
) -> ListQueryOptions:
    """Primary list options for *state*.

    *scope* is accepted for symmetry with :func:`build_search_input`; list
    queries carry their collection in the query arguments instead.
    """
    facet_ids = aggregate_facet_ids(state)
    return ListQueryOptions(
        take=pagination.take,
        skip=pagination.skip,
        sort=build_sort(state.sort_key),
        filter=build_price_filter(state.price_min, state.price_max),
        facet_value_ids=facet_ids,
        facet_value_operator=LogicalOperator.OR if facet_ids else None,
    )


def build_search_input(state: FilterState, pagination: Pagination, scope: Scope) -> dict[str, Any]:
    """``SearchInput`` for the primary, filtered search."""
    search_input: dict[str, Any] = {
        **scope.to_search_fields(),
        "groupByProduct": True,
        "take": pagination.take,
        "skip": pagination.skip,
    }
    sort = build_search_sort(state.sort_key)
    if sort is not None:
        search_input["sort"] = sort
    facet_ids = aggregate_facet_ids(state)
    if facet_ids:
        search_input["facetValueIds"] = facet_ids
        search_input["facetValueOperator"] = LogicalOperator.OR.value
    if state.has_price_filter:
        search_input["priceRangeWithTax"] = {
            "min": state.price_min or 0,
            "max": state.price_max or PRICE_FILTER_MAX,
        }
    return search_input


def build_facet_options_input(scope: Scope) -> dict[str, Any]:
    """``SearchInput`` for the options query: scope only, no selections."""
    return {
        **scope.to_search_fields(),
        "groupByProduct": True,
        "take": FACET_LIST_TAKE,
        "skip": 0,
    }


# ------------------------------------------------------------------
# Result helpers
# ------------------------------------------------------------------


def extract_price_range(items: Iterable[SearchResultItem]) -> PriceBounds:
    """Lowest and highest ``price_with_tax`` across *items*.

    An empty result gives ``PriceBounds(0, 1_000_000)``; treat that as a
    placeholder rather than a real bound.
    """
    low: int | None = None
    high = 0
    for item in items:
        price = item.price_with_tax
        if price is None:
            continue
        low = price.low if low is None else min(low, price.low)
        high = max(high, price.high)
    return PriceBounds(min=low or 0, max=high or EMPTY_PRICE_RANGE_MAX)


def price_bounds_from_extremes(data: Mapping[str, Any]) -> PriceBounds:
    """Read the ``GetPriceRange`` query: the cheapest and dearest hit."""

    def _first_price(alias: str) -> Mapping[str, Any] | None:
        items = (data.get(alias) or {}).get("items") or []
        return items[0].get("priceWithTax") if items else None

    cheapest = _first_price("searchMin") or {}
    dearest = _first_price("searchMax") or {}
    low = cheapest.get("min", cheapest.get("value")) or 0
    high = dearest.get("max", dearest.get("value")) or EMPTY_PRICE_RANGE_MAX
    return PriceBounds(min=int(low), max=int(high))


@dataclasses.dataclass(frozen=True)
class FacetOption:
    """A selectable facet value in the filter sidebar."""

    id: str
    name: str
    code: str
    product_count: int
    description: str = ""


def map_facet_values_by_code(facet_values: Iterable[FacetValueResult], facet_code: str) -> list[FacetOption]:
    return [
        FacetOption(
            id=result.facet_value.id,
            name=result.facet_value.name,
            code=result.facet_value.code,
            product_count=result.count,
            description=result.facet_value.description,
        )
        for result in facet_values
        if result.facet_value.facet_code == facet_code
    ]


def map_brands(facet_values: Iterable[FacetValueResult]) -> list[FacetOption]:
    return map_facet_values_by_code(facet_values, BRAND_FACET_CODE)


def map_product_types(facet_values: Iterable[FacetValueResult]) -> list[FacetOption]:
    return map_facet_values_by_code(facet_values, PRODUCT_TYPE_FACET_CODE)


def available_facet_types(facet_values: Iterable[FacetValueResult]) -> list[str]:
    """Distinct facet codes in first-seen order."""
    codes: list[str] = []
    for result in facet_values:
        code = result.facet_value.facet_code
        if code and code not in codes:
            codes.append(code)
    return codes


@dataclasses.dataclass(frozen=True)
class CategoryNode:
    id: str
    name: str
    slug: str
    product_count: int
    children: tuple[CategoryNode, ...] = ()


def _is_root(collection: CollectionNode) -> bool:
    return collection.parent is None or collection.parent.name == ROOT_COLLECTION_NAME


def build_category_tree(collections: Sequence[CollectionNode]) -> list[CategoryNode]:
    """Nest a flat collection list into the category sidebar tree.

    Children listed inline are resolved against the full list so their own
    children and product counts are filled in.
    """
    by_id = {collection.id: collection for collection in collections}

    def _node(collection: CollectionNode, ancestors: frozenset[str]) -> CategoryNode:
        full = by_id.get(collection.id, collection)
        path = ancestors | {full.id}
        children = tuple(_node(child, path) for child in full.children if child.id not in path)
        return CategoryNode(
            id=full.id,
            name=full.name,
            slug=full.slug,
            product_count=full.product_count,
            children=children,
        )

    return [_node(collection, frozenset()) for collection in collections if _is_root(collection)]
