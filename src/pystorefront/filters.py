"""Catalog filter state and its URL query-string form.

The query string is the source of truth: a listing page parses it into a
:class:`FilterState` on every request and writes changes back with
:func:`serialize`, which merges onto the previous query string so
parameters this module does not own survive the update.

Recognised parameters::

    priceMin, priceMax     integers, minor currency units
    brands, productTypes   comma-separated facet value ids
    fvd                    comma-separated generic facet value ids
    sort                   a SortKey value; absent means the default
    page                   1-based page number; absent means 1
    q / search             free-text search term
    collectionId           collection scope
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator

PRICE_MIN = "priceMin"
PRICE_MAX = "priceMax"
BRANDS = "brands"
PRODUCT_TYPES = "productTypes"
FACET_VALUES = "fvd"
SORT = "sort"
PAGE = "page"
SEARCH = "q"
SEARCH_ALIAS = "search"
COLLECTION_ID = "collectionId"

#: Parameters that describe what is being browsed rather than how it is
#: filtered. ``clear_filters`` keeps them.
SCOPE_PARAMS: tuple[str, ...] = (SEARCH, SEARCH_ALIAS, COLLECTION_ID)


class SortKey(enum.StrEnum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"


class FilterState(BaseModel):
    """Filter, sort and paging selections of a catalog listing."""

    model_config = ConfigDict(frozen=True)

    price_min: int | None = None
    price_max: int | None = None
    brand_ids: frozenset[str] = frozenset()
    product_type_ids: frozenset[str] = frozenset()
    facet_value_ids: frozenset[str] = frozenset()
    sort_key: str | None = None
    collection_id: str | None = None
    search_term: str | None = None
    page: int = Field(default=1, ge=1)

    @field_validator("search_term")
    @classmethod
    def _strip_search_term(cls, value: str | None) -> str | None:
        # Blank means no search, the same as a missing parameter.
        if value is None:
            return None
        return value.strip() or None

    @property
    def sort(self) -> SortKey | None:
        """The sort key if it is a recognised one."""
        if self.sort_key is None:
            return None
        try:
            return SortKey(self.sort_key)
        except ValueError:
            return None

    @property
    def has_price_filter(self) -> bool:
        return self.price_min is not None or self.price_max is not None

    @property
    def selected_facet_ids(self) -> list[str]:
        """Every selected facet value id, brands first, without duplicates."""
        ids: list[str] = []
        for group in (self.brand_ids, self.product_type_ids, self.facet_value_ids):
            for value in sorted(group):
                if value not in ids:
                    ids.append(value)
        return ids

    @property
    def is_filtered(self) -> bool:
        return self.has_price_filter or bool(self.selected_facet_ids)


@dataclasses.dataclass(frozen=True)
class PriceBounds:
    """Lowest and highest price available in the current scope."""

    min: int
    max: int


@dataclasses.dataclass(frozen=True)
class Navigation:
    """Where to go after a filter change.

    Filter changes replace the current history entry so rapid toggling
    does not fill the back stack.
    """

    url: str
    replace: bool = True


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


def _query_pairs(query: str | Mapping[str, str]) -> dict[str, str]:
    if isinstance(query, Mapping):
        return {str(key): str(value) for key, value in query.items()}
    return dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_ids(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


def _parse_page(value: str | None) -> int:
    page = _parse_int(value)
    if page is None or page < 1:
        return 1
    return page


def parse(query: str | Mapping[str, str]) -> FilterState:
    """Read a :class:`FilterState` from a query string.

    Missing keys take their defaults. Non-numeric prices become ``None``
    and an invalid page becomes 1; nothing here raises on bad input.
    """
    params = _query_pairs(query)
    search = params.get(SEARCH) or params.get(SEARCH_ALIAS) or ""
    return FilterState(
        price_min=_parse_int(params.get(PRICE_MIN)),
        price_max=_parse_int(params.get(PRICE_MAX)),
        brand_ids=_parse_ids(params.get(BRANDS)),
        product_type_ids=_parse_ids(params.get(PRODUCT_TYPES)),
        facet_value_ids=_parse_ids(params.get(FACET_VALUES)),
        sort_key=params.get(SORT) or None,
        collection_id=params.get(COLLECTION_ID) or None,
        search_term=search or None,
        page=_parse_page(params.get(PAGE)),
    )


# ------------------------------------------------------------------
# Serialisation
# ------------------------------------------------------------------


def _set_or_delete(params: dict[str, str], key: str, value: str | None) -> None:
    if value:
        params[key] = value
    else:
        params.pop(key, None)


def _join_ids(ids: Iterable[str]) -> str:
    return ",".join(sorted(ids))


def _price_min_param(state: FilterState, bounds: PriceBounds | None) -> str | None:
    value = state.price_min
    if value is None or value <= 0:
        return None
    if bounds is not None and value <= bounds.min:
        return None
    return str(value)


def _price_max_param(state: FilterState, bounds: PriceBounds | None) -> str | None:
    value = state.price_max
    if value is None or value <= 0:
        return None
    if bounds is not None and value >= bounds.max:
        return None
    return str(value)


def serialize(
    state: FilterState,
    previous: str | Mapping[str, str] = "",
    *,
    price_bounds: PriceBounds | None = None,
) -> str:
    """Write *state* onto the *previous* query string.

    Parameters outside the filter vocabulary are kept as they were.
    Default values are removed instead of written: an empty id set, page 1,
    no sort, an empty search, and a price at or beyond the absolute bound
    in *price_bounds* (or not positive).

    Returns the query string without a leading ``?``.
    """
    params = _query_pairs(previous)

    _set_or_delete(params, PRICE_MIN, _price_min_param(state, price_bounds))
    _set_or_delete(params, PRICE_MAX, _price_max_param(state, price_bounds))
    _set_or_delete(params, BRANDS, _join_ids(state.brand_ids))
    _set_or_delete(params, PRODUCT_TYPES, _join_ids(state.product_type_ids))
    _set_or_delete(params, FACET_VALUES, _join_ids(state.facet_value_ids))
    _set_or_delete(params, SORT, state.sort_key)
    _set_or_delete(params, PAGE, str(state.page) if state.page > 1 else None)
    _set_or_delete(params, COLLECTION_ID, state.collection_id)

    search_key = SEARCH_ALIAS if SEARCH_ALIAS in params and SEARCH not in params else SEARCH
    params.pop(SEARCH_ALIAS if search_key == SEARCH else SEARCH, None)
    _set_or_delete(params, search_key, state.search_term)

    return urlencode(params, safe=",")


# ------------------------------------------------------------------
# State updates
# ------------------------------------------------------------------


def _toggle(ids: frozenset[str], value: str) -> frozenset[str]:
    return ids - {value} if value in ids else ids | {value}


def toggle_brand(state: FilterState, brand_id: str) -> FilterState:
    return state.model_copy(update={"brand_ids": _toggle(state.brand_ids, brand_id)})


def toggle_product_type(state: FilterState, product_type_id: str) -> FilterState:
    return state.model_copy(update={"product_type_ids": _toggle(state.product_type_ids, product_type_id)})


def toggle_facet_value(state: FilterState, facet_value_id: str) -> FilterState:
    return state.model_copy(update={"facet_value_ids": _toggle(state.facet_value_ids, facet_value_id)})


def update_price_range(
    state: FilterState,
    price_min: int,
    price_max: int,
    absolute_min: int,
    absolute_max: int,
) -> FilterState:
    """Set the price window; a side at its absolute bound is cleared."""
    return state.model_copy(
        update={
            "price_min": price_min if price_min > absolute_min else None,
            "price_max": price_max if price_max < absolute_max else None,
        }
    )


def update_sort(state: FilterState, sort_key: SortKey | str | None) -> FilterState:
    return state.model_copy(update={"sort_key": str(sort_key) if sort_key else None})


def go_to_page(state: FilterState, page: int) -> FilterState:
    return state.model_copy(update={"page": max(page, 1)})


def clear_filters(previous: str | Mapping[str, str] = "") -> str:
    """Drop every filter parameter, keeping only the browsing scope."""
    params = _query_pairs(previous)
    kept = {key: value for key, value in params.items() if key in SCOPE_PARAMS}
    return urlencode(kept, safe=",")


# ------------------------------------------------------------------
# Navigation
# ------------------------------------------------------------------


def navigate(path: str, query: str) -> Navigation:
    query = query.lstrip("?")
    return Navigation(url=f"{path}?{query}" if query else path)


def apply(
    path: str,
    state: FilterState,
    previous: str | Mapping[str, str] = "",
    *,
    price_bounds: PriceBounds | None = None,
) -> Navigation:
    """Serialise *state* onto *previous* and navigate to the result."""
    return navigate(path, serialize(state, previous, price_bounds=price_bounds))
