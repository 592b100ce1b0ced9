"""Tests for FilterState to shop API input translation."""

from __future__ import annotations

from typing import Any

import pytest

from pystorefront import filters
from pystorefront.filters import FilterState, PriceBounds
from pystorefront.models.catalog import CollectionNode, FacetValueResult, SearchResultItem
from pystorefront.query_builder import (
    DEFAULT_SORT,
    LogicalOperator,
    PageInfo,
    Pagination,
    Scope,
    available_facet_types,
    build_category_tree,
    build_facet_options_input,
    build_list_options,
    build_price_filter,
    build_search_input,
    build_search_sort,
    build_sort,
    extract_price_range,
    map_brands,
    map_product_types,
    price_bounds_from_extremes,
)

EXAMPLE_QUERY = "?priceMin=5000&priceMax=20000&brands=acme,globex&sort=price-asc&page=2"


def _facet_value(value_id: str, facet_code: str, count: int) -> FacetValueResult:
    return FacetValueResult.model_validate(
        {
            "count": count,
            "facetValue": {
                "id": value_id,
                "name": value_id.title(),
                "code": value_id,
                "facet": {"id": f"F-{facet_code}", "name": facet_code, "code": facet_code},
            },
        }
    )


def _item(product_id: str, price: dict[str, Any] | None) -> SearchResultItem:
    return SearchResultItem.model_validate({"productId": product_id, "priceWithTax": price})


# ------------------------------------------------------------------
# Pagination
# ------------------------------------------------------------------


class TestPagination:
    def test_skip_and_take(self) -> None:
        pagination = Pagination(page=3, page_size=12)
        assert pagination.skip == 24
        assert pagination.take == 12

    @pytest.mark.parametrize("page, size", [(0, 12), (1, 0)])
    def test_rejects_invalid_values(self, page: int, size: int) -> None:
        with pytest.raises(ValueError):
            Pagination(page=page, page_size=size)

    def test_page_info(self) -> None:
        info = PageInfo.from_totals(25, Pagination(page=2, page_size=12))
        assert info.total_pages == 3
        assert info.has_next
        assert info.has_previous

    def test_empty_result_has_one_page(self) -> None:
        info = PageInfo.from_totals(0, Pagination())
        assert info.total_pages == 1
        assert not info.has_next
        assert not info.has_previous


# ------------------------------------------------------------------
# Sorting and predicates
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "key, expected",
    [
        ("price-asc", {"price": "ASC"}),
        ("price-desc", {"price": "DESC"}),
        ("newest", {"createdAt": "DESC"}),
        ("oldest", {"createdAt": "ASC"}),
        ("name-asc", {"name": "ASC"}),
        (None, {"createdAt": "DESC"}),
        ("popularity", {"createdAt": "DESC"}),
    ],
)
def test_sort_table(key: str | None, expected: dict[str, str]) -> None:
    assert build_sort(key) == expected


def test_sort_result_is_a_copy() -> None:
    build_sort(None)["createdAt"] = "ASC"
    assert DEFAULT_SORT == {"createdAt": "DESC"}


def test_search_sort_keeps_relevance_for_date_keys() -> None:
    assert build_search_sort("price-desc") == {"price": "DESC"}
    assert build_search_sort("newest") is None
    assert build_search_sort(None) is None
    assert build_search_sort("bogus") is None


def test_price_filter() -> None:
    assert build_price_filter(None, None) is None
    assert build_price_filter(5000, 20000) == {"priceWithTax": {"between": {"start": 5000, "end": 20000}}}
    assert build_price_filter(None, 20000) == {"priceWithTax": {"between": {"start": 0, "end": 20000}}}
    assert build_price_filter(5000, None) == {"priceWithTax": {"between": {"start": 5000, "end": 999_999_999}}}


# ------------------------------------------------------------------
# List options
# ------------------------------------------------------------------


def test_list_options_for_example_listing() -> None:
    state = filters.parse(EXAMPLE_QUERY)
    options = build_list_options(state, Pagination.from_state(state, page_size=12))

    assert options.skip == (2 - 1) * 12
    assert options.take == 12
    assert options.sort == {"price": "ASC"}
    assert options.filter == {"priceWithTax": {"between": {"start": 5000, "end": 20000}}}
    assert options.facet_value_ids == ["acme", "globex"]
    assert options.facet_value_operator == LogicalOperator.OR

    variables = options.to_variables()
    assert variables["skip"] == 12
    assert variables["filter"]["priceWithTax"] == {"between": {"start": 5000, "end": 20000}}
    assert variables["filter"]["facetValueId"] == {"in": ["acme", "globex"]}


def test_list_options_without_selections() -> None:
    options = build_list_options(FilterState(), Pagination())
    assert options.filter is None
    assert options.facet_value_ids == []
    assert options.facet_value_operator is None
    assert options.to_variables() == {"take": 12, "skip": 0, "sort": {"createdAt": "DESC"}}


def test_list_variables_can_omit_price() -> None:
    state = FilterState(price_min=100, brand_ids=frozenset({"acme"}))
    variables = build_list_options(state, Pagination()).to_variables(include_price=False)
    assert variables["filter"] == {"facetValueId": {"in": ["acme"]}}

    price_only = build_list_options(FilterState(price_min=100), Pagination())
    assert "filter" not in price_only.to_variables(include_price=False)


# ------------------------------------------------------------------
# Search inputs
# ------------------------------------------------------------------


def test_primary_and_options_queries_share_scope_only() -> None:
    state = filters.parse("q=lamp&brands=acme&productTypes=desk&priceMin=1000&sort=name-desc&page=3")
    scope = Scope.from_state(state, collection_slug="lighting")
    pagination = Pagination.from_state(state, page_size=10)

    primary = build_search_input(state, pagination, scope)
    options = build_facet_options_input(scope)

    assert primary == {
        "term": "lamp",
        "collectionSlug": "lighting",
        "groupByProduct": True,
        "take": 10,
        "skip": 20,
        "sort": {"name": "DESC"},
        "facetValueIds": ["acme", "desk"],
        "facetValueOperator": "OR",
        "priceRangeWithTax": {"min": 1000, "max": 999_999_999},
    }
    assert options == {"term": "lamp", "collectionSlug": "lighting", "groupByProduct": True, "take": 100, "skip": 0}


def test_search_input_without_filters_has_no_predicates() -> None:
    primary = build_search_input(FilterState(), Pagination(), Scope())
    assert primary == {"groupByProduct": True, "take": 12, "skip": 0}


def test_scope_from_collection_id() -> None:
    scope = Scope.from_state(filters.parse("collectionId=9"))
    assert scope.to_search_fields() == {"collectionId": "9"}


# ------------------------------------------------------------------
# Result helpers
# ------------------------------------------------------------------


class TestPriceRange:
    def test_mixed_single_and_range_prices(self) -> None:
        items = [
            _item("1", {"value": 2500}),
            _item("2", {"min": 1200, "max": 4000}),
            _item("3", {"value": 9900}),
            _item("4", None),
        ]
        assert extract_price_range(items) == PriceBounds(min=1200, max=9900)

    def test_empty_result_gives_placeholder(self) -> None:
        assert extract_price_range([]) == PriceBounds(min=0, max=1_000_000)

    def test_extremes_response(self) -> None:
        data = {
            "searchMin": {"items": [{"priceWithTax": {"min": 300, "max": 800}}]},
            "searchMax": {"items": [{"priceWithTax": {"value": 45000}}]},
        }
        assert price_bounds_from_extremes(data) == PriceBounds(min=300, max=45000)

    def test_extremes_response_without_hits(self) -> None:
        data = {"searchMin": {"items": []}, "searchMax": None}
        assert price_bounds_from_extremes(data) == PriceBounds(min=0, max=1_000_000)


def test_facet_value_mapping() -> None:
    values = [
        _facet_value("acme", "brand", 4),
        _facet_value("shoes", "product-type", 7),
        _facet_value("globex", "brand", 2),
        _facet_value("red", "color", 1),
    ]

    brands = map_brands(values)
    assert [(b.id, b.name, b.product_count) for b in brands] == [("acme", "Acme", 4), ("globex", "Globex", 2)]
    assert [t.id for t in map_product_types(values)] == ["shoes"]
    assert available_facet_types(values) == ["brand", "product-type", "color"]


def test_category_tree() -> None:
    raw = [
        {
            "id": "1",
            "name": "Electronics",
            "slug": "electronics",
            "parent": {"id": "0", "name": "__root_collection__"},
            "children": [{"id": "2", "name": "Phones", "slug": "phones"}],
            "productVariants": {"totalItems": 10},
        },
        {
            "id": "2",
            "name": "Phones",
            "slug": "phones",
            "parent": {"id": "1", "name": "Electronics"},
            "children": [{"id": "3", "name": "Cases", "slug": "cases"}],
            "productVariants": {"totalItems": 6},
        },
        {
            "id": "3",
            "name": "Cases",
            "slug": "cases",
            "parent": {"id": "2", "name": "Phones"},
            "productVariants": {"totalItems": 2},
        },
        {"id": "4", "name": "Garden", "slug": "garden", "productVariants": {"totalItems": 3}},
    ]
    tree = build_category_tree([CollectionNode.model_validate(item) for item in raw])

    assert [node.slug for node in tree] == ["electronics", "garden"]
    phones = tree[0].children[0]
    assert phones.product_count == 6
    assert [child.slug for child in phones.children] == ["cases"]
    assert tree[1].children == ()


def test_category_tree_survives_cycles() -> None:
    raw = [
        {"id": "1", "name": "A", "slug": "a", "children": [{"id": "2", "name": "B"}]},
        {"id": "2", "name": "B", "slug": "b", "parent": {"id": "1", "name": "A"}, "children": [{"id": "1"}]},
    ]
    tree = build_category_tree([CollectionNode.model_validate(item) for item in raw])
    assert len(tree) == 1
    assert tree[0].children[0].children == ()
