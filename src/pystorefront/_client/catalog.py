"""Catalog reads for :class:`pystorefront.client.StorefrontClient`."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pystorefront._constants import FACET_LIST_TAKE
from pystorefront.filters import FilterState, PriceBounds
from pystorefront.gateway import RequestContext
from pystorefront.models.catalog import (
    Collection,
    CollectionList,
    FacetList,
    FacetValueResult,
    Product,
    ProductList,
    SearchResponse,
    SearchResultItem,
)
from pystorefront.queries import (
    GET_COLLECTION,
    GET_COLLECTION_WITH_PRODUCTS,
    GET_COLLECTIONS,
    GET_COLLECTIONS_TREE,
    GET_FACETS,
    GET_PRICE_RANGE,
    GET_PRODUCT,
    GET_PRODUCTS,
    GET_SEARCH_RESULTS,
)
from pystorefront.query_builder import (
    CategoryNode,
    FacetOption,
    ListQueryOptions,
    PageInfo,
    Pagination,
    Scope,
    available_facet_types,
    build_category_tree,
    build_facet_options_input,
    build_list_options,
    build_search_input,
    extract_price_range,
    map_brands,
    map_product_types,
    price_bounds_from_extremes,
)

if TYPE_CHECKING:
    from pystorefront.client import StorefrontClient


@dataclass(frozen=True)
class CatalogPage:
    """One page of a filtered listing plus the sidebar options for its scope."""

    state: FilterState
    items: list[SearchResultItem]
    page_info: PageInfo
    price_bounds: PriceBounds
    facet_values: list[FacetValueResult] = field(default_factory=list)
    brands: list[FacetOption] = field(default_factory=list)
    product_types: list[FacetOption] = field(default_factory=list)
    facet_types: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CollectionPage:
    collection: Collection
    products: list[Product]
    page_info: PageInfo


async def get_products(
    client: StorefrontClient,
    options: ListQueryOptions | None = None,
    *,
    context: RequestContext | None = None,
) -> ProductList:
    variables = {"options": options.to_variables(include_price=False)} if options is not None else None
    data = await client.gateway.request(GET_PRODUCTS, variables, context)
    return ProductList.model_validate(data.get("products") or {})


async def get_product(
    client: StorefrontClient,
    *,
    slug: str | None = None,
    product_id: str | None = None,
    context: RequestContext | None = None,
) -> Product | None:
    if not slug and not product_id:
        raise ValueError("slug or product_id is required")
    variables = {"slug": slug} if slug else {"id": product_id}
    data = await client.gateway.request(GET_PRODUCT, variables, context)
    raw = data.get("product")
    return Product.model_validate(raw) if isinstance(raw, dict) else None


async def get_collections(client: StorefrontClient, *, context: RequestContext | None = None) -> CollectionList:
    data = await client.gateway.request(GET_COLLECTIONS, None, context)
    return CollectionList.model_validate(data.get("collections") or {})


async def get_collection(
    client: StorefrontClient,
    slug: str,
    *,
    context: RequestContext | None = None,
) -> Collection | None:
    data = await client.gateway.request(GET_COLLECTION, {"slug": slug}, context)
    raw = data.get("collection")
    return Collection.model_validate(raw) if isinstance(raw, dict) else None


async def get_collection_with_products(
    client: StorefrontClient,
    slug: str,
    state: FilterState,
    *,
    page_size: int | None = None,
    context: RequestContext | None = None,
) -> CollectionPage | None:
    """A collection and one filtered page of its variants' products."""
    pagination = Pagination.from_state(state, page_size or client.config.page_size)
    options = build_list_options(state, pagination, Scope.from_state(state, collection_slug=slug))
    data = await client.gateway.request(
        GET_COLLECTION_WITH_PRODUCTS,
        {"slug": slug, "options": options.to_variables()},
        context,
    )
    raw = data.get("collection")
    if not isinstance(raw, dict):
        return None
    collection = Collection.model_validate(raw)
    return CollectionPage(
        collection=collection,
        products=collection.products,
        page_info=PageInfo.from_totals(collection.product_variants.total_items, pagination),
    )


async def search(
    client: StorefrontClient,
    search_input: dict[str, object],
    *,
    context: RequestContext | None = None,
) -> SearchResponse:
    data = await client.gateway.request(GET_SEARCH_RESULTS, {"input": search_input}, context)
    return SearchResponse.model_validate(data.get("search") or {})


async def browse(
    client: StorefrontClient,
    state: FilterState,
    *,
    collection_slug: str | None = None,
    page_size: int | None = None,
    context: RequestContext | None = None,
) -> CatalogPage:
    """Run the filtered search and the scope-only options search together."""
    pagination = Pagination.from_state(state, page_size or client.config.page_size)
    scope = Scope.from_state(state, collection_slug=collection_slug)
    results, options = await asyncio.gather(
        search(client, build_search_input(state, pagination, scope), context=context),
        search(client, build_facet_options_input(scope), context=context),
    )
    facet_values = options.facet_values
    return CatalogPage(
        state=state,
        items=results.items,
        page_info=PageInfo.from_totals(results.total_items, pagination),
        price_bounds=extract_price_range(options.items),
        facet_values=facet_values,
        brands=map_brands(facet_values),
        product_types=map_product_types(facet_values),
        facet_types=available_facet_types(facet_values),
    )


async def get_facets(client: StorefrontClient, *, context: RequestContext | None = None) -> FacetList:
    data = await client.gateway.request(GET_FACETS, {"options": {"take": FACET_LIST_TAKE}}, context)
    return FacetList.model_validate(data.get("facets") or {})


async def get_category_tree(
    client: StorefrontClient,
    *,
    context: RequestContext | None = None,
) -> list[CategoryNode]:
    data = await client.gateway.request(GET_COLLECTIONS_TREE, None, context)
    return build_category_tree(CollectionList.model_validate(data.get("collections") or {}).items)


async def get_price_range(
    client: StorefrontClient,
    *,
    collection_slug: str | None = None,
    term: str | None = None,
    context: RequestContext | None = None,
) -> PriceBounds:
    data = await client.gateway.request(
        GET_PRICE_RANGE,
        {"collectionSlug": collection_slug, "term": term},
        context,
    )
    return price_bounds_from_extremes(data)
