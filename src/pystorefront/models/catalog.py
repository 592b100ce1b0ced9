"""Catalog models: products, variants, search results, facets, collections."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Discriminator, Field, Tag, model_validator

from pystorefront.models._base import StorefrontModel


class Asset(StorefrontModel):
    id: str
    preview: str = ""
    source: str = ""


# ------------------------------------------------------------------
# Prices
# ------------------------------------------------------------------


class SinglePrice(StorefrontModel):
    """A single price in minor currency units."""

    value: int

    @property
    def low(self) -> int:
        return self.value

    @property
    def high(self) -> int:
        return self.value


class PriceRange(StorefrontModel):
    """Price span across the variants grouped into one search result."""

    min: int
    max: int

    @property
    def low(self) -> int:
        return self.min

    @property
    def high(self) -> int:
        return self.max


def _price_kind(value: Any) -> str | None:
    if isinstance(value, SinglePrice):
        return "single"
    if isinstance(value, PriceRange):
        return "range"
    if isinstance(value, dict):
        if "value" in value:
            return "single"
        if "min" in value or "max" in value:
            return "range"
    return None


Price = Annotated[
    Annotated[SinglePrice, Tag("single")] | Annotated[PriceRange, Tag("range")],
    Discriminator(_price_kind),
]
"""Search price: either :class:`SinglePrice` or :class:`PriceRange`."""


# ------------------------------------------------------------------
# Facets
# ------------------------------------------------------------------


class FacetRef(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""


class FacetValue(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""
    description: str = ""
    facet: FacetRef | None = None

    @property
    def facet_code(self) -> str:
        return self.facet.code if self.facet is not None else ""


class FacetValueResult(StorefrontModel):
    """A facet value and how many results carry it."""

    facet_value: FacetValue
    count: int = 0


class Facet(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""
    values: list[FacetValue] = Field(default_factory=list)


class FacetList(StorefrontModel):
    items: list[Facet] = Field(default_factory=list)
    total_items: int = 0


# ------------------------------------------------------------------
# Products
# ------------------------------------------------------------------


class CollectionRef(StorefrontModel):
    id: str
    name: str = ""
    slug: str = ""


class ProductOption(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""


class ProductOptionGroup(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""
    options: list[ProductOption] = Field(default_factory=list)


class ProductVariant(StorefrontModel):
    id: str
    name: str = ""
    price: int = 0
    price_with_tax: int = 0
    sku: str = ""
    stock_level: str = ""
    featured_asset: Asset | None = None
    options: list[ProductOption] = Field(default_factory=list)
    product: Product | None = None


class Product(StorefrontModel):
    id: str
    name: str = ""
    slug: str = ""
    description: str = ""
    featured_asset: Asset | None = None
    assets: list[Asset] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    option_groups: list[ProductOptionGroup] = Field(default_factory=list)
    facet_values: list[FacetValue] = Field(default_factory=list)
    collections: list[CollectionRef] = Field(default_factory=list)

    @property
    def price_with_tax(self) -> SinglePrice | PriceRange | None:
        """Price (or span) across the product's variants."""
        prices = [v.price_with_tax for v in self.variants]
        if not prices:
            return None
        low, high = min(prices), max(prices)
        if low == high:
            return SinglePrice(value=low)
        return PriceRange(min=low, max=high)


class ProductList(StorefrontModel):
    items: list[Product] = Field(default_factory=list)
    total_items: int = 0


# ------------------------------------------------------------------
# Search
# ------------------------------------------------------------------


class SearchResultItem(StorefrontModel):
    product_id: str
    product_name: str = ""
    slug: str = ""
    description: str = ""
    sku: str = ""
    price: Price | None = None
    price_with_tax: Price | None = None
    product_asset: Asset | None = None
    collection_ids: list[str] = Field(default_factory=list)
    facet_ids: list[str] = Field(default_factory=list)
    facet_value_ids: list[str] = Field(default_factory=list)
    score: float = 0.0


class SearchResponse(StorefrontModel):
    items: list[SearchResultItem] = Field(default_factory=list)
    total_items: int = 0
    facet_values: list[FacetValueResult] = Field(default_factory=list)


# ------------------------------------------------------------------
# Collections
# ------------------------------------------------------------------


class CollectionNode(StorefrontModel):
    """A collection as it appears in the collection tree."""

    id: str
    name: str = ""
    slug: str = ""
    description: str = ""
    featured_asset: Asset | None = None
    parent: CollectionRef | None = None
    children: list[CollectionNode] = Field(default_factory=list)
    product_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_product_count(cls, values: Any) -> Any:
        """Flatten ``productVariants.totalItems`` into ``productCount``."""
        if not isinstance(values, dict):
            return values
        variants = values.get("productVariants")
        if isinstance(variants, dict) and "productCount" not in values:
            return {**values, "productCount": variants.get("totalItems") or 0}
        return values


class CollectionList(StorefrontModel):
    items: list[CollectionNode] = Field(default_factory=list)
    total_items: int = 0


class VariantList(StorefrontModel):
    items: list[ProductVariant] = Field(default_factory=list)
    total_items: int = 0
    facet_values: list[FacetValueResult] = Field(default_factory=list)


class Collection(StorefrontModel):
    id: str
    name: str = ""
    slug: str = ""
    description: str = ""
    featured_asset: Asset | None = None
    breadcrumbs: list[CollectionRef] = Field(default_factory=list)
    children: list[CollectionNode] = Field(default_factory=list)
    product_variants: VariantList = Field(default_factory=VariantList)

    @property
    def products(self) -> list[Product]:
        """Distinct products behind the listed variants, in listing order."""
        seen: set[str] = set()
        products: list[Product] = []
        for variant in self.product_variants.items:
            product = variant.product
            if product is None or product.id in seen:
                continue
            seen.add(product.id)
            products.append(product)
        return products


ProductVariant.model_rebuild()
CollectionNode.model_rebuild()
