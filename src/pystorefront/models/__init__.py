"""Data models for shop API responses."""

from pystorefront.models._base import InputModel, StorefrontEnum, StorefrontModel
from pystorefront.models.catalog import (
    Asset,
    Collection,
    CollectionList,
    CollectionNode,
    CollectionRef,
    Facet,
    FacetList,
    FacetRef,
    FacetValue,
    FacetValueResult,
    Price,
    PriceRange,
    Product,
    ProductList,
    ProductOption,
    ProductOptionGroup,
    ProductVariant,
    SearchResponse,
    SearchResultItem,
    SinglePrice,
    VariantList,
)
from pystorefront.models.customer import (
    AddressInput,
    Channel,
    Country,
    CurrentUser,
    CustomerAddress,
    CustomerInput,
    CustomerProfile,
    RegisterCustomerInput,
    UpdateAddressInput,
    UpdateCustomerInput,
)
from pystorefront.models.order import (
    Customer,
    Order,
    OrderAddress,
    OrderLine,
    OrderList,
    OrderState,
    Payment,
    PaymentMethodQuote,
    ShippingLine,
    ShippingMethodQuote,
    ShippingMethodRef,
)
from pystorefront.models.results import ErrorCode, ErrorResult, is_error_result, parse_error_result, unwrap

__all__ = [
    "AddressInput",
    "Asset",
    "Channel",
    "Collection",
    "CollectionList",
    "CollectionNode",
    "CollectionRef",
    "Country",
    "CurrentUser",
    "Customer",
    "CustomerAddress",
    "CustomerInput",
    "CustomerProfile",
    "ErrorCode",
    "ErrorResult",
    "Facet",
    "FacetList",
    "FacetRef",
    "FacetValue",
    "FacetValueResult",
    "InputModel",
    "Order",
    "OrderAddress",
    "OrderLine",
    "OrderList",
    "OrderState",
    "Payment",
    "PaymentMethodQuote",
    "Price",
    "PriceRange",
    "Product",
    "ProductList",
    "ProductOption",
    "ProductOptionGroup",
    "ProductVariant",
    "RegisterCustomerInput",
    "SearchResponse",
    "SearchResultItem",
    "ShippingLine",
    "ShippingMethodQuote",
    "ShippingMethodRef",
    "SinglePrice",
    "StorefrontEnum",
    "StorefrontModel",
    "UpdateAddressInput",
    "UpdateCustomerInput",
    "VariantList",
    "is_error_result",
    "parse_error_result",
    "unwrap",
]
