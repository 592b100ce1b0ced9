"""Tests for Pydantic model parsing with StorefrontModel + StorefrontEnum."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pystorefront.models import (
    AddressInput,
    Collection,
    CollectionNode,
    ErrorCode,
    Order,
    OrderAddress,
    OrderState,
    PriceRange,
    Product,
    SearchResponse,
    SinglePrice,
    UpdateAddressInput,
)

# ------------------------------------------------------------------
# StorefrontEnum
# ------------------------------------------------------------------


class TestStorefrontEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert OrderState("Frobnicating") == OrderState.UNKNOWN

    def test_known_value(self) -> None:
        assert OrderState("ArrangingPayment") == OrderState.ARRANGING_PAYMENT

    def test_all_enums_have_unknown(self) -> None:
        for cls in (OrderState, ErrorCode):
            assert hasattr(cls, "UNKNOWN"), f"{cls.__name__} missing UNKNOWN"

    def test_editable_states(self) -> None:
        assert OrderState.ADDING_ITEMS.is_editable
        assert not OrderState.ARRANGING_PAYMENT.is_editable
        assert not OrderState.UNKNOWN.is_editable


# ------------------------------------------------------------------
# StorefrontModel
# ------------------------------------------------------------------


class TestStorefrontModel:
    def test_nulls_use_defaults_and_raw_is_kept(self) -> None:
        order = Order.model_validate(
            {"id": "1", "code": "AB12", "state": "AddingItems", "customer": None, "lines": None, "futureField": 7}
        )
        assert order.customer is None
        assert order.lines == []
        assert order.raw["futureField"] == 7
        assert not order.has_customer
        assert order.is_empty

    def test_unknown_state_string(self) -> None:
        order = Order.model_validate({"id": "1", "state": "SomethingNew"})
        assert order.state == OrderState.UNKNOWN

    def test_models_are_frozen(self) -> None:
        order = Order.model_validate({"id": "1"})
        with pytest.raises(ValidationError):
            order.code = "X"  # type: ignore[misc]


class TestSearchPrices:
    def test_single_and_range_prices(self) -> None:
        response = SearchResponse.model_validate(
            {
                "totalItems": 2,
                "items": [
                    {"productId": "1", "productName": "Lamp", "priceWithTax": {"value": 1999}},
                    {"productId": "2", "productName": "Desk", "priceWithTax": {"min": 15000, "max": 22000}},
                ],
                "facetValues": [
                    {"count": 2, "facetValue": {"id": "7", "name": "Acme", "facet": {"id": "1", "code": "brand"}}}
                ],
            }
        )
        lamp, desk = response.items
        assert isinstance(lamp.price_with_tax, SinglePrice)
        assert (lamp.price_with_tax.low, lamp.price_with_tax.high) == (1999, 1999)
        assert isinstance(desk.price_with_tax, PriceRange)
        assert (desk.price_with_tax.low, desk.price_with_tax.high) == (15000, 22000)
        assert response.facet_values[0].facet_value.facet_code == "brand"

    def test_product_price_across_variants(self) -> None:
        product = Product.model_validate(
            {
                "id": "1",
                "variants": [{"id": "a", "priceWithTax": 500}, {"id": "b", "priceWithTax": 900}],
            }
        )
        assert isinstance(product.price_with_tax, PriceRange)
        assert Product.model_validate({"id": "2"}).price_with_tax is None


def test_collection_products_are_distinct_and_ordered() -> None:
    collection = Collection.model_validate(
        {
            "id": "5",
            "slug": "lighting",
            "productVariants": {
                "totalItems": 3,
                "items": [
                    {"id": "v1", "product": {"id": "p1", "name": "Lamp"}},
                    {"id": "v2", "product": {"id": "p1", "name": "Lamp"}},
                    {"id": "v3", "product": {"id": "p2", "name": "Sconce"}},
                    {"id": "v4", "product": None},
                ],
            },
        }
    )
    assert [p.id for p in collection.products] == ["p1", "p2"]


def test_collection_node_lifts_product_count() -> None:
    node = CollectionNode.model_validate({"id": "1", "productVariants": {"totalItems": 42}})
    assert node.product_count == 42


def test_order_product_ids() -> None:
    order = Order.model_validate(
        {
            "id": "1",
            "lines": [
                {"id": "l1", "productVariant": {"id": "v1", "product": {"id": "p1"}}},
                {"id": "l2", "productVariant": {"id": "v2", "product": {"id": "p2"}}},
                {"id": "l3", "productVariant": None},
            ],
        }
    )
    assert order.product_ids == {"p1", "p2"}


def test_order_address_completeness() -> None:
    address = OrderAddress.model_validate({"fullName": "Ada", "streetLine1": " ", "city": "London"})
    assert address.missing_fields() == ["street_line1", "country_code"]
    assert not address.is_complete

    complete = OrderAddress.model_validate(
        {"fullName": "Ada", "streetLine1": "1 Row", "city": "London", "countryCode": "GB", "company": None}
    )
    assert complete.is_complete
    assert complete.to_input() == {"fullName": "Ada", "streetLine1": "1 Row", "city": "London", "countryCode": "GB"}


class TestInputs:
    def test_address_input_drops_blank_fields(self) -> None:
        address = AddressInput(
            full_name=" Ada ", street_line1="1 Row", city="London", country_code="GB", company="", province=None
        )
        assert address.to_variables() == {
            "fullName": "Ada",
            "streetLine1": "1 Row",
            "city": "London",
            "countryCode": "GB",
        }

    def test_update_address_input_carries_id(self) -> None:
        update = UpdateAddressInput(id="9", full_name="Ada", street_line1="1 Row", city="London", country_code="GB")
        assert update.to_variables()["id"] == "9"

    def test_required_address_fields(self) -> None:
        with pytest.raises(ValidationError):
            AddressInput(full_name="Ada", street_line1="1 Row", city="London")  # type: ignore[call-arg]
