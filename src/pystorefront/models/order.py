"""Active order, checkout and payment models."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pystorefront.models._base import StorefrontEnum, StorefrontModel
from pystorefront.models.catalog import ProductVariant

# Address fields the shipping step must have filled in before payment.
REQUIRED_ADDRESS_FIELDS: tuple[str, ...] = ("full_name", "street_line1", "city", "country_code")


class OrderState(StorefrontEnum):
    """Order states of the remote order process."""

    CREATED = "Created"
    DRAFT = "Draft"
    ADDING_ITEMS = "AddingItems"
    ARRANGING_PAYMENT = "ArrangingPayment"
    PAYMENT_AUTHORIZED = "PaymentAuthorized"
    PAYMENT_SETTLED = "PaymentSettled"
    PARTIALLY_SHIPPED = "PartiallyShipped"
    SHIPPED = "Shipped"
    PARTIALLY_DELIVERED = "PartiallyDelivered"
    DELIVERED = "Delivered"
    MODIFYING = "Modifying"
    ARRANGING_ADDITIONAL_PAYMENT = "ArrangingAdditionalPayment"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"

    @property
    def is_editable(self) -> bool:
        """Whether the order is still in its initial, item-editing state."""
        return self in (OrderState.CREATED, OrderState.DRAFT, OrderState.ADDING_ITEMS)


class OrderAddress(StorefrontModel):
    full_name: str = ""
    company: str = ""
    street_line1: str = ""
    street_line2: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    country_code: str = ""
    country: str = ""
    phone_number: str = ""

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_ADDRESS_FIELDS if not str(getattr(self, name)).strip()]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_input(self) -> dict[str, Any]:
        """Address as a ``CreateAddressInput`` variables dict."""
        fields = {
            "fullName": self.full_name,
            "company": self.company,
            "streetLine1": self.street_line1,
            "streetLine2": self.street_line2,
            "city": self.city,
            "province": self.province,
            "postalCode": self.postal_code,
            "countryCode": self.country_code,
            "phoneNumber": self.phone_number,
        }
        return {key: value for key, value in fields.items() if value}


class ShippingMethodRef(StorefrontModel):
    id: str
    name: str = ""
    description: str = ""


class ShippingLine(StorefrontModel):
    shipping_method: ShippingMethodRef | None = None
    price_with_tax: int = 0


class Customer(StorefrontModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email_address: str = ""


class OrderLine(StorefrontModel):
    id: str
    quantity: int = 0
    line_price_with_tax: int = 0
    product_variant: ProductVariant | None = None


class Payment(StorefrontModel):
    id: str
    method: str = ""
    amount: int = 0
    state: str = ""
    metadata: dict[str, Any] | None = None


class Order(StorefrontModel):
    id: str
    code: str = ""
    state: OrderState = OrderState.UNKNOWN
    total: int = 0
    total_with_tax: int = 0
    total_quantity: int = 0
    currency_code: str = ""
    order_placed_at: str | None = None
    lines: list[OrderLine] = Field(default_factory=list)
    shipping: int = 0
    shipping_with_tax: int = 0
    shipping_address: OrderAddress | None = None
    billing_address: OrderAddress | None = None
    shipping_lines: list[ShippingLine] = Field(default_factory=list)
    customer: Customer | None = None
    payments: list[Payment] = Field(default_factory=list)

    @property
    def has_customer(self) -> bool:
        return self.customer is not None

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def product_ids(self) -> set[str]:
        ids: set[str] = set()
        for line in self.lines:
            variant = line.product_variant
            if variant is not None and variant.product is not None:
                ids.add(variant.product.id)
        return ids


class OrderList(StorefrontModel):
    items: list[Order] = Field(default_factory=list)
    total_items: int = 0


class ShippingMethodQuote(StorefrontModel):
    """An eligible shipping method for the active order."""

    id: str
    name: str = ""
    code: str = ""
    description: str = ""
    price_with_tax: int = 0
    metadata: dict[str, Any] | None = None


class PaymentMethodQuote(StorefrontModel):
    """An eligible payment method for the active order."""

    id: str
    name: str = ""
    code: str = ""
    description: str = ""
    is_eligible: bool = False
    eligibility_message: str = ""
