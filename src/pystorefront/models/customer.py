"""Customer, account and address models plus mutation inputs."""

from __future__ import annotations

from pydantic import Field

from pystorefront.models._base import InputModel, StorefrontModel


class Channel(StorefrontModel):
    id: str
    code: str = ""
    token: str = ""


class CurrentUser(StorefrontModel):
    id: str
    identifier: str = ""
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    email_address: str = ""
    channels: list[Channel] = Field(default_factory=list)


class Country(StorefrontModel):
    id: str
    name: str = ""
    code: str = ""


class CustomerAddress(StorefrontModel):
    id: str
    full_name: str = ""
    company: str = ""
    street_line1: str = ""
    street_line2: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    country: Country | None = None
    phone_number: str = ""
    default_shipping_address: bool = False
    default_billing_address: bool = False


class CustomerProfile(StorefrontModel):
    """Result of ``updateCustomer``."""

    id: str
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    email_address: str = ""


# ------------------------------------------------------------------
# Inputs
# ------------------------------------------------------------------


class AddressInput(InputModel):
    """``CreateAddressInput``; blank optional fields are omitted."""

    full_name: str
    street_line1: str
    city: str
    country_code: str
    company: str | None = None
    street_line2: str | None = None
    province: str | None = None
    postal_code: str | None = None
    phone_number: str | None = None
    default_shipping_address: bool | None = None
    default_billing_address: bool | None = None

    def to_variables(self) -> dict[str, object]:
        data = super().to_variables()
        return {key: value for key, value in data.items() if value != ""}


class UpdateAddressInput(AddressInput):
    id: str


class CustomerInput(InputModel):
    """``CreateCustomerInput`` used by the checkout customer step."""

    email_address: str
    first_name: str
    last_name: str
    phone_number: str | None = None


class RegisterCustomerInput(InputModel):
    email_address: str
    password: str
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None


class UpdateCustomerInput(InputModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
