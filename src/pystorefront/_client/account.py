"""Authentication and customer account operations for :class:`pystorefront.client.StorefrontClient`.

Mutations returning a result union raise
:class:`~pystorefront.exceptions.ErrorResultError` for the error variant;
callers turn it into a sentence with
:func:`pystorefront.messages.error_message_for`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pystorefront.gateway import NO_CACHE, RequestContext
from pystorefront.models.customer import (
    AddressInput,
    Country,
    CurrentUser,
    CustomerAddress,
    CustomerProfile,
    RegisterCustomerInput,
    UpdateAddressInput,
    UpdateCustomerInput,
)
from pystorefront.models.order import OrderList
from pystorefront.models.results import unwrap
from pystorefront.queries import (
    AUTHENTICATE,
    CREATE_CUSTOMER_ADDRESS,
    DELETE_CUSTOMER_ADDRESS,
    GET_AVAILABLE_COUNTRIES,
    GET_CUSTOMER_ADDRESSES,
    GET_CUSTOMER_ORDERS,
    LOGOUT,
    ME,
    REGISTER_CUSTOMER_ACCOUNT,
    REQUEST_PASSWORD_RESET,
    RESET_PASSWORD,
    UPDATE_CUSTOMER,
    UPDATE_CUSTOMER_ADDRESS,
    UPDATE_CUSTOMER_EMAIL_ADDRESS,
    UPDATE_CUSTOMER_PASSWORD,
    VERIFY_CUSTOMER_ACCOUNT,
)

if TYPE_CHECKING:
    from pystorefront.client import StorefrontClient


async def _result(
    client: StorefrontClient,
    query: str,
    field: str,
    variables: dict[str, Any] | None,
    context: RequestContext | None,
) -> dict[str, Any]:
    data = await client.gateway.request(query, variables, context)
    return unwrap(data.get(field), field)


# ------------------------------------------------------------------
# Authentication
# ------------------------------------------------------------------


async def authenticate(
    client: StorefrontClient,
    username: str,
    password: str,
    *,
    remember_me: bool = False,
    context: RequestContext | None = None,
) -> CurrentUser:
    variables = {
        "input": {"native": {"username": username, "password": password}},
        "rememberMe": remember_me,
    }
    return CurrentUser.model_validate(await _result(client, AUTHENTICATE, "authenticate", variables, context))


async def register_customer_account(
    client: StorefrontClient,
    registration: RegisterCustomerInput,
    *,
    context: RequestContext | None = None,
) -> bool:
    result = await _result(
        client,
        REGISTER_CUSTOMER_ACCOUNT,
        "registerCustomerAccount",
        {"input": registration.to_variables()},
        context,
    )
    return bool(result.get("success"))


async def verify_customer_account(
    client: StorefrontClient,
    token: str,
    password: str | None = None,
    *,
    context: RequestContext | None = None,
) -> CurrentUser:
    variables: dict[str, Any] = {"token": token}
    if password:
        variables["password"] = password
    result = await _result(client, VERIFY_CUSTOMER_ACCOUNT, "verifyCustomerAccount", variables, context)
    return CurrentUser.model_validate(result)


async def request_password_reset(
    client: StorefrontClient,
    email_address: str,
    *,
    context: RequestContext | None = None,
) -> bool:
    result = await _result(
        client,
        REQUEST_PASSWORD_RESET,
        "requestPasswordReset",
        {"emailAddress": email_address},
        context,
    )
    return bool(result.get("success"))


async def reset_password(
    client: StorefrontClient,
    token: str,
    password: str,
    *,
    context: RequestContext | None = None,
) -> CurrentUser:
    result = await _result(client, RESET_PASSWORD, "resetPassword", {"token": token, "password": password}, context)
    return CurrentUser.model_validate(result)


async def logout(client: StorefrontClient, *, context: RequestContext | None = None) -> bool:
    data = await client.gateway.request(LOGOUT, None, context)
    return bool((data.get("logout") or {}).get("success"))


# ------------------------------------------------------------------
# Customer
# ------------------------------------------------------------------


async def get_current_user(client: StorefrontClient, *, context: RequestContext | None = None) -> CurrentUser | None:
    """Signed-in user with their customer profile, or ``None`` for a guest."""
    data = await client.gateway.request(ME, None, context, NO_CACHE)
    me = data.get("me")
    if not isinstance(me, dict):
        return None
    profile = data.get("activeCustomer") or {}
    merged = {
        **me,
        "firstName": profile.get("firstName"),
        "lastName": profile.get("lastName"),
        "phoneNumber": profile.get("phoneNumber"),
        "emailAddress": profile.get("emailAddress") or me.get("identifier"),
    }
    return CurrentUser.model_validate(merged)


async def update_customer(
    client: StorefrontClient,
    update: UpdateCustomerInput,
    *,
    context: RequestContext | None = None,
) -> CustomerProfile:
    data = await client.gateway.request(UPDATE_CUSTOMER, {"input": update.to_variables()}, context)
    return CustomerProfile.model_validate(data.get("updateCustomer") or {})


async def update_customer_password(
    client: StorefrontClient,
    current_password: str,
    new_password: str,
    *,
    context: RequestContext | None = None,
) -> bool:
    result = await _result(
        client,
        UPDATE_CUSTOMER_PASSWORD,
        "updateCustomerPassword",
        {"currentPassword": current_password, "newPassword": new_password},
        context,
    )
    return bool(result.get("success"))


async def update_customer_email_address(
    client: StorefrontClient,
    password: str,
    new_email_address: str,
    *,
    context: RequestContext | None = None,
) -> bool:
    result = await _result(
        client,
        UPDATE_CUSTOMER_EMAIL_ADDRESS,
        "updateCustomerEmailAddress",
        {"password": password, "newEmailAddress": new_email_address},
        context,
    )
    return bool(result.get("success"))


async def get_customer_addresses(
    client: StorefrontClient,
    *,
    context: RequestContext | None = None,
) -> list[CustomerAddress]:
    data = await client.gateway.request(GET_CUSTOMER_ADDRESSES, None, context)
    customer = data.get("activeCustomer") or {}
    return [CustomerAddress.model_validate(item) for item in customer.get("addresses") or []]


async def create_customer_address(
    client: StorefrontClient,
    address: AddressInput,
    *,
    context: RequestContext | None = None,
) -> CustomerAddress:
    data = await client.gateway.request(CREATE_CUSTOMER_ADDRESS, {"input": address.to_variables()}, context)
    return CustomerAddress.model_validate(data.get("createCustomerAddress") or {})


async def update_customer_address(
    client: StorefrontClient,
    address: UpdateAddressInput,
    *,
    context: RequestContext | None = None,
) -> CustomerAddress:
    data = await client.gateway.request(UPDATE_CUSTOMER_ADDRESS, {"input": address.to_variables()}, context)
    return CustomerAddress.model_validate(data.get("updateCustomerAddress") or {})


async def delete_customer_address(
    client: StorefrontClient,
    address_id: str,
    *,
    context: RequestContext | None = None,
) -> bool:
    data = await client.gateway.request(DELETE_CUSTOMER_ADDRESS, {"id": address_id}, context)
    return bool((data.get("deleteCustomerAddress") or {}).get("success"))


async def get_customer_orders(
    client: StorefrontClient,
    *,
    take: int = 10,
    skip: int = 0,
    context: RequestContext | None = None,
) -> OrderList:
    variables = {"options": {"take": take, "skip": skip, "sort": {"createdAt": "DESC"}}}
    data = await client.gateway.request(GET_CUSTOMER_ORDERS, variables, context)
    customer = data.get("activeCustomer") or {}
    return OrderList.model_validate(customer.get("orders") or {})


async def get_available_countries(
    client: StorefrontClient,
    *,
    context: RequestContext | None = None,
) -> list[Country]:
    data = await client.gateway.request(GET_AVAILABLE_COUNTRIES, None, context)
    return [Country.model_validate(item) for item in data.get("availableCountries") or []]
