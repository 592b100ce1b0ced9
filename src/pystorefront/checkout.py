"""Multi-step checkout against the shop API's active order.

The step machine is a plain value: :class:`CheckoutSession` holds the
current :class:`CheckoutStep` and :func:`advance` returns the next session
or raises :class:`~pystorefront.exceptions.InvalidTransitionError`.

:class:`CheckoutOrchestrator` drives the remote calls for each step. A
submission never raises for remote failures; it returns a
:class:`StepOutcome` whose session only moves forward when the remote call
succeeded. Steps never retry on their own: a retry is the user submitting
the same step again.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from pystorefront._constants import DEFAULT_PAYMENT_METADATA, UPSELL_CANDIDATES, UPSELL_LIMIT
from pystorefront.exceptions import EmptyCartError, InvalidTransitionError, RemoteApiError
from pystorefront.gateway import NO_CACHE, ApiGateway, RequestContext
from pystorefront.messages import SESSION_EXPIRED_MESSAGE
from pystorefront.models.catalog import Product
from pystorefront.models.customer import AddressInput, CustomerInput
from pystorefront.models.order import Order, OrderAddress, OrderState, PaymentMethodQuote, ShippingMethodQuote
from pystorefront.models.results import ErrorCode, ErrorResult, parse_error_result
from pystorefront.queries import (
    ADD_ITEM_TO_ORDER,
    ADD_PAYMENT_TO_ORDER,
    ELIGIBLE_PAYMENT_METHODS,
    ELIGIBLE_SHIPPING_METHODS,
    GET_ACTIVE_ORDER,
    GET_ORDER_BY_CODE,
    GET_PRODUCTS,
    SET_CUSTOMER_FOR_ORDER,
    SET_ORDER_BILLING_ADDRESS,
    SET_ORDER_SHIPPING_ADDRESS,
    SET_ORDER_SHIPPING_METHOD,
    TRANSITION_ORDER_TO_STATE,
)

_logger = logging.getLogger(__name__)

ACTION_FAILED_MESSAGE = "Action failed. Please try again."
ORDER_NOT_FOUND_MESSAGE = "We could not find that order."
_ALREADY_LOGGED_IN_MARKERS = ("already logged in", "ALREADY_LOGGED_IN")

_ADDRESS_FIELD_LABELS = {
    "full_name": "full name",
    "street_line1": "street address",
    "city": "city",
    "country_code": "country",
}


class CheckoutStep(enum.StrEnum):
    CUSTOMER = "customer"
    SHIPPING_ADDRESS = "shipping-address"
    SHIPPING_METHOD = "shipping-method"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"


_STEP_ORDER: tuple[CheckoutStep, ...] = tuple(CheckoutStep)


class ErrorKind(enum.StrEnum):
    """Why a step submission failed."""

    API = "api"
    TRANSPORT = "transport"
    PRECONDITION = "precondition"
    SESSION_EXPIRED = "session-expired"
    NOT_FOUND = "not-found"


# ------------------------------------------------------------------
# Step machine
# ------------------------------------------------------------------


class CheckoutSession(BaseModel):
    """Client-side view of the checkout of one active order."""

    model_config = ConfigDict(frozen=True)

    step: CheckoutStep
    has_customer: bool = False
    order_code: str = ""

    @property
    def is_complete(self) -> bool:
        return self.step == CheckoutStep.CONFIRMATION

    @classmethod
    def begin(cls, *, has_customer: bool, order_code: str = "") -> CheckoutSession:
        return cls(step=initial_step(has_customer), has_customer=has_customer, order_code=order_code)


def initial_step(has_customer: bool) -> CheckoutStep:
    """First step; the customer step is skipped when the order already has one."""
    return CheckoutStep.SHIPPING_ADDRESS if has_customer else CheckoutStep.CUSTOMER


def next_step(step: CheckoutStep) -> CheckoutStep:
    if step == CheckoutStep.CONFIRMATION:
        raise InvalidTransitionError("Checkout is already complete")
    return _STEP_ORDER[_STEP_ORDER.index(step) + 1]


def advance(session: CheckoutSession, submitted: CheckoutStep, **changes: Any) -> CheckoutSession:
    """Session after a successful submission of *submitted*.

    Raises
    ------
    InvalidTransitionError
        If *submitted* is not the session's current step.
    """
    if submitted != session.step:
        raise InvalidTransitionError(f"Cannot submit {submitted} while checkout is at {session.step}")
    return session.model_copy(update={"step": next_step(submitted), **changes})


def rewind(session: CheckoutSession, step: CheckoutStep) -> CheckoutSession:
    """Return to an earlier step to change what was submitted there."""
    if session.is_complete:
        raise InvalidTransitionError("Checkout is already complete")
    if step == CheckoutStep.CUSTOMER and session.has_customer:
        raise InvalidTransitionError("The order already has a customer")
    if _STEP_ORDER.index(step) > _STEP_ORDER.index(session.step):
        raise InvalidTransitionError(f"Cannot skip ahead from {session.step} to {step}")
    return session.model_copy(update={"step": step})


# ------------------------------------------------------------------
# Results
# ------------------------------------------------------------------


@dataclass(frozen=True)
class StepOutcome:
    """Result of one step submission.

    ``error`` is a sentence safe to show the user. ``resume_at`` names the
    earlier step to go back to when a precondition failed, and
    ``restart_required`` means the active order is gone and checkout has to
    start over from the cart.
    """

    session: CheckoutSession
    error: str | None = None
    error_kind: ErrorKind | None = None
    restart_required: bool = False
    resume_at: CheckoutStep | None = None
    order: Order | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CheckoutOverview:
    """Everything the checkout page needs when it opens."""

    session: CheckoutSession
    order: Order
    shipping_methods: list[ShippingMethodQuote] = field(default_factory=list)
    payment_methods: list[PaymentMethodQuote] = field(default_factory=list)


@dataclass(frozen=True)
class Confirmation:
    """The placed order and a few products to suggest.

    ``error`` is set when the order could not be loaded; ``order`` is then
    ``None`` and the page should send the shopper back to the shop.
    """

    order: Order | None = None
    upsell_products: list[Product] = field(default_factory=list)
    error: str | None = None
    error_kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UpsellOutcome:
    order: Order | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _billing_address_for(order: Order, shipping: OrderAddress) -> OrderAddress:
    # An unset billing address comes back as an object of null fields.
    billing = order.billing_address
    if billing is not None and billing.is_complete:
        return billing
    return shipping


def _mentions_already_logged_in(text: str) -> bool:
    return any(marker in text for marker in _ALREADY_LOGGED_IN_MARKERS)


def _is_already_logged_in(error: ErrorResult) -> bool:
    return error.code == ErrorCode.ALREADY_LOGGED_IN or _mentions_already_logged_in(
        f"{error.error_code} {error.message}"
    )


# ------------------------------------------------------------------
# Orchestrator
# ------------------------------------------------------------------


class CheckoutOrchestrator:
    """Drive checkout steps for one shopper.

    *context* is the incoming request of a server render; its cookie ties
    every call to the shopper's remote session.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        context: RequestContext | None = None,
        *,
        payment_metadata: Mapping[str, Any] | None = None,
        upsell_limit: int = UPSELL_LIMIT,
    ) -> None:
        self._gateway = gateway
        self._context = context
        self._payment_metadata = dict(payment_metadata if payment_metadata is not None else DEFAULT_PAYMENT_METADATA)
        self._upsell_limit = upsell_limit

    async def _request(self, query: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self._gateway.request(query, variables, self._context, NO_CACHE)

    async def _active_order(self) -> Order | None:
        data = await self._request(GET_ACTIVE_ORDER)
        raw = data.get("activeOrder")
        return Order.model_validate(raw) if isinstance(raw, dict) else None

    # ------------------------------------------------------------------
    # Outcome helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _expired(session: CheckoutSession) -> StepOutcome:
        return StepOutcome(
            session=session,
            error=SESSION_EXPIRED_MESSAGE,
            error_kind=ErrorKind.SESSION_EXPIRED,
            restart_required=True,
        )

    def _rejected(self, session: CheckoutSession, error: ErrorResult, fallback: str) -> StepOutcome:
        if error.code == ErrorCode.NO_ACTIVE_ORDER:
            return self._expired(session)
        _logger.warning("Checkout step %s rejected: %s (%s)", session.step, error.error_code, error.message)
        return StepOutcome(session=session, error=error.best_message or fallback, error_kind=ErrorKind.API)

    @staticmethod
    def _failed(session: CheckoutSession) -> StepOutcome:
        _logger.exception("Checkout step %s failed", session.step)
        return StepOutcome(session=session, error=ACTION_FAILED_MESSAGE, error_kind=ErrorKind.TRANSPORT)

    @staticmethod
    def _blocked(session: CheckoutSession, message: str, resume_at: CheckoutStep | None) -> StepOutcome:
        return StepOutcome(
            session=session,
            error=message,
            error_kind=ErrorKind.PRECONDITION,
            resume_at=resume_at,
        )

    @staticmethod
    def _require_step(session: CheckoutSession, step: CheckoutStep) -> None:
        if session.step != step:
            raise InvalidTransitionError(f"Cannot submit {step} while checkout is at {session.step}")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def start(self) -> CheckoutOverview:
        """Load the active order and the eligible shipping and payment methods.

        Raises
        ------
        EmptyCartError
            There is no active order or it has no lines.
        """
        order = await self._active_order()
        if order is None or order.is_empty:
            raise EmptyCartError("The cart is empty")

        shipping = await self._request(ELIGIBLE_SHIPPING_METHODS)
        payment = await self._request(ELIGIBLE_PAYMENT_METHODS)
        return CheckoutOverview(
            session=CheckoutSession.begin(has_customer=order.has_customer, order_code=order.code),
            order=order,
            shipping_methods=[
                ShippingMethodQuote.model_validate(item) for item in shipping.get("eligibleShippingMethods") or []
            ],
            payment_methods=[
                PaymentMethodQuote.model_validate(item) for item in payment.get("eligiblePaymentMethods") or []
            ],
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def submit_customer(self, session: CheckoutSession, customer: CustomerInput) -> StepOutcome:
        """Attach guest details to the order.

        An order that already has a customer (a signed-in shopper) counts as
        success, whether that is seen up front or reported by the API.
        """
        self._require_step(session, CheckoutStep.CUSTOMER)
        try:
            order = await self._active_order()
            if order is None:
                return self._expired(session)
            if order.has_customer:
                _logger.debug("Order %s already has a customer; skipping customer step", order.code)
                return StepOutcome(session=advance(session, CheckoutStep.CUSTOMER, has_customer=True), order=order)
            data = await self._request(SET_CUSTOMER_FOR_ORDER, {"input": customer.to_variables()})
        except RemoteApiError as exc:
            if _mentions_already_logged_in(str(exc)):
                return StepOutcome(session=advance(session, CheckoutStep.CUSTOMER, has_customer=True))
            return self._failed(session)
        except Exception:
            return self._failed(session)

        result = data.get("setCustomerForOrder")
        error = parse_error_result(result)
        if error is not None:
            if _is_already_logged_in(error):
                return StepOutcome(session=advance(session, CheckoutStep.CUSTOMER, has_customer=True))
            return self._rejected(session, error, "Failed to set customer")
        return StepOutcome(session=advance(session, CheckoutStep.CUSTOMER, has_customer=True))

    async def submit_shipping_address(self, session: CheckoutSession, address: AddressInput) -> StepOutcome:
        self._require_step(session, CheckoutStep.SHIPPING_ADDRESS)
        try:
            data = await self._request(SET_ORDER_SHIPPING_ADDRESS, {"input": address.to_variables()})
        except Exception:
            return self._failed(session)

        error = parse_error_result(data.get("setOrderShippingAddress"))
        if error is not None:
            return self._rejected(session, error, "Failed to set shipping address")
        if data.get("setOrderShippingAddress") is None:
            return self._expired(session)
        return StepOutcome(session=advance(session, CheckoutStep.SHIPPING_ADDRESS))

    async def submit_shipping_method(self, session: CheckoutSession, shipping_method_id: str) -> StepOutcome:
        """Select one shipping method; the order always uses a single shipping group."""
        self._require_step(session, CheckoutStep.SHIPPING_METHOD)
        if not shipping_method_id:
            return self._blocked(session, "Please choose a shipping method.", None)
        try:
            data = await self._request(SET_ORDER_SHIPPING_METHOD, {"shippingMethodId": [shipping_method_id]})
        except Exception:
            return self._failed(session)

        error = parse_error_result(data.get("setOrderShippingMethod"))
        if error is not None:
            return self._rejected(session, error, "Failed to set shipping method")
        if data.get("setOrderShippingMethod") is None:
            return self._expired(session)
        return StepOutcome(session=advance(session, CheckoutStep.SHIPPING_METHOD))

    async def submit_payment(self, session: CheckoutSession, method_code: str) -> StepOutcome:
        """Pay for the order.

        The order is re-read first. Payment is never attempted without a
        complete shipping address and a shipping line. An order still in
        ``AddingItems`` gets a billing address (best effort) and is moved to
        ``ArrangingPayment`` before the payment is added.
        """
        self._require_step(session, CheckoutStep.PAYMENT)
        if not method_code:
            return self._blocked(session, "Please choose a payment method.", None)
        try:
            order = await self._active_order()
        except Exception:
            return self._failed(session)
        if order is None:
            return self._expired(session)

        blocked = self._check_payable(session, order)
        if blocked is not None:
            return blocked

        if order.state.is_editable:
            assert order.shipping_address is not None  # noqa: S101
            await self._set_billing_address(_billing_address_for(order, order.shipping_address))
            try:
                data = await self._request(TRANSITION_ORDER_TO_STATE, {"state": OrderState.ARRANGING_PAYMENT.value})
            except Exception:
                return self._failed(session)
            error = parse_error_result(data.get("transitionOrderToState"))
            if error is not None:
                return self._rejected(session, error, "The order could not be prepared for payment")

        try:
            data = await self._request(
                ADD_PAYMENT_TO_ORDER,
                {"input": {"method": method_code, "metadata": dict(self._payment_metadata)}},
            )
        except Exception:
            return self._failed(session)

        result = data.get("addPaymentToOrder")
        error = parse_error_result(result)
        if error is not None:
            return self._rejected(session, error, "Payment failed")
        if not isinstance(result, dict):
            return self._expired(session)

        paid = Order.model_validate(result)
        _logger.debug("Payment added to order %s (state %s)", paid.code, paid.state)
        return StepOutcome(
            session=advance(session, CheckoutStep.PAYMENT, order_code=paid.code or order.code),
            order=paid,
        )

    def _check_payable(self, session: CheckoutSession, order: Order) -> StepOutcome | None:
        address = order.shipping_address
        if address is None:
            return self._blocked(
                session,
                "Your order has no shipping address. Please go back and complete the shipping address.",
                CheckoutStep.SHIPPING_ADDRESS,
            )
        missing = address.missing_fields()
        if missing:
            labels = ", ".join(_ADDRESS_FIELD_LABELS[name] for name in missing)
            return self._blocked(
                session,
                f"Your shipping address is incomplete ({labels}). Please go back and complete the shipping address.",
                CheckoutStep.SHIPPING_ADDRESS,
            )
        if not order.shipping_lines:
            return self._blocked(
                session,
                "No shipping method is selected. Please go back and choose a shipping method.",
                CheckoutStep.SHIPPING_METHOD,
            )
        if not order.state.is_editable and order.state != OrderState.ARRANGING_PAYMENT:
            return self._blocked(
                session,
                f"This order cannot accept payment while it is {order.state.value}. Please restart checkout.",
                None,
            )
        return None

    async def _set_billing_address(self, address: OrderAddress) -> None:
        try:
            data = await self._request(SET_ORDER_BILLING_ADDRESS, {"input": address.to_input()})
        except Exception:
            _logger.warning("Setting the billing address failed; continuing to payment", exc_info=True)
            return
        error = parse_error_result(data.get("setOrderBillingAddress"))
        if error is not None:
            _logger.warning("Billing address rejected: %s (%s)", error.error_code, error.message)

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    async def load_confirmation(self, code: str) -> Confirmation:
        """Load the placed order by its code plus a few products to suggest."""
        try:
            data = await self._request(GET_ORDER_BY_CODE, {"code": code})
        except Exception:
            _logger.exception("Loading confirmation for order %s failed", code)
            return Confirmation(error=ACTION_FAILED_MESSAGE, error_kind=ErrorKind.TRANSPORT)
        raw = data.get("orderByCode")
        if not isinstance(raw, dict):
            _logger.warning("Order %s not found for confirmation", code)
            return Confirmation(error=ORDER_NOT_FOUND_MESSAGE, error_kind=ErrorKind.NOT_FOUND)
        order = Order.model_validate(raw)
        return Confirmation(order=order, upsell_products=await self._upsell_products(order))

    async def _upsell_products(self, order: Order) -> list[Product]:
        try:
            data = await self._gateway.request(
                GET_PRODUCTS,
                {"options": {"take": UPSELL_CANDIDATES, "sort": {"createdAt": "DESC"}}},
                self._context,
            )
        except Exception:
            _logger.warning("Loading upsell products failed", exc_info=True)
            return []
        items = (data.get("products") or {}).get("items") or []
        purchased = order.product_ids
        products = [Product.model_validate(item) for item in items]
        return [product for product in products if product.id not in purchased][: self._upsell_limit]

    async def add_upsell_item(self, variant_id: str, quantity: int = 1) -> UpsellOutcome:
        """Add a suggested product to a new cart; checkout state is untouched."""
        if quantity < 1:
            return UpsellOutcome(error="Quantity must be at least 1")
        try:
            data = await self._request(ADD_ITEM_TO_ORDER, {"productVariantId": variant_id, "quantity": quantity})
        except Exception:
            _logger.exception("Adding upsell item %s failed", variant_id)
            return UpsellOutcome(error=ACTION_FAILED_MESSAGE)
        result = data.get("addItemToOrder")
        error = parse_error_result(result)
        if error is not None:
            _logger.warning("Upsell item %s rejected: %s", variant_id, error.error_code)
            return UpsellOutcome(error=error.best_message or "Failed to add item")
        return UpsellOutcome(order=Order.model_validate(result) if isinstance(result, dict) else None)
