"""Mutation result unions.

Every shop API mutation answers with either its success payload or an
``ErrorResult`` carrying ``errorCode`` and ``message``. The helpers here
discriminate that union on the presence of ``errorCode``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pystorefront.exceptions import ErrorResultError
from pystorefront.models._base import StorefrontEnum, StorefrontModel


class ErrorCode(StorefrontEnum):
    """Known ``errorCode`` values of the shop API."""

    UNKNOWN = "UNKNOWN_ERROR"
    ALREADY_LOGGED_IN = "ALREADY_LOGGED_IN_ERROR"
    NO_ACTIVE_ORDER = "NO_ACTIVE_ORDER_ERROR"
    ORDER_MODIFICATION = "ORDER_MODIFICATION_ERROR"
    ORDER_STATE_TRANSITION = "ORDER_STATE_TRANSITION_ERROR"
    ORDER_PAYMENT_STATE = "ORDER_PAYMENT_STATE_ERROR"
    INELIGIBLE_SHIPPING_METHOD = "INELIGIBLE_SHIPPING_METHOD_ERROR"
    INELIGIBLE_PAYMENT_METHOD = "INELIGIBLE_PAYMENT_METHOD_ERROR"
    PAYMENT_FAILED = "PAYMENT_FAILED_ERROR"
    PAYMENT_DECLINED = "PAYMENT_DECLINED_ERROR"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK_ERROR"
    NEGATIVE_QUANTITY = "NEGATIVE_QUANTITY_ERROR"
    ORDER_LIMIT = "ORDER_LIMIT_ERROR"
    EMAIL_ADDRESS_CONFLICT = "EMAIL_ADDRESS_CONFLICT_ERROR"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS_ERROR"
    NOT_VERIFIED = "NOT_VERIFIED_ERROR"
    MISSING_PASSWORD = "MISSING_PASSWORD_ERROR"
    PASSWORD_VALIDATION = "PASSWORD_VALIDATION_ERROR"
    PASSWORD_ALREADY_SET = "PASSWORD_ALREADY_SET_ERROR"
    VERIFICATION_TOKEN_INVALID = "VERIFICATION_TOKEN_INVALID_ERROR"
    VERIFICATION_TOKEN_EXPIRED = "VERIFICATION_TOKEN_EXPIRED_ERROR"
    PASSWORD_RESET_TOKEN_INVALID = "PASSWORD_RESET_TOKEN_INVALID_ERROR"
    PASSWORD_RESET_TOKEN_EXPIRED = "PASSWORD_RESET_TOKEN_EXPIRED_ERROR"
    NATIVE_AUTH_STRATEGY = "NATIVE_AUTH_STRATEGY_ERROR"


class ErrorResult(StorefrontModel):
    """The error variant of a mutation result union."""

    error_code: str
    message: str = ""
    payment_error_message: str = ""
    transition_error: str = ""
    from_state: str = ""
    to_state: str = ""
    validation_error_message: str = ""

    @property
    def code(self) -> ErrorCode:
        return ErrorCode(self.error_code)

    @property
    def best_message(self) -> str:
        """Most specific human-readable message available."""
        return (
            self.payment_error_message
            or self.validation_error_message
            or self.transition_error
            or self.message
        )


def is_error_result(payload: Any) -> bool:
    return isinstance(payload, Mapping) and bool(payload.get("errorCode"))


def parse_error_result(payload: Any) -> ErrorResult | None:
    """Return the :class:`ErrorResult` if *payload* is the error variant."""
    if not is_error_result(payload):
        return None
    return ErrorResult.model_validate(dict(payload))


def unwrap(payload: Any, operation: str) -> dict[str, Any]:
    """Return the success variant of a result union.

    Raises
    ------
    ErrorResultError
        If *payload* is the error variant, or missing entirely.
    """
    error = parse_error_result(payload)
    if error is not None:
        raise ErrorResultError(
            error.best_message or f"{operation} failed",
            error_code=error.error_code,
            operation=operation,
            payload=dict(payload),
        )
    if not isinstance(payload, Mapping):
        raise ErrorResultError(f"{operation} returned no result", operation=operation)
    return dict(payload)
