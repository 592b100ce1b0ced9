"""Custom exception hierarchy for pystorefront."""

from __future__ import annotations

from typing import Any


class StorefrontError(Exception):
    """Base exception for all pystorefront errors."""


class StorefrontConfigError(StorefrontError):
    """Invalid or missing configuration."""


class RemoteApiError(StorefrontError):
    """Transport-level failure (network, non-2xx, unparseable body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class GraphQLResponseError(RemoteApiError):
    """Response carried a top-level ``errors`` array."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        endpoint: str = "",
    ) -> None:
        self.errors = errors or []
        super().__init__(message, endpoint=endpoint)


class ErrorResultError(StorefrontError):
    """A mutation resolved to the error variant of its result union."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str = "",
        operation: str = "",
        payload: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.operation = operation
        self.payload = payload or {}
        super().__init__(message)


class CheckoutError(StorefrontError):
    """Checkout could not proceed."""


class EmptyCartError(CheckoutError):
    """No active order, or the active order has no lines."""


class InvalidTransitionError(CheckoutError):
    """A checkout step was submitted out of order."""
