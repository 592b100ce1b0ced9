"""User-facing sentences for shop API failures.

Raw error objects, codes and tracebacks never reach the user; callers log
the original and show the sentence from :func:`error_message_for`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pystorefront.exceptions import ErrorResultError
from pystorefront.models.results import ErrorCode, ErrorResult

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"
TRANSPORT_ERROR_MESSAGE = "We could not reach the store. Please try again."
SESSION_EXPIRED_MESSAGE = "Your checkout session has expired. Please restart checkout from your cart."

ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorCode.NOT_VERIFIED: "Please check your email to verify your account",
    ErrorCode.MISSING_PASSWORD: "Password is required",
    ErrorCode.EMAIL_ADDRESS_CONFLICT: "An account with this email address already exists",
    ErrorCode.VERIFICATION_TOKEN_INVALID: "Verification link is invalid",
    ErrorCode.VERIFICATION_TOKEN_EXPIRED: "Verification link has expired",
    ErrorCode.PASSWORD_RESET_TOKEN_INVALID: "Password reset link is invalid",
    ErrorCode.PASSWORD_RESET_TOKEN_EXPIRED: "Password reset link has expired",
    ErrorCode.PASSWORD_ALREADY_SET: "Password has already been set for this account",
    ErrorCode.NATIVE_AUTH_STRATEGY: "Authentication error occurred",
}


def _error_fields(error: Any) -> tuple[str, str] | None:
    if isinstance(error, ErrorResult):
        return error.error_code, error.best_message
    if isinstance(error, ErrorResultError):
        return error.error_code, str(error)
    if isinstance(error, Mapping) and error.get("errorCode"):
        return str(error["errorCode"]), str(error.get("message") or "")
    return None


def error_message_for(error: Any) -> str:
    """Sentence to show the user for *error*.

    Known error codes map to fixed sentences; password policy failures
    pass the server's explanation through. Unknown codes fall back to the
    raw message, and anything that is not a structured error result falls
    back to a generic sentence.
    """
    fields = _error_fields(error)
    if fields is None:
        return GENERIC_ERROR_MESSAGE
    code, message = fields
    known = ErrorCode(code)
    if known == ErrorCode.PASSWORD_VALIDATION:
        return message or "Password does not meet requirements"
    if known in ERROR_MESSAGES:
        return ERROR_MESSAGES[known]
    return message or GENERIC_ERROR_MESSAGE
