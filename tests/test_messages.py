from __future__ import annotations

import pytest

from pystorefront.exceptions import ErrorResultError, RemoteApiError
from pystorefront.messages import GENERIC_ERROR_MESSAGE, error_message_for
from pystorefront.models.results import ErrorCode, ErrorResult, parse_error_result, unwrap


@pytest.mark.parametrize(
    "code, expected",
    [
        ("INVALID_CREDENTIALS_ERROR", "Invalid email or password"),
        ("NOT_VERIFIED_ERROR", "Please check your email to verify your account"),
        ("EMAIL_ADDRESS_CONFLICT_ERROR", "An account with this email address already exists"),
        ("PASSWORD_RESET_TOKEN_EXPIRED_ERROR", "Password reset link has expired"),
    ],
)
def test_known_codes_map_to_fixed_sentences(code: str, expected: str) -> None:
    assert error_message_for({"errorCode": code, "message": "raw server text"}) == expected


def test_password_policy_passes_server_message_through() -> None:
    error = ErrorResult.model_validate(
        {
            "errorCode": "PASSWORD_VALIDATION_ERROR",
            "message": "Password is invalid",
            "validationErrorMessage": "Password must contain a symbol",
        }
    )
    assert error_message_for(error) == "Password must contain a symbol"


def test_unknown_code_falls_back_to_raw_message() -> None:
    assert error_message_for({"errorCode": "SOMETHING_NEW", "message": "Try later"}) == "Try later"
    assert error_message_for({"errorCode": "SOMETHING_NEW"}) == GENERIC_ERROR_MESSAGE


def test_unstructured_errors_get_generic_sentence() -> None:
    assert error_message_for(RemoteApiError("socket closed")) == GENERIC_ERROR_MESSAGE
    assert error_message_for(ValueError("x")) == GENERIC_ERROR_MESSAGE
    assert error_message_for(None) == GENERIC_ERROR_MESSAGE
    assert error_message_for({"message": "no code"}) == GENERIC_ERROR_MESSAGE


def test_error_result_error_is_mapped() -> None:
    with pytest.raises(ErrorResultError) as exc_info:
        unwrap({"errorCode": "INVALID_CREDENTIALS_ERROR", "message": "bad"}, "authenticate")

    assert exc_info.value.error_code == "INVALID_CREDENTIALS_ERROR"
    assert exc_info.value.operation == "authenticate"
    assert error_message_for(exc_info.value) == "Invalid email or password"


def test_unwrap_success_and_missing_payload() -> None:
    assert unwrap({"id": "1", "code": "A"}, "addItemToOrder") == {"id": "1", "code": "A"}
    with pytest.raises(ErrorResultError, match="returned no result"):
        unwrap(None, "addItemToOrder")


def test_parse_error_result() -> None:
    assert parse_error_result({"id": "1"}) is None
    assert parse_error_result(None) is None

    error = parse_error_result({"errorCode": "PAYMENT_FAILED_ERROR", "message": "Payment failed"})
    assert error is not None
    assert error.code == ErrorCode.PAYMENT_FAILED
    assert error.best_message == "Payment failed"


def test_unknown_error_code_enum_falls_back() -> None:
    assert ErrorResult(error_code="BRAND_NEW_ERROR").code == ErrorCode.UNKNOWN
