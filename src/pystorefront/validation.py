"""Pre-flight checks for account and address forms.

Validators return messages instead of raising; form handlers collect them
field by field and never send invalid input to the shop API.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from pystorefront.models.customer import CurrentUser

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
_NON_DIGIT_RE = re.compile(r"\D")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_password(password: str) -> list[str]:
    """Every password policy violation; empty when the password is acceptable."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    return errors


def validate_name(name: str) -> str | None:
    if not name.strip():
        return "Name cannot be empty"
    if len(name) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters long"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name must be less than {NAME_MAX_LENGTH} characters"
    if not _NAME_RE.match(name):
        return "Name can only contain letters, spaces, hyphens, and apostrophes"
    return None


def validate_phone(phone: str) -> str | None:
    """Phone is optional; a given number needs 10 to 15 digits."""
    if not phone.strip():
        return None
    digits = _NON_DIGIT_RE.sub("", phone)
    if len(digits) < PHONE_MIN_DIGITS:
        return f"Phone number must be at least {PHONE_MIN_DIGITS} digits"
    if len(digits) > PHONE_MAX_DIGITS:
        return f"Phone number must be less than {PHONE_MAX_DIGITS} digits"
    return None


def format_phone(phone: str) -> str:
    """``(XXX) XXX-XXXX`` for ten digits, groups of three otherwise."""
    if not phone:
        return ""
    digits = _NON_DIGIT_RE.sub("", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return " ".join(digits[i : i + 3] for i in range(0, len(digits), 3))


def full_name(user: CurrentUser | None) -> str:
    """Display name for *user*; ``"Guest"`` when signed out."""
    if user is None:
        return "Guest"
    if user.first_name and user.last_name:
        return f"{user.first_name} {user.last_name}"
    if user.first_name or user.last_name:
        return user.first_name or user.last_name
    return (user.email_address or user.identifier).split("@")[0]


# ------------------------------------------------------------------
# Forms
# ------------------------------------------------------------------


def validate_registration(form: Mapping[str, str]) -> dict[str, str]:
    """Field errors for the registration form (``emailAddress``, ``password``, names, phone)."""
    errors: dict[str, str] = {}
    email = form.get("emailAddress", "").strip()
    if not validate_email(email):
        errors["emailAddress"] = "Please enter a valid email address"
    password_errors = validate_password(form.get("password", ""))
    if password_errors:
        errors["password"] = password_errors[0]
    if form.get("confirmPassword") is not None and form.get("confirmPassword") != form.get("password"):
        errors["confirmPassword"] = "Passwords do not match"
    for field in ("firstName", "lastName"):
        message = validate_name(form.get(field, ""))
        if message:
            errors[field] = message
    phone_error = validate_phone(form.get("phoneNumber", ""))
    if phone_error:
        errors["phoneNumber"] = phone_error
    return errors


def validate_profile(form: Mapping[str, str]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for field in ("firstName", "lastName"):
        message = validate_name(form.get(field, ""))
        if message:
            errors[field] = message
    phone_error = validate_phone(form.get("phoneNumber", ""))
    if phone_error:
        errors["phoneNumber"] = phone_error
    return errors


def validate_password_change(current: str, new: str, confirm: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not current:
        errors["currentPassword"] = "Current password is required"
    policy = validate_password(new)
    if policy:
        errors["newPassword"] = policy[0]
    elif new == current:
        errors["newPassword"] = "New password must be different from the current password"
    if new != confirm:
        errors["confirmPassword"] = "Passwords do not match"
    return errors


def validate_address(form: Mapping[str, str]) -> dict[str, str]:
    """Required address fields plus the optional phone number."""
    errors: dict[str, str] = {}
    required = {
        "fullName": "Full name is required",
        "streetLine1": "Street address is required",
        "city": "City is required",
        "countryCode": "Country is required",
    }
    for field, message in required.items():
        if not form.get(field, "").strip():
            errors[field] = message
    phone_error = validate_phone(form.get("phoneNumber", ""))
    if phone_error:
        errors["phoneNumber"] = phone_error
    return errors
