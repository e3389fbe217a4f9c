"""Validation of user-entered registration and listing forms.

Every validator returns a :class:`ValidationResult`; the combined form
validators return ``(is_valid, errors)`` with errors keyed by the camelCase
field names the API uses.
"""

from __future__ import annotations

import re

from pydantic import BaseModel

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
SPECIAL_CHAR_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

MAX_ESTIMATED_VALUE = 1_000_000


class ValidationResult(BaseModel):
    is_valid: bool
    error: str | None = None


class PasswordRequirements(BaseModel):
    min_length: bool
    has_uppercase: bool
    has_lowercase: bool
    has_number: bool
    has_special: bool


class PasswordStrength(BaseModel):
    score: int  # number of requirements met, 0-5
    label: str
    requirements: PasswordRequirements


_VALID = ValidationResult(is_valid=True)


def _invalid(error: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=error)


def validate_email(email: str) -> ValidationResult:
    if not email.strip():
        return _invalid("Email is required")
    if not EMAIL_RE.match(email):
        return _invalid("Please enter a valid email address")
    return _VALID


def validate_password_strength(password: str) -> PasswordStrength:
    """Score a password against the five strength requirements."""
    requirements = PasswordRequirements(
        min_length=len(password) >= 8,
        has_uppercase=re.search(r"[A-Z]", password) is not None,
        has_lowercase=re.search(r"[a-z]", password) is not None,
        has_number=re.search(r"[0-9]", password) is not None,
        has_special=SPECIAL_CHAR_RE.search(password) is not None,
    )
    score = sum(requirements.model_dump().values())
    if score <= 1:
        label = "Weak"
    elif score == 2:
        label = "Fair"
    elif score == 3:
        label = "Good"
    else:
        label = "Strong"
    return PasswordStrength(score=score, label=label, requirements=requirements)


def validate_password(password: str) -> ValidationResult:
    if not password:
        return _invalid("Password is required")
    if len(password) < 8:
        return _invalid("Password must be at least 8 characters")
    if validate_password_strength(password).score < 2:
        return _invalid("Password is too weak. Add uppercase, numbers, or special characters.")
    return _VALID


def validate_username(username: str) -> ValidationResult:
    if not username.strip():
        return _invalid("Username is required")
    if len(username) < 3:
        return _invalid("Username must be at least 3 characters")
    if len(username) > 20:
        return _invalid("Username must be 20 characters or less")
    if not USERNAME_RE.match(username):
        return _invalid("Username can only contain letters, numbers, and underscores")
    return _VALID


def validate_display_name(name: str) -> ValidationResult:
    if not name.strip():
        return _invalid("Display name is required")
    if len(name.strip()) < 2:
        return _invalid("Display name must be at least 2 characters")
    if len(name) > 50:
        return _invalid("Display name must be 50 characters or less")
    return _VALID


def validate_listing_title(title: str) -> ValidationResult:
    if not title.strip():
        return _invalid("Title is required")
    if len(title.strip()) < 3:
        return _invalid("Title must be at least 3 characters")
    if len(title) > 100:
        return _invalid("Title must be 100 characters or less")
    return _VALID


def validate_listing_description(description: str) -> ValidationResult:
    if not description.strip():
        return _invalid("Description is required")
    if len(description.strip()) < 10:
        return _invalid("Description must be at least 10 characters")
    if len(description) > 2000:
        return _invalid("Description must be 2000 characters or less")
    return _VALID


def validate_estimated_value(value: str) -> ValidationResult:
    if not value.strip():
        return _invalid("Estimated value is required")
    try:
        number = float(value)
    except ValueError:
        return _invalid("Please enter a valid number")
    if number != number:  # NaN
        return _invalid("Please enter a valid number")
    if number < 0:
        return _invalid("Value cannot be negative")
    if number > MAX_ESTIMATED_VALUE:
        return _invalid("Value seems too high. Please enter a realistic estimate.")
    return _VALID


def _collect(results: dict[str, ValidationResult]) -> tuple[bool, dict[str, str]]:
    errors = {field: result.error or "" for field, result in results.items() if not result.is_valid}
    return not errors, errors


def validate_registration_form(
    display_name: str, username: str, email: str, password: str
) -> tuple[bool, dict[str, str]]:
    return _collect(
        {
            "displayName": validate_display_name(display_name),
            "username": validate_username(username),
            "email": validate_email(email),
            "password": validate_password(password),
        }
    )


def validate_listing_form(
    title: str,
    description: str,
    estimated_value: str,
    category: str,
    images: list[str],
) -> tuple[bool, dict[str, str]]:
    _, errors = _collect(
        {
            "title": validate_listing_title(title),
            "description": validate_listing_description(description),
            "estimatedValue": validate_estimated_value(estimated_value),
        }
    )
    if not category:
        errors["category"] = "Please select a category"
    if not images:
        errors["images"] = "Please add at least one image"
    return not errors, errors
