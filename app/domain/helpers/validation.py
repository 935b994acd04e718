import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

PLACEHOLDER_API_KEY = "YOUR_FIREBASE_WEB_API_KEY"
MIN_PASSWORD_LENGTH = 6


def as_decimal(value: Any) -> Optional[Decimal]:
    """Decimal for a finite number, None for anything else (nan, inf, text)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def validate_amount(amount: Any, label: str = "amount") -> Decimal:
    value = as_decimal(amount)
    if value is None or value <= 0:
        raise ValueError(f"Invalid {label}: must be greater than zero")
    return value


def validate_category(category: str) -> str:
    category = (category or "").strip()
    if not category:
        raise ValueError("Please select a category")
    return category


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    if year < 1:
        raise ValueError("Year must be positive")


def validate_return_rate(rate: Any) -> Optional[Decimal]:
    if rate is None:
        return None
    value = as_decimal(rate)
    if value is None:
        raise ValueError("Invalid return rate")
    if value < 0:
        raise ValueError("Return rate cannot be negative")
    return value


def validate_email(email: str) -> str:
    email = (email or "").strip()
    if not re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email):
        raise ValueError("Invalid email format")
    return email


def validate_password(password: str) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    return password


def validate_full_name(full_name: str) -> str:
    full_name = (full_name or "").strip()
    if not full_name:
        raise ValueError("Full name is required")
    return full_name


def is_valid_api_key(api_key: str | None) -> bool:
    return bool(api_key) and api_key != PLACEHOLDER_API_KEY and len(api_key) > 10
