from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError


# Maximum price: $9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999
MAX_STOCK = 2_147_483_647


def require_object(payload: Any) -> dict:
    """Reject JSON bodies that parse to something other than an object."""
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def require_fields(payload: dict, fields: list[str]) -> None:
    """
    Presence check: a field counts as missing only when absent or null.

    Zero, False and empty lists are present values and are left for the
    type checks to judge.
    """
    require_object(payload)
    missing = [f for f in fields if payload.get(f) is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def coerce_int(value: Any, field: str, *, minimum: int | None = None, maximum: int | None = None) -> int:
    """Strict integer coercion that rejects floats, bools and scientific notation."""
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10") and decimals ("12.5")
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    else:
        raise ValidationError(f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if maximum is not None and result > maximum:
        raise ValidationError(f"{field} must be at most {maximum}")
    return result


def parse_money_cents(value: Any, field: str, *, maximum: int = MAX_PRICE_CENTS) -> int:
    """
    Parse a non-negative decimal amount (number or numeric string) into cents.

    At most two fractional digits are accepted. Floats go through str() so
    9.99 becomes Decimal("9.99") rather than its binary approximation.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"{field} must be a decimal number")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a decimal number")

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a decimal number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")

    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValidationError(f"{field} must have at most two decimal places")

    cents_int = int(cents)
    if cents_int > maximum:
        raise ValidationError(f"{field} exceeds maximum allowed value")
    return cents_int


def format_cents(cents: int | None) -> str | None:
    """Render integer cents as a two-place decimal string (999 -> "9.99")."""
    if cents is None:
        return None
    return str((Decimal(cents) / 100).quantize(Decimal("0.01")))


def clean_string(value: Any, field: str, *, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"{field} must not be blank")
    if len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return cleaned
