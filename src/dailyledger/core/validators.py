"""Reusable validation utilities for input sanitization."""

import re
from decimal import Decimal, InvalidOperation

# Matches NUMERIC(12, 2)
MAX_AMOUNT = Decimal("9999999999.99")
CENTS = Decimal("0.01")

_AMOUNT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def _to_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Convert form input to Decimal. Returns None for empty or unparsable input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))

    cleaned = str(value).strip().replace(",", "").replace("$", "")
    if not cleaned or not _AMOUNT_PATTERN.match(cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_amount(value: Decimal | float | int | str | None) -> Decimal:
    """
    Parse a free-text amount for live recomputation.

    Empty or unparsable input counts as 0 and never raises, so a half-typed
    field cannot break the preview.

    Examples:
        "1,250.50" -> Decimal("1250.50")
        "abc" -> Decimal("0")
        "" -> Decimal("0")
    """
    parsed = _to_decimal(value)
    return parsed if parsed is not None else Decimal("0")


def parse_required_amount(value: Decimal | float | int | str | None) -> Decimal | None:
    """Parse an amount that must be present. Returns None when missing or unparsable."""
    return _to_decimal(value)


def validate_currency(
    value: Decimal | float | str, max_value: Decimal = MAX_AMOUNT
) -> Decimal:
    """
    Validate currency input.

    Args:
        value: Currency value to validate
        max_value: Maximum allowed value (default matches NUMERIC(12, 2))

    Returns:
        Validated Decimal

    Raises:
        ValueError: If value is unparsable, negative or exceeds max
    """
    decimal_value = _to_decimal(value)
    if decimal_value is None:
        raise ValueError(f"Invalid currency format: {value}")

    if decimal_value < 0:
        raise ValueError("Currency value cannot be negative")

    if decimal_value > max_value:
        raise ValueError(f"Currency value exceeds maximum allowed: {max_value}")

    return decimal_value


def validate_positive_amount(value: Decimal | float | str, field_name: str = "Amount") -> Decimal:
    """Validate a ledger amount that must be strictly greater than zero.

    The bounds apply to the value rounded to cents, which is what gets stored.
    """
    decimal_value = _to_decimal(value)
    if decimal_value is None or decimal_value <= 0:
        raise ValueError(f"{field_name} must be a number greater than 0")
    rounded = to_cents(decimal_value)
    if rounded <= 0:
        raise ValueError(f"{field_name} must be at least {CENTS}")
    if rounded > MAX_AMOUNT:
        raise ValueError(f"{field_name} exceeds maximum allowed: {MAX_AMOUNT}")
    return decimal_value


def to_cents(value: Decimal) -> Decimal:
    """Round to 2 decimal places for storage and display."""
    rounded = value.quantize(CENTS)
    # Avoid "-0.00"
    return rounded if rounded != 0 else Decimal("0.00")


def validate_text(
    value: str | None,
    field_name: str = "Field",
    max_length: int = 100,
) -> str:
    """
    Validate required free text (names, categories, descriptions).

    Returns:
        Stripped text

    Raises:
        ValueError: If empty or too long
    """
    if value is None or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = value.strip()
    if len(cleaned) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    return cleaned
