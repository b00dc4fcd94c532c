"""Money helpers.

All monetary values are ``Decimal``. Floats arriving from JSON are
converted through ``str`` so that 0.1 stays 0.1. Rounding is half-up,
matching how people round dollar figures by hand.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")

# Largest amount the money columns hold (Numeric(14, 2)) in whole dollars
MAX_AMOUNT = Decimal("999999999999")
_CENT = Decimal("0.01")
_DOLLAR = Decimal("1")


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """Convert a raw numeric value to Decimal.

    Args:
        value: Number or numeric string.

    Returns:
        The value as Decimal (may be non-finite; see is_valid_amount).

    Raises:
        ValueError: If the value cannot be parsed as a number.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Boolean is not a monetary amount")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary amount: {value!r}") from e


def is_valid_amount(value: Decimal) -> bool:
    """Return True if value is finite and between 0 and MAX_AMOUNT."""
    return value.is_finite() and ZERO <= value <= MAX_AMOUNT


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def round_dollars(value: Decimal) -> Decimal:
    return value.quantize(_DOLLAR, rounding=ROUND_HALF_UP)
