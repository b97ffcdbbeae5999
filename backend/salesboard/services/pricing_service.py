# Overview: Service-layer operations for pricing; line totals and discount conversion.

"""
Line total calculation.

Discounts are entered as whole percentages (0-25) and stored on records as
fractions (0.00-0.25). Convert once on the way in (percent_to_fraction) and
once on the way out (fraction_to_percent); never scale twice.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


MIN_DISCOUNT_PERCENT = 0
MAX_DISCOUNT_PERCENT = 25

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """
    Lenient numeric coercion: anything that is not a finite number is 0.

    Accepts ints, floats, Decimals and numeric strings ("12", " 3.5 ").
    """
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        return Decimal(value)
    elif isinstance(value, float):
        number = Decimal(str(value))
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return _ZERO
        try:
            number = Decimal(stripped)
        except InvalidOperation:
            return _ZERO
    else:
        return _ZERO
    if not number.is_finite():
        return _ZERO
    return number


def clamp_discount_percent(value) -> int:
    """Round to a whole percent and clamp into [0, 25]; non-numeric -> 0."""
    percent = int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if percent > MAX_DISCOUNT_PERCENT:
        return MAX_DISCOUNT_PERCENT
    if percent < MIN_DISCOUNT_PERCENT:
        return MIN_DISCOUNT_PERCENT
    return percent


def compute_total(quantity, unit_price, discount_percent) -> Decimal:
    """quantity * unit_price * (1 - discount_percent / 100), discount clamped first."""
    percent = Decimal(clamp_discount_percent(discount_percent))
    return to_decimal(quantity) * to_decimal(unit_price) * (1 - percent / _HUNDRED)


def percent_to_fraction(discount_percent) -> float:
    """Form percent (10) -> stored fraction (0.1)."""
    return float(Decimal(clamp_discount_percent(discount_percent)) / _HUNDRED)


def fraction_to_percent(discount) -> int:
    """Stored fraction (0.1) -> form percent (10)."""
    return int((to_decimal(discount) * _HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
