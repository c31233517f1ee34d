"""Integer-cent helpers.

Every monetary value in the engine is an int of cents. Floats only appear as
an intermediate (miles, multipliers, percentages) and are rounded straight
back to cents with round-half-away-from-zero.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    # str() keeps 15.3 as 15.3 instead of its binary expansion
    return Decimal(str(value))


def round_cents(value) -> int:
    """Round a cent amount to an int, halves away from zero."""
    return int(_to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def multiply_cents(amount, factor) -> int:
    """round(amount * factor) without float drift."""
    return round_cents(_to_decimal(amount) * _to_decimal(factor))


def percent_of(amount_cents, pct) -> int:
    """
    round(amount_cents * pct / 100)

    Examples:
    - percent_of(15000, 10) -> 1500
    - percent_of(999, 12.5) -> 125
    """
    return round_cents(_to_decimal(amount_cents) * _to_decimal(pct) / Decimal(100))


def dollars_to_cents(text) -> int:
    """Parse a dollar amount typed by staff ("12.50", "$1,200") into cents. Blank is 0."""
    cleaned = str(text or "").replace("$", "").replace(",", "").strip()
    if not cleaned:
        return 0
    try:
        return round_cents(Decimal(cleaned) * 100)
    except InvalidOperation:
        raise ValueError(f"Not a dollar amount: {text!r}")
