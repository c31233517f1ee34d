"""Discounts and custom fees.

A percentage discount is always taken from the pre-discount subtotal, never
from a running total, so the order of discounts does not matter.
"""

from bounce_pricing.exceptions import InvalidDiscountError
from bounce_pricing.models import CustomFee, FixedAmountDiscount, PercentageDiscount
from bounce_pricing.money import percent_of


def discount_amount(discount, subtotal_cents) -> int:
    if isinstance(discount, PercentageDiscount):
        return percent_of(subtotal_cents, discount.percentage)
    return discount.amount_cents


def discount_total(discounts, subtotal_cents) -> int:
    return sum(discount_amount(d, subtotal_cents) for d in discounts)


def custom_fees_total(custom_fees) -> int:
    return sum(fee.amount_cents for fee in custom_fees)


def parse_discount_entry(name, amount_cents=0, percentage=0):
    """
    Validate a discount typed in by staff and return the matching variant.

    Exactly one of ``amount_cents`` / ``percentage`` must be set.
    """
    name = (name or "").strip()
    amount_cents = amount_cents or 0
    percentage = percentage or 0

    if not name:
        raise InvalidDiscountError(name, "a name is required")
    if amount_cents and percentage:
        raise InvalidDiscountError(name, "set an amount or a percentage, not both")
    if amount_cents < 0:
        raise InvalidDiscountError(name, "amount cannot be negative")
    if amount_cents:
        return FixedAmountDiscount(name=name, amount_cents=int(amount_cents))
    if not 0 < percentage <= 100:
        raise InvalidDiscountError(name, "set an amount or a percentage between 0 and 100")
    return PercentageDiscount(name=name, percentage=percentage)


def discount_from_record(record):
    """
    Read a stored discount row ({name, amount_cents, percentage}).

    Rows were validated on entry; if a legacy row has both, the amount wins.
    """
    name = record.get("name") or ""
    amount_cents = record.get("amount_cents") or 0
    percentage = float(record.get("percentage") or 0)
    if amount_cents > 0 or percentage <= 0:
        return FixedAmountDiscount(name=name, amount_cents=int(amount_cents))
    return PercentageDiscount(name=name, percentage=percentage)


def custom_fee_from_record(record) -> CustomFee:
    return CustomFee(name=record.get("name") or "", amount_cents=int(record.get("amount_cents") or 0))
