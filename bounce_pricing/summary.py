"""Presentation-ready order summary.

Quote screens, the invoice builder, printable invoices and order detail all
build their breakdown through ``build_order_summary`` so what is shown never
drifts from what was computed. Amounts stay in cents; currency formatting is
up to the caller.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from bounce_pricing.adjustments import discount_amount
from bounce_pricing.models import FeeWaivers, Mode, PickupPreference


TRAVEL = "travel"
SURFACE = "surface"
SAME_DAY_PICKUP = "same_day_pickup"
GENERATOR = "generator"

SURFACE_FEE_LABEL = "Surface Fee (Sandbags)"
SAME_DAY_PICKUP_LABEL = "Same-Day Pickup Fee"


@dataclass(frozen=True)
class SummaryFees:
    """Fee inputs for a summary. ``None`` means the fee line is not shown at all."""

    travel_fee_cents: Optional[int] = None
    travel_total_miles: float = 0.0
    travel_fee_display_name: str = ""
    surface_fee_cents: Optional[int] = None
    same_day_pickup_fee_cents: Optional[int] = None
    generator_fee_cents: Optional[int] = None
    generator_qty: int = 0


@dataclass(frozen=True)
class SummaryItem:
    name: str
    mode: str
    price_cents: int
    qty: int
    line_total_cents: int
    is_new: bool = False


@dataclass(frozen=True)
class FeeLine:
    key: str
    name: str
    amount_cents: int
    waived: bool = False
    original_amount_cents: Optional[int] = None


@dataclass(frozen=True)
class AdjustmentLine:
    name: str
    amount_cents: int


@dataclass(frozen=True)
class OrderSummaryDisplay:
    items: Tuple[SummaryItem, ...]
    fees: Tuple[FeeLine, ...]
    discounts: Tuple[AdjustmentLine, ...]
    custom_fees: Tuple[AdjustmentLine, ...]
    subtotal_cents: int
    total_fees_cents: int
    total_discounts_cents: int
    total_custom_fees_cents: int
    taxable_amount_cents: int
    tax_cents: int
    tip_cents: int
    total_cents: int
    deposit_due_cents: int
    deposit_paid_cents: int
    balance_due_cents: int
    is_multi_day: bool
    pickup_preference: str
    tax_waived: bool = False
    original_tax_cents: Optional[int] = None


def _travel_label(fees):
    if fees.travel_fee_display_name:
        return fees.travel_fee_display_name
    if fees.travel_total_miles and fees.travel_total_miles > 0:
        return f"Travel Fee ({fees.travel_total_miles:.1f} mi)"
    return "Travel Fee"


def _generator_label(qty):
    return f"Generator ({qty}x)" if qty > 1 else "Generator"


def build_fee_lines(fees, waivers=None, original_fees=None):
    """
    One line per fee that has a value. A 0 still gets a line: a waived fee
    shows as a struck-through $0.00 so staff can see it was zeroed on purpose.
    """
    waivers = waivers or FeeWaivers()
    candidates = (
        (TRAVEL, _travel_label(fees), fees.travel_fee_cents),
        (SURFACE, SURFACE_FEE_LABEL, fees.surface_fee_cents),
        (SAME_DAY_PICKUP, SAME_DAY_PICKUP_LABEL, fees.same_day_pickup_fee_cents),
        (GENERATOR, _generator_label(fees.generator_qty), fees.generator_fee_cents),
    )

    lines = []
    for key, name, amount in candidates:
        if amount is None:
            continue
        waived = waivers.is_waived(key)
        original = None
        if waived and original_fees is not None:
            original = getattr(original_fees, f"{key}_fee_cents")
        lines.append(FeeLine(
            key=key,
            name=name,
            amount_cents=0 if waived else amount,
            waived=waived,
            original_amount_cents=original,
        ))
    return tuple(lines)


def build_discount_lines(discounts, subtotal_cents):
    """Percentage discounts are recomputed against the subtotal given here."""
    return tuple(
        AdjustmentLine(name=d.name, amount_cents=discount_amount(d, subtotal_cents))
        for d in discounts
    )


def _summary_item(item):
    return SummaryItem(
        name=item.unit_name or "Unknown Item",
        mode="Water" if item.mode == Mode.WATER else "Dry",
        price_cents=item.unit_price_cents,
        qty=item.qty,
        line_total_cents=item.line_total_cents,
        is_new=item.is_new,
    )


def build_order_summary(items, fees, discounts, custom_fees, subtotal_cents, tax_cents, tip_cents,
                        total_cents, deposit_due_cents, deposit_paid_cents=0,
                        event_date: Optional[date] = None, event_end_date: Optional[date] = None,
                        pickup_preference=PickupPreference.NEXT_DAY, waivers=None,
                        original_fees=None, original_tax_cents=None) -> OrderSummaryDisplay:
    """Assemble the display breakdown. Pure: same inputs, same summary."""
    waivers = waivers or FeeWaivers()
    fee_lines = build_fee_lines(fees, waivers, original_fees)
    discount_lines = build_discount_lines(discounts, subtotal_cents)
    custom_fee_lines = tuple(AdjustmentLine(name=f.name, amount_cents=f.amount_cents) for f in custom_fees)

    total_fees = sum(line.amount_cents for line in fee_lines)
    untaxed_fees = sum(line.amount_cents for line in fee_lines if line.key == SAME_DAY_PICKUP)
    total_discounts = sum(line.amount_cents for line in discount_lines)
    total_custom_fees = sum(line.amount_cents for line in custom_fee_lines)
    taxable = max(0, subtotal_cents + total_fees - untaxed_fees + total_custom_fees - total_discounts)

    is_multi_day = bool(event_date and event_end_date and event_end_date != event_date)

    return OrderSummaryDisplay(
        items=tuple(_summary_item(item) for item in items),
        fees=fee_lines,
        discounts=discount_lines,
        custom_fees=custom_fee_lines,
        subtotal_cents=subtotal_cents,
        total_fees_cents=total_fees,
        total_discounts_cents=total_discounts,
        total_custom_fees_cents=total_custom_fees,
        taxable_amount_cents=taxable,
        tax_cents=0 if waivers.tax.waived else tax_cents,
        tip_cents=tip_cents or 0,
        total_cents=total_cents,
        deposit_due_cents=deposit_due_cents,
        deposit_paid_cents=deposit_paid_cents or 0,
        balance_due_cents=total_cents - deposit_due_cents,
        is_multi_day=is_multi_day,
        pickup_preference=PickupPreference(pickup_preference).value,
        tax_waived=waivers.tax.waived,
        original_tax_cents=original_tax_cents,
    )
