"""Taxable base, tax and grand total."""

from dataclasses import dataclass
from decimal import Decimal

from bounce_pricing.money import multiply_cents


TAX_RATE = Decimal("0.06")


@dataclass(frozen=True)
class Totals:
    taxable_amount_cents: int
    tax_cents: int
    original_tax_cents: int
    total_cents: int


def taxable_amount(subtotal_cents, fees, discount_total_cents, custom_fees_total_cents) -> int:
    """subtotal + travel + surface + generator - discounts + custom fees, floored at 0."""
    return max(0, subtotal_cents + fees.taxable_cents - discount_total_cents + custom_fees_total_cents)


def tax_for(taxable_cents) -> int:
    return multiply_cents(taxable_cents, TAX_RATE)


def compute_totals(subtotal_cents, fees, discount_total_cents=0, custom_fees_total_cents=0,
                   tax_waived=False, tip_cents=0) -> Totals:
    """
    ``fees`` are the effective AutomaticFees (waived fees already zeroed);
    the tax base follows them. ``original_tax_cents`` is the tax on that same
    base whether or not tax itself is waived.
    """
    taxable = taxable_amount(subtotal_cents, fees, discount_total_cents, custom_fees_total_cents)
    original_tax = tax_for(taxable)
    tax = 0 if tax_waived else original_tax
    total = (
        subtotal_cents
        + fees.total_cents
        - discount_total_cents
        + custom_fees_total_cents
        + tax
        + tip_cents
    )
    return Totals(
        taxable_amount_cents=taxable,
        tax_cents=tax,
        original_tax_cents=original_tax,
        total_cents=total,
    )
