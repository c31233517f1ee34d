"""Rebuild waived fees on persisted orders.

A waived fee is stored as 0, which looks the same as a fee that never
applied. To show staff what was waived, and to restore it when a waiver is
turned back off, the original amount is rebuilt from facts the order still
carries (miles, city, ZIP, surface, pickup preference, generator count) and the
pricing rules: the order's own snapshot when it has one, otherwise the
current rules.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional, Tuple

from bounce_pricing.adjustments import custom_fees_total, discount_total
from bounce_pricing.fees import generator_fee, same_day_pickup_fee, surface_fee
from bounce_pricing.models import (
    AutomaticFees,
    CartItem,
    CustomFee,
    Discount,
    EventDetails,
    FeeWaivers,
    LocationType,
    PickupPreference,
    PricingRules,
    Surface,
    WaivableFee,
)
from bounce_pricing.rules import require_rules
from bounce_pricing.totals import compute_totals, tax_for, taxable_amount
from bounce_pricing.travel import per_mile_travel_fee, travel_fee_for_rules


logger = logging.getLogger(__name__)

RULES_SNAPSHOT = "snapshot"
RULES_CURRENT = "current"


@dataclass(frozen=True)
class PersistedOrder:
    """The stored order fields pricing needs to redisplay or re-toggle an order."""

    event_date: date
    subtotal_cents: int
    items: Tuple[CartItem, ...] = ()
    event_end_date: Optional[date] = None
    location_type: LocationType = LocationType.RESIDENTIAL
    surface: Surface = Surface.GRASS
    city: str = ""
    zip: str = ""
    can_use_stakes: bool = True
    pickup_preference: PickupPreference = PickupPreference.NEXT_DAY
    generator_qty: int = 0
    travel_fee_cents: int = 0
    travel_total_miles: float = 0.0
    surface_fee_cents: int = 0
    same_day_pickup_fee_cents: int = 0
    generator_fee_cents: int = 0
    tax_cents: int = 0
    tip_cents: int = 0
    discounts: Tuple[Discount, ...] = ()
    custom_fees: Tuple[CustomFee, ...] = ()
    deposit_due_cents: int = 0
    deposit_paid_cents: int = 0
    custom_deposit_cents: Optional[int] = None
    waivers: FeeWaivers = field(default_factory=FeeWaivers)
    pricing_snapshot: Optional[PricingRules] = None

    @property
    def event(self) -> EventDetails:
        return EventDetails(
            event_date=self.event_date,
            event_end_date=self.event_end_date,
            location_type=self.location_type,
            surface=self.surface,
            city=self.city,
            zip=self.zip,
            can_use_stakes=self.can_use_stakes,
            generator_qty=self.generator_qty,
            pickup_preference=self.pickup_preference,
        )

    @property
    def total_units(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def stored_fees(self) -> AutomaticFees:
        return AutomaticFees(
            travel_fee_cents=self.travel_fee_cents or 0,
            surface_fee_cents=self.surface_fee_cents or 0,
            same_day_pickup_fee_cents=self.same_day_pickup_fee_cents or 0,
            generator_fee_cents=self.generator_fee_cents or 0,
        )


@dataclass(frozen=True)
class ReconstructedFees:
    original: AutomaticFees
    effective: AutomaticFees
    original_tax_cents: int
    tax_cents: int
    discount_total_cents: int
    custom_fees_total_cents: int
    taxable_amount_cents: int
    total_cents: int
    rules_source: str


def rules_for_order(order, current_rules):
    """The order's pricing snapshot if it has one, else the current rules."""
    if order.pricing_snapshot is not None:
        return order.pricing_snapshot, RULES_SNAPSHOT
    return require_rules(current_rules), RULES_CURRENT


def _rebuild(name, stored_cents, waived, recompute):
    if not waived or stored_cents:
        return stored_cents
    amount = recompute()
    logger.debug("Rebuilt waived %s fee: %d", name, amount)
    return amount


def _original_travel_fee(order, rules):
    def recompute():
        miles = order.travel_total_miles or 0
        if order.city or order.zip:
            # zone override and included city come before per-mile
            return travel_fee_for_rules(miles, order.city, order.zip, rules).fee_cents
        if miles <= 0:
            logger.debug("Waived travel fee has no stored miles, treating it as 0")
            return 0
        return per_mile_travel_fee(miles, rules.base_radius_miles, rules.per_mile_after_base_cents)

    return _rebuild("travel", order.travel_fee_cents or 0, order.waivers.travel.waived, recompute)


def original_fees(order, rules) -> AutomaticFees:
    """What each automatic fee on ``order`` is worth before waivers."""
    event = order.event
    stored = order.stored_fees
    waivers = order.waivers
    return AutomaticFees(
        travel_fee_cents=_original_travel_fee(order, rules),
        surface_fee_cents=_rebuild(
            "surface",
            stored.surface_fee_cents,
            waivers.surface.waived,
            lambda: surface_fee(event.needs_sandbags, rules),
        ),
        same_day_pickup_fee_cents=_rebuild(
            "same-day pickup",
            stored.same_day_pickup_fee_cents,
            waivers.same_day_pickup.waived,
            lambda: same_day_pickup_fee(
                event.is_same_day_pickup,
                rules,
                total_units=order.total_units,
                has_generator=order.generator_qty > 0,
                subtotal_cents=order.subtotal_cents,
            ),
        ),
        generator_fee_cents=_rebuild(
            "generator",
            stored.generator_fee_cents,
            waivers.generator.waived,
            lambda: generator_fee(order.generator_qty, rules),
        ),
    )


def reconstruct_fees(order, current_rules=None) -> ReconstructedFees:
    """
    Original and effective fee amounts for a stored order.

    Tax that is not waived keeps its stored value. Waived tax is rebuilt
    from the effective fees, the same base the tax was charged on.
    """
    rules, source = rules_for_order(order, current_rules)
    original = original_fees(order, rules)
    effective = original.apply_waivers(order.waivers)

    discounts = discount_total(order.discounts, order.subtotal_cents)
    custom = custom_fees_total(order.custom_fees)
    taxable = taxable_amount(order.subtotal_cents, effective, discounts, custom)

    if order.waivers.tax.waived:
        original_tax = order.tax_cents or tax_for(taxable)
        tax = 0
    else:
        original_tax = tax = order.tax_cents or 0

    total = (
        order.subtotal_cents
        + effective.total_cents
        - discounts
        + custom
        + tax
        + (order.tip_cents or 0)
    )
    return ReconstructedFees(
        original=original,
        effective=effective,
        original_tax_cents=original_tax,
        tax_cents=tax,
        discount_total_cents=discounts,
        custom_fees_total_cents=custom,
        taxable_amount_cents=taxable,
        total_cents=total,
        rules_source=source,
    )


def apply_waiver_change(order, fee, waived, reason="", current_rules=None) -> PersistedOrder:
    """
    Waive or restore one fee and return the order fields to store.

    Waiving stores the fee as 0; restoring stores the rebuilt original. Tax
    is recomputed from the resulting effective fees either way.
    """
    fee = WaivableFee(fee)
    rebuilt = reconstruct_fees(order, current_rules)
    if waived:
        waivers = order.waivers.waive(fee, reason)
    else:
        waivers = order.waivers.restore(fee)

    effective = rebuilt.original.apply_waivers(waivers)
    totals = compute_totals(
        order.subtotal_cents,
        effective,
        discount_total_cents=rebuilt.discount_total_cents,
        custom_fees_total_cents=rebuilt.custom_fees_total_cents,
        tax_waived=waivers.tax.waived,
        tip_cents=order.tip_cents or 0,
    )
    logger.debug("%s %s fee on order", "Waived" if waived else "Restored", fee.value)
    return replace(
        order,
        waivers=waivers,
        travel_fee_cents=effective.travel_fee_cents,
        surface_fee_cents=effective.surface_fee_cents,
        same_day_pickup_fee_cents=effective.same_day_pickup_fee_cents,
        generator_fee_cents=effective.generator_fee_cents,
        tax_cents=totals.tax_cents,
    )
