"""End-to-end pricing: cart + event + rules -> PriceBreakdown -> summary.

Every entry point takes all of its inputs as arguments and returns a fresh
result; nothing is cached between calls.
"""

import logging
from decimal import Decimal

from bounce_pricing.adjustments import custom_fees_total, discount_total
from bounce_pricing.deposit import DepositOverride, default_deposit
from bounce_pricing.distance import resolve_driving_distance
from bounce_pricing.fees import aggregate_fees
from bounce_pricing.models import FeeWaivers, LocationType, PriceBreakdown
from bounce_pricing.money import multiply_cents, percent_of
from bounce_pricing.rules import require_rules
from bounce_pricing.summary import SummaryFees, build_order_summary
from bounce_pricing.totals import compute_totals
from bounce_pricing.travel import travel_fee_for_rules
from bounce_pricing.waivers import reconstruct_fees


logger = logging.getLogger(__name__)


def calculate_subtotal(items, location_type, num_days, rules) -> int:
    """
    Rental subtotal.
    Formula: day one = round(sum(price x qty) x location multiplier),
    plus round(day one x extra_day_pct / 100 x extra days) for multi-day events

    Examples (multipliers 1.0, extra day 50%):
    - $100 + $50, one day: $150
    - $100, three days: $100 + $100 x 0.5 x 2 = $200
    """
    raw = sum(item.unit_price_cents * item.qty for item in items)
    if LocationType(location_type) == LocationType.COMMERCIAL:
        multiplier = rules.commercial_multiplier
    else:
        multiplier = rules.residential_multiplier
    day_one = multiply_cents(raw, multiplier)

    subtotal = day_one
    extra_days = num_days - 1
    if extra_days > 0 and rules.extra_day_pct:
        subtotal += percent_of(day_one, Decimal(str(rules.extra_day_pct)) * extra_days)
    return subtotal


def build_price_breakdown(items, event, distance_miles, rules, discounts=(), custom_fees=(),
                          waivers=None, deposit_override=None, tip_cents=0) -> PriceBreakdown:
    """Price a cart for an event at a known distance from the home base."""
    require_rules(rules)
    waivers = waivers or FeeWaivers()
    deposit_override = deposit_override or DepositOverride()
    event = event.normalized()

    subtotal = calculate_subtotal(items, event.location_type, event.num_days, rules)
    travel = travel_fee_for_rules(distance_miles, event.city, event.zip, rules)
    original = aggregate_fees(
        event,
        rules,
        travel_fee_cents=travel.fee_cents,
        total_units=sum(item.qty for item in items),
        subtotal_cents=subtotal,
    )
    effective = original.apply_waivers(waivers)

    discounts_cents = discount_total(discounts, subtotal)
    custom_cents = custom_fees_total(custom_fees)
    totals = compute_totals(
        subtotal,
        effective,
        discount_total_cents=discounts_cents,
        custom_fees_total_cents=custom_cents,
        tax_waived=waivers.tax.waived,
        tip_cents=tip_cents,
    )
    deposit = deposit_override.resolve(default_deposit(items, rules))

    return PriceBreakdown(
        subtotal_cents=subtotal,
        travel_fee_cents=effective.travel_fee_cents,
        travel_total_miles=travel.total_miles,
        travel_base_radius_miles=travel.base_radius_miles,
        travel_chargeable_miles=travel.chargeable_miles,
        travel_per_mile_cents=travel.per_mile_cents,
        travel_is_flat_fee=travel.is_flat_fee,
        travel_is_included_city=travel.is_included_city,
        travel_fee_display_name=travel.display_name,
        surface_fee_cents=effective.surface_fee_cents,
        same_day_pickup_fee_cents=effective.same_day_pickup_fee_cents,
        generator_fee_cents=effective.generator_fee_cents,
        discount_total_cents=discounts_cents,
        custom_fees_total_cents=custom_cents,
        taxable_amount_cents=totals.taxable_amount_cents,
        tax_cents=totals.tax_cents,
        tip_cents=tip_cents,
        total_cents=totals.total_cents,
        deposit_due_cents=deposit,
        balance_due_cents=totals.total_cents - deposit,
        original_fees=original,
        original_tax_cents=totals.original_tax_cents,
        waivers=waivers,
    )


def quote_event(items, event, rules, origin, api_key=None, session=None, **options):
    """
    Resolve the driving distance to the event, then price it.

    Returns ``(PriceBreakdown, DistanceEstimate)``. Events without
    coordinates are priced at 0 miles.
    """
    require_rules(rules)
    destination = event.destination
    if destination is None:
        logger.warning("Event has no coordinates, pricing travel at 0 mi")
        estimate = None
        miles = 0.0
    else:
        estimate = resolve_driving_distance(origin, destination, api_key=api_key, session=session)
        miles = estimate.miles
    return build_price_breakdown(items, event, miles, rules, **options), estimate


def _shown(original_cents, waived):
    # a fee that never applied gets no line; a waived one always does
    if not original_cents and not waived:
        return None
    return original_cents


def summarize_breakdown(breakdown, items, event, discounts=(), custom_fees=(), deposit_paid_cents=0):
    """Summary for a live quote or invoice being built."""
    event = event.normalized()
    original = breakdown.original_fees
    waivers = breakdown.waivers
    fees = SummaryFees(
        travel_fee_cents=_shown(original.travel_fee_cents, waivers.travel.waived),
        travel_total_miles=breakdown.travel_total_miles,
        travel_fee_display_name=breakdown.travel_fee_display_name,
        surface_fee_cents=_shown(original.surface_fee_cents, waivers.surface.waived),
        same_day_pickup_fee_cents=_shown(
            original.same_day_pickup_fee_cents, waivers.same_day_pickup.waived
        ),
        generator_fee_cents=_shown(original.generator_fee_cents, waivers.generator.waived),
        generator_qty=event.generator_qty,
    )
    return build_order_summary(
        items=items,
        fees=fees,
        discounts=discounts,
        custom_fees=custom_fees,
        subtotal_cents=breakdown.subtotal_cents,
        tax_cents=breakdown.original_tax_cents,
        tip_cents=breakdown.tip_cents,
        total_cents=breakdown.total_cents,
        deposit_due_cents=breakdown.deposit_due_cents,
        deposit_paid_cents=deposit_paid_cents,
        event_date=event.event_date,
        event_end_date=event.event_end_date,
        pickup_preference=event.pickup_preference,
        waivers=waivers,
        original_fees=original,
        original_tax_cents=breakdown.original_tax_cents,
    )


def summarize_persisted_order(order, current_rules=None):
    """Redisplay a stored order, rebuilding any waived fee first."""
    rebuilt = reconstruct_fees(order, current_rules)
    original = rebuilt.original
    waivers = order.waivers
    fees = SummaryFees(
        travel_fee_cents=_shown(original.travel_fee_cents, waivers.travel.waived),
        travel_total_miles=order.travel_total_miles or 0.0,
        surface_fee_cents=_shown(original.surface_fee_cents, waivers.surface.waived),
        same_day_pickup_fee_cents=_shown(
            original.same_day_pickup_fee_cents, waivers.same_day_pickup.waived
        ),
        generator_fee_cents=_shown(original.generator_fee_cents, waivers.generator.waived),
        generator_qty=order.generator_qty,
    )
    deposit_due = order.custom_deposit_cents
    if deposit_due is None:
        deposit_due = order.deposit_due_cents
    return build_order_summary(
        items=order.items,
        fees=fees,
        discounts=order.discounts,
        custom_fees=order.custom_fees,
        subtotal_cents=order.subtotal_cents,
        tax_cents=rebuilt.original_tax_cents,
        tip_cents=order.tip_cents,
        total_cents=rebuilt.total_cents,
        deposit_due_cents=deposit_due,
        deposit_paid_cents=order.deposit_paid_cents,
        event_date=order.event_date,
        event_end_date=order.event_end_date,
        pickup_preference=order.event.normalized().pickup_preference,
        waivers=waivers,
        original_fees=original,
        original_tax_cents=rebuilt.original_tax_cents,
    )
