"""Automatic fees derived from event logistics.

Each fee is recomputed from the raw inputs and the pricing rules only, never
from an earlier breakdown, so recomputing after any edit gives the same answer.
"""

from bounce_pricing.models import AutomaticFees


def surface_fee(needs_sandbags, rules) -> int:
    """Sandbag fee when the units cannot be staked (cement, or grass without stakes)."""
    return rules.surface_sandbag_fee_cents if needs_sandbags else 0


def same_day_pickup_fee(is_same_day, rules, total_units=0, has_generator=False, subtotal_cents=0) -> int:
    """
    Fee for picking the units up on the event day.

    Next-day pickup is free. For same-day pickup the matrix rows are tried in
    order and the first match sets the fee; with no match (or no matrix) the
    flat same-day fee applies.
    """
    if not is_same_day:
        return 0
    for row in rules.same_day_matrix:
        if row.matches(total_units, has_generator, subtotal_cents):
            return row.fee_cents
    return rules.same_day_pickup_fee_cents


def generator_fee(generator_qty, rules) -> int:
    """
    Generator rental.
    Formula: single rate + (qty - 1) x additional rate

    Examples (single $100, additional $75):
    - 0 generators: $0
    - 1 generator: $100
    - 3 generators: $100 + 2 x $75 = $250
    """
    if generator_qty <= 0:
        return 0
    return rules.generator_fee_single_cents + (generator_qty - 1) * rules.generator_fee_multiple_cents


def aggregate_fees(event, rules, travel_fee_cents, total_units, subtotal_cents) -> AutomaticFees:
    """All automatic fees for a (normalized) event, before waivers."""
    return AutomaticFees(
        travel_fee_cents=travel_fee_cents,
        surface_fee_cents=surface_fee(event.needs_sandbags, rules),
        same_day_pickup_fee_cents=same_day_pickup_fee(
            event.is_same_day_pickup,
            rules,
            total_units=total_units,
            has_generator=event.generator_qty > 0,
            subtotal_cents=subtotal_cents,
        ),
        generator_fee_cents=generator_fee(event.generator_qty, rules),
    )
