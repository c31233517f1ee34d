from datetime import date

import pytest

from bounce_pricing.models import CartItem, EventDetails, PricingRules, ZoneOverride


@pytest.fixture
def rules():
    """Pricing rules used across the suite: 10 mi free radius, $2.50/mi after."""
    return PricingRules(
        base_radius_miles=10,
        per_mile_after_base_cents=250,
        included_cities=("Dearborn", "Wayne"),
        zone_overrides=(ZoneOverride(zip="48226", flat_cents=7500, name="Downtown"),),
        surface_sandbag_fee_cents=3000,
        same_day_pickup_fee_cents=5000,
        generator_fee_single_cents=10000,
        generator_fee_multiple_cents=7500,
        deposit_per_unit_cents=5000,
    )


@pytest.fixture
def event_date():
    return date(2026, 7, 4)


@pytest.fixture
def event(event_date):
    """A one-day residential event on grass, picked up the next day."""
    return EventDetails(event_date=event_date, city="Canton", zip="48187")


@pytest.fixture
def items():
    """Two units at $100 and $50."""
    return (
        CartItem(unit_id="castle", unit_price_cents=10000, unit_name="Castle Bouncer"),
        CartItem(unit_id="slide", unit_price_cents=5000, unit_name="Water Slide", mode="water"),
    )
