# pricing_config.py
# This file contains the home base, travel zones, fees and deposit settings
# Edit this file to update pricing without touching the main app

from bounce_pricing.models import GeoPoint
from bounce_pricing.rules import load_pricing_rules

# Where every delivery leaves from
HOME_BASE = {
    "address": "4426 Woodward St, Wayne, MI 48184",
    "lat": 42.2775,
    "lng": -83.3863,
}

# Admin pricing rules record
# Format: same keys as the stored pricing-rules row, all money in cents
PRICING_RULES = {
    "base_radius_miles": 20,
    "per_mile_after_base_cents": 300,
    "included_city_list_json": ["Wayne", "Westland", "Dearborn", "Dearborn Heights"],
    "zone_overrides_json": [
        {"zip": "48226", "flat_cents": 7500, "zone_name": "Downtown Detroit"},
    ],
    "surface_sandbag_fee_cents": 3000,
    "residential_multiplier": 1.0,
    "commercial_multiplier": 1.0,
    "same_day_pickup_fee_cents": 5000,
    "same_day_matrix_json": [
        {"units": 1, "generator": False, "subtotal_ge_cents": 0, "fee_cents": 5000},
        {"units": 2, "generator": False, "subtotal_ge_cents": 0, "fee_cents": 7500},
        {"units": 1, "generator": True, "subtotal_ge_cents": 0, "fee_cents": 10000},
    ],
    "generator_fee_single_cents": 10000,
    "generator_fee_multiple_cents": 7500,
    "deposit_per_unit_cents": 5000,
    "overnight_holiday_only": False,
    "extra_day_pct": 50,
}


# Helper function to get the typed pricing rules, with optional overrides (e.g. from secrets)
def get_pricing_rules(overrides=None):
    record = dict(PRICING_RULES)
    record.update(dict(overrides or {}))
    return load_pricing_rules(record)


# Helper function to get the home base as a point for distance lookups
def get_home_base(overrides=None):
    base = dict(HOME_BASE)
    base.update(dict(overrides or {}))
    return GeoPoint(float(base["lat"]), float(base["lng"]))


# Helper function to get the home base street address for display
def get_home_base_address(overrides=None):
    base = dict(HOME_BASE)
    base.update(dict(overrides or {}))
    return base["address"]

