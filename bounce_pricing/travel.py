"""Travel fee resolution.

Pure function of the distance, the event's city/ZIP and the zone settings,
shared by the customer quote flow and the admin travel calculator.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from bounce_pricing.money import multiply_cents


class TravelRule(str, Enum):
    FLAT_ZONE = "flat_zone"
    INCLUDED_CITY = "included_city"
    WITHIN_BASE = "within_base"
    PER_MILE = "per_mile"


@dataclass(frozen=True)
class TravelFeeResult:
    fee_cents: int
    rule: TravelRule
    total_miles: float
    base_radius_miles: float
    chargeable_miles: float
    per_mile_cents: int
    display_name: str
    zone_zip: Optional[str] = None
    zone_name: str = ""
    city: str = ""

    @property
    def is_flat_fee(self) -> bool:
        return self.rule == TravelRule.FLAT_ZONE

    @property
    def is_included_city(self) -> bool:
        return self.rule == TravelRule.INCLUDED_CITY


def chargeable_miles(distance_miles, base_radius_miles) -> float:
    """Miles beyond the free base radius, never negative."""
    excess = Decimal(str(distance_miles)) - Decimal(str(base_radius_miles))
    return float(max(excess, Decimal(0)))


def per_mile_travel_fee(distance_miles, base_radius_miles, per_mile_cents) -> int:
    """
    Standard distance-based travel fee.
    Formula: round((distance - base radius) x per-mile rate), 0 inside the radius

    Examples:
    - 25 mi, 10 mi radius, 250/mi: 15 x 250 = 3750
    - 30 mi, 10 mi radius, 300/mi: 20 x 300 = 6000
    - 8 mi, 10 mi radius: 0
    """
    excess = chargeable_miles(distance_miles, base_radius_miles)
    if excess <= 0:
        return 0
    return multiply_cents(excess, per_mile_cents)


def _find_zone(zip_code, zone_overrides):
    zip_code = (zip_code or "").strip()
    if not zip_code:
        return None
    for zone in zone_overrides:
        if zone.zip == zip_code:
            return zone
    return None


def _is_included_city(city, included_cities):
    city_clean = (city or "").strip().lower()
    if not city_clean:
        return False
    return any(city_clean == included.strip().lower() for included in included_cities)


def resolve_travel_fee(distance_miles, city, zip_code, base_radius_miles, per_mile_cents,
                       included_cities=(), zone_overrides=()) -> TravelFeeResult:
    """
    Resolve the travel fee; the first matching rule wins:
    1. ZIP has a zone override -> that flat fee, whatever the distance
    2. city is an included city (case-insensitive) -> free
    3. beyond the base radius -> per-mile on the excess
    4. otherwise free
    """
    common = dict(
        total_miles=distance_miles,
        base_radius_miles=base_radius_miles,
        per_mile_cents=per_mile_cents,
        city=city or "",
    )

    zone = _find_zone(zip_code, zone_overrides)
    if zone is not None:
        label = zone.name or zone.zip
        return TravelFeeResult(
            fee_cents=zone.flat_cents,
            rule=TravelRule.FLAT_ZONE,
            chargeable_miles=0.0,
            display_name=f"Travel Fee (Flat Zone {label}, {distance_miles:.1f} mi)",
            zone_zip=zone.zip,
            zone_name=zone.name,
            **common,
        )

    if _is_included_city(city, included_cities):
        return TravelFeeResult(
            fee_cents=0,
            rule=TravelRule.INCLUDED_CITY,
            chargeable_miles=0.0,
            display_name=f"Travel Fee (Included City: {city.strip()}, {distance_miles:.1f} mi)",
            **common,
        )

    excess = chargeable_miles(distance_miles, base_radius_miles)
    if excess > 0:
        per_mile_dollars = per_mile_cents / 100
        return TravelFeeResult(
            fee_cents=per_mile_travel_fee(distance_miles, base_radius_miles, per_mile_cents),
            rule=TravelRule.PER_MILE,
            chargeable_miles=excess,
            display_name=f"Travel Fee ({excess:.1f} mi × ${per_mile_dollars:.2f}/mi)",
            **common,
        )

    return TravelFeeResult(
        fee_cents=0,
        rule=TravelRule.WITHIN_BASE,
        chargeable_miles=0.0,
        display_name=f"Travel Fee (Within {base_radius_miles:g} mi Base Radius, {distance_miles:.1f} mi)",
        **common,
    )


def travel_fee_for_rules(distance_miles, city, zip_code, rules) -> TravelFeeResult:
    """resolve_travel_fee with the zone settings taken from ``PricingRules``."""
    return resolve_travel_fee(
        distance_miles,
        city,
        zip_code,
        base_radius_miles=rules.base_radius_miles,
        per_mile_cents=rules.per_mile_after_base_cents,
        included_cities=rules.included_cities,
        zone_overrides=rules.zone_overrides,
    )
