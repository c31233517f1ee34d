"""Tests for the editable pricing configuration."""
from bounce_pricing.models import GeoPoint, PricingRules
from pricing_config import (
    HOME_BASE,
    PRICING_RULES,
    get_home_base,
    get_home_base_address,
    get_pricing_rules,
)


class TestGetPricingRules:
    """The config record loads into PricingRules."""

    def test_loads(self):
        """The shipped record parses."""
        rules = get_pricing_rules()

        assert isinstance(rules, PricingRules)
        assert rules.base_radius_miles == PRICING_RULES["base_radius_miles"]
        assert rules.included_cities == tuple(PRICING_RULES["included_city_list_json"])
        assert rules.zone_overrides[0].name == "Downtown Detroit"

    def test_matrix_is_ordered(self):
        """The same-day matrix comes back most specific first."""
        rules = get_pricing_rules()

        assert rules.same_day_matrix[0].units == 2

    def test_overrides(self):
        """Overrides replace single keys and leave the rest."""
        rules = get_pricing_rules({"base_radius_miles": "15"})

        assert rules.base_radius_miles == 15.0
        assert rules.per_mile_after_base_cents == PRICING_RULES["per_mile_after_base_cents"]

    def test_overrides_do_not_mutate(self):
        """The module-level record is left untouched."""
        get_pricing_rules({"base_radius_miles": 99})

        assert PRICING_RULES["base_radius_miles"] != 99


class TestHomeBase:
    """The home base point and address."""

    def test_point(self):
        """The home base is a GeoPoint."""
        assert get_home_base() == GeoPoint(HOME_BASE["lat"], HOME_BASE["lng"])

    def test_overrides(self):
        """Secrets can move the home base."""
        assert get_home_base({"lat": "42.0", "lng": "-83.0"}) == GeoPoint(42.0, -83.0)
        assert get_home_base_address({"address": "1 Main St"}) == "1 Main St"
