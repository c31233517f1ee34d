"""Tests for waiver flags and rebuilding waived fees on stored orders."""
from dataclasses import replace

import pytest

from bounce_pricing.exceptions import PricingRulesMissingError, WaiverReasonRequiredError
from bounce_pricing.models import (
    CartItem,
    FeeWaivers,
    PickupPreference,
    Surface,
    WaivableFee,
    Waiver,
)
from bounce_pricing.waivers import (
    RULES_CURRENT,
    RULES_SNAPSHOT,
    PersistedOrder,
    apply_waiver_change,
    reconstruct_fees,
)


@pytest.fixture
def order_rules(rules):
    """Rules at $3/mi after 10 mi."""
    return replace(rules, per_mile_after_base_cents=300)


@pytest.fixture
def full_order(event_date, order_rules):
    """
    A stored order where every automatic fee applies and nothing is waived:
    30 mi, cement, same-day pickup, two generators, two units.
    """
    subtotal = 20000
    travel = 6000
    surface = 3000
    same_day = 5000
    generators = 17500
    tax = round((subtotal + travel + surface + generators) * 0.06)
    return PersistedOrder(
        event_date=event_date,
        subtotal_cents=subtotal,
        items=(CartItem(unit_id="castle", unit_price_cents=10000, qty=2),),
        surface=Surface.CEMENT,
        pickup_preference=PickupPreference.SAME_DAY,
        generator_qty=2,
        travel_fee_cents=travel,
        travel_total_miles=30,
        surface_fee_cents=surface,
        same_day_pickup_fee_cents=same_day,
        generator_fee_cents=generators,
        tax_cents=tax,
        deposit_due_cents=10000,
        pricing_snapshot=order_rules,
    )


class TestFeeWaivers:
    """Per-fee waiver flags."""

    def test_waive_requires_reason(self):
        """Turning a waiver on needs a reason."""
        with pytest.raises(WaiverReasonRequiredError):
            FeeWaivers().waive(WaivableFee.TRAVEL, "  ")

    def test_waive_and_restore(self):
        """Waiving sets the flag and reason, restoring clears both."""
        waivers = FeeWaivers().waive("travel", "Neighbor discount")

        assert waivers.travel == Waiver(waived=True, reason="Neighbor discount")
        assert waivers.is_waived(WaivableFee.TRAVEL)
        assert waivers.any_waived
        assert waivers.restore("travel") == FeeWaivers()

    def test_rewaive_keeps_reason(self):
        """Waiving an already waived fee without a new reason keeps the old one."""
        waivers = FeeWaivers().waive("tax", "Nonprofit").waive("tax", "")

        assert waivers.tax.reason == "Nonprofit"

    def test_from_flags(self):
        """Stored column flags map to waivers."""
        waivers = FeeWaivers.from_flags(
            tax_waived=True,
            tax_waive_reason="Nonprofit",
            same_day_pickup_fee_waived=True,
            same_day_pickup_fee_waive_reason="Staff on site",
        )

        assert waivers.tax.waived
        assert waivers.same_day_pickup.reason == "Staff on site"
        assert not waivers.travel.waived


class TestReconstructTravel:
    """Waived travel is rebuilt from the stored miles, city and ZIP."""

    def test_thirty_miles(self, event_date, order_rules):
        """30 mi, 10 mi radius, $3/mi rebuilds to $60."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            travel_total_miles=30,
            travel_fee_cents=0,
            waivers=FeeWaivers().waive("travel", "Promo"),
        )

        rebuilt = reconstruct_fees(order, order_rules)

        assert rebuilt.original.travel_fee_cents == 6000
        assert rebuilt.effective.travel_fee_cents == 0
        assert rebuilt.rules_source == RULES_CURRENT

    def test_unknown_miles(self, event_date, order_rules):
        """Without miles the waived fee is treated as 0."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            waivers=FeeWaivers().waive("travel", "Promo"),
        )

        assert reconstruct_fees(order, order_rules).original.travel_fee_cents == 0

    def test_stored_value_kept(self, event_date, order_rules):
        """A legacy waived row that still has its amount keeps it."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            travel_total_miles=30,
            travel_fee_cents=7500,
            waivers=FeeWaivers().waive("travel", "Promo"),
        )

        rebuilt = reconstruct_fees(order, order_rules)

        assert rebuilt.original.travel_fee_cents == 7500
        assert rebuilt.effective.travel_fee_cents == 0

    def test_snapshot_beats_current_rules(self, event_date, rules, order_rules):
        """An order's own rules are used even if current rates changed."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            travel_total_miles=30,
            waivers=FeeWaivers().waive("travel", "Promo"),
            pricing_snapshot=order_rules,
        )

        rebuilt = reconstruct_fees(order, rules)

        assert rebuilt.original.travel_fee_cents == 6000
        assert rebuilt.rules_source == RULES_SNAPSHOT

    def test_missing_rules(self, event_date):
        """No snapshot and no current rules is an error."""
        order = PersistedOrder(event_date=event_date, subtotal_cents=100)

        with pytest.raises(PricingRulesMissingError):
            reconstruct_fees(order, None)

    def test_included_city_rebuilds_to_zero(self, event_date, order_rules):
        """An included city travels free however far it is."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=15000,
            city="dearborn",
            travel_total_miles=40,
            travel_fee_cents=0,
            waivers=FeeWaivers().waive("travel", "Promo"),
            pricing_snapshot=order_rules,
        )

        assert reconstruct_fees(order).original.travel_fee_cents == 0

    def test_zone_rebuilds_to_flat_fee(self, event_date, order_rules):
        """A zone ZIP rebuilds to the zone's flat fee, not per-mile."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            zip="48226",
            travel_total_miles=30,
            travel_fee_cents=0,
            waivers=FeeWaivers().waive("travel", "Promo"),
            pricing_snapshot=order_rules,
        )

        assert reconstruct_fees(order).original.travel_fee_cents == 7500


class TestReconstructOtherFees:
    """Surface, same-day and generator fees rebuild from the stored facts."""

    def test_surface(self, event_date, rules):
        """Cement rebuilds the sandbag fee, staked grass rebuilds to 0."""
        waivers = FeeWaivers().waive("surface", "Comp")
        cement = PersistedOrder(event_date=event_date, subtotal_cents=100, surface=Surface.CEMENT, waivers=waivers)
        grass = PersistedOrder(event_date=event_date, subtotal_cents=100, waivers=waivers)

        assert reconstruct_fees(cement, rules).original.surface_fee_cents == 3000
        assert reconstruct_fees(grass, rules).original.surface_fee_cents == 0

    def test_same_day(self, event_date, rules):
        """Same-day pickup rebuilds its fee, next-day rebuilds to 0."""
        waivers = FeeWaivers().waive("same_day_pickup", "Comp")
        same_day = PersistedOrder(
            event_date=event_date,
            subtotal_cents=100,
            pickup_preference=PickupPreference.SAME_DAY,
            waivers=waivers,
        )
        next_day = PersistedOrder(event_date=event_date, subtotal_cents=100, waivers=waivers)

        assert reconstruct_fees(same_day, rules).original.same_day_pickup_fee_cents == 5000
        assert reconstruct_fees(next_day, rules).original.same_day_pickup_fee_cents == 0

    def test_generators(self, event_date, rules):
        """Three generators rebuild to 10000 + 2 x 7500."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=100,
            generator_qty=3,
            waivers=FeeWaivers().waive("generator", "Comp"),
        )

        assert reconstruct_fees(order, rules).original.generator_fee_cents == 25000

    def test_waived_tax(self, event_date, rules):
        """Waived tax stored as 0 is rebuilt from the effective fees."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=10000,
            surface=Surface.CEMENT,
            surface_fee_cents=3000,
            tax_cents=0,
            waivers=FeeWaivers().waive("tax", "Nonprofit"),
        )

        rebuilt = reconstruct_fees(order, rules)

        assert rebuilt.original_tax_cents == 780
        assert rebuilt.tax_cents == 0
        assert rebuilt.total_cents == 13000

    def test_unwaived_tax_is_stored_value(self, full_order):
        """Tax that is not waived keeps its stored value."""
        rebuilt = reconstruct_fees(full_order)

        assert rebuilt.tax_cents == full_order.tax_cents
        assert rebuilt.original == full_order.stored_fees
        assert rebuilt.total_cents == 20000 + 6000 + 3000 + 5000 + 17500 + full_order.tax_cents


class TestApplyWaiverChange:
    """Waiving then restoring gives back exactly the original order."""

    @pytest.mark.parametrize("fee", list(WaivableFee))
    def test_round_trip(self, full_order, fee):
        """Every fee survives a waive/restore cycle."""
        waived = apply_waiver_change(full_order, fee, True, reason="Comp")
        restored = apply_waiver_change(waived, fee, False)

        assert waived.waivers.is_waived(fee)
        assert restored == full_order

    def test_included_city_round_trip(self, event_date, order_rules):
        """A free included-city trip stays free after waive and restore."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=15000,
            city="Dearborn",
            travel_total_miles=40,
            travel_fee_cents=0,
            tax_cents=900,
            pricing_snapshot=order_rules,
        )

        waived = apply_waiver_change(order, "travel", True, reason="Comp")
        restored = apply_waiver_change(waived, "travel", False)

        assert restored.travel_fee_cents == 0
        assert restored.tax_cents == 900
        assert restored == order

    def test_zone_round_trip(self, event_date, order_rules):
        """A zone flat fee comes back at its flat amount."""
        order = PersistedOrder(
            event_date=event_date,
            subtotal_cents=20000,
            zip="48226",
            travel_total_miles=30,
            travel_fee_cents=7500,
            tax_cents=round((20000 + 7500) * 0.06),
            pricing_snapshot=order_rules,
        )

        waived = apply_waiver_change(order, "travel", True, reason="Comp")
        restored = apply_waiver_change(waived, "travel", False)

        assert waived.travel_fee_cents == 0
        assert waived.tax_cents == 1200
        assert restored.travel_fee_cents == 7500
        assert restored == order

    def test_waiving_travel_zeroes_fee_and_retaxes(self, full_order):
        """The waived fee is stored as 0 and tax follows the new base."""
        waived = apply_waiver_change(full_order, "travel", True, reason="Promo")

        assert waived.travel_fee_cents == 0
        assert waived.tax_cents == round((20000 + 3000 + 17500) * 0.06)
        assert waived.surface_fee_cents == full_order.surface_fee_cents

    def test_waiving_same_day_keeps_tax(self, full_order):
        """Same-day pickup is not taxed, so waiving it leaves tax alone."""
        waived = apply_waiver_change(full_order, "same_day_pickup", True, reason="Staff on site")

        assert waived.same_day_pickup_fee_cents == 0
        assert waived.tax_cents == full_order.tax_cents

    def test_waiving_tax(self, full_order):
        """Waived tax is stored as 0."""
        waived = apply_waiver_change(full_order, "tax", True, reason="Nonprofit")

        assert waived.tax_cents == 0
        assert reconstruct_fees(waived).original_tax_cents == full_order.tax_cents

    def test_reason_required(self, full_order):
        """A waiver without a reason is refused."""
        with pytest.raises(WaiverReasonRequiredError):
            apply_waiver_change(full_order, "generator", True, reason="")
