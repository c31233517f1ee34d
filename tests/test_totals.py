"""Tests for tax and totals."""
from bounce_pricing.models import AutomaticFees
from bounce_pricing.totals import compute_totals, tax_for, taxable_amount


class TestComputeTotals:
    """taxable, tax and total from the effective fees."""

    def test_discount_and_custom_fee(self):
        """$150 subtotal, 10% off, $20 custom fee: total $164.30."""
        totals = compute_totals(
            15000,
            AutomaticFees(),
            discount_total_cents=1500,
            custom_fees_total_cents=2000,
        )

        assert totals.taxable_amount_cents == 15500
        assert totals.tax_cents == 930
        assert totals.total_cents == 16430

    def test_same_day_pickup_is_not_taxed(self):
        """Same-day pickup adds to the total but not to the taxable amount."""
        with_pickup = compute_totals(10000, AutomaticFees(same_day_pickup_fee_cents=5000))
        without_pickup = compute_totals(10000, AutomaticFees())

        assert with_pickup.taxable_amount_cents == without_pickup.taxable_amount_cents == 10000
        assert with_pickup.tax_cents == 600
        assert with_pickup.total_cents == without_pickup.total_cents + 5000

    def test_taxed_fees(self):
        """Travel, surface and generator fees are taxed."""
        fees = AutomaticFees(travel_fee_cents=3750, surface_fee_cents=3000, generator_fee_cents=10000)

        totals = compute_totals(10000, fees)

        assert totals.taxable_amount_cents == 26750
        assert totals.tax_cents == 1605
        assert totals.total_cents == 26750 + 1605

    def test_tax_waived(self):
        """Waived tax is 0 but the original is still known."""
        totals = compute_totals(10000, AutomaticFees(), tax_waived=True)

        assert totals.tax_cents == 0
        assert totals.original_tax_cents == 600
        assert totals.total_cents == 10000

    def test_tip(self):
        """A tip is added after tax and is not taxed."""
        totals = compute_totals(10000, AutomaticFees(), tip_cents=1000)

        assert totals.tax_cents == 600
        assert totals.total_cents == 11600

    def test_taxable_floor(self):
        """Discounts bigger than the order leave nothing to tax."""
        assert taxable_amount(1000, AutomaticFees(), 5000, 0) == 0
        assert compute_totals(1000, AutomaticFees(), discount_total_cents=5000).tax_cents == 0


class TestTaxFor:
    """6% rounded half up."""

    def test_rounding(self):
        """6% of 25 cents is 1.5, which rounds to 2."""
        assert tax_for(25) == 2
        assert tax_for(15500) == 930
