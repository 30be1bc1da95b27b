"""Tests for money helpers and order totals."""

from decimal import Decimal

from storefront.services.pricing import compute_totals, price_line, shipping_for, tax_for
from storefront.utils.money import format_minor_units, to_minor_units


class TestMoney:
    def test_to_minor_units_rounds_half_up(self):
        assert to_minor_units(Decimal("19.99")) == 1999
        assert to_minor_units(Decimal("0.005")) == 1
        assert to_minor_units(Decimal("2.675")) == 268

    def test_to_minor_units_accepts_floats_and_strings(self):
        assert to_minor_units(19.99) == 1999
        assert to_minor_units("240.00") == 24000

    def test_format_minor_units(self):
        assert format_minor_units(7001) == "70.01"
        assert format_minor_units(5) == "0.05"
        assert format_minor_units(None) == "0.00"


class TestPricing:
    def test_price_line_multiplies_rounded_unit_price(self):
        assert price_line(Decimal("19.99"), 3) == (1999, 5997)

    def test_tax_is_rounded_half_up(self):
        assert tax_for(5997, Decimal("0.084")) == 504
        assert tax_for(24000, Decimal("0.084")) == 2016

    def test_no_shipping_for_empty_subtotal(self):
        assert shipping_for(0, 500) == 0
        assert shipping_for(1, 500) == 500

    def test_widget_scenario(self):
        totals = compute_totals([5997], tax_rate=Decimal("0.084"), flat_shipping_cents=500)

        assert totals.subtotal_cents == 5997
        assert totals.tax_cents == 504
        assert totals.shipping_cents == 500
        assert totals.total_cents == 7001

    def test_multiple_lines(self):
        totals = compute_totals(
            [10000, 8000, 6000],
            tax_rate=Decimal("0.084"),
            flat_shipping_cents=500,
        )

        assert totals.subtotal_cents == 24000
        assert totals.total_cents == 26516
        assert totals.total_cents == (
            totals.subtotal_cents + totals.shipping_cents + totals.tax_cents
        )
