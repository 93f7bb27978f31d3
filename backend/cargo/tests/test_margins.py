from decimal import Decimal

from ..services.margins import margin_percent, needs_approval


class TestMargins:
    def test_margin_on_sell_price(self):
        assert margin_percent(Decimal("1000"), Decimal("850")) == Decimal("15.00")

    def test_margin_rounded_to_cents(self):
        assert margin_percent("300", "200") == Decimal("33.33")

    def test_negative_margin(self):
        assert margin_percent(100, 120) == Decimal("-20.00")

    def test_nothing_sold(self):
        assert margin_percent(0, 500) == Decimal("0")
        assert margin_percent(None, 500) == Decimal("0")

    def test_needs_approval_below_threshold(self):
        assert needs_approval(1000, 900, 15) is True
        assert needs_approval(1000, 850, 15) is False
        assert needs_approval(1000, 800, "15") is False
