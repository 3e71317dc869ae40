# tests/test_totals.py
"""
Checkout Totals Tests - Unit Tests for Base-currency Totals

This module contains unit tests for subtotal aggregation, shipping inclusion,
the zero tax line and destination handling in calculate_totals.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- storeprice.application.totals (calculate_totals, calculate_subtotal, tax helpers)
- storeprice.application.shipping (ShippingZoneResolver)
- storeprice.domain.models (CartLineItem, DiscountWindow, Money)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storeprice.application.shipping import ShippingZoneResolver
from storeprice.application.totals import (
    calculate_subtotal,
    calculate_tax,
    calculate_totals,
    get_tax_exemption_notice,
)
from storeprice.domain.errors import InvalidPriceError
from storeprice.domain.models import CartLineItem, DiscountWindow, Money

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def resolver():
    return ShippingZoneResolver(domestic_country="NL", use_weight_tiers=False)


def _item(product_id, price, **kwargs):
    return CartLineItem(product_id=product_id, title=product_id, price=Money(price, "EUR"), **kwargs)


class TestCalculateSubtotal:
    def test_sums_effective_prices(self):
        discounted = DiscountWindow(Decimal("40"), start=NOW - timedelta(days=1))
        items = [_item("a", "50", discount=discounted), _item("b", "19.99")]
        assert calculate_subtotal(items, NOW) == Money("59.99", "EUR")

    def test_rounds_once_after_summing(self):
        items = [_item("a", "0.005"), _item("b", "0.005")]
        assert calculate_subtotal(items, NOW) == Money("0.01", "EUR")

    def test_empty(self):
        assert calculate_subtotal([], NOW) == Money("0", "EUR")


class TestCalculateTotals:
    def test_domestic_order(self, resolver):
        totals = calculate_totals([_item("a", "50")], "NL", now=NOW, resolver=resolver)
        assert totals.subtotal == Money("50.00", "EUR")
        assert totals.shipping == Money("5", "EUR")
        assert totals.tax == Money("0", "EUR")
        assert totals.total == Money("55.00", "EUR")
        assert totals.currency == "EUR"
        assert totals.zone == "domestic"
        assert totals.destination_country == "NL"

    def test_total_is_sum_of_parts(self, resolver):
        items = [_item("a", "12.34"), _item("b", "56.78")]
        totals = calculate_totals(items, "US", now=NOW, resolver=resolver)
        assert totals.total == totals.subtotal + totals.shipping + totals.tax
        assert totals.total == Money("89.12", "EUR")

    def test_missing_destination_uses_rest_of_world(self, resolver):
        totals = calculate_totals([_item("a", "10")], None, now=NOW, resolver=resolver)
        assert totals.zone == "rest-of-world"
        assert totals.shipping == Money("30", "EUR")
        assert totals.destination_country == ""

    def test_free_shipping_flag(self, resolver):
        totals = calculate_totals([_item("a", "10", free_shipping=True)], "US", now=NOW, resolver=resolver)
        assert totals.free_shipping is True
        assert totals.total == Money("10.00", "EUR")

    def test_empty_cart_totals_are_zero(self, resolver):
        totals = calculate_totals([], "US", now=NOW, resolver=resolver)
        assert totals.total == Money("0", "EUR")
        assert totals.free_shipping is False


class TestTax:
    def test_tax_is_always_zero(self):
        assert calculate_tax(Money("1000", "EUR")) == Money("0", "EUR")

    def test_exemption_notice(self):
        assert "tax-exempt" in get_tax_exemption_notice()


class TestLineItems:
    def test_negative_price_rejected(self):
        with pytest.raises(InvalidPriceError):
            _item("a", "-1")

    def test_from_dict(self):
        item = CartLineItem.from_dict(
            {
                "productId": 7,
                "title": "Wool coat",
                "price": 80,
                "discountPrice": 60,
                "discountStartDate": "2025-06-01T00:00:00Z",
                "weightGrams": 1200,
                "freeShipping": True,
            },
            "EUR",
        )
        assert item.product_id == "7"
        assert item.price == Money("80", "EUR")
        assert item.discount.discount_price == Decimal("60")
        assert item.weight_grams == 1200
        assert item.free_shipping is True
