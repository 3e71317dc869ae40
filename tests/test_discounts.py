# tests/test_discounts.py
"""
Discount Evaluator Tests - Unit Tests for Discount Windows

This module contains unit tests for discount window evaluation, effective
prices and discount badges, including malformed windows and inclusive bounds.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- storeprice.application.discounts (evaluate_discount, get_effective_price, badges)
- storeprice.domain.models (CartLineItem, DiscountWindow, Money, Product)
- pytest (testing framework)
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storeprice.application.discounts import (
    evaluate_discount,
    format_discount_percentage,
    get_discount_percentage,
    get_effective_price,
    is_discount_active,
)
from storeprice.domain.models import (
    ActiveDiscount,
    CartLineItem,
    DiscountWindow,
    ExpiredDiscount,
    Money,
    NoDiscount,
    Product,
    UpcomingDiscount,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _item(price="50", discount=None):
    return CartLineItem(product_id="p1", title="Denim jacket", price=Money(price, "EUR"), discount=discount)


class TestEvaluateDiscount:
    def test_no_window(self):
        assert isinstance(evaluate_discount(_item(), NOW), NoDiscount)

    def test_window_without_price(self):
        window = DiscountWindow(discount_price=None, start=NOW - timedelta(days=1))
        assert isinstance(evaluate_discount(_item(discount=window), NOW), NoDiscount)

    def test_active_unbounded(self):
        state = evaluate_discount(_item(discount=DiscountWindow(Decimal("40"))), NOW)
        assert isinstance(state, ActiveDiscount)
        assert state.price == Decimal("40")
        assert state.kind == "active"

    def test_upcoming(self):
        window = DiscountWindow(Decimal("40"), start=NOW + timedelta(hours=1))
        state = evaluate_discount(_item(discount=window), NOW)
        assert isinstance(state, UpcomingDiscount)
        assert state.start == NOW + timedelta(hours=1)

    def test_expired(self):
        window = DiscountWindow(Decimal("40"), start=NOW - timedelta(days=3), end=NOW - timedelta(seconds=1))
        assert isinstance(evaluate_discount(_item(discount=window), NOW), ExpiredDiscount)

    def test_bounds_are_inclusive(self):
        at_start = DiscountWindow(Decimal("40"), start=NOW, end=NOW + timedelta(days=1))
        at_end = DiscountWindow(Decimal("40"), start=NOW - timedelta(days=1), end=NOW)
        assert isinstance(evaluate_discount(_item(discount=at_start), NOW), ActiveDiscount)
        assert isinstance(evaluate_discount(_item(discount=at_end), NOW), ActiveDiscount)

    def test_discount_not_lower_than_price_is_ignored(self):
        assert isinstance(evaluate_discount(_item(discount=DiscountWindow(Decimal("50"))), NOW), NoDiscount)
        assert isinstance(evaluate_discount(_item(discount=DiscountWindow(Decimal("60"))), NOW), NoDiscount)

    def test_non_positive_discount_is_ignored(self):
        assert isinstance(evaluate_discount(_item(discount=DiscountWindow(Decimal("0"))), NOW), NoDiscount)
        assert isinstance(evaluate_discount(_item(discount=DiscountWindow(Decimal("-5"))), NOW), NoDiscount)

    def test_naive_datetimes_are_utc(self):
        window = DiscountWindow(Decimal("40"), start=datetime(2025, 6, 15, 11, 0))
        assert isinstance(evaluate_discount(_item(discount=window), datetime(2025, 6, 15, 12, 0)), ActiveDiscount)

    def test_works_on_products(self):
        product = Product(id="p2", title="Scarf", price=Money("20", "EUR"), discount=DiscountWindow(Decimal("15")))
        assert is_discount_active(product, NOW)


class TestEffectivePrice:
    def test_active_discount_price(self):
        window = DiscountWindow(Decimal("40"), start=NOW - timedelta(days=1), end=NOW + timedelta(days=1))
        assert get_effective_price(_item(discount=window), NOW) == Money("40", "EUR")

    def test_regular_price_outside_window(self):
        window = DiscountWindow(Decimal("40"), start=NOW + timedelta(days=1))
        assert get_effective_price(_item(discount=window), NOW) == Money("50", "EUR")

    def test_malformed_window_from_fields_degrades(self):
        window = DiscountWindow.from_fields("abc", "not-a-date", None)
        assert window.discount_price is None
        assert window.start is None
        assert get_effective_price(_item(discount=window), NOW) == Money("50", "EUR")

    def test_unparseable_end_date_is_no_discount(self):
        window = DiscountWindow.from_fields("40", "2020-01-01T00:00:00Z", "31/12/2020")
        assert window.discount_price == Decimal("40")
        assert window.malformed is True
        assert isinstance(evaluate_discount(_item(discount=window), NOW), NoDiscount)
        assert get_effective_price(_item(discount=window), NOW) == Money("50", "EUR")

    def test_unparseable_start_date_is_no_discount(self):
        window = DiscountWindow.from_fields("40", "soon", None)
        assert get_effective_price(_item(discount=window), NOW) == Money("50", "EUR")

    def test_cart_payload_with_bad_end_date_charges_regular_price(self):
        item = CartLineItem.from_dict(
            {
                "productId": "p1",
                "price": 50,
                "discountPrice": 40,
                "discountStartDate": "2020-01-01T00:00:00Z",
                "discountEndDate": "31/12/2020",
            },
            "EUR",
        )
        assert get_effective_price(item, NOW) == Money("50", "EUR")

    def test_from_fields_parses_iso_strings(self):
        window = DiscountWindow.from_fields("40", "2025-06-01T00:00:00Z", "2025-06-30T23:59:59+00:00")
        assert window.start == datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert get_effective_price(_item(discount=window), NOW) == Money("40", "EUR")


class TestDiscountPercentage:
    def test_percentage(self):
        assert get_discount_percentage(Money("50", "EUR"), Money("40", "EUR")) == 20
        assert format_discount_percentage(Money("50", "EUR"), Money("40", "EUR")) == "20%"

    def test_rounds_half_up(self):
        # 12.5% saved
        assert get_discount_percentage(Decimal("40"), Decimal("35")) == 13

    def test_no_saving(self):
        assert get_discount_percentage(Decimal("50"), Decimal("50")) == 0
        assert format_discount_percentage(Decimal("50"), Decimal("50")) == ""

    def test_zero_original(self):
        assert get_discount_percentage(Decimal("0"), Decimal("0")) == 0
