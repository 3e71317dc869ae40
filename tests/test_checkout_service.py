# tests/test_checkout_service.py
"""
Checkout Service Tests - End-to-end Pricing Scenarios

This module contains scenario tests for CheckoutService: base totals,
conversion into the display currency, the gateway amount and the charge
request guards (empty cart, minimum charge), plus charge intent reuse.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- storeprice.application.checkout_service (CheckoutService)
- storeprice.application.rate_cache (ExchangeRateCache with an offline source)
- storeprice.application.shipping (ShippingZoneResolver)
- storeprice.application.gateway (ChargeIntentCache)
- unittest.mock (Mock rates source and payment gateway)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock  # Mock rates source and payment gateway

from storeprice.application.checkout_service import CheckoutService
from storeprice.application.discounts import format_discount_percentage
from storeprice.application.gateway import ChargeIntentCache
from storeprice.application.rate_cache import ExchangeRateCache
from storeprice.application.shipping import ShippingZoneResolver
from storeprice.domain.errors import (
    BelowMinimumChargeError,
    EmptyCartError,
    ProviderUnavailableError,
    UnsupportedCurrencyError,
)
from storeprice.domain.models import CartLineItem, DiscountWindow, Money

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service():
    cache = ExchangeRateCache(source=None, clock=lambda: NOW)
    resolver = ShippingZoneResolver(domestic_country="NL", use_weight_tiers=False)
    return CheckoutService(cache, resolver=resolver)


def _item(product_id, price, **kwargs):
    return CartLineItem(product_id=product_id, title=product_id, price=Money(price, "EUR"), **kwargs)


class TestQuote:
    def test_domestic_eur(self, service):
        quote = service.quote([_item("a", "50")], "NL", "EUR")

        assert quote.base.total == Money("55.00", "EUR")
        assert quote.display.total == Money("55.00", "EUR")
        assert quote.rate == Decimal("1")
        assert quote.gateway_amount == 5500
        assert quote.gateway_currency == "eur"

    def test_usd_conversion_matches_gateway_amount(self, service):
        quote = service.quote([_item("a", "35")], "US", "USD")

        assert quote.base.total == Money("55.00", "EUR")
        assert quote.display.total == Money("63.80", "USD")
        assert quote.gateway_amount == 6380
        assert quote.gateway_currency == "usd"

    def test_us_order_with_north_america_shipping(self, service):
        quote = service.quote([_item("a", "50")], "US", "USD")

        assert quote.base.shipping == Money("20", "EUR")
        assert quote.base.total == Money("70.00", "EUR")
        assert quote.display.subtotal == Money("58.00", "USD")
        assert quote.display.shipping == Money("23.20", "USD")
        assert quote.display.total == Money("81.20", "USD")
        assert quote.gateway_amount == 8120

    def test_jpy_quote(self, service):
        quote = service.quote([_item("a", "50")], "JP", "JPY")

        # 75 EUR * 175.58
        assert quote.display.total == Money("13169", "JPY")
        assert quote.gateway_amount == 13169
        assert quote.display.zone == "asia-pacific"

    def test_jpy_display_lines_add_up_to_total(self, service):
        quote = service.quote([_item("a", "1.00")], "NL", "JPY")
        display = quote.display

        # 1 EUR -> 175.58 and 6 EUR -> 1053.48 round to 176 and 1053
        assert display.subtotal == Money("176", "JPY")
        assert display.total == Money("1053", "JPY")
        assert display.shipping == Money("877", "JPY")
        assert display.subtotal + display.shipping + display.tax == display.total
        assert quote.gateway_amount == 1053

    def test_active_discount(self, service):
        window = DiscountWindow(Decimal("40"), start=NOW - timedelta(days=1), end=NOW + timedelta(days=1))
        item = _item("a", "50", discount=window)

        quote = service.quote([item], "NL", "EUR")

        assert quote.base.subtotal == Money("40.00", "EUR")
        assert format_discount_percentage(item.price, quote.base.subtotal) == "20%"

    def test_fallback_rates_are_flagged(self, service):
        quote = service.quote([_item("a", "50")], "US", "USD")
        assert quote.rates.fetched is False

    def test_unsupported_currency(self, service):
        with pytest.raises(UnsupportedCurrencyError):
            service.quote([_item("a", "50")], "US", "CHF")

    def test_live_rates_used_when_available(self):
        source = Mock()
        source.name = "test"
        source.fetch_rates.return_value = {"EUR": "1", "USD": "1.50"}
        service = CheckoutService(
            ExchangeRateCache(source=source, clock=lambda: NOW),
            resolver=ShippingZoneResolver(domestic_country="NL"),
        )

        quote = service.quote([_item("a", "50")], "NL", "USD")

        assert quote.rates.fetched is True
        assert quote.display.total == Money("82.50", "USD")

    def test_source_failure_still_prices(self):
        source = Mock()
        source.fetch_rates.side_effect = ProviderUnavailableError("down")
        service = CheckoutService(
            ExchangeRateCache(source=source, clock=lambda: NOW),
            resolver=ShippingZoneResolver(domestic_country="NL"),
        )

        quote = service.quote([_item("a", "35")], "US", "USD")

        assert quote.gateway_amount == 6380
        assert quote.rates.fetched is False


class TestPrepareCharge:
    def test_charge_request(self, service):
        charge = service.prepare_charge([_item("a", "35")], "US", "USD")

        assert charge.amount == 6380
        assert charge.currency == "usd"
        assert charge.metadata["total"] == "63.80"
        assert charge.metadata["base_total"] == "55.00"
        assert charge.metadata["exchange_rate"] == "1.16"
        assert charge.metadata["shipping_zone"] == "north-america"
        assert charge.metadata["destination_country"] == "US"
        assert charge.metadata["items"] == "a"

    def test_empty_cart(self, service):
        with pytest.raises(EmptyCartError):
            service.prepare_charge([], "NL", "EUR")

    def test_below_minimum(self, service):
        item = _item("a", "0.20", free_shipping=True)
        with pytest.raises(BelowMinimumChargeError):
            service.prepare_charge([item], "NL", "EUR")

    def test_below_minimum_jpy(self, service):
        # 0.20 EUR is 35 JPY, under the 50 JPY minimum
        item = _item("a", "0.20", free_shipping=True)
        with pytest.raises(BelowMinimumChargeError):
            service.prepare_charge([item], "JP", "JPY")


class TestChargeIntent:
    def test_same_cart_reuses_intent(self, service):
        gateway = Mock()
        gateway.create_charge_intent.side_effect = ["pi_1", "pi_2"]
        intents = ChargeIntentCache(gateway)
        items = [_item("a", "35"), _item("b", "10")]

        first = service.request_charge_intent(items, "US", "USD", intents)
        second = service.request_charge_intent(list(reversed(items)), "US", "USD", intents)

        assert first == second == "pi_1"
        gateway.create_charge_intent.assert_called_once()

    def test_changed_currency_creates_new_intent(self, service):
        gateway = Mock()
        gateway.create_charge_intent.side_effect = ["pi_1", "pi_2"]
        intents = ChargeIntentCache(gateway)
        items = [_item("a", "35")]

        service.request_charge_intent(items, "US", "USD", intents)
        handle = service.request_charge_intent(items, "US", "EUR", intents)

        assert handle == "pi_2"
        assert len(intents.invalidated) == 1

    def test_rejected_charge_never_reaches_gateway(self, service):
        gateway = Mock()
        intents = ChargeIntentCache(gateway)

        with pytest.raises(EmptyCartError):
            service.request_charge_intent([], "US", "USD", intents)
        gateway.create_charge_intent.assert_not_called()
