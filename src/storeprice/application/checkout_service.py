# src/storeprice/application/checkout_service.py
"""
Checkout Service - Orchestration of the Pricing Pipeline

This module composes the pricing components into the two calls the checkout
needs: a quote for display and a validated charge request for the payment
gateway. Both go through the same path (base totals -> conversion -> encoding)
so the displayed total is the charged total.

Degraded inputs (bad discount data, unknown destination, stale rates) are
handled inside the components. Hard failures (empty cart, missing rate, charge
below the gateway minimum) propagate to the caller, which must not contact the
gateway.

Files that USE this module:
- storeprice.app (builds quotes for the CLI)
- tests.test_checkout_service (end-to-end scenarios)

Files that this module USES:
- storeprice.application.rate_cache (ExchangeRateCache)
- storeprice.application.totals (calculate_totals)
- storeprice.application.converter (convert, get_rate)
- storeprice.application.gateway (encode, build_charge_request, cart_fingerprint, ChargeIntentCache)
- storeprice.application.shipping (ShippingZoneResolver)
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from storeprice.application import shipping
from storeprice.application.converter import convert, get_rate
from storeprice.application.gateway import (
    ChargeIntentCache,
    build_charge_request,
    cart_fingerprint,
    encode,
    gateway_currency,
)
from storeprice.application.rate_cache import Clock, ExchangeRateCache
from storeprice.application.totals import calculate_totals
from storeprice.domain.currencies import get_currency
from storeprice.domain.errors import BelowMinimumChargeError, EmptyCartError
from storeprice.domain.models import CartLineItem, ChargeRequest, CheckoutQuote, CheckoutTotals, Money

logger = logging.getLogger(__name__)


class CheckoutService:
    """Quotes and charge requests for a cart, destination and display currency."""

    def __init__(
        self,
        rate_cache: ExchangeRateCache,
        resolver: Optional[shipping.ShippingZoneResolver] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            rate_cache: Shared exchange rate cache
            resolver: Shipping resolver (defaults to the module-level one)
            clock: Current UTC time for discount windows (defaults to the cache clock)
        """
        self.rate_cache = rate_cache
        self.resolver = resolver or shipping.resolver
        self.clock = clock or rate_cache.clock

    def quote(
        self,
        items: Sequence[CartLineItem],
        destination_country: Optional[str],
        currency: str,
        now: Optional[datetime] = None,
    ) -> CheckoutQuote:
        """
        Price a cart for display in the selected currency.

        Args:
            items: Cart line items in base currency
            destination_country: Country from the checkout form (may be empty)
            currency: Selected display currency
            now: Evaluation time (defaults to the service clock)

        Returns:
            CheckoutQuote with base totals, display totals and the gateway amount

        Raises:
            UnsupportedCurrencyError: If currency is not supported
            RateUnavailableError: If no rate exists for currency
        """
        code = get_currency(currency).code
        now = now or self.clock()
        base = calculate_totals(items, destination_country, now=now, resolver=self.resolver)
        rates = self.rate_cache.get_rates(now=now)
        rate = get_rate(code, rates)

        subtotal = convert(base.subtotal, code, rates)
        # Converted directly, this is the amount charged
        total = convert(base.total, code, rates)
        display = CheckoutTotals(
            subtotal=subtotal,
            # Remainder so the display lines add up to the charged total
            shipping=total - subtotal,
            tax=Money.zero(code),
            total=total,
            currency=code,
            destination_country=base.destination_country,
            zone=base.zone,
            free_shipping=base.free_shipping,
        )
        if not rates.fetched:
            logger.info("Quote in %s uses fallback rates (%s)", code, rates.source)

        return CheckoutQuote(
            base=base,
            display=display,
            rate=rate,
            rates=rates,
            gateway_amount=encode(display.total),
            gateway_currency=gateway_currency(code),
        )

    def prepare_charge(
        self,
        items: Sequence[CartLineItem],
        destination_country: Optional[str],
        currency: str,
        now: Optional[datetime] = None,
    ) -> ChargeRequest:
        """
        Validated charge request for the payment gateway.

        Raises:
            EmptyCartError: If the cart has no items
            BelowMinimumChargeError: If the total is under the gateway minimum
            UnsupportedCurrencyError: If currency is not supported
            RateUnavailableError: If no rate exists for currency
        """
        if not items:
            logger.warning("Refusing charge for empty cart")
            raise EmptyCartError("Cart is empty")

        quote = self.quote(items, destination_country, currency, now=now)
        display = quote.display
        metadata = {
            "items": ",".join(item.product_id for item in items),
            "subtotal": str(display.subtotal.amount),
            "shipping": str(display.shipping.amount),
            "tax": str(display.tax.amount),
            "total": str(display.total.amount),
            "base_total": str(quote.base.total.amount),
            "exchange_rate": str(quote.rate),
            "shipping_zone": display.zone,
            "destination_country": display.destination_country,
        }
        try:
            charge = build_charge_request(display.total, metadata)
        except BelowMinimumChargeError:
            logger.error("Charge rejected for total %s %s", display.total.amount, display.currency)
            raise
        logger.info("Charge prepared: %d %s (%s)", charge.amount, charge.currency, display.zone)
        return charge

    def request_charge_intent(
        self,
        items: Sequence[CartLineItem],
        destination_country: Optional[str],
        currency: str,
        intents: ChargeIntentCache,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Create (or reuse) the charge intent for this cart, currency and destination.

        A changed cart, currency or destination produces a new fingerprint and a
        new intent; unchanged inputs reuse the existing one.
        """
        charge = self.prepare_charge(items, destination_country, currency, now=now)
        fingerprint = cart_fingerprint(
            (item.product_id for item in items), currency, destination_country or ""
        )
        return intents.get_or_create(fingerprint, charge)
