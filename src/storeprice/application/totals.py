# src/storeprice/application/totals.py
"""
Checkout Totals Calculator - Subtotal, Shipping and Total in Base Currency

This module aggregates a cart into CheckoutTotals in the base currency.
Effective prices are summed exactly and rounded once at the end. Tax is
always zero: the storefront sells second-hand goods and leaves tax/VAT to the
payment provider or out-of-band policy. Totals are derived, never stored;
callers simply recompute them when the cart or destination changes.

Files that USE this module:
- storeprice.application.checkout_service (base totals for quotes and charges)
- tests.test_totals (unit tests)

Files that this module USES:
- storeprice.application.discounts (get_effective_price)
- storeprice.application.shipping (ShippingZoneResolver, default resolver)
- storeprice.domain.currencies (BASE_CURRENCY, round_money)
- storeprice.domain.models (CartLineItem, CheckoutTotals, Money)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from storeprice.application import shipping
from storeprice.application.discounts import get_effective_price
from storeprice.domain.currencies import BASE_CURRENCY, round_money
from storeprice.domain.models import CartLineItem, CheckoutTotals, Money

log = logging.getLogger(__name__)

TAX_EXEMPTION_NOTICE = "Second-hand goods tax-exempt"


def calculate_tax(subtotal: Money) -> Money:
    """Always zero for second-hand goods; kept so order records carry a tax field."""
    return Money.zero(subtotal.currency)


def get_tax_exemption_notice() -> str:
    return TAX_EXEMPTION_NOTICE


def calculate_subtotal(items: Sequence[CartLineItem], now: Optional[datetime] = None) -> Money:
    """Sum of effective prices, rounded once after summing."""
    now = now or datetime.now(timezone.utc)
    subtotal = Money.zero(BASE_CURRENCY)
    for item in items:
        subtotal = subtotal + get_effective_price(item, now)
    return round_money(subtotal)


def calculate_totals(
    items: Sequence[CartLineItem],
    destination_country: Optional[str],
    now: Optional[datetime] = None,
    resolver: Optional[shipping.ShippingZoneResolver] = None,
) -> CheckoutTotals:
    """
    Compute checkout totals in the base currency.

    Args:
        items: Cart line items (prices already in base currency)
        destination_country: ISO country code from the checkout form (may be empty)
        now: Instant used for discount windows (defaults to current UTC time)
        resolver: Shipping resolver (defaults to the module-level one)

    Returns:
        CheckoutTotals with subtotal, shipping, zero tax and total
    """
    resolver = resolver or shipping.resolver
    subtotal = calculate_subtotal(items, now)
    shipping_cost, zone_id, ships_free = resolver.order_shipping(items, destination_country, subtotal)
    shipping_cost = round_money(shipping_cost)
    tax = calculate_tax(subtotal)
    total = subtotal + shipping_cost + tax

    log.debug(
        "Totals for %d item(s) to %s (%s): subtotal=%s shipping=%s total=%s",
        len(items), destination_country or "-", zone_id,
        subtotal.amount, shipping_cost.amount, total.amount,
    )
    return CheckoutTotals(
        subtotal=subtotal,
        shipping=shipping_cost,
        tax=tax,
        total=total,
        currency=BASE_CURRENCY,
        destination_country=(destination_country or "").upper(),
        zone=zone_id,
        free_shipping=ships_free,
    )
