# src/storeprice/application/__init__.py
"""
Application Layer - Pricing Services

This package contains the pricing components and the checkout orchestration
that composes them. Only the exchange rate cache performs I/O, through an
injected rates source.
"""

from storeprice.application.checkout_service import CheckoutService
from storeprice.application.converter import CurrencyConverter, convert, convert_to_base
from storeprice.application.discounts import (
    evaluate_discount,
    format_discount_percentage,
    get_effective_price,
    is_discount_active,
)
from storeprice.application.gateway import ChargeIntentCache, encode, meets_minimum
from storeprice.application.rate_cache import ExchangeRateCache
from storeprice.application.shipping import ShippingZoneResolver
from storeprice.application.totals import calculate_totals

__all__ = [
    "CheckoutService",
    "CurrencyConverter",
    "convert",
    "convert_to_base",
    "evaluate_discount",
    "is_discount_active",
    "get_effective_price",
    "format_discount_percentage",
    "ChargeIntentCache",
    "encode",
    "meets_minimum",
    "ExchangeRateCache",
    "ShippingZoneResolver",
    "calculate_totals",
]
