# src/storeprice/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, the currency table and pricing errors.
No dependencies on infrastructure or external systems.
"""

from storeprice.domain.models import (
    ActiveDiscount,
    CartLineItem,
    ChargeRequest,
    CheckoutQuote,
    CheckoutTotals,
    DiscountState,
    DiscountWindow,
    ExchangeRateSnapshot,
    ExpiredDiscount,
    Money,
    NoDiscount,
    Product,
    ShippingEstimate,
    ShippingZone,
    UpcomingDiscount,
    WeightTiers,
)
from storeprice.domain.currencies import (
    BASE_CURRENCY,
    CURRENCIES,
    Currency,
    get_currency,
    round_amount,
    round_money,
)
from storeprice.domain.errors import (
    BelowMinimumChargeError,
    CurrencyMismatchError,
    DomainError,
    EmptyCartError,
    InvalidPriceError,
    ProviderUnavailableError,
    RateUnavailableError,
    UnsupportedCurrencyError,
)

__all__ = [
    "Money",
    "Product",
    "CartLineItem",
    "DiscountWindow",
    "DiscountState",
    "NoDiscount",
    "UpcomingDiscount",
    "ActiveDiscount",
    "ExpiredDiscount",
    "WeightTiers",
    "ShippingZone",
    "ShippingEstimate",
    "ExchangeRateSnapshot",
    "CheckoutTotals",
    "CheckoutQuote",
    "ChargeRequest",
    "BASE_CURRENCY",
    "CURRENCIES",
    "Currency",
    "get_currency",
    "round_amount",
    "round_money",
    "DomainError",
    "InvalidPriceError",
    "UnsupportedCurrencyError",
    "CurrencyMismatchError",
    "RateUnavailableError",
    "ProviderUnavailableError",
    "BelowMinimumChargeError",
    "EmptyCartError",
]
