# src/storeprice/domain/currencies.py
"""
Currency Table - Supported Currencies and Rounding

Static, process-wide registry of the six supported currencies with their
display metadata, gateway minor-unit divisor and minimum chargeable amount.
Also home of round_amount(), the single rounding function shared by display
and gateway encoding so the number shown is the number charged.

Files that USE this module:
- storeprice.application.converter (rounding after conversion)
- storeprice.application.gateway (minor-unit encoding and minimums)
- storeprice.adapters.formatting.formatter (symbols and decimal places)
- storeprice.config.settings (currency code validation)

Files that this module USES:
- storeprice.domain.models (Money)
- storeprice.domain.errors (UnsupportedCurrencyError)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Mapping

from storeprice.domain.errors import UnsupportedCurrencyError
from storeprice.domain.models import Money

# Catalog prices are stored in EUR; every conversion starts here.
BASE_CURRENCY = "EUR"

ROUNDING = ROUND_HALF_UP


@dataclass(frozen=True)
class Currency:
    """
    Supported currency.

    Attributes:
        code: ISO 4217 code
        symbol: Display symbol
        name: English name
        decimal_places: Display precision (0 for zero-decimal currencies)
        minor_unit_divisor: Gateway minor units per major unit (1 or 100)
        minimum_charge: Smallest chargeable amount in major units
        symbol_position: "before" or "after" the number
    """
    code: str
    symbol: str
    name: str
    decimal_places: int
    minor_unit_divisor: int
    minimum_charge: Decimal
    symbol_position: str = "before"


CURRENCIES: Mapping[str, Currency] = MappingProxyType({
    "USD": Currency("USD", "$", "US Dollar", 2, 100, Decimal("0.50")),
    "EUR": Currency("EUR", "€", "Euro", 2, 100, Decimal("0.50")),
    "GBP": Currency("GBP", "£", "British Pound", 2, 100, Decimal("0.30")),
    "JPY": Currency("JPY", "¥", "Japanese Yen", 0, 1, Decimal("50")),
    "CAD": Currency("CAD", "CA$", "Canadian Dollar", 2, 100, Decimal("0.50")),
    "AUD": Currency("AUD", "A$", "Australian Dollar", 2, 100, Decimal("0.50")),
})

# Units per 1 EUR, used when the live source is unreachable (rounded to 2dp)
FALLBACK_RATES: Mapping[str, Decimal] = MappingProxyType({
    "EUR": Decimal("1.0"),
    "USD": Decimal("1.16"),
    "GBP": Decimal("0.87"),
    "JPY": Decimal("175.58"),
    "CAD": Decimal("1.64"),
    "AUD": Decimal("1.79"),
})

LOCALE_TO_CURRENCY: Mapping[str, str] = MappingProxyType({
    "en": "USD",
    "es": "EUR",
    "fr": "EUR",
    "de": "EUR",
    "ja": "JPY",
})


def is_valid_currency(code: str) -> bool:
    return bool(code) and code.upper() in CURRENCIES


def get_currency(code: str) -> Currency:
    """
    Look up a supported currency.

    Raises:
        UnsupportedCurrencyError: If the code is not in the table
    """
    currency = CURRENCIES.get((code or "").upper())
    if currency is None:
        raise UnsupportedCurrencyError(code)
    return currency


def get_supported_currencies() -> list[str]:
    return list(CURRENCIES)


def get_currency_from_locale(locale: str) -> str:
    """Default display currency for a locale (USD when unknown)."""
    return LOCALE_TO_CURRENCY.get((locale or "").lower(), "USD")


def round_amount(amount: Decimal, code: str) -> Decimal:
    """
    Round an amount to the display precision of its currency.

    This is the only rounding step between conversion, display and the
    gateway encoder. Half-up, like the storefront's Math.round.
    """
    quantum = Decimal(1).scaleb(-get_currency(code).decimal_places)
    return amount.quantize(quantum, rounding=ROUNDING)


def round_money(money: Money) -> Money:
    return Money(round_amount(money.amount, money.currency), money.currency)


def minimum_charge(code: str) -> Money:
    currency = get_currency(code)
    return Money(currency.minimum_charge, currency.code)
