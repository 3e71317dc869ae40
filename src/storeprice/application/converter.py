# src/storeprice/application/converter.py
"""
Currency Converter - Base Currency to Display/Charge Currency

This module converts base-currency (EUR) amounts into the selected display
currency using an exchange rate snapshot, rounding once with the shared
round_amount() so the displayed amount is exactly what the gateway encoder
receives. Conversion fails closed: a currency with no rate in either the
snapshot or the fallback table raises instead of mislabelling EUR.

Files that USE this module:
- storeprice.application.checkout_service (converts base totals for display)
- tests.test_converter (unit tests)

Files that this module USES:
- storeprice.application.rate_cache (ExchangeRateCache for the class API)
- storeprice.domain.currencies (BASE_CURRENCY, FALLBACK_RATES, round_amount)
- storeprice.domain.models (Money, ExchangeRateSnapshot)
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Union

from storeprice.application.rate_cache import ExchangeRateCache
from storeprice.domain.currencies import BASE_CURRENCY, FALLBACK_RATES, get_currency, round_amount
from storeprice.domain.errors import CurrencyMismatchError, RateUnavailableError
from storeprice.domain.models import ExchangeRateSnapshot, Money

log = logging.getLogger(__name__)

Rates = Union[ExchangeRateSnapshot, Mapping[str, Decimal]]


def get_rate(target_currency: str, rates: Rates) -> Decimal:
    """
    Rate for target_currency relative to the base currency.

    Looks in the given rates first, then the static fallback table.
    The base currency is always 1.

    Raises:
        UnsupportedCurrencyError: If the currency is not supported
        RateUnavailableError: If neither table has a usable rate
    """
    code = get_currency(target_currency).code
    if code == BASE_CURRENCY:
        return Decimal("1")

    table = rates.rates if isinstance(rates, ExchangeRateSnapshot) else rates
    rate = table.get(code)
    if rate is None or Decimal(str(rate)) <= 0:
        rate = FALLBACK_RATES.get(code)
        if rate is None:
            log.error("No exchange rate for %s in snapshot or fallback table", code)
            raise RateUnavailableError(code)
        log.warning("Snapshot has no %s rate, using fallback rate %s", code, rate)
    return Decimal(str(rate))


def convert(amount_base: Money, target_currency: str, rates: Rates) -> Money:
    """
    Convert a base-currency amount to target_currency.

    Args:
        amount_base: Amount in the base currency (EUR)
        target_currency: Supported currency code
        rates: Snapshot or plain mapping of rates relative to the base

    Returns:
        Converted Money rounded to the target currency's precision

    Raises:
        CurrencyMismatchError: If amount_base is not in the base currency
        UnsupportedCurrencyError: If target_currency is not supported
        RateUnavailableError: If no rate is available
    """
    if amount_base.currency != BASE_CURRENCY:
        raise CurrencyMismatchError(amount_base.currency, BASE_CURRENCY)
    rate = get_rate(target_currency, rates)
    code = target_currency.upper()
    return Money(round_amount(amount_base.amount * rate, code), code)


def convert_to_base(amount: Money, rates: Rates) -> Money:
    """Convert an amount in a supported currency back to the base currency."""
    rate = get_rate(amount.currency, rates)
    return Money(round_amount(amount.amount / rate, BASE_CURRENCY), BASE_CURRENCY)


class CurrencyConverter:
    """Converter bound to an exchange rate cache."""

    def __init__(self, rate_cache: ExchangeRateCache):
        self.rate_cache = rate_cache

    def convert(self, amount_base: Money, target_currency: str,
                rates: Optional[ExchangeRateSnapshot] = None) -> Money:
        """Convert using the given snapshot, or the cache's current one."""
        return convert(amount_base, target_currency, rates or self.rate_cache.get_rates())

    def convert_to_base(self, amount: Money,
                        rates: Optional[ExchangeRateSnapshot] = None) -> Money:
        return convert_to_base(amount, rates or self.rate_cache.get_rates())
