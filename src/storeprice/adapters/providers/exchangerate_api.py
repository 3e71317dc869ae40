# src/storeprice/adapters/providers/exchangerate_api.py
"""
ExchangeRate-API Provider for EUR-based Exchange Rates

This module implements the ExchangeRate-API client (free tier, no key) used as
the live source for the exchange rate cache. Caching lives in the cache, not
here: every call is a fresh HTTP request bounded by the configured timeout.

Files that USE this module:
- storeprice.app (wires the provider into the exchange rate cache)
- tests.test_providers (unit tests)

Files that this module USES:
- storeprice.adapters.providers.base (RatesSource interface)
- storeprice.config (settings for API URL and timeout)
- storeprice.domain.currencies (supported codes and fallback rates)
"""
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Optional

import requests

from storeprice.adapters.providers.base import RatesSource
from storeprice.config import settings
from storeprice.domain.currencies import BASE_CURRENCY, CURRENCIES, FALLBACK_RATES
from storeprice.domain.errors import ProviderUnavailableError

log = logging.getLogger(__name__)

_RATE_QUANTUM = Decimal("0.01")


def _round_rate(value: object) -> Decimal:
    """Round a raw API rate to 2 decimal places."""
    return Decimal(str(value)).quantize(_RATE_QUANTUM, rounding=ROUND_HALF_UP)


class ExchangeRateApiProvider(RatesSource):
    name = "exchangerate-api.com"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize ExchangeRate-API provider.

        Args:
            base_url: Optional custom API URL (defaults to settings.exchange_rates_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.url = base_url or settings.exchange_rates_url
        self.timeout = timeout or settings.http_timeout_seconds

    def fetch_rates(self) -> Dict[str, Decimal]:
        """
        Get rates for every supported currency relative to EUR.

        Rates are rounded to 2 decimal places. A supported currency missing from
        the response (or with a non-positive value) takes its fallback rate.
        EUR is always exactly 1.

        Returns:
            Mapping of currency code to units per 1 EUR

        Raises:
            ProviderUnavailableError: On timeout, HTTP/network error, invalid JSON
                or an unexpected response schema
        """
        try:
            log.info("Fetching fresh exchange rates from %s", self.name)
            resp = requests.get(self.url, timeout=self.timeout)

            if resp.status_code >= 500:
                log.warning("Exchange rate API returned %d (server error)", resp.status_code)
                raise ProviderUnavailableError(
                    f"Exchange rate API returned {resp.status_code} (server error)"
                )

            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout as e:
            log.warning("Exchange rate API timeout after %d seconds", self.timeout)
            raise ProviderUnavailableError(f"Exchange rate API timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            log.warning("Exchange rate API request failed: %s", e)
            raise ProviderUnavailableError(f"Exchange rate API request failed: {e}") from e
        except ValueError as e:
            log.error("Exchange rate API returned invalid JSON: %s", e)
            raise ProviderUnavailableError(f"Exchange rate API returned invalid JSON: {e}") from e

        # Expect: {"base":"EUR","rates":{"USD":1.1634,...}}
        if not isinstance(data, dict) or not isinstance(data.get("rates"), dict):
            log.error("Exchange rate API unexpected response structure: %r", data)
            raise ProviderUnavailableError("Exchange rate API response missing 'rates' field")

        base = str(data.get("base", BASE_CURRENCY)).upper()
        if base != BASE_CURRENCY:
            log.error("Exchange rate API returned base %s, expected %s", base, BASE_CURRENCY)
            raise ProviderUnavailableError(f"Exchange rate API returned base {base}")

        raw = data["rates"]
        rates: Dict[str, Decimal] = {}
        for code in CURRENCIES:
            if code == BASE_CURRENCY:
                rates[code] = Decimal("1")
                continue
            try:
                value = _round_rate(raw[code])
            except (KeyError, InvalidOperation, TypeError, ValueError):
                value = Decimal("0")
            if value <= 0:
                log.warning("Exchange rate API has no usable %s rate, using fallback", code)
                value = FALLBACK_RATES[code]
            rates[code] = value

        log.info("Exchange rates updated from %s: %s", self.name,
                 ", ".join(f"{k}={v}" for k, v in rates.items()))
        return rates
