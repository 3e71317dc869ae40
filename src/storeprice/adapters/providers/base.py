# src/storeprice/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Sources

This module defines the abstract base class for live exchange rate sources.
It establishes the contract the exchange rate cache relies on.

Files that USE this module:
- storeprice.adapters.providers.exchangerate_api (ExchangeRateApiProvider implements RatesSource)
- storeprice.application.rate_cache (ExchangeRateCache consumes a RatesSource)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Mapping


class RatesSource(ABC):
    name: str = "unknown"

    @abstractmethod
    def fetch_rates(self) -> Mapping[str, Decimal]:
        """
        Return rates relative to the base currency, one entry per supported code.

        Raises:
            ProviderUnavailableError: If the source cannot be reached or parsed
        """
        raise NotImplementedError
