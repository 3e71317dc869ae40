"""
Provider Adapters - External API Clients

This package contains adapters for live exchange rate sources.
All providers implement the RatesSource interface.
"""

from storeprice.adapters.providers.base import RatesSource
from storeprice.adapters.providers.exchangerate_api import ExchangeRateApiProvider

__all__ = [
    "RatesSource",
    "ExchangeRateApiProvider",
]
