# src/storeprice/__init__.py
"""
StorePrice - Checkout Pricing Engine

Deterministic pricing for the vintage storefront checkout: discount windows,
shipping zones, EUR-based multi-currency conversion, and encoding of the final
charge into the payment gateway's integer minor units.
"""

__version__ = "1.0.0"
