"""
Formatting Adapters - Price Display

This package contains display formatting for prices, totals and quotes.
"""

from storeprice.adapters.formatting.formatter import (
    format_price,
    format_quote,
    format_totals,
)

__all__ = [
    "format_price",
    "format_totals",
    "format_quote",
]
