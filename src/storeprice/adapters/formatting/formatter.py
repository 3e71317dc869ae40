# src/storeprice/adapters/formatting/formatter.py
"""
Price Formatter - Display Strings for Prices, Totals and Quotes

This module renders Money amounts with their currency symbol and precision,
and lays out checkout totals and quotes as plain text. Amounts pass through
round_amount() before formatting, the same rounding the gateway encoder uses.

Files that USE this module:
- storeprice.app (prints quotes)
- tests.test_formatter (unit tests)

Files that this module USES:
- storeprice.domain.currencies (get_currency, round_amount)
- storeprice.domain.models (Money, CheckoutTotals, CheckoutQuote)
- storeprice.application.totals (tax exemption notice)
"""
from __future__ import annotations

from typing import List

from storeprice.application.totals import get_tax_exemption_notice
from storeprice.domain.currencies import BASE_CURRENCY, get_currency, round_amount
from storeprice.domain.models import CheckoutQuote, CheckoutTotals, Money


def format_price(money: Money) -> str:
    """
    Format an amount with symbol, thousands separators and currency precision.

    Args:
        money: Amount to format

    Returns:
        String like '$63.80', '¥1,050' or 'CA$1,234.50'
    """
    currency = get_currency(money.currency)
    rounded = round_amount(money.amount, currency.code)
    sign = "-" if rounded < 0 else ""
    number = f"{abs(rounded):,.{currency.decimal_places}f}"
    if currency.symbol_position == "before":
        return f"{sign}{currency.symbol}{number}"
    return f"{sign}{number}{currency.symbol}"


def format_totals(totals: CheckoutTotals) -> str:
    """
    Format checkout totals as plain text lines.

    Returns:
        Subtotal, shipping (with zone), tax and total lines
    """
    shipping = "Free" if totals.free_shipping else format_price(totals.shipping)
    lines: List[str] = [
        f"Subtotal: {format_price(totals.subtotal)}",
        f"Shipping ({totals.zone}): {shipping}",
        f"Tax: {format_price(totals.tax)} ({get_tax_exemption_notice()})",
        f"Total: {format_price(totals.total)}",
    ]
    return "\n".join(lines)


def format_quote(quote: CheckoutQuote) -> str:
    """
    Format a checkout quote: display totals, rate used and the gateway amount.

    Adds a note when the rates are the static fallback table.
    """
    display = quote.display
    lines = [format_totals(display)]
    if display.currency != BASE_CURRENCY:
        lines.append(f"Rate: 1 {BASE_CURRENCY} = {quote.rate} {display.currency}")
        lines.append(f"Base total: {format_price(quote.base.total)}")
    lines.append(f"Charge: {quote.gateway_amount} {quote.gateway_currency}")
    if not quote.rates.fetched:
        lines.append("⚠️ Live exchange rates unavailable, using fallback rates")
    return "\n".join(lines)
