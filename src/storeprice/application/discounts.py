# src/storeprice/application/discounts.py
"""
Discount Evaluator - Time-bounded Discount Windows

This module decides whether a product's discount applies at a given instant
and which price to charge. A window is evaluated once into a DiscountState
(NoDiscount, UpcomingDiscount, ActiveDiscount or ExpiredDiscount) and callers
branch on that instead of re-checking the optional fields.

Malformed windows never raise: a missing, non-positive or not-lower discount
price, or a window with an unparseable field, is treated as no discount, so
checkout keeps working on bad admin data.

Files that USE this module:
- storeprice.application.totals (effective prices for the subtotal)
- storeprice.adapters.formatting.formatter (discount badges)
- tests.test_discounts (unit tests)

Files that this module USES:
- storeprice.domain.models (Money, DiscountWindow and the DiscountState variants)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol, Union

from storeprice.domain.models import (
    ActiveDiscount,
    DiscountState,
    DiscountWindow,
    ExpiredDiscount,
    Money,
    NoDiscount,
    UpcomingDiscount,
)

log = logging.getLogger(__name__)


class Discountable(Protocol):
    """Anything with a regular price and an optional discount window."""
    price: Money
    discount: Optional[DiscountWindow]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def evaluate_discount(product: Discountable, now: Optional[datetime] = None) -> DiscountState:
    """
    Classify the product's discount window at the given instant.

    Args:
        product: Product or cart line item
        now: Evaluation time (defaults to current UTC time)

    Returns:
        NoDiscount if there is no usable discount, otherwise the window's state.
        Both bounds are inclusive.
    """
    window = product.discount
    if window is None or window.discount_price is None:
        return NoDiscount()
    if window.malformed:
        log.debug("Ignoring discount with unparseable fields: %r", window)
        return NoDiscount()

    price = window.discount_price
    if price <= 0 or price >= product.price.amount:
        log.debug("Ignoring malformed discount %s (regular price %s)", price, product.price.amount)
        return NoDiscount()

    now = _as_utc(now or datetime.now(timezone.utc))
    start = _as_utc(window.start) if window.start else None
    end = _as_utc(window.end) if window.end else None

    if start is not None and now < start:
        return UpcomingDiscount(price=price, start=start, end=end)
    if end is not None and now > end:
        return ExpiredDiscount(price=price, start=start, end=end)
    return ActiveDiscount(price=price, start=start, end=end)


def is_discount_active(product: Discountable, now: Optional[datetime] = None) -> bool:
    return isinstance(evaluate_discount(product, now), ActiveDiscount)


def get_effective_price(product: Discountable, now: Optional[datetime] = None) -> Money:
    """Discount price while the discount is active, regular price otherwise."""
    state = evaluate_discount(product, now)
    if isinstance(state, ActiveDiscount):
        return Money(state.price, product.price.currency)
    return product.price


def _amount(value: Union[Money, Decimal, int, float, str]) -> Decimal:
    if isinstance(value, Money):
        return value.amount
    return Decimal(str(value))


def get_discount_percentage(original, effective) -> int:
    """
    Whole-number percentage saved, rounded half-up. 0 when nothing is saved
    or the original price is zero.
    """
    original_amount = _amount(original)
    effective_amount = _amount(effective)
    if original_amount <= 0 or effective_amount >= original_amount:
        return 0
    pct = (original_amount - effective_amount) / original_amount * 100
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_discount_percentage(original, effective) -> str:
    """Display badge such as "20%"; empty string when there is no discount."""
    percentage = get_discount_percentage(original, effective)
    return f"{percentage}%" if percentage > 0 else ""
