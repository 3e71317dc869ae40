# src/storeprice/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core pricing concepts:
- Money amounts tagged with a currency
- Catalog products and cart line items with optional discount windows
- Discount evaluation states
- Shipping zones and rate tiers
- Exchange rate snapshots
- Checkout totals, quotes and gateway charge requests

Files that USE this module:
- storeprice.application.* (all services use domain models)
- storeprice.adapters.* (adapters create and render domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- storeprice.domain.errors (CurrencyMismatchError, InvalidPriceError)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime, timedelta, timezone  # Date/time utilities for windows and snapshots
from decimal import Decimal, InvalidOperation  # Exact arithmetic for money
from types import MappingProxyType  # Read-only view over snapshot rates
from typing import Any, Mapping, Optional, Union  # Type hints

from storeprice.domain.errors import CurrencyMismatchError, InvalidPriceError


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number or numeric string to Decimal.

    Floats go through their string form so 1.16 stays 1.16 instead of
    1.15999999999999992006394222699E+0.

    Raises:
        InvalidPriceError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidPriceError(f"Invalid numeric value: {value!r}") from e


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO timestamp (or pass a datetime through) as an aware UTC datetime.

    Accepts both "...Z" and "+00:00" suffixes. Naive values are taken as UTC.
    Returns None for empty input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Money:
    """
    An exact amount tagged with an upper-case currency code.

    Attributes:
        amount: Decimal amount in major units (e.g. 63.80 for $63.80)
        currency: ISO 4217 code of the amount
    """
    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency", str(self.currency).upper())

    @classmethod
    def zero(cls, currency: str) -> Money:
        return cls(Decimal("0"), currency)

    def _check(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def __add__(self, other: Money) -> Money:
        self._check(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._check(other)
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._check(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._check(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._check(other)
        return self.amount >= other.amount


@dataclass(frozen=True)
class DiscountWindow:
    """
    Time-bounded override price on a product.

    Attributes:
        discount_price: Override price in base currency (None = no discount)
        start: When the discount becomes active (None = already active)
        end: When the discount expires (None = never expires)
        malformed: A raw field could not be parsed; the window never applies
    """
    discount_price: Optional[Decimal] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    malformed: bool = False

    @classmethod
    def from_fields(
        cls,
        discount_price: Any = None,
        start: Union[str, datetime, None] = None,
        end: Union[str, datetime, None] = None,
    ) -> DiscountWindow:
        """
        Build a window from raw catalog fields (numbers, ISO strings, datetimes).

        Unparseable values do not raise. The window is flagged as malformed
        instead, so an unreadable end date cannot leave a discount open-ended.
        """
        malformed = False
        price: Optional[Decimal] = None
        try:
            price = to_decimal(discount_price) if discount_price not in (None, "") else None
        except InvalidPriceError:
            malformed = True

        bounds = []
        for value in (start, end):
            try:
                bounds.append(parse_timestamp(value))
            except (TypeError, ValueError):
                malformed = True
                bounds.append(None)

        return cls(discount_price=price, start=bounds[0], end=bounds[1], malformed=malformed)


# --- Discount evaluation states ---

@dataclass(frozen=True)
class NoDiscount:
    """No usable discount: absent, or malformed window."""
    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class UpcomingDiscount:
    """Valid discount whose window has not started yet."""
    price: Decimal
    start: Optional[datetime]
    end: Optional[datetime]
    kind: str = field(default="upcoming", init=False)


@dataclass(frozen=True)
class ActiveDiscount:
    """Discount in effect at the evaluation instant."""
    price: Decimal
    start: Optional[datetime]
    end: Optional[datetime]
    kind: str = field(default="active", init=False)


@dataclass(frozen=True)
class ExpiredDiscount:
    """Discount whose window has ended."""
    price: Decimal
    start: Optional[datetime]
    end: Optional[datetime]
    kind: str = field(default="expired", init=False)


DiscountState = Union[NoDiscount, UpcomingDiscount, ActiveDiscount, ExpiredDiscount]


@dataclass(frozen=True)
class Product:
    """
    Catalog product as supplied by the catalog collaborator.

    Attributes:
        id: Product identifier
        title: Display title
        price: Regular price in base currency
        discount: Optional discount window
        weight_grams: Shipping weight in grams
        free_shipping: Ships free regardless of zone
        in_stock: False once the one-of-a-kind item is sold
    """
    id: str
    title: str
    price: Money
    discount: Optional[DiscountWindow] = None
    weight_grams: Optional[int] = None
    free_shipping: bool = False
    in_stock: bool = True


@dataclass(frozen=True)
class CartLineItem:
    """
    Item in the cart with its price frozen at add-to-cart time.

    Attributes:
        product_id: Product identifier
        title: Display title
        price: Unit price in base currency, captured when the item entered the cart
        discount: Discount window captured with the price
        weight_grams: Shipping weight in grams
        free_shipping: Per-item free shipping opt-out
    """
    product_id: str
    title: str
    price: Money
    discount: Optional[DiscountWindow] = None
    weight_grams: Optional[int] = None
    free_shipping: bool = False

    def __post_init__(self) -> None:
        if self.price.amount < 0:
            raise InvalidPriceError(
                f"Negative price for {self.product_id}: {self.price.amount}"
            )

    @classmethod
    def from_product(cls, product: Product) -> CartLineItem:
        """Capture a product into the cart, freezing its price and discount window."""
        return cls(
            product_id=product.id,
            title=product.title,
            price=product.price,
            discount=product.discount,
            weight_grams=product.weight_grams,
            free_shipping=product.free_shipping,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], currency: str) -> CartLineItem:
        """
        Create a line item from a catalog-style dictionary.

        Keys follow the storefront cart payload: productId, title, price,
        discountPrice, discountStartDate, discountEndDate, weightGrams,
        freeShipping.
        """
        discount = None
        if data.get("discountPrice") is not None:
            discount = DiscountWindow.from_fields(
                data.get("discountPrice"),
                data.get("discountStartDate"),
                data.get("discountEndDate"),
            )
        weight = data.get("weightGrams")
        return cls(
            product_id=str(data["productId"]),
            title=str(data.get("title", "")),
            price=Money(data["price"], currency),
            discount=discount,
            weight_grams=int(weight) if weight is not None else None,
            free_shipping=bool(data.get("freeShipping", False)),
        )


@dataclass(frozen=True)
class WeightTiers:
    """Weight-based shipping prices for one zone (base currency)."""
    under_500g: Decimal
    under_1kg: Decimal
    up_to_2kg: Decimal


@dataclass(frozen=True)
class ShippingZone:
    """
    Named group of destination countries sharing one flat rate.

    Attributes:
        id: Zone identifier (domestic, europe, north-america, asia-pacific, rest-of-world)
        countries: ISO 3166-1 alpha-2 codes in this zone
        flat_rate: Flat shipping rate in base currency
        weight_tiers: Optional weight-based prices
        estimated_days: Human-readable delivery estimate
    """
    id: str
    countries: tuple[str, ...]
    flat_rate: Money
    weight_tiers: Optional[WeightTiers] = None
    estimated_days: str = ""


@dataclass(frozen=True)
class ShippingEstimate:
    """Shipping cost, zone and delivery time for a destination."""
    cost: Money
    zone: str
    estimated_days: str
    destination_country: str


@dataclass(frozen=True)
class ExchangeRateSnapshot:
    """
    Rates relative to the base currency at a point in time.

    Attributes:
        rates: Currency code -> units of that currency per 1 base unit
        fetched_at: When the snapshot was produced (UTC)
        fetched: False for the static fallback table (display hint only)
        source: Where the rates came from
    """
    rates: Mapping[str, Decimal]
    fetched_at: datetime
    fetched: bool = True
    source: str = "fallback"

    def __post_init__(self) -> None:
        frozen = {str(k).upper(): to_decimal(v) for k, v in self.rates.items()}
        object.__setattr__(self, "rates", MappingProxyType(frozen))

    def rate_for(self, currency: str) -> Optional[Decimal]:
        return self.rates.get(currency.upper())

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at


@dataclass(frozen=True)
class CheckoutTotals:
    """
    Derived checkout amounts, all in one currency. Never persisted.

    Attributes:
        subtotal: Sum of effective item prices
        shipping: Order shipping charge
        tax: Always zero (second-hand goods, tax handled out of band)
        total: subtotal + shipping + tax
        currency: Currency of all amounts
        destination_country: Country the totals were computed for
        zone: Resolved shipping zone
        free_shipping: True when the order ships free
    """
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    currency: str
    destination_country: str
    zone: str
    free_shipping: bool = False


@dataclass(frozen=True)
class ChargeRequest:
    """
    Gateway-ready charge: integer minor units and lowercase currency.

    Attributes:
        amount: Amount in the gateway's smallest currency unit
        currency: Lowercase currency code (e.g. "eur")
        metadata: String metadata attached to the charge intent
    """
    amount: int
    currency: str
    metadata: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckoutQuote:
    """
    Everything the checkout page shows and the gateway charges.

    Attributes:
        base: Totals in the base currency
        display: Totals converted to the selected currency
        rate: Rate used for the conversion
        rates: Snapshot the rate came from
        gateway_amount: Display total in integer minor units
        gateway_currency: Lowercase display currency
    """
    base: CheckoutTotals
    display: CheckoutTotals
    rate: Decimal
    rates: ExchangeRateSnapshot
    gateway_amount: int
    gateway_currency: str
