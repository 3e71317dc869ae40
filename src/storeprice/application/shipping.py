# src/storeprice/application/shipping.py
"""
Shipping Zone Resolver - Destination Zones and Rates

This module maps destination countries to shipping zones and prices an
order's shipping. The country -> zone index is built once per resolver; the
storefront's domestic country is pulled out of its regional zone so that every
supported code belongs to exactly one zone. Unknown or missing destinations
resolve to rest-of-world instead of blocking checkout.

Order policy: shipping is one charge per order, not per item. The order ships
free only when the cart is non-empty and every item carries free_shipping, or
when a configured free-shipping threshold is reached. Otherwise the zone's
flat rate applies (or its weight tier for the total cart weight when weight
tiers are enabled).

Files that USE this module:
- storeprice.application.totals (order shipping for checkout totals)
- storeprice.application.checkout_service (default resolver)
- tests.test_shipping (unit tests)

Files that this module USES:
- storeprice.config (domestic country, free-shipping threshold, weight tiers)
- storeprice.domain.currencies (BASE_CURRENCY)
- storeprice.domain.models (Money, ShippingZone, WeightTiers, ShippingEstimate, CartLineItem)
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from storeprice.config import settings
from storeprice.domain.currencies import BASE_CURRENCY
from storeprice.domain.models import (
    CartLineItem,
    Money,
    ShippingEstimate,
    ShippingZone,
    WeightTiers,
)

log = logging.getLogger(__name__)

DOMESTIC = "domestic"
EUROPE = "europe"
NORTH_AMERICA = "north-america"
ASIA_PACIFIC = "asia-pacific"
REST_OF_WORLD = "rest-of-world"

ZONE_IDS: Tuple[str, ...] = (DOMESTIC, EUROPE, NORTH_AMERICA, ASIA_PACIFIC, REST_OF_WORLD)

# Surcharge on top of the flat rate for parcels over 2kg
OVERWEIGHT_SURCHARGE = Decimal("10")

# HS code for used clothing (customs declarations)
HS_CODE_USED_CLOTHING = "6309.00"

# zone -> (flat rate, weight tiers, delivery estimate), base currency
_ZONE_RATES: Dict[str, Tuple[Decimal, WeightTiers, str]] = {
    DOMESTIC: (Decimal("5"), WeightTiers(Decimal("5"), Decimal("8"), Decimal("10")), "2-3 business days"),
    EUROPE: (Decimal("12"), WeightTiers(Decimal("10"), Decimal("15"), Decimal("20")), "5-7 business days"),
    NORTH_AMERICA: (Decimal("20"), WeightTiers(Decimal("18"), Decimal("25"), Decimal("30")), "7-14 business days"),
    ASIA_PACIFIC: (Decimal("25"), WeightTiers(Decimal("22"), Decimal("28"), Decimal("35")), "10-21 business days"),
    REST_OF_WORLD: (Decimal("30"), WeightTiers(Decimal("25"), Decimal("32"), Decimal("40")), "14-28 business days"),
}

# (code, name, regional zone); the domestic country is moved to DOMESTIC at build time
SUPPORTED_COUNTRIES: Tuple[Tuple[str, str, str], ...] = (
    # Europe - EU
    ("AT", "Austria", EUROPE),
    ("BE", "Belgium", EUROPE),
    ("BG", "Bulgaria", EUROPE),
    ("HR", "Croatia", EUROPE),
    ("CY", "Cyprus", EUROPE),
    ("CZ", "Czech Republic", EUROPE),
    ("DK", "Denmark", EUROPE),
    ("EE", "Estonia", EUROPE),
    ("FI", "Finland", EUROPE),
    ("FR", "France", EUROPE),
    ("DE", "Germany", EUROPE),
    ("GR", "Greece", EUROPE),
    ("HU", "Hungary", EUROPE),
    ("IE", "Ireland", EUROPE),
    ("IT", "Italy", EUROPE),
    ("LV", "Latvia", EUROPE),
    ("LT", "Lithuania", EUROPE),
    ("LU", "Luxembourg", EUROPE),
    ("MT", "Malta", EUROPE),
    ("NL", "Netherlands", EUROPE),
    ("PL", "Poland", EUROPE),
    ("PT", "Portugal", EUROPE),
    ("RO", "Romania", EUROPE),
    ("SK", "Slovakia", EUROPE),
    ("SI", "Slovenia", EUROPE),
    ("ES", "Spain", EUROPE),
    ("SE", "Sweden", EUROPE),
    # Europe - non-EU
    ("GB", "United Kingdom", EUROPE),
    ("NO", "Norway", EUROPE),
    ("CH", "Switzerland", EUROPE),
    ("IS", "Iceland", EUROPE),
    ("LI", "Liechtenstein", EUROPE),
    ("MC", "Monaco", EUROPE),
    ("AD", "Andorra", EUROPE),
    # North America
    ("US", "United States", NORTH_AMERICA),
    ("CA", "Canada", NORTH_AMERICA),
    ("MX", "Mexico", NORTH_AMERICA),
    # Asia-Pacific
    ("JP", "Japan", ASIA_PACIFIC),
    ("CN", "China", ASIA_PACIFIC),
    ("KR", "South Korea", ASIA_PACIFIC),
    ("AU", "Australia", ASIA_PACIFIC),
    ("NZ", "New Zealand", ASIA_PACIFIC),
    ("SG", "Singapore", ASIA_PACIFIC),
    ("HK", "Hong Kong", ASIA_PACIFIC),
    ("TW", "Taiwan", ASIA_PACIFIC),
    ("TH", "Thailand", ASIA_PACIFIC),
    ("MY", "Malaysia", ASIA_PACIFIC),
    ("IN", "India", ASIA_PACIFIC),
    ("ID", "Indonesia", ASIA_PACIFIC),
    ("PH", "Philippines", ASIA_PACIFIC),
    ("VN", "Vietnam", ASIA_PACIFIC),
    # Rest of world - South America
    ("BR", "Brazil", REST_OF_WORLD),
    ("AR", "Argentina", REST_OF_WORLD),
    ("CL", "Chile", REST_OF_WORLD),
    ("CO", "Colombia", REST_OF_WORLD),
    ("PE", "Peru", REST_OF_WORLD),
    # Rest of world - Middle East
    ("AE", "United Arab Emirates", REST_OF_WORLD),
    ("SA", "Saudi Arabia", REST_OF_WORLD),
    ("IL", "Israel", REST_OF_WORLD),
    ("TR", "Turkey", REST_OF_WORLD),
    # Rest of world - Africa
    ("ZA", "South Africa", REST_OF_WORLD),
    ("EG", "Egypt", REST_OF_WORLD),
    ("MA", "Morocco", REST_OF_WORLD),
)


class ShippingZoneResolver:
    """Country -> zone index and order shipping policy."""

    def __init__(
        self,
        domestic_country: Optional[str] = None,
        free_shipping_threshold: Optional[Decimal] = None,
        use_weight_tiers: Optional[bool] = None,
    ):
        """
        Build the zone table and country index.

        Args:
            domestic_country: Storefront's home country (defaults to settings.domestic_country)
            free_shipping_threshold: Subtotal (base currency) from which orders ship free
                (defaults to settings.free_shipping_threshold, None = no threshold)
            use_weight_tiers: Price by total cart weight (defaults to settings.use_weight_tiers)
        """
        self.domestic_country = (domestic_country or settings.domestic_country).upper()
        threshold = (
            free_shipping_threshold if free_shipping_threshold is not None
            else settings.free_shipping_threshold
        )
        self.free_shipping_threshold = Money(threshold, BASE_CURRENCY) if threshold is not None else None
        self.use_weight_tiers = settings.use_weight_tiers if use_weight_tiers is None else use_weight_tiers

        self._names: Dict[str, str] = {}
        self._index: Dict[str, str] = {}
        members: Dict[str, List[str]] = {zone_id: [] for zone_id in ZONE_IDS}
        for code, name, zone_id in SUPPORTED_COUNTRIES:
            if code == self.domestic_country:
                zone_id = DOMESTIC
            self._names[code] = name
            self._index[code] = zone_id
            members[zone_id].append(code)
        if self.domestic_country not in self._index:
            self._names[self.domestic_country] = self.domestic_country
            self._index[self.domestic_country] = DOMESTIC
            members[DOMESTIC].append(self.domestic_country)

        self._zones: Dict[str, ShippingZone] = {}
        for zone_id in ZONE_IDS:
            flat, tiers, estimate = _ZONE_RATES[zone_id]
            self._zones[zone_id] = ShippingZone(
                id=zone_id,
                countries=tuple(members[zone_id]),
                flat_rate=Money(flat, BASE_CURRENCY),
                weight_tiers=tiers,
                estimated_days=estimate,
            )
        log.debug("Shipping zones built (domestic=%s, countries=%d)",
                  self.domestic_country, len(self._index))

    # --- Lookups ---

    def resolve_zone(self, country_code: Optional[str]) -> str:
        """Zone for a country code; rest-of-world for unknown or missing codes."""
        code = (country_code or "").strip().upper()
        zone_id = self._index.get(code)
        if zone_id is None:
            log.info("Unrecognized destination %r, using %s", country_code, REST_OF_WORLD)
            return REST_OF_WORLD
        return zone_id

    def get_zone(self, zone_id: str) -> ShippingZone:
        try:
            return self._zones[zone_id]
        except KeyError:
            raise ValueError(f"Unknown shipping zone: {zone_id!r}") from None

    def get_rate(self, zone_id: str) -> Money:
        return self.get_zone(zone_id).flat_rate

    def get_free_shipping_threshold(self, zone_id: str) -> Optional[Money]:
        """Subtotal from which the zone ships free (one threshold for all zones)."""
        self.get_zone(zone_id)
        return self.free_shipping_threshold

    def is_country_supported(self, country_code: Optional[str]) -> bool:
        return (country_code or "").upper() in self._index

    def get_country_name(self, country_code: str) -> str:
        return self._names.get((country_code or "").upper(), country_code)

    def get_countries_by_zone(self) -> Dict[str, Tuple[str, ...]]:
        return {zone_id: zone.countries for zone_id, zone in self._zones.items()}

    # --- Pricing ---

    def calculate_shipping(self, country_code: Optional[str], weight_grams: Optional[int] = None) -> Money:
        """
        Shipping cost for one parcel.

        Without a weight the zone's flat rate applies. With a weight:
        under 500g, under 1kg, up to 2kg tiers; heavier parcels pay the
        flat rate plus a surcharge.
        """
        zone = self.get_zone(self.resolve_zone(country_code))
        tiers = zone.weight_tiers
        if not weight_grams or tiers is None:
            return zone.flat_rate
        if weight_grams < 500:
            amount = tiers.under_500g
        elif weight_grams < 1000:
            amount = tiers.under_1kg
        elif weight_grams <= 2000:
            amount = tiers.up_to_2kg
        else:
            amount = zone.flat_rate.amount + OVERWEIGHT_SURCHARGE
        return Money(amount, BASE_CURRENCY)

    def get_shipping_estimate(self, country_code: Optional[str],
                              weight_grams: Optional[int] = None) -> ShippingEstimate:
        zone_id = self.resolve_zone(country_code)
        code = (country_code or "").upper()
        return ShippingEstimate(
            cost=self.calculate_shipping(country_code, weight_grams),
            zone=zone_id,
            estimated_days=self.get_zone(zone_id).estimated_days,
            destination_country=self._names.get(code, "Unknown"),
        )

    def order_shipping(
        self,
        items: Sequence[CartLineItem],
        country_code: Optional[str],
        subtotal: Money,
    ) -> Tuple[Money, str, bool]:
        """
        Shipping for a whole order.

        Args:
            items: Cart line items
            country_code: Destination country
            subtotal: Order subtotal in base currency

        Returns:
            (shipping, zone id, ships free)
        """
        zone_id = self.resolve_zone(country_code)
        if not items:
            return Money.zero(BASE_CURRENCY), zone_id, False
        if all(item.free_shipping for item in items):
            return Money.zero(BASE_CURRENCY), zone_id, True
        threshold = self.get_free_shipping_threshold(zone_id)
        if threshold is not None and subtotal >= threshold:
            return Money.zero(BASE_CURRENCY), zone_id, True

        weight = None
        if self.use_weight_tiers:
            weights = [item.weight_grams for item in items if item.weight_grams]
            weight = sum(weights) if weights else None
        return self.calculate_shipping(country_code, weight), zone_id, False


def get_customs_info(zone_id: str) -> Dict[str, object]:
    """Customs and tax notes shown for a destination zone."""
    if zone_id == DOMESTIC:
        return {
            "requires_customs_form": False,
            "estimated_duties": "None",
            "tax_exemption": "Domestic shipping - no customs",
        }
    if zone_id == EUROPE:
        return {
            "requires_customs_form": True,
            "estimated_duties": "Varies by country (typically low for used goods)",
            "tax_exemption": "VAT exempt for second-hand goods under margin scheme in many EU countries",
        }
    return {
        "requires_customs_form": True,
        "estimated_duties": "Customer responsible for customs duties and import taxes",
        "tax_exemption": "Declared as used/vintage clothing - may reduce duties",
    }


def get_customs_declaration(item_description: str, value: Money) -> Dict[str, object]:
    return {
        "description": f"Used vintage clothing - {item_description}",
        "hs_code": HS_CODE_USED_CLOTHING,
        "value": value,
        "origin": "Various vintage sources",
    }


# Default resolver built from settings at import
resolver = ShippingZoneResolver()
