# src/storeprice/application/gateway.py
"""
Gateway Amount Encoder - Integer Minor Units and Charge Minimums

This module is the single place where a decimal amount becomes the integer
the payment gateway expects: cents for 100-minor-unit currencies, whole yen
for JPY. It enforces per-currency minimum charges before anything reaches the
gateway and keeps at most one charge intent per cart fingerprint.

Files that USE this module:
- storeprice.application.checkout_service (gateway amount and charge requests)
- storeprice.app (prints the gateway amount)
- tests.test_gateway (unit tests)

Files that this module USES:
- storeprice.domain.currencies (get_currency, round_amount, minimum_charge)
- storeprice.domain.models (Money, ChargeRequest)
- storeprice.domain.errors (BelowMinimumChargeError)
"""
from __future__ import annotations

import hashlib
import logging
import threading
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Protocol, Tuple

from storeprice.domain.currencies import get_currency, minimum_charge, round_amount
from storeprice.domain.errors import BelowMinimumChargeError
from storeprice.domain.models import ChargeRequest, Money

log = logging.getLogger(__name__)


def encode(amount: Money) -> int:
    """
    Amount in the gateway's smallest currency unit.

    Rounds with the shared display rounding first, so an already-rounded
    amount encodes to exactly what was shown.

    Examples:
        Money("10.50", "USD") -> 1050
        Money(1050, "JPY") -> 1050
    """
    currency = get_currency(amount.currency)
    rounded = round_amount(amount.amount, currency.code)
    return int(rounded * currency.minor_unit_divisor)


def decode(minor_units: int, currency_code: str) -> Money:
    """Gateway minor units back to a Money amount."""
    currency = get_currency(currency_code)
    amount = Decimal(int(minor_units)) / Decimal(currency.minor_unit_divisor)
    return Money(round_amount(amount, currency.code), currency.code)


def gateway_currency(currency_code: str) -> str:
    """Lowercase currency code as the gateway expects it."""
    return get_currency(currency_code).code.lower()


def meets_minimum(amount: Money) -> bool:
    minimum = minimum_charge(amount.currency)
    return round_amount(amount.amount, minimum.currency) >= minimum.amount


def require_minimum(amount: Money) -> None:
    """
    Raises:
        BelowMinimumChargeError: If the amount is under the currency's minimum
    """
    if not meets_minimum(amount):
        minimum = minimum_charge(amount.currency)
        log.warning("Charge of %s %s below minimum %s", amount.amount, amount.currency, minimum.amount)
        raise BelowMinimumChargeError(amount, minimum)


def build_charge_request(amount: Money, metadata: Optional[Mapping[str, str]] = None) -> ChargeRequest:
    """
    Validated, gateway-ready charge for an amount.

    Raises:
        BelowMinimumChargeError: If the amount is under the currency's minimum
        UnsupportedCurrencyError: If the currency is not supported
    """
    require_minimum(amount)
    return ChargeRequest(
        amount=encode(amount),
        currency=gateway_currency(amount.currency),
        metadata=dict(metadata or {}),
    )


def cart_fingerprint(item_ids: Iterable[str], currency: str, destination_country: str) -> str:
    """Stable key for (sorted item ids, currency, destination)."""
    parts = sorted(str(i) for i in item_ids)
    raw = "|".join([",".join(parts), (currency or "").upper(), (destination_country or "").upper()])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class PaymentGateway(Protocol):
    """External collaborator that creates charge intents."""
    def create_charge_intent(self, amount: int, currency: str, metadata: Mapping[str, str]) -> str:
        ...


class ChargeIntentCache:
    """
    At most one charge intent per cart fingerprint.

    Re-requesting the same fingerprint returns the cached handle; a new
    fingerprint replaces (invalidates) the previous one.
    """

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway
        self._lock = threading.Lock()
        self._current: Optional[Tuple[str, str]] = None  # (fingerprint, handle)
        self._invalidated: Dict[str, str] = {}

    @property
    def invalidated(self) -> Dict[str, str]:
        """Fingerprint -> handle of intents superseded by a newer fingerprint."""
        return dict(self._invalidated)

    def get_or_create(self, fingerprint: str, charge: ChargeRequest) -> str:
        with self._lock:
            if self._current is not None and self._current[0] == fingerprint:
                log.debug("Reusing charge intent for fingerprint %s", fingerprint[:12])
                return self._current[1]
            if self._current is not None:
                old_fp, old_handle = self._current
                self._invalidated[old_fp] = old_handle
                log.info("Cart changed, invalidating charge intent for %s", old_fp[:12])
            handle = self.gateway.create_charge_intent(charge.amount, charge.currency, charge.metadata)
            self._current = (fingerprint, handle)
            log.info("Created charge intent: %d %s", charge.amount, charge.currency)
            return handle

    def clear(self) -> None:
        with self._lock:
            self._current = None
