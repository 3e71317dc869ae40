# src/storeprice/domain/errors.py
"""
Domain Errors - Pricing Exceptions

This module defines the pricing exceptions. Degraded situations (bad discount
data, unknown destination, unreachable rate source) never raise; only the hard
validation failures below reach the checkout caller.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidPriceError(DomainError):
    """Raised when a price value is invalid (e.g., negative)."""
    pass


class UnsupportedCurrencyError(DomainError):
    """Raised when a currency code is not in the currency table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unsupported currency: {code!r}")


class CurrencyMismatchError(DomainError):
    """Raised when arithmetic mixes two currencies without a conversion."""

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot combine {left} with {right} without conversion")


class RateUnavailableError(DomainError):
    """Raised when neither the live snapshot nor the fallback table has a rate."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"No exchange rate available for {code}")


class ProviderUnavailableError(DomainError):
    """Raised when the live exchange rate source is unavailable."""
    pass


class BelowMinimumChargeError(DomainError):
    """Raised when a charge amount is below the gateway minimum for its currency."""

    def __init__(self, amount, minimum):
        self.amount = amount
        self.minimum = minimum
        super().__init__(
            f"Amount {amount.amount} {amount.currency} is below the minimum charge "
            f"of {minimum.amount} {minimum.currency}"
        )


class EmptyCartError(DomainError):
    """Raised when a charge is requested for an empty cart."""
    pass
