# src/storeprice/shared/validators.py
"""
Input Validation Utilities - Configuration and Request Validation

This module provides validation functions for configuration values and
checkout inputs: country codes, currency codes and URLs.

Files that USE this module:
- storeprice.config.settings (uses validation functions in Settings field validators)
- storeprice.app (validates CLI arguments before quoting)

Files that this module USES:
- None (pure utility functions)
"""
import re


def validate_country_code(code: str) -> bool:
    """
    Validate ISO 3166-1 alpha-2 country code format.

    Args:
        code: Country code to validate (case-insensitive)

    Returns:
        True if the code is two ASCII letters, False otherwise
    """
    if not code:
        return False
    return bool(re.match(r'^[A-Za-z]{2}$', code))


def validate_currency_code(code: str) -> bool:
    """
    Validate ISO 4217 currency code format.

    Only the shape is checked here; whether the currency is supported
    is decided by the currency table.

    Args:
        code: Currency code to validate (case-insensitive)

    Returns:
        True if the code is three ASCII letters, False otherwise
    """
    if not code:
        return False
    return bool(re.match(r'^[A-Za-z]{3}$', code))


def validate_url(url: str) -> bool:
    """
    Validate that a string is an http(s) URL.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False
    return bool(re.match(r'^https?://[^\s/$.?#].[^\s]*$', url))

