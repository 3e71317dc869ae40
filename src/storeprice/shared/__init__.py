"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from storeprice.shared.validators import (
    validate_country_code,
    validate_currency_code,
    validate_url,
)

__all__ = [
    "validate_country_code",
    "validate_currency_code",
    "validate_url",
]
