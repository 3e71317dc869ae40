# src/storeprice/app.py
"""
Application Entry Point - Checkout Quote CLI

This module serves as the composition root for the pricing engine.
It wires the rates provider, exchange rate cache and checkout service, then
prices a cart read from a JSON file and prints the quote.

Cart file format: a JSON list of line items (or {"items": [...]}) using the
storefront cart keys productId, title, price, discountPrice,
discountStartDate, discountEndDate, weightGrams, freeShipping. Prices are in
the base currency.

Files that USE this module:
- storeprice console script (pyproject entry point)
- python -m storeprice.app (module entry point)

Files that this module USES:
- storeprice.shared.logging_conf (setup_logging for logging configuration)
- storeprice.shared.validators (country and currency argument checks)
- storeprice.config (settings for logging and wiring)
- storeprice.adapters.providers (ExchangeRateApiProvider for live rates)
- storeprice.adapters.formatting (format_quote for output)
- storeprice.application (ExchangeRateCache, CheckoutService)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import argparse  # Command line parsing
import json  # Cart file decoding
import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from pathlib import Path  # Object-oriented filesystem paths
from typing import List, Optional, Sequence

from storeprice.shared.logging_conf import setup_logging  # Configure logging with file rotation
from storeprice.shared.validators import validate_country_code, validate_currency_code
from storeprice.adapters.formatting import format_quote  # Plain text quote layout
from storeprice.adapters.providers import ExchangeRateApiProvider  # Live EUR rates
from storeprice.application.checkout_service import CheckoutService
from storeprice.application.rate_cache import ExchangeRateCache
from storeprice.domain.currencies import BASE_CURRENCY
from storeprice.domain.errors import DomainError
from storeprice.domain.models import CartLineItem

logger = logging.getLogger(__name__)


def load_cart(path: Path) -> List[CartLineItem]:
    """
    Read cart line items from a JSON file.

    Raises:
        ValueError: If the file is not a list of items (or an object with "items")
        InvalidPriceError: If a price is not numeric or negative
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("items")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of cart items")
    return [CartLineItem.from_dict(entry, BASE_CURRENCY) for entry in data]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storeprice",
        description="Price a cart for a destination and display currency.",
    )
    parser.add_argument("cart", type=Path, help="JSON file with cart line items")
    parser.add_argument("--country", default="", help="Destination country (ISO alpha-2)")
    parser.add_argument("--currency", default=BASE_CURRENCY, help="Display currency (default: EUR)")
    parser.add_argument("--offline", action="store_true", help="Skip live rates and use the fallback table")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Price a cart and print the checkout quote.

    This function:
    1. Parses arguments and sets up logging
    2. Validates country and currency arguments
    3. Wires the rates provider, rate cache and checkout service
    4. Prints the formatted quote (display totals, rate and gateway amount)

    Returns:
        Process exit code (0 on success)
    """
    args = build_parser().parse_args(argv)

    # Logging + config
    # Import settings here so --help works even with a broken .env
    from storeprice.config import settings

    setup_logging(
        level=args.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    if args.country and not validate_country_code(args.country):
        print(f"Invalid country code: {args.country!r}", file=sys.stderr)
        return 2
    if not validate_currency_code(args.currency):
        print(f"Invalid currency code: {args.currency!r}", file=sys.stderr)
        return 2

    try:
        items = load_cart(args.cart)
    except (OSError, ValueError, KeyError) as e:
        logger.error("Could not read cart %s: %s", args.cart, e)
        print(f"Could not read cart: {e}", file=sys.stderr)
        return 1
    except DomainError as e:
        print(f"Invalid cart: {e}", file=sys.stderr)
        return 1

    source = None if args.offline else ExchangeRateApiProvider()
    service = CheckoutService(ExchangeRateCache(source=source))

    try:
        quote = service.quote(items, args.country, args.currency)
        if items:
            # Validates the gateway minimum before reporting the charge
            service.prepare_charge(items, args.country, args.currency)
    except DomainError as e:
        logger.error("Checkout failed: %s", e)
        print(f"Checkout failed: {e}", file=sys.stderr)
        return 1

    print(format_quote(quote))
    return 0


if __name__ == "__main__":
    sys.exit(main())
