"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (live exchange rate APIs)
- Formatting (display output)
"""

__all__ = []
