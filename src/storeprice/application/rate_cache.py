# src/storeprice/application/rate_cache.py
"""
Exchange Rate Cache - Shared, Time-bounded Rate Snapshot

This module holds the one piece of shared mutable state in the pricing engine:
the current ExchangeRateSnapshot. The snapshot is refreshed lazily when older
than the freshness window, replaced wholesale (never mutated), and degrades to
the last-known or static fallback rates when the live source fails, so pricing
is always computable.

Concurrent refreshes are coalesced: a single lock guards the fetch, so at
most one remote request is in flight. Callers holding a stale snapshot read it
while the refresh runs; only a cold cache waits, then re-checks freshness.

Files that USE this module:
- storeprice.application.converter (CurrencyConverter reads snapshots)
- storeprice.application.checkout_service (CheckoutService reads snapshots)
- storeprice.app (creates the cache with the live provider)
- tests.test_rate_cache (unit tests)

Files that this module USES:
- storeprice.adapters.providers.base (RatesSource interface)
- storeprice.domain.currencies (FALLBACK_RATES)
- storeprice.domain.models (ExchangeRateSnapshot)
- storeprice.config (default freshness, staleness and retry windows)
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from storeprice.adapters.providers.base import RatesSource
from storeprice.config import settings
from storeprice.domain.currencies import FALLBACK_RATES
from storeprice.domain.models import ExchangeRateSnapshot

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def fallback_snapshot(now: datetime) -> ExchangeRateSnapshot:
    """Static fallback table stamped with the given time, flagged as not fetched."""
    return ExchangeRateSnapshot(
        rates=FALLBACK_RATES,
        fetched_at=now,
        fetched=False,
        source="fallback",
    )


class ExchangeRateCache:
    """Lazily refreshed exchange rate snapshot with fallback and coalesced refresh."""

    def __init__(
        self,
        source: Optional[RatesSource] = None,
        clock: Optional[Clock] = None,
        max_age: Optional[timedelta] = None,
        max_stale_age: Optional[timedelta] = None,
        retry_after: Optional[timedelta] = None,
    ):
        """
        Initialize an empty cache.

        Args:
            source: Live rates source (None = always use the fallback table)
            clock: Returns the current UTC time (injectable for tests)
            max_age: Freshness window (defaults to settings.rates_cache_minutes)
            max_stale_age: Oldest last-known snapshot kept after a failed refresh
                (defaults to settings.rates_max_stale_hours)
            retry_after: Minimum gap between live attempts after a failure
                (defaults to settings.rates_retry_seconds)
        """
        self.source = source
        self.clock = clock or utc_now
        self.max_age = max_age if max_age is not None else timedelta(minutes=settings.rates_cache_minutes)
        self.max_stale_age = (
            max_stale_age if max_stale_age is not None
            else timedelta(hours=settings.rates_max_stale_hours)
        )
        self.retry_after = (
            retry_after if retry_after is not None
            else timedelta(seconds=settings.rates_retry_seconds)
        )
        self._snapshot: Optional[ExchangeRateSnapshot] = None
        self._last_failure: Optional[datetime] = None
        self._refresh_lock = threading.Lock()

    @property
    def snapshot(self) -> Optional[ExchangeRateSnapshot]:
        """Current snapshot without triggering a refresh (None before first access)."""
        return self._snapshot

    def get_rates(self, now: Optional[datetime] = None) -> ExchangeRateSnapshot:
        """
        Get the current snapshot, refreshing it first if stale.

        Args:
            now: Evaluation time (defaults to the cache clock)

        Returns:
            A snapshot; never None
        """
        return self.refresh_if_stale(self.max_age, now=now)

    def refresh_if_stale(
        self, max_age: Optional[timedelta] = None, now: Optional[datetime] = None
    ) -> ExchangeRateSnapshot:
        """
        Return a snapshot no older than max_age when the source allows it.

        Args:
            max_age: Freshness window for this call (defaults to the cache's)
            now: Evaluation time (defaults to the cache clock)

        Returns:
            Fresh live snapshot, retained last-known snapshot, or the fallback table
        """
        max_age = self.max_age if max_age is None else max_age
        now = now or self.clock()

        current = self._snapshot
        if current is not None and not self._needs_refresh(current, max_age, now):
            return current

        if current is not None:
            # Refresh already in flight: serve the stale snapshot instead of waiting on it
            if not self._refresh_lock.acquire(blocking=False):
                return current
        else:
            self._refresh_lock.acquire()
        try:
            # Another caller may have refreshed while we waited
            current = self._snapshot
            if current is not None and not self._needs_refresh(current, max_age, now):
                return current
            self._snapshot = self._refresh(current, now)
            return self._snapshot
        finally:
            self._refresh_lock.release()

    def invalidate(self) -> None:
        """Drop the current snapshot so the next access refreshes."""
        with self._refresh_lock:
            self._snapshot = None
            self._last_failure = None

    def _needs_refresh(self, current: ExchangeRateSnapshot, max_age: timedelta, now: datetime) -> bool:
        if current.fetched and current.age(now) < max_age:
            return False
        if self.source is None:
            # Offline: the fallback table never gets fresher
            return False
        if self._last_failure is not None and now - self._last_failure < self.retry_after:
            return False
        return True

    def _refresh(self, current: Optional[ExchangeRateSnapshot], now: datetime) -> ExchangeRateSnapshot:
        if self.source is None:
            logger.info("No live rates source configured, using fallback rates")
            return fallback_snapshot(now)

        try:
            rates = self.source.fetch_rates()
        except Exception as e:
            self._last_failure = now
            if current is not None and current.fetched and current.age(now) <= self.max_stale_age:
                logger.warning(
                    "Rate refresh failed, keeping rates from %s: %s",
                    current.fetched_at.isoformat(), e,
                )
                return current
            logger.warning("Rate refresh failed, using fallback rates: %s", e)
            if current is not None and not current.fetched:
                return current
            return fallback_snapshot(now)

        self._last_failure = None
        snapshot = ExchangeRateSnapshot(
            rates=rates,
            fetched_at=now,
            fetched=True,
            source=getattr(self.source, "name", "live"),
        )
        logger.info("Exchange rate snapshot refreshed from %s", snapshot.source)
        return snapshot
