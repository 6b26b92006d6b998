"""Bounded, time-expiring cache for Panchanga snapshots.

Swiss Ephemeris output is deterministic, so the TTL only bounds memory in
long-running processes. Entries are evicted oldest-inserted first when the
cache is full. A single lock covers lookup, computation and insertion so two
callers asking for the same day never compute it twice.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Callable, Dict, NamedTuple, Optional

from ..schemas.panchanga import Location, PanchangaSnapshot


logger = logging.getLogger(__name__)


DEFAULT_MAX_SIZE = int(os.getenv("PANCHANGA_CACHE_MAX_SIZE", "365"))
DEFAULT_TTL_SECONDS = float(os.getenv("PANCHANGA_CACHE_TTL_SECONDS", str(24 * 60 * 60)))


class CacheEntry(NamedTuple):
    snapshot: PanchangaSnapshot
    created_at: float


def build_cache_key(date_str: str, location: Location) -> str:
    key = f"{date_str}:{location.lat:.4f}:{location.lon:.4f}"
    # a LocationConfig also keys on its timezone
    tz = getattr(location, "tz", None)
    return f"{key}:{tz}" if tz else key


class PanchangaCache:
    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # dicts keep insertion order, the first key is the oldest entry
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at > self.ttl_seconds

    def _lookup(self, key: str) -> Optional[PanchangaSnapshot]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry):
            del self._entries[key]
            return None
        return entry.snapshot

    def _store(self, key: str, snapshot: PanchangaSnapshot) -> None:
        if key not in self._entries and len(self._entries) >= self.max_size:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("panchanga.cache.evict", extra={"cache_key": oldest})
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(snapshot, self._clock())

    # Public API ---------------------------------------------------------

    def get(self, date_str: str, location: Location) -> Optional[PanchangaSnapshot]:
        with self._lock:
            return self._lookup(build_cache_key(date_str, location))

    def set(self, date_str: str, location: Location, snapshot: PanchangaSnapshot) -> None:
        with self._lock:
            self._store(build_cache_key(date_str, location), snapshot)

    def get_or_compute(
        self,
        date_str: str,
        location: Location,
        compute: Callable[[], PanchangaSnapshot],
    ) -> PanchangaSnapshot:
        """Return the cached snapshot or compute, store and return a new one.

        ``compute`` runs while the lock is held. If it raises, nothing is
        stored and the exception propagates unchanged.
        """

        key = build_cache_key(date_str, location)
        with self._lock:
            cached = self._lookup(key)
            if cached is not None:
                logger.debug("panchanga.cache.hit", extra={"cache_key": key})
                return cached
            logger.debug("panchanga.cache.miss", extra={"cache_key": key})
            snapshot = compute()
            self._store(key, snapshot)
            return snapshot

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)
