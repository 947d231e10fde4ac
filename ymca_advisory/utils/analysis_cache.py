"""
In-memory TTL cache for comprehensive analyses.

Entries expire a fixed time after insertion and are evicted lazily when
read. The clock is injectable so tests can advance time without sleeping.
All access happens on one event loop, so no locking is needed; when two
runs store the same key, the last write wins.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..constants import CACHE_KEY_PREFIX, CACHE_TTL_SECONDS
from ..models.analysis import ComprehensiveAnalysis

logger = logging.getLogger(__name__)


def cache_key(organization_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}{organization_id}"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: ComprehensiveAnalysis
    created_at: float


class AnalysisCache:
    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self.stats = {"hits": 0, "misses": 0, "expired": 0, "invalidated": 0}

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[ComprehensiveAnalysis]:
        """Cached analysis for `key`, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self.stats["misses"] += 1
            return None
        if self._is_expired(entry):
            del self._entries[key]
            self.stats["expired"] += 1
            self.stats["misses"] += 1
            logger.debug(f"Cache entry {key} expired")
            return None
        self.stats["hits"] += 1
        return entry.value

    def put(self, key: str, value: ComprehensiveAnalysis) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())

    def invalidate(self, key: str) -> bool:
        """Drop `key`. Returns whether an entry was removed."""
        removed = self._entries.pop(key, None) is not None
        if removed:
            self.stats["invalidated"] += 1
            logger.debug(f"Cache entry {key} invalidated")
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry)
