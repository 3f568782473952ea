"""In-memory TTL cache keyed by string.

Each service owns its own instance. Expiry is checked on every read;
``sweep()`` reclaims memory for entries nobody reads again and is meant
to be called periodically by the host (see ``main.lifespan``).
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fraction of entries dropped when the size bound is hit.
EVICT_FRACTION = 0.1


@dataclass
class _CacheEntry(Generic[T]):
    value: T
    expires_at: float
    last_accessed: float


class TTLCache(Generic[T]):
    """Time-bounded memoization store with least-recently-used overflow eviction."""

    def __init__(
        self,
        default_ttl: float,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, _CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[T]:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self._clock()
        if now >= entry.expires_at:
            del self._entries[key]
            return None
        entry.last_accessed = now
        return entry.value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Store a value with a fresh expiry (``ttl`` seconds, or the default)."""
        if self._max_entries is not None and key not in self._entries:
            self._enforce_size_limit()
        now = self._clock()
        self._entries[key] = _CacheEntry(
            value=value,
            expires_at=now + (self._default_ttl if ttl is None else ttl),
            last_accessed=now,
        )

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``. Returns count removed."""
        doomed = [k for k in self._entries if k.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def sweep(self) -> int:
        """Evict all expired entries. Returns count removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache sweep evicted %d expired entries", len(expired))
        return len(expired)

    def _enforce_size_limit(self) -> None:
        if len(self._entries) < self._max_entries:
            return
        self.sweep()
        if len(self._entries) < self._max_entries:
            return
        count = max(1, math.floor(self._max_entries * EVICT_FRACTION))
        by_age = sorted(self._entries.items(), key=lambda item: item[1].last_accessed)
        for key, _ in by_age[:count]:
            del self._entries[key]
        logger.debug("Cache full (%d entries); evicted %d least recently used",
                     self._max_entries, count)
