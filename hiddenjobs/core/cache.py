"""Process-wide TTL caches with whole-entry replacement and an injected clock."""

import logging
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from hiddenjobs.core.config import CacheConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """An immutable cached value. Replaced wholesale, never mutated."""

    value: Any
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.created_at < self.ttl


class TTLCache:
    """Key/value store whose entries expire after a fixed TTL."""

    def __init__(self, ttl: float, clock: Clock = time.monotonic, name: str = "cache") -> None:
        self._ttl = ttl
        self._clock = clock
        self._name = name
        self._entries: dict[Hashable, CacheEntry] = {}
        self._last_sweep = clock()

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            del self._entries[key]
            logger.debug("%s: expired %r", self._name, key)
            return None
        return entry.value

    def set(self, key: Hashable, value: Any, ttl: float | None = None) -> None:
        now = self._clock()
        if now - self._last_sweep >= self._ttl:
            self._sweep(now)
        self._entries[key] = CacheEntry(
            value=value,
            created_at=now,
            ttl=self._ttl if ttl is None else ttl,
        )

    def _sweep(self, now: float) -> None:
        """Drop every expired entry; runs at most once per default TTL."""
        expired = [k for k, e in self._entries.items() if not e.is_fresh(now)]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug("%s: swept %d expired entries", self._name, len(expired))

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or every entry when key is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


class CacheService:
    """The three caches shared by acquisition, search and ranking."""

    def __init__(self, config: CacheConfig | None = None, clock: Clock = time.monotonic) -> None:
        config = config or CacheConfig()
        self.searches = TTLCache(config.search_ttl_s, clock, name="search")
        self.pages = TTLCache(config.page_ttl_s, clock, name="provider-page")
        self.recommendations = TTLCache(config.recommendation_ttl_s, clock, name="recommendation")

    def clear(self) -> None:
        self.searches.invalidate()
        self.pages.invalidate()
        self.recommendations.invalidate()
