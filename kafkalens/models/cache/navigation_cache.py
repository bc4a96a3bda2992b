"""Navigation-scoped cache.

Keeps per-view UI state (for example the query text of a topic page) alive
while the user navigates away from a screen and back within one session.

Performance notes:
- All operations are synchronous. Since asyncio is single-threaded and no
  method awaits, reads and writes cannot interleave and no lock is needed.
- Entries are never evicted unless ``max_entries`` is set; eviction then only
  considers entries with no live subscribers, least recently used first.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Immutable snapshot of a cached value."""

    key: str
    value: T
    generation: int = 0


class CacheSubscription(Generic[T]):
    """A view's handle on one cache key.

    Reads always return the latest entry. Closing the subscription leaves the
    entry in the cache.
    """

    def __init__(self, cache: NavigationScopedCache, key: str) -> None:
        self._cache = cache
        self._key = key
        self._closed = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def entry(self) -> CacheEntry[T]:
        entry = self._cache.peek(self._key)
        if entry is None:
            raise KeyError(self._key)
        return entry

    @property
    def value(self) -> T:
        return self.entry.value

    def set(
        self,
        updater: Callable[[T], T],
        *,
        expected_generation: int | None = None,
    ) -> CacheEntry[T] | None:
        """Write through to the cache. No-op once closed."""
        if self._closed:
            return None
        return self._cache.set(
            self._key, updater, expected_generation=expected_generation
        )

    def close(self) -> None:
        """Release the subscription. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._cache._release(self._key)


class NavigationScopedCache:
    """Process-lifetime key/value store that survives view remounts.

    Owned by the application object, not a module global, so tests and
    multiple apps get independent caches.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        self._entries: OrderedDict[str, CacheEntry[Any]] = OrderedDict()
        self._subscribers: dict[str, int] = {}
        self._max_entries = max_entries or None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def peek(self, key: str) -> CacheEntry[Any] | None:
        """Return the entry for ``key`` without creating or touching it."""
        return self._entries.get(key)

    def subscriber_count(self, key: str) -> int:
        return self._subscribers.get(key, 0)

    def get_or_init(self, key: str, initial_value: T) -> CacheEntry[T]:
        """Return the existing entry for ``key`` or create it at generation 0.

        The initial value is ignored when the key already exists.
        """
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
            return entry

        entry = CacheEntry(key=key, value=initial_value)
        self._entries[key] = entry
        logger.debug("Cache entry created: %s", key)
        self._evict_if_needed()
        return entry

    def subscribe(self, key: str, initial_value: T) -> CacheSubscription[T]:
        """Acquire ``key`` for a mounted view, creating it if needed."""
        self._subscribers[key] = self._subscribers.get(key, 0) + 1
        self.get_or_init(key, initial_value)
        return CacheSubscription(self, key)

    def set(
        self,
        key: str,
        updater: Callable[[T], T],
        *,
        expected_generation: int | None = None,
    ) -> CacheEntry[T] | None:
        """Apply ``updater`` to the current value and bump the generation.

        Returns None without writing when nobody is subscribed to ``key`` or
        when ``expected_generation`` does not match the stored entry.
        """
        entry = self._entries.get(key)
        if entry is None or not self._subscribers.get(key):
            logger.debug("Dropped write to unsubscribed cache key: %s", key)
            return None
        if expected_generation is not None and expected_generation != entry.generation:
            logger.debug(
                "Dropped stale write to %s (expected generation %s, current %s)",
                key,
                expected_generation,
                entry.generation,
            )
            return None

        updated = replace(entry, value=updater(entry.value), generation=entry.generation + 1)
        self._entries[key] = updated
        self._entries.move_to_end(key)
        return updated

    def _release(self, key: str) -> None:
        count = self._subscribers.get(key, 0) - 1
        if count > 0:
            self._subscribers[key] = count
        else:
            self._subscribers.pop(key, None)
        self._evict_if_needed()

    def _evict_if_needed(self) -> None:
        if self._max_entries is None:
            return
        # Oldest first; subscribed entries are skipped
        for key in list(self._entries):
            if len(self._entries) <= self._max_entries:
                break
            if self._subscribers.get(key):
                continue
            del self._entries[key]
            logger.debug("Cache entry evicted: %s", key)


__all__ = [
    "CacheEntry",
    "CacheSubscription",
    "NavigationScopedCache",
]
