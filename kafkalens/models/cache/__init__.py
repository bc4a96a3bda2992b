"""Cache models."""

from kafkalens.models.cache.navigation_cache import (
    CacheEntry,
    CacheSubscription,
    NavigationScopedCache,
)

__all__ = [
    "CacheEntry",
    "CacheSubscription",
    "NavigationScopedCache",
]
