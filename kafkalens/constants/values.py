"""Scalar constants for the TUI."""

from typing import Final

APP_TITLE: Final = "KafkaLens"

# Navigation cache key prefix for per-topic view state
TOPIC_PAGE_CACHE_PREFIX: Final = "topic-page"

# Topic configuration key shown in the topic header
CLEANUP_POLICY_CONFIG: Final = "cleanup.policy"

# Placeholder shown while a value is still loading
PENDING_VALUE: Final = "..."

__all__ = [
    "APP_TITLE",
    "CLEANUP_POLICY_CONFIG",
    "PENDING_VALUE",
    "TOPIC_PAGE_CACHE_PREFIX",
]
