"""Constants module for KafkaLens TUI.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings with Final)
- timeouts.py: Polling intervals
- defaults.py: Default values for settings

Note: Keyboard bindings are defined in kafkalens.keyboard module.
"""

from kafkalens.constants.defaults import (
    BACKEND_COMMAND_DEFAULT,
    CACHE_MAX_ENTRIES_DEFAULT,
    DEFAULT_QUERY,
    PAGE_SIZE_DEFAULT,
)
from kafkalens.constants.enums import (
    ConsumeFrom,
    ConsumerState,
    NotificationSeverity,
)
from kafkalens.constants.timeouts import CONSUMER_POLL_INTERVAL_MS
from kafkalens.constants.values import (
    APP_TITLE,
    CLEANUP_POLICY_CONFIG,
    PENDING_VALUE,
    TOPIC_PAGE_CACHE_PREFIX,
)

__all__ = [
    "APP_TITLE",
    "BACKEND_COMMAND_DEFAULT",
    "CACHE_MAX_ENTRIES_DEFAULT",
    "CLEANUP_POLICY_CONFIG",
    "CONSUMER_POLL_INTERVAL_MS",
    "DEFAULT_QUERY",
    "PAGE_SIZE_DEFAULT",
    "PENDING_VALUE",
    "TOPIC_PAGE_CACHE_PREFIX",
    "ConsumeFrom",
    "ConsumerState",
    "NotificationSeverity",
]
