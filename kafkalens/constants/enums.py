"""All enum definitions for the TUI.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Consumer Enums
# =============================================================================


class ConsumerState(Enum):
    """Lifecycle states of the backend consumption process."""

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    UNAVAILABLE = "unavailable"


class ConsumeFrom(Enum):
    """Where a newly started consumer begins reading."""

    BEGINNING = "Beginning"
    END = "End"
    TIMESTAMP = "Timestamp"


# =============================================================================
# Notification Enums
# =============================================================================


class NotificationSeverity(Enum):
    """Severity values understood by Textual's ``App.notify``."""

    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"


__all__ = [
    "ConsumeFrom",
    "ConsumerState",
    "NotificationSeverity",
]
