"""Timing constants for the TUI.

Interval values for polling cycles. Request timeouts are owned by the
backend process, so none are defined here.
"""

from typing import Final

# ============================================================================
# Polling intervals (milliseconds)
# ============================================================================

CONSUMER_POLL_INTERVAL_MS: Final = 1000

__all__ = [
    "CONSUMER_POLL_INTERVAL_MS",
]
