"""Topic screen configuration."""

from typing import Final

# (label, width) pairs in RecordRow.as_table_row() order
RECORD_TABLE_COLUMNS: Final[list[tuple[str, int]]] = [
    ("Partition", 10),
    ("Offset", 12),
    ("Timestamp", 16),
    ("Key", 24),
    ("Payload", 80),
]

CONSUMER_STATE_LABELS: Final[dict[str, str]] = {
    "idle": "Idle",
    "starting": "Starting...",
    "running": "Consuming",
    "stopping": "Stopping...",
    "unavailable": "Unavailable",
}

__all__ = [
    "CONSUMER_STATE_LABELS",
    "RECORD_TABLE_COLUMNS",
]
