"""Record models."""

from kafkalens.models.records.record_row import RecordRow

__all__ = [
    "RecordRow",
]
