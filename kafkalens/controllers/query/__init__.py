"""Record query components."""

from kafkalens.controllers.query.records import RecordsQuery
from kafkalens.controllers.query.trigger import (
    ImperativeQueryTrigger,
    QueryTarget,
    QueryTargetSlot,
)

__all__ = [
    "ImperativeQueryTrigger",
    "QueryTarget",
    "QueryTargetSlot",
    "RecordsQuery",
]
