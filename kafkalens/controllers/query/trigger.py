"""Imperative query trigger.

The topic view decides *when* a query runs, while the records component
decides how results are fetched and kept. The coordinator hands the view a
trigger instead of a reference to the component; the trigger finds its
target at call time through a slot the coordinator owns.
"""

from __future__ import annotations

import logging
from typing import Protocol

from kafkalens.errors import InvalidTriggerError
from kafkalens.models.records.record_row import RecordRow
from kafkalens.models.topics.topic_info import TopicIdentity

logger = logging.getLogger(__name__)


class QueryTarget(Protocol):
    """Component that can execute a resolved record query."""

    @property
    def identity(self) -> TopicIdentity: ...

    async def execute(self, resolved_query: str) -> list[RecordRow] | None: ...


class QueryTargetSlot:
    """Holds the query target of the currently mounted topic view."""

    def __init__(self) -> None:
        self._target: QueryTarget | None = None

    @property
    def current(self) -> QueryTarget | None:
        return self._target

    def bind(self, target: QueryTarget) -> None:
        self._target = target

    def unbind(self, target: QueryTarget | None = None) -> None:
        """Clear the slot, only if it still holds ``target`` when one is given."""
        if target is None or self._target is target:
            self._target = None

    def resolve(self, identity: TopicIdentity) -> QueryTarget:
        target = self._target
        if target is None or target.identity != identity:
            raise InvalidTriggerError(
                f"No query target mounted for {identity}; re-acquire the trigger"
            )
        return target


class ImperativeQueryTrigger:
    """Dispatch handle for ``execute_query``; holds no result state.

    Valid for as long as its identity stays mounted.
    """

    def __init__(self, slot: QueryTargetSlot, identity: TopicIdentity) -> None:
        self._slot = slot
        self._identity = identity

    @property
    def identity(self) -> TopicIdentity:
        return self._identity

    @property
    def is_valid(self) -> bool:
        target = self._slot.current
        return target is not None and target.identity == self._identity

    async def execute_query(self, resolved_query: str) -> list[RecordRow] | None:
        """Run ``resolved_query`` on the mounted target.

        A call made while an earlier one is pending supersedes it; the earlier
        call then returns None.

        Raises:
            InvalidTriggerError: The trigger's identity is no longer mounted.
        """
        target = self._slot.resolve(self._identity)
        logger.debug("Executing query for %s", self._identity)
        return await target.execute(resolved_query)


__all__ = [
    "ImperativeQueryTrigger",
    "QueryTarget",
    "QueryTargetSlot",
]
