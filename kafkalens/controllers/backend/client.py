"""Typed client for the backend commands used by the topic view.

Every failure is logged, reported once to the notification channel and
re-raised as a typed error so the caller's state machine can react.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from kafkalens.controllers.backend.runner import CommandRunner
from kafkalens.errors import (
    BackendError,
    BackendUnavailable,
    ConsumerUnavailable,
    TransientPollFailure,
)
from kafkalens.models.consumer.consumer_status import ConsumerConfig, ConsumerStatus
from kafkalens.models.records.record_row import RecordRow
from kafkalens.models.topics.topic_info import PartitionOffset, TopicInfo

logger = logging.getLogger(__name__)

R = TypeVar("R")

Notifier = Callable[[str, str], None]
"""Callable ``(title, description)`` that shows an error to the user."""

_RECORDS_ADAPTER = TypeAdapter(list[RecordRow])
_LAST_OFFSETS_ADAPTER = TypeAdapter(dict[str, list[PartitionOffset]])


class BackendClient:
    """Backend command wrapper with notify-and-rethrow error handling."""

    CMD_GET_CONSUMER_STATE = "get_consumer_state"
    CMD_START_CONSUMER = "start_consumer"
    CMD_STOP_CONSUMER = "stop_consumer"
    CMD_GET_RECORDS = "get_records"
    CMD_GET_LAST_OFFSETS = "get_last_offsets"
    CMD_GET_TOPIC_INFO = "get_topic_info"

    # Backend error types meaning the consumption process cannot be created
    CONSUMER_UNAVAILABLE_ERROR_TYPES = frozenset(
        {"Consumer unavailable", "Resource exhausted"}
    )

    def __init__(self, runner: CommandRunner, notifier: Notifier | None = None) -> None:
        self._runner = runner
        self._notifier = notifier

    def set_notifier(self, notifier: Notifier | None) -> None:
        self._notifier = notifier

    async def _call(
        self,
        command: str,
        arguments: Mapping[str, Any],
        *,
        title: str,
        parse: Callable[[Any], R] | None = None,
        notify: bool = True,
    ) -> R:
        try:
            raw = await self._runner(command, arguments)
            return parse(raw) if parse is not None else raw
        except BackendError as exc:
            description = exc.message
            logger.error("Backend command %s failed: %s", command, exc)
            if notify:
                self._notify(title, description)
            raise
        except ValidationError as exc:
            description = f"Malformed response ({exc.error_count()} validation errors)"
            logger.error("Backend command %s returned malformed data: %s", command, exc)
            if notify:
                self._notify(title, description)
            raise

    def _notify(self, title: str, description: str) -> None:
        if self._notifier is not None:
            self._notifier(title, description)

    # =========================================================================
    # Consumer commands
    # =========================================================================

    async def get_consumer_state(
        self, cluster_id: str, topic_name: str, *, notify: bool = True
    ) -> ConsumerStatus:
        try:
            return await self._call(
                self.CMD_GET_CONSUMER_STATE,
                {"clusterId": cluster_id, "topicName": topic_name},
                title="Unable to get the consumer status",
                parse=ConsumerStatus.model_validate,
                notify=notify,
            )
        except BackendError as exc:
            raise TransientPollFailure(cluster_id, topic_name, exc.message) from exc
        except ValidationError as exc:
            raise TransientPollFailure(cluster_id, topic_name, str(exc)) from exc

    async def start_consumer(
        self,
        cluster_id: str,
        topic_name: str,
        config: ConsumerConfig | None = None,
    ) -> None:
        effective = config or ConsumerConfig()
        try:
            await self._call(
                self.CMD_START_CONSUMER,
                {
                    "clusterId": cluster_id,
                    "topicName": topic_name,
                    "config": effective.to_payload(),
                },
                title=f"Unable to start the consumer for {topic_name}",
            )
        except BackendError as exc:
            if exc.error_type in self.CONSUMER_UNAVAILABLE_ERROR_TYPES:
                raise ConsumerUnavailable(self.CMD_START_CONSUMER, exc.message) from exc
            raise BackendUnavailable(self.CMD_START_CONSUMER, exc.message) from exc

    async def stop_consumer(self, cluster_id: str, topic_name: str) -> None:
        try:
            await self._call(
                self.CMD_STOP_CONSUMER,
                {"clusterId": cluster_id, "topicName": topic_name},
                title=f"Unable to stop the consumer for {topic_name}",
            )
        except BackendError as exc:
            raise BackendUnavailable(self.CMD_STOP_CONSUMER, exc.message) from exc

    # =========================================================================
    # Records and topic metadata
    # =========================================================================

    async def execute_query(self, cluster_id: str, query: str) -> list[RecordRow]:
        try:
            return await self._call(
                self.CMD_GET_RECORDS,
                {"clusterId": cluster_id, "query": query},
                title="Unable to run the query",
                parse=_RECORDS_ADAPTER.validate_python,
            )
        except BackendError as exc:
            raise BackendUnavailable(self.CMD_GET_RECORDS, exc.message) from exc
        except ValidationError as exc:
            raise BackendUnavailable(self.CMD_GET_RECORDS, str(exc)) from exc

    async def get_last_offsets(
        self, cluster_id: str, topic_names: Iterable[str]
    ) -> dict[str, list[PartitionOffset]]:
        try:
            return await self._call(
                self.CMD_GET_LAST_OFFSETS,
                {"clusterId": cluster_id, "topicNames": sorted(set(topic_names))},
                title="Unable to retrieve the last offsets",
                parse=_LAST_OFFSETS_ADAPTER.validate_python,
            )
        except BackendError as exc:
            raise BackendUnavailable(self.CMD_GET_LAST_OFFSETS, exc.message) from exc
        except ValidationError as exc:
            raise BackendUnavailable(self.CMD_GET_LAST_OFFSETS, str(exc)) from exc

    async def get_topic_info(self, cluster_id: str, topic_name: str) -> TopicInfo:
        try:
            return await self._call(
                self.CMD_GET_TOPIC_INFO,
                {"clusterId": cluster_id, "topicName": topic_name},
                title="Unable to retrieve topic info",
                parse=TopicInfo.model_validate,
            )
        except BackendError as exc:
            raise BackendUnavailable(self.CMD_GET_TOPIC_INFO, exc.message) from exc
        except ValidationError as exc:
            raise BackendUnavailable(self.CMD_GET_TOPIC_INFO, str(exc)) from exc


__all__ = [
    "BackendClient",
    "Notifier",
]
