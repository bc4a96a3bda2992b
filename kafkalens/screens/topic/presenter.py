"""Topic screen presenter - composes caching, consumer lifecycle and queries.

One ``TopicViewCoordinator`` lives as long as its screen. ``mount`` binds it to
a (cluster, topic) identity; ``unmount`` drops everything identity-scoped
except the query text, which stays in the navigation cache for the next
visit.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from kafkalens.constants.enums import ConsumerState
from kafkalens.constants.values import PENDING_VALUE, TOPIC_PAGE_CACHE_PREFIX
from kafkalens.controllers.backend.client import BackendClient, Notifier
from kafkalens.controllers.base import ObservableMixin
from kafkalens.controllers.consumer import ConsumerLifecycleController
from kafkalens.controllers.query import (
    ImperativeQueryTrigger,
    QueryTargetSlot,
    RecordsQuery,
)
from kafkalens.errors import BackendUnavailable, InvalidTransitionError, TemplateError
from kafkalens.models.cache.navigation_cache import CacheSubscription, NavigationScopedCache
from kafkalens.models.consumer.consumer_status import ConsumerConfig
from kafkalens.models.records.record_row import RecordRow
from kafkalens.models.state.app_settings import AppSettings
from kafkalens.models.topics.topic_info import (
    TopicIdentity,
    estimate_record_count,
)
from kafkalens.utils.query_template import TOPIC, QueryTemplateEngine

logger = logging.getLogger(__name__)


def topic_cache_key(identity: TopicIdentity) -> str:
    """Navigation cache key holding the view state of one topic page."""
    return f"{TOPIC_PAGE_CACHE_PREFIX}-{identity.cluster_id}-{identity.topic_name}"


@dataclass(frozen=True)
class TopicPageState:
    """Cached view state of a topic page."""

    query: str


@dataclass(frozen=True)
class TopicSummary:
    """Header information for a topic page; None means not loaded."""

    estimated_records: int | None = None
    partition_count: int | None = None
    cleanup_policy: str | None = None

    def subtitle(self) -> str:
        def _fmt(value: object) -> str:
            return PENDING_VALUE if value is None else str(value)

        return (
            f"Estimated Records: {_fmt(self.estimated_records)}, "
            f"Cleanup policy: {_fmt(self.cleanup_policy)}, "
            f"Partitions: {_fmt(self.partition_count)}"
        )


class TopicViewCoordinator(ObservableMixin):
    """Presenter for TopicScreen - one topic-inspection session."""

    def __init__(
        self,
        backend: BackendClient,
        cache: NavigationScopedCache,
        *,
        settings: AppSettings | None = None,
        notifier: Notifier | None = None,
        engine: QueryTemplateEngine | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._cache = cache
        self._settings = settings or AppSettings()
        self._notifier = notifier
        self._engine = engine or QueryTemplateEngine()
        self._consumer = ConsumerLifecycleController(
            backend, poll_interval_ms=self._settings.poll_interval_ms
        )
        self._consumer.add_listener(self._notify_listeners)
        self._slot = QueryTargetSlot()
        self._identity: TopicIdentity | None = None
        self._page_state: CacheSubscription[TopicPageState] | None = None
        self._records: RecordsQuery | None = None
        self._remove_records_listener: Callable[[], None] | None = None
        self._trigger: ImperativeQueryTrigger | None = None
        self._summary = TopicSummary()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def identity(self) -> TopicIdentity | None:
        return self._identity

    @property
    def is_mounted(self) -> bool:
        return self._identity is not None

    @property
    def consumer(self) -> ConsumerLifecycleController:
        return self._consumer

    @property
    def records(self) -> RecordsQuery | None:
        return self._records

    @property
    def trigger(self) -> ImperativeQueryTrigger | None:
        return self._trigger

    @property
    def summary(self) -> TopicSummary:
        return self._summary

    @property
    def query_text(self) -> str:
        if self._page_state is None:
            return self._settings.default_query
        return self._page_state.value.query

    @property
    def consumer_button_label(self) -> str:
        return "Stop" if self._consumer.state is ConsumerState.RUNNING else "Consume"

    # =========================================================================
    # Mount / unmount
    # =========================================================================

    async def mount(self, cluster_id: str, topic_name: str) -> None:
        """Bind the view to a topic: restore cached state, poll, wire queries."""
        if self.attach(cluster_id, topic_name):
            await self.load()

    def attach(self, cluster_id: str, topic_name: str) -> bool:
        """Synchronous part of ``mount``.

        Returns False when the identity is already mounted.
        """
        identity = TopicIdentity(cluster_id, topic_name)
        if identity == self._identity:
            return False
        if self._identity is not None:
            self.unmount()

        self._identity = identity
        self._page_state = self._cache.subscribe(
            topic_cache_key(identity),
            TopicPageState(query=self._settings.default_query),
        )
        records = RecordsQuery(
            self._backend,
            identity,
            page_size=self._settings.page_size,
            engine=self._engine,
        )
        self._records = records
        self._remove_records_listener = records.add_listener(self._notify_listeners)
        self._slot.bind(records)
        self._trigger = ImperativeQueryTrigger(self._slot, identity)
        self._summary = TopicSummary()
        self._consumer.bind(cluster_id, topic_name)
        logger.info("Topic view mounted for %s", identity)
        self._notify_listeners()
        return True

    async def load(self) -> None:
        """Fetch the consumer status and the topic summary for the mounted topic."""
        if self._identity is None:
            return
        await asyncio.gather(self._consumer.refresh(), self.load_summary())

    def unmount(self) -> None:
        """Tear down polling and queries; the cached query text survives."""
        identity, self._identity = self._identity, None
        if identity is None:
            return
        self._consumer.unmount()
        if self._records is not None:
            self._slot.unbind(self._records)
            self._records.close()
        if self._remove_records_listener is not None:
            self._remove_records_listener()
        self._remove_records_listener = None
        self._records = None
        self._trigger = None
        if self._page_state is not None:
            self._page_state.close()
        self._page_state = None
        self._summary = TopicSummary()
        logger.info("Topic view unmounted from %s", identity)
        self._notify_listeners()

    # =========================================================================
    # Topic summary
    # =========================================================================

    async def load_summary(self) -> TopicSummary:
        """Load estimated size, partition count and cleanup policy.

        Failures were already reported by the backend client; the affected
        fields stay unknown.
        """
        identity = self._identity
        if identity is None:
            return self._summary

        offsets_result, info_result = await asyncio.gather(
            self._backend.get_last_offsets(identity.cluster_id, [identity.topic_name]),
            self._backend.get_topic_info(identity.cluster_id, identity.topic_name),
            return_exceptions=True,
        )
        for result in (offsets_result, info_result):
            if isinstance(result, BaseException) and not isinstance(result, BackendUnavailable):
                raise result

        if identity != self._identity:
            logger.debug("Discarded topic summary for %s", identity)
            return self._summary

        summary = TopicSummary()
        if isinstance(offsets_result, BackendUnavailable):
            logger.warning("Estimated records unavailable for %s", identity)
        else:
            summary = replace(
                summary,
                estimated_records=estimate_record_count(
                    offsets_result.get(identity.topic_name, [])
                ),
            )
        if isinstance(info_result, BackendUnavailable):
            logger.warning("Topic info unavailable for %s", identity)
        else:
            summary = replace(
                summary,
                partition_count=info_result.partition_count,
                cleanup_policy=info_result.cleanup_policy,
            )

        self._summary = summary
        self._notify_listeners()
        return summary

    # =========================================================================
    # Query
    # =========================================================================

    def edit_query(self, text: str) -> None:
        """Store the edited query text. Does not execute it."""
        if self._page_state is None:
            logger.debug("Query edit ignored, no topic mounted")
            return
        self._page_state.set(lambda state: replace(state, query=text))

    async def run_query(self) -> list[RecordRow] | None:
        """Resolve the cached query for this topic and execute it.

        Returns the rows, or None when superseded by a later run.

        Raises:
            TemplateError: The query cannot be resolved; reported to the user.
            BackendUnavailable: The query failed in the backend.
        """
        identity = self._identity
        trigger = self._trigger
        if identity is None or trigger is None:
            raise InvalidTransitionError("run query", "no topic mounted")

        try:
            resolved = self._engine.resolve(self.query_text, {TOPIC: identity.topic_name})
            return await trigger.execute_query(resolved)
        except TemplateError as exc:
            logger.warning("Query for %s rejected: %s", identity, exc)
            self._report("Invalid query", str(exc))
            raise

    async def fetch_next_page(self) -> list[RecordRow] | None:
        if self._records is None:
            return None
        return await self._records.fetch_next_page()

    # =========================================================================
    # Consumer
    # =========================================================================

    async def toggle_consumer(self, config: ConsumerConfig | None = None) -> None:
        """Stop a running consumer or start an idle one.

        From UNAVAILABLE the toggle is the explicit retry: reset, then start.
        Calls made while a start/stop is pending are ignored.
        """
        identity = self._identity
        if identity is None:
            raise InvalidTransitionError("toggle", "no topic mounted")

        state = self._consumer.state
        if state is ConsumerState.RUNNING:
            await self._consumer.stop(identity.cluster_id, identity.topic_name)
        elif state in (ConsumerState.IDLE, ConsumerState.UNAVAILABLE):
            if state is ConsumerState.UNAVAILABLE:
                self._consumer.reset()
            await self._consumer.start(identity.cluster_id, identity.topic_name, config)
        else:
            logger.debug("Consumer toggle ignored while %s", state.value)

    def _report(self, title: str, description: str) -> None:
        if self._notifier is not None:
            self._notifier(title, description)


__all__ = [
    "TopicPageState",
    "TopicSummary",
    "TopicViewCoordinator",
    "topic_cache_key",
]
