"""Consumer lifecycle controller.

Drives the backend consumption process for the mounted topic view through
``IDLE -> STARTING -> RUNNING -> STOPPING -> IDLE`` and keeps the last
polled ``ConsumerStatus``. ``UNAVAILABLE`` is entered when the backend cannot
create the process and is left only through ``reset()``.

Status responses are guarded by the mounted identity and a poll epoch that
advances on every mount, start, stop and unmount. Within one epoch the last
response to complete wins.
"""

from __future__ import annotations

import asyncio
import logging

from kafkalens.constants.enums import ConsumerState
from kafkalens.constants.timeouts import CONSUMER_POLL_INTERVAL_MS
from kafkalens.controllers.backend.client import BackendClient
from kafkalens.controllers.base import BaseController
from kafkalens.controllers.consumer.poll_subscription import PollSubscription
from kafkalens.errors import (
    BackendUnavailable,
    ConsumerUnavailable,
    InvalidTransitionError,
    StaleResult,
    TransientPollFailure,
)
from kafkalens.models.consumer.consumer_status import ConsumerConfig, ConsumerStatus
from kafkalens.models.topics.topic_info import TopicIdentity

logger = logging.getLogger(__name__)

_PollKey = tuple[TopicIdentity, int]


class ConsumerLifecycleController(BaseController):
    """Starts, stops and polls the consumer of one topic view."""

    def __init__(
        self,
        backend: BackendClient,
        *,
        poll_interval_ms: int = CONSUMER_POLL_INTERVAL_MS,
    ) -> None:
        super().__init__()
        if poll_interval_ms <= 0:
            raise ValueError(f"poll interval must be positive, got {poll_interval_ms}")
        self._backend = backend
        self._poll_interval_ms = poll_interval_ms
        self._state = ConsumerState.IDLE
        self._status: ConsumerStatus | None = None
        self._subscription: PollSubscription | None = None
        self._epoch = 0
        self._inflight: asyncio.Task[ConsumerStatus] | None = None
        self._inflight_key: _PollKey | None = None
        self._poll_failing = False
        self._last_error: str | None = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def status(self) -> ConsumerStatus | None:
        """Last applied snapshot, None until the first poll for this identity."""
        return self._status

    @property
    def is_loading(self) -> bool:
        return self.is_mounted and self._status is None

    @property
    def is_running(self) -> bool:
        return self._status.is_running if self._status is not None else False

    @property
    def record_count(self) -> int:
        return self._status.record_count if self._status is not None else 0

    @property
    def poll_interval_ms(self) -> int | None:
        """Active polling interval, None when polling is disabled."""
        if self._subscription is None:
            return None
        return self._subscription.interval_ms

    @property
    def can_start(self) -> bool:
        return self.is_mounted and self._state is ConsumerState.IDLE

    @property
    def can_stop(self) -> bool:
        return self.is_mounted and self._state is ConsumerState.RUNNING

    @property
    def last_error(self) -> str | None:
        return self._last_error

    # =========================================================================
    # Identity
    # =========================================================================

    async def mount(self, cluster_id: str, topic_name: str) -> None:
        """Bind to a topic and fetch its current consumer status once."""
        self.bind(cluster_id, topic_name)
        await self.refresh()

    def bind(self, cluster_id: str, topic_name: str) -> None:
        """Synchronous part of ``mount``: switch identity, status unknown."""
        identity = TopicIdentity(cluster_id, topic_name)
        if self._identity is not None:
            self.unmount()

        self._identity = identity
        self._state = ConsumerState.IDLE
        self._status = None
        self._poll_failing = False
        self._last_error = None
        self._epoch += 1
        self._subscription = PollSubscription(identity, self.refresh)
        logger.debug("Consumer controller mounted for %s", identity)
        self._notify_listeners()

    def unmount(self) -> None:
        """Disable polling; responses still in flight will be discarded."""
        if self._subscription is not None:
            self._subscription.stop()
        self._subscription = None
        identity, self._identity = self._identity, None
        self._epoch += 1
        self._state = ConsumerState.IDLE
        self._status = None
        self._poll_failing = False
        if identity is not None:
            logger.debug("Consumer controller unmounted from %s", identity)
            self._notify_listeners()

    # =========================================================================
    # Lifecycle transitions
    # =========================================================================

    async def start(
        self,
        cluster_id: str,
        topic_name: str,
        config: ConsumerConfig | None = None,
    ) -> None:
        """Start consuming. Only valid from IDLE.

        Raises:
            InvalidTransitionError: Not mounted on this topic, or not IDLE.
            BackendUnavailable: The backend rejected the request; the state
                returns to IDLE (UNAVAILABLE for ``ConsumerUnavailable``).
        """
        identity = self._require_mounted(cluster_id, topic_name, "start")
        if self._state is not ConsumerState.IDLE:
            raise InvalidTransitionError("start", self._state)

        self._last_error = None
        self._advance_epoch()
        self._set_state(ConsumerState.STARTING)
        try:
            await self._backend.start_consumer(cluster_id, topic_name, config)
        except ConsumerUnavailable as exc:
            if self._still_in(identity, ConsumerState.STARTING):
                self._last_error = exc.message
                self._set_state(ConsumerState.UNAVAILABLE)
            raise
        except BackendUnavailable as exc:
            if self._still_in(identity, ConsumerState.STARTING):
                self._last_error = exc.message
                self._set_state(ConsumerState.IDLE)
            raise
        except Exception as exc:
            if self._still_in(identity, ConsumerState.STARTING):
                logger.exception("Unexpected error starting consumer for %s", identity)
                self._last_error = str(exc)
                self._set_state(ConsumerState.IDLE)
            raise

        if not self._still_in(identity, ConsumerState.STARTING):
            logger.debug("Start acknowledged for %s after the view changed", identity)
            return

        self._set_state(ConsumerState.RUNNING)
        self._arm_polling()
        await self.refresh()

    async def stop(self, cluster_id: str, topic_name: str) -> None:
        """Stop consuming. Only valid from RUNNING.

        Polling is disabled before the request is sent, and every status
        response issued before the stop is discarded.

        Raises:
            InvalidTransitionError: Not mounted on this topic, or not RUNNING.
            BackendUnavailable: The backend rejected the request; the state
                returns to RUNNING and polling resumes.
        """
        identity = self._require_mounted(cluster_id, topic_name, "stop")
        if self._state is not ConsumerState.RUNNING:
            raise InvalidTransitionError("stop", self._state)

        self._last_error = None
        self._advance_epoch()
        self._set_state(ConsumerState.STOPPING)
        self._disarm_polling()
        try:
            await self._backend.stop_consumer(cluster_id, topic_name)
        except BackendUnavailable as exc:
            self._resume_after_failed_stop(identity, exc.message)
            raise
        except Exception as exc:
            logger.exception("Unexpected error stopping consumer for %s", identity)
            self._resume_after_failed_stop(identity, str(exc))
            raise

        if not self._still_in(identity, ConsumerState.STOPPING):
            logger.debug("Stop acknowledged for %s after the view changed", identity)
            return

        # Polls issued while STOPPING must not resurrect RUNNING
        self._advance_epoch()
        if self._status is not None:
            self._status = self._status.model_copy(update={"is_running": False})
        self._set_state(ConsumerState.IDLE)

    def reset(self) -> None:
        """Leave UNAVAILABLE so the user can retry ``start``."""
        if self._state is not ConsumerState.UNAVAILABLE:
            raise InvalidTransitionError("reset", self._state)
        self._set_state(ConsumerState.IDLE)

    # =========================================================================
    # Polling
    # =========================================================================

    async def refresh(self) -> ConsumerStatus | None:
        """Poll the backend once and apply the response if still current.

        Concurrent calls for the same identity and epoch share one request.
        Poll failures are absorbed: the state is unchanged and the next tick
        retries.
        """
        identity = self._identity
        if identity is None:
            return None
        key: _PollKey = (identity, self._epoch)

        inflight = self._inflight
        if inflight is not None and self._inflight_key == key and not inflight.done():
            try:
                await asyncio.shield(inflight)
            except TransientPollFailure:
                pass  # reported by the request owner
            return self._status

        task = asyncio.ensure_future(self._fetch_status(identity))
        self._inflight = task
        self._inflight_key = key
        try:
            status = await asyncio.shield(task)
        except TransientPollFailure as exc:
            self._on_poll_failure(key, exc)
            return self._status
        finally:
            if self._inflight is task:
                self._inflight = None
                self._inflight_key = None

        try:
            self._apply_status(key, status)
        except StaleResult:
            logger.debug("Discarded stale consumer status for %s", identity)
        return self._status

    async def _fetch_status(self, identity: TopicIdentity) -> ConsumerStatus:
        # Only the first failure of a streak reaches the user
        return await self._backend.get_consumer_state(
            identity.cluster_id,
            identity.topic_name,
            notify=not self._poll_failing,
        )

    def _apply_status(self, key: _PollKey, status: ConsumerStatus) -> None:
        identity, epoch = key
        if not self.is_current(identity) or epoch != self._epoch:
            raise StaleResult(f"status for {identity} from epoch {epoch}")

        self._poll_failing = False
        self._status = status
        if self._state is ConsumerState.IDLE and status.is_running:
            # Consumer kept running in the backend while the view was away
            logger.info("Consumer for %s is already running, resuming polling", identity)
            self._state = ConsumerState.RUNNING
            self._arm_polling()
        self._notify_listeners()

    def _on_poll_failure(self, key: _PollKey, exc: TransientPollFailure) -> None:
        identity, epoch = key
        if not self.is_current(identity) or epoch != self._epoch:
            logger.debug("Ignored poll failure for stale request %s", identity)
            return
        if self._poll_failing:
            logger.debug("Consumer status poll still failing for %s: %s", identity, exc.message)
        else:
            logger.warning("Consumer status poll failed for %s: %s", identity, exc.message)
        self._poll_failing = True
        self._last_error = exc.message
        self._notify_listeners()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_mounted(self, cluster_id: str, topic_name: str, operation: str) -> TopicIdentity:
        identity = TopicIdentity(cluster_id, topic_name)
        if not self.is_current(identity):
            raise InvalidTransitionError(operation, f"not mounted on {identity}")
        return identity

    def _still_in(self, identity: TopicIdentity, state: ConsumerState) -> bool:
        return self.is_current(identity) and self._state is state

    def _resume_after_failed_stop(self, identity: TopicIdentity, error: str) -> None:
        if self._still_in(identity, ConsumerState.STOPPING):
            self._last_error = error
            self._set_state(ConsumerState.RUNNING)
            self._arm_polling()

    def _advance_epoch(self) -> None:
        self._epoch += 1

    def _set_state(self, state: ConsumerState) -> None:
        if state is self._state:
            return
        logger.debug("Consumer %s: %s -> %s", self._identity, self._state.value, state.value)
        self._state = state
        self._notify_listeners()

    def _arm_polling(self) -> None:
        if self._subscription is not None:
            self._subscription.start(self._poll_interval_ms)

    def _disarm_polling(self) -> None:
        if self._subscription is not None:
            self._subscription.stop()


__all__ = [
    "ConsumerLifecycleController",
]
