"""Fixed-rate polling owned by one topic view identity."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from kafkalens.models.topics.topic_info import TopicIdentity

logger = logging.getLogger(__name__)


class PollSubscription:
    """Runs ``tick`` every ``interval_ms`` until stopped.

    Only the timer loop is cancelled by ``stop()``. A tick already in flight
    is shielded and runs to completion; its owner decides whether the result
    is still wanted. Ticks never overlap because the loop awaits each one
    before sleeping again.
    """

    def __init__(self, identity: TopicIdentity, tick: Callable[[], Awaitable[object]]) -> None:
        self._identity = identity
        self._tick = tick
        self._interval_ms: int | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def identity(self) -> TopicIdentity:
        return self._identity

    @property
    def interval_ms(self) -> int | None:
        """Current interval, or None when polling is disabled."""
        return self._interval_ms

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval_ms: int) -> None:
        """Arm (or re-arm) polling at a fixed interval. Needs a running loop."""
        if interval_ms <= 0:
            raise ValueError(f"poll interval must be positive, got {interval_ms}")
        self.stop()
        self._interval_ms = interval_ms
        self._task = asyncio.get_running_loop().create_task(
            self._run(interval_ms / 1000), name=f"poll-{self._identity}"
        )
        logger.debug("Polling %s every %sms", self._identity, interval_ms)

    def stop(self) -> None:
        """Disable polling. Safe to call when already stopped."""
        self._interval_ms = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Polling stopped for %s", self._identity)

    async def _run(self, delay_seconds: float) -> None:
        while True:
            await asyncio.sleep(delay_seconds)
            try:
                await asyncio.shield(self._tick())
            except Exception:
                logger.exception("Poll tick failed for %s", self._identity)


__all__ = [
    "PollSubscription",
]
