"""Base controller with identity-scoped, listener-driven patterns for KafkaLens.

Controllers are bound to one topic view identity at a time and tell the view
about state changes through plain callbacks, so they can be driven from
Textual workers as well as from tests without an app.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from kafkalens.models.topics.topic_info import TopicIdentity

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ObservableMixin:
    """Mixin providing change listeners.

    Listeners are called synchronously after every applied change. They
    should only read state and schedule UI refreshes.
    """

    def __init__(self) -> None:
        """Initialize the listener registry."""
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            listener()


class BaseController(ObservableMixin, ABC):
    """Base class for controllers scoped to a (cluster, topic) identity.

    Subclasses implement ``mount``/``unmount``; responses that arrive for an
    identity other than the mounted one must be discarded.
    """

    def __init__(self) -> None:
        super().__init__()
        self._identity: TopicIdentity | None = None

    @property
    def identity(self) -> TopicIdentity | None:
        return self._identity

    @property
    def is_mounted(self) -> bool:
        return self._identity is not None

    def is_current(self, identity: TopicIdentity | None) -> bool:
        """True when ``identity`` is the one currently mounted."""
        return identity is not None and identity == self._identity

    @abstractmethod
    async def mount(self, cluster_id: str, topic_name: str) -> None:
        """Bind the controller to a topic view identity."""
        ...

    @abstractmethod
    def unmount(self) -> None:
        """Release the current identity and stop background activity."""
        ...
