"""Controllers module for KafkaLens TUI.

This module provides the controllers behind the topic view: backend command
access, the consumer lifecycle, and record queries.
"""

from __future__ import annotations

# Backend
from kafkalens.controllers.backend import (
    BackendClient,
    CommandRunner,
    Notifier,
    SubprocessCommandRunner,
)

# Base classes
from kafkalens.controllers.base import BaseController, ObservableMixin

# Consumer domain
from kafkalens.controllers.consumer import (
    ConsumerLifecycleController,
    PollSubscription,
)

# Query domain
from kafkalens.controllers.query import (
    ImperativeQueryTrigger,
    QueryTargetSlot,
    RecordsQuery,
)

__all__ = [
    "BackendClient",
    "BaseController",
    "CommandRunner",
    "ConsumerLifecycleController",
    "ImperativeQueryTrigger",
    "Notifier",
    "ObservableMixin",
    "PollSubscription",
    "QueryTargetSlot",
    "RecordsQuery",
    "SubprocessCommandRunner",
]
