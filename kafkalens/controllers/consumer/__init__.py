"""Consumer lifecycle domain."""

from kafkalens.controllers.consumer.controller import ConsumerLifecycleController
from kafkalens.controllers.consumer.poll_subscription import PollSubscription

__all__ = [
    "ConsumerLifecycleController",
    "PollSubscription",
]
