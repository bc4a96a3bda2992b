"""Consumer models."""

from kafkalens.models.consumer.consumer_status import ConsumerConfig, ConsumerStatus

__all__ = [
    "ConsumerConfig",
    "ConsumerStatus",
]
