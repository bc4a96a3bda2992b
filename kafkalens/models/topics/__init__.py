"""Topic models."""

from kafkalens.models.topics.topic_info import (
    PartitionInfo,
    PartitionOffset,
    TopicIdentity,
    TopicInfo,
    estimate_record_count,
)

__all__ = [
    "PartitionInfo",
    "PartitionOffset",
    "TopicIdentity",
    "TopicInfo",
    "estimate_record_count",
]
