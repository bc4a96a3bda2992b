"""Topic metadata models."""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, Field

from kafkalens.constants.values import CLEANUP_POLICY_CONFIG


class TopicIdentity(NamedTuple):
    """The (cluster, topic) pair that scopes caching, polling and result discard."""

    cluster_id: str
    topic_name: str

    def __str__(self) -> str:
        return f"{self.cluster_id}/{self.topic_name}"


class PartitionInfo(BaseModel):
    """Partition replication summary."""

    id: int
    isr: int = 0
    replicas: int = 0


class PartitionOffset(BaseModel):
    """Last offset of one partition."""

    partition: int
    offset: int = Field(ge=0)


class TopicInfo(BaseModel):
    """Topic description returned by the backend."""

    name: str = ""
    partitions: list[PartitionInfo] = Field(default_factory=list)
    configurations: dict[str, str | None] = Field(default_factory=dict)

    @property
    def partition_count(self) -> int:
        return len(self.partitions)

    @property
    def cleanup_policy(self) -> str | None:
        return self.configurations.get(CLEANUP_POLICY_CONFIG)


def estimate_record_count(offsets: list[PartitionOffset]) -> int:
    """Estimate the topic size as the sum of the partitions' last offsets."""
    return sum(po.offset for po in offsets)
