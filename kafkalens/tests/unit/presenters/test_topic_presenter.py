"""Tests for TopicViewCoordinator.

This module tests:
- Cached query text surviving unmount and remount
- Query editing vs. execution
- Query resolution and error reporting
- Trigger invalidation on topic change
- Topic summary loading
- Consumer toggle
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from kafkalens.constants.enums import ConsumeFrom, ConsumerState
from kafkalens.controllers.backend.client import BackendClient
from kafkalens.errors import (
    BackendError,
    ConsumerUnavailable,
    InvalidTransitionError,
    InvalidTriggerError,
    TemplateError,
)
from kafkalens.models.cache.navigation_cache import NavigationScopedCache
from kafkalens.models.consumer.consumer_status import ConsumerConfig
from kafkalens.models.state.app_settings import AppSettings
from kafkalens.models.topics.topic_info import TopicIdentity
from kafkalens.screens.topic.presenter import (
    TopicSummary,
    TopicViewCoordinator,
    topic_cache_key,
)
from kafkalens.tests.fakes import FakeRunner, status_payload

CLUSTER = "c1"
TOPIC = "orders"
QUERY = "SELECT * FROM {:topic} LIMIT {:limit} OFFSET {:offset}"

# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def cache() -> NavigationScopedCache:
    return NavigationScopedCache()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(default_query=QUERY, page_size=20)


@pytest_asyncio.fixture
async def coordinator(
    backend: BackendClient,
    cache: NavigationScopedCache,
    settings: AppSettings,
    notifier: MagicMock,
) -> AsyncIterator[TopicViewCoordinator]:
    coord = TopicViewCoordinator(backend, cache, settings=settings, notifier=notifier)
    yield coord
    coord.unmount()


# =============================================================================
# Cache scoping
# =============================================================================


class TestNavigationCache:
    """Test query text persistence across visits."""

    def test_cache_key(self) -> None:
        assert topic_cache_key(TopicIdentity("c1", "orders")) == "topic-page-c1-orders"

    @pytest.mark.asyncio
    async def test_default_query_before_mount(self, coordinator: TopicViewCoordinator) -> None:
        assert coordinator.query_text == QUERY

    @pytest.mark.asyncio
    async def test_edited_query_survives_remount(
        self,
        coordinator: TopicViewCoordinator,
        cache: NavigationScopedCache,
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        coordinator.edit_query("SELECT 1 FROM {:topic}")
        coordinator.unmount()

        assert cache.subscriber_count("topic-page-c1-orders") == 0

        await coordinator.mount(CLUSTER, TOPIC)

        assert coordinator.query_text == "SELECT 1 FROM {:topic}"

    @pytest.mark.asyncio
    async def test_queries_are_per_topic(self, coordinator: TopicViewCoordinator) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        coordinator.edit_query("edited for orders")

        await coordinator.mount(CLUSTER, "payments")

        assert coordinator.query_text == QUERY

    @pytest.mark.asyncio
    async def test_edit_does_not_execute(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)

        coordinator.edit_query("SELECT 2 FROM {:topic}")

        assert fake_runner.count(BackendClient.CMD_GET_RECORDS) == 0

    @pytest.mark.asyncio
    async def test_remount_same_topic_is_noop(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        polls = fake_runner.count(BackendClient.CMD_GET_CONSUMER_STATE)

        await coordinator.mount(CLUSTER, TOPIC)

        assert fake_runner.count(BackendClient.CMD_GET_CONSUMER_STATE) == polls


# =============================================================================
# Queries
# =============================================================================


class TestRunQuery:
    """Test query execution through the trigger."""

    @pytest.mark.asyncio
    async def test_resolves_and_executes(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = [{"partition": 0, "offset": 1}]
        await coordinator.mount(CLUSTER, TOPIC)

        rows = await coordinator.run_query()

        assert len(rows) == 1
        _, arguments = fake_runner.calls[-1]
        assert arguments["query"] == "SELECT * FROM orders LIMIT 20 OFFSET 0"
        assert coordinator.records.rows == rows

    @pytest.mark.asyncio
    async def test_unresolvable_query_is_reported(
        self,
        coordinator: TopicViewCoordinator,
        fake_runner: FakeRunner,
        notifier: MagicMock,
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        coordinator.edit_query("SELECT * FROM {:topic} WHERE partition = {:partition}")

        with pytest.raises(TemplateError):
            await coordinator.run_query()

        assert fake_runner.count(BackendClient.CMD_GET_RECORDS) == 0
        assert notifier.call_args.args[0] == "Invalid query"

    @pytest.mark.asyncio
    async def test_run_query_requires_mount(self, coordinator: TopicViewCoordinator) -> None:
        with pytest.raises(InvalidTransitionError):
            await coordinator.run_query()

    @pytest.mark.asyncio
    async def test_previous_trigger_invalid_after_topic_change(
        self, coordinator: TopicViewCoordinator
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        stale_trigger = coordinator.trigger

        await coordinator.mount(CLUSTER, "payments")

        with pytest.raises(InvalidTriggerError):
            await stale_trigger.execute_query("SELECT 1")
        assert coordinator.trigger.is_valid

    @pytest.mark.asyncio
    async def test_next_page(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = [
            {"partition": 0, "offset": index} for index in range(20)
        ]
        await coordinator.mount(CLUSTER, TOPIC)
        await coordinator.run_query()

        await coordinator.fetch_next_page()

        _, arguments = fake_runner.calls[-1]
        assert arguments["query"] == "SELECT * FROM orders LIMIT 20 OFFSET 20"
        assert len(coordinator.records.rows) == 40


# =============================================================================
# Summary
# =============================================================================


class TestSummary:
    """Test topic header information."""

    def test_pending_subtitle(self) -> None:
        assert TopicSummary().subtitle() == (
            "Estimated Records: ..., Cleanup policy: ..., Partitions: ..."
        )

    @pytest.mark.asyncio
    async def test_summary_loaded_on_mount(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_LAST_OFFSETS] = {
            TOPIC: [{"partition": 0, "offset": 10}, {"partition": 1, "offset": 5}],
        }
        fake_runner.responses[BackendClient.CMD_GET_TOPIC_INFO] = {
            "name": TOPIC,
            "partitions": [{"id": 0}, {"id": 1}],
            "configurations": {"cleanup.policy": "delete"},
        }

        await coordinator.mount(CLUSTER, TOPIC)

        assert coordinator.summary.subtitle() == (
            "Estimated Records: 15, Cleanup policy: delete, Partitions: 2"
        )

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_other_fields(
        self,
        coordinator: TopicViewCoordinator,
        fake_runner: FakeRunner,
        notifier: MagicMock,
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_LAST_OFFSETS] = BackendError("X", "down")
        fake_runner.responses[BackendClient.CMD_GET_TOPIC_INFO] = {
            "name": TOPIC,
            "partitions": [{"id": 0}],
            "configurations": {},
        }

        await coordinator.mount(CLUSTER, TOPIC)

        assert coordinator.summary.estimated_records is None
        assert coordinator.summary.partition_count == 1
        notifier.assert_called_once()


# =============================================================================
# Consumer toggle
# =============================================================================


class TestToggleConsumer:
    """Test the consume/stop button behaviour."""

    @pytest.mark.asyncio
    async def test_toggle_starts_and_stops(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        assert coordinator.consumer_button_label == "Consume"
        fake_runner.responses[BackendClient.CMD_GET_CONSUMER_STATE] = status_payload(True, 1)

        await coordinator.toggle_consumer()

        assert coordinator.consumer.state is ConsumerState.RUNNING
        assert coordinator.consumer_button_label == "Stop"

        await coordinator.toggle_consumer()

        assert coordinator.consumer.state is ConsumerState.IDLE
        assert coordinator.consumer.poll_interval_ms is None

    @pytest.mark.asyncio
    async def test_toggle_retries_from_unavailable(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        fake_runner.responses[BackendClient.CMD_START_CONSUMER] = BackendError(
            "Resource exhausted", "too many consumers"
        )
        with pytest.raises(ConsumerUnavailable):
            await coordinator.toggle_consumer()
        assert coordinator.consumer.state is ConsumerState.UNAVAILABLE

        fake_runner.responses[BackendClient.CMD_START_CONSUMER] = None
        await coordinator.toggle_consumer()

        assert coordinator.consumer.state is ConsumerState.RUNNING
        assert fake_runner.count(BackendClient.CMD_START_CONSUMER) == 2

    @pytest.mark.asyncio
    async def test_unmount_stops_polling(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)
        await coordinator.toggle_consumer()

        coordinator.unmount()

        assert coordinator.consumer.poll_interval_ms is None
        assert coordinator.records is None
        assert coordinator.trigger is None

    @pytest.mark.asyncio
    async def test_toggle_passes_start_position(
        self, coordinator: TopicViewCoordinator, fake_runner: FakeRunner
    ) -> None:
        await coordinator.mount(CLUSTER, TOPIC)

        await coordinator.toggle_consumer(
            ConsumerConfig(consume_from=ConsumeFrom.TIMESTAMP, timestamp_ms=1_700_000_000_000)
        )

        starts = fake_runner.calls_for(BackendClient.CMD_START_CONSUMER)
        assert [args["config"] for args in starts] == [
            {"from": "Timestamp", "timestamp": 1_700_000_000_000}
        ]
