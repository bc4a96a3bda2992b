"""Tests for RecordsQuery and ImperativeQueryTrigger.

This module tests:
- Query execution and paging placeholders
- Last-caller-wins for overlapping executions
- Error propagation
- Trigger validity across identity changes
"""

from __future__ import annotations

import asyncio

import pytest

from kafkalens.controllers.backend.client import BackendClient
from kafkalens.controllers.query import (
    ImperativeQueryTrigger,
    QueryTargetSlot,
    RecordsQuery,
)
from kafkalens.errors import BackendError, BackendUnavailable, InvalidTriggerError, TemplateError
from kafkalens.models.topics.topic_info import TopicIdentity
from kafkalens.tests.fakes import FakeRunner, Gate

IDENTITY = TopicIdentity("c1", "orders")
PAGED_QUERY = "SELECT * FROM orders LIMIT {:limit} OFFSET {:offset}"


def _rows(count: int, start: int = 0) -> list[dict]:
    return [{"partition": 0, "offset": start + index} for index in range(count)]


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def records(backend: BackendClient) -> RecordsQuery:
    return RecordsQuery(backend, IDENTITY, page_size=2)


# =============================================================================
# RecordsQuery
# =============================================================================


class TestExecute:
    """Test query execution."""

    def test_rejects_non_positive_page_size(self, backend: BackendClient) -> None:
        with pytest.raises(ValueError):
            RecordsQuery(backend, IDENTITY, page_size=0)

    @pytest.mark.asyncio
    async def test_binds_paging_placeholders(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(2)

        rows = await records.execute(PAGED_QUERY)

        assert len(rows) == 2
        _, arguments = fake_runner.calls[-1]
        assert arguments == {
            "clusterId": "c1",
            "query": "SELECT * FROM orders LIMIT 2 OFFSET 0",
        }
        assert records.query == PAGED_QUERY
        assert records.has_more
        assert not records.is_loading

    @pytest.mark.asyncio
    async def test_unknown_placeholder_never_reaches_backend(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        with pytest.raises(TemplateError):
            await records.execute("SELECT * FROM orders WHERE p = {:partition}")

        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_fetch_next_page_appends(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(2)
        await records.execute(PAGED_QUERY)
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(1, start=2)

        await records.fetch_next_page()

        assert [row.offset for row in records.rows] == [0, 1, 2]
        assert records.page == 1
        assert not records.has_more
        _, arguments = fake_runner.calls[-1]
        assert arguments["query"].endswith("LIMIT 2 OFFSET 2")

    @pytest.mark.asyncio
    async def test_fetch_next_page_without_more(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        assert await records.fetch_next_page() is None
        assert fake_runner.calls == []

    @pytest.mark.asyncio
    async def test_next_page_waits_for_new_query(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        """Paging while a new query loads never mixes rows of two queries."""
        first_query = "SELECT 'q1' LIMIT {:limit} OFFSET {:offset}"
        second_query = "SELECT 'q2' LIMIT {:limit} OFFSET {:offset}"
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(2)
        await records.execute(first_query)
        gate = Gate(_rows(2, start=100))
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = gate
        pending = asyncio.create_task(records.execute(second_query))
        await gate.entered.wait()
        calls = len(fake_runner.calls)

        assert await records.fetch_next_page() is None
        assert len(fake_runner.calls) == calls
        assert records.query == first_query

        gate.release()
        await pending

        assert [row.offset for row in records.rows] == [100, 101]
        assert records.query == second_query
        assert records.page == 0

        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(1, start=102)
        await records.fetch_next_page()

        assert [row.offset for row in records.rows] == [100, 101, 102]
        _, arguments = fake_runner.calls[-1]
        assert arguments["query"] == "SELECT 'q2' LIMIT 2 OFFSET 2"

    @pytest.mark.asyncio
    async def test_failure_sets_error(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = BackendError("X", "bad sql")

        with pytest.raises(BackendUnavailable):
            await records.execute(PAGED_QUERY)

        assert records.error == "bad sql"
        assert not records.is_loading

    @pytest.mark.asyncio
    async def test_last_caller_wins(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        """An older execution finishing last does not overwrite newer rows."""
        slow = Gate(_rows(2, start=100))

        def respond(arguments: dict) -> object:
            if "slow" in arguments["query"]:
                return slow(arguments)
            return _rows(1, start=7)

        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = respond
        first = asyncio.create_task(records.execute("SELECT 'slow' LIMIT {:limit}"))
        await slow.entered.wait()

        second = await records.execute("SELECT 'fast' LIMIT {:limit}")
        slow.release()

        assert await first is None
        assert [row.offset for row in second] == [7]
        assert [row.offset for row in records.rows] == [7]
        assert records.query == "SELECT 'fast' LIMIT {:limit}"

    @pytest.mark.asyncio
    async def test_closed_discards_pending(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        gate = Gate(_rows(2))
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = gate
        pending = asyncio.create_task(records.execute(PAGED_QUERY))
        await gate.entered.wait()

        records.close()
        gate.release()

        assert await pending is None
        assert records.rows == []
        assert await records.execute(PAGED_QUERY) is None


# =============================================================================
# ImperativeQueryTrigger
# =============================================================================


class TestTrigger:
    """Test trigger dispatch and invalidation."""

    @pytest.mark.asyncio
    async def test_dispatches_to_bound_target(
        self, records: RecordsQuery, fake_runner: FakeRunner
    ) -> None:
        slot = QueryTargetSlot()
        slot.bind(records)
        trigger = ImperativeQueryTrigger(slot, IDENTITY)
        fake_runner.responses[BackendClient.CMD_GET_RECORDS] = _rows(1)

        rows = await trigger.execute_query(PAGED_QUERY)

        assert trigger.is_valid
        assert len(rows) == 1
        assert len(records.rows) == 1

    @pytest.mark.asyncio
    async def test_invalid_after_identity_change(
        self, records: RecordsQuery, backend: BackendClient
    ) -> None:
        slot = QueryTargetSlot()
        slot.bind(records)
        trigger = ImperativeQueryTrigger(slot, IDENTITY)

        slot.bind(RecordsQuery(backend, TopicIdentity("c1", "payments")))

        assert not trigger.is_valid
        with pytest.raises(InvalidTriggerError):
            await trigger.execute_query(PAGED_QUERY)

    @pytest.mark.asyncio
    async def test_invalid_after_unbind(self, records: RecordsQuery) -> None:
        slot = QueryTargetSlot()
        slot.bind(records)
        trigger = ImperativeQueryTrigger(slot, IDENTITY)

        slot.unbind(records)

        with pytest.raises(InvalidTriggerError):
            await trigger.execute_query(PAGED_QUERY)

    def test_unbind_ignores_other_target(
        self, records: RecordsQuery, backend: BackendClient
    ) -> None:
        slot = QueryTargetSlot()
        slot.bind(records)

        slot.unbind(RecordsQuery(backend, IDENTITY))

        assert slot.current is records
