"""Shared fixtures for KafkaLens tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kafkalens.controllers.backend.client import BackendClient
from kafkalens.tests.fakes import FakeRunner, status_payload


@pytest.fixture
def fake_runner() -> FakeRunner:
    runner = FakeRunner()
    runner.responses = {
        BackendClient.CMD_GET_CONSUMER_STATE: status_payload(False, 0),
        BackendClient.CMD_START_CONSUMER: None,
        BackendClient.CMD_STOP_CONSUMER: None,
        BackendClient.CMD_GET_RECORDS: [],
        BackendClient.CMD_GET_LAST_OFFSETS: {},
        BackendClient.CMD_GET_TOPIC_INFO: {"name": "", "partitions": [], "configurations": {}},
    }
    return runner


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def backend(fake_runner: FakeRunner, notifier: MagicMock) -> BackendClient:
    return BackendClient(fake_runner, notifier=notifier)
