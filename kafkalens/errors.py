"""Exception hierarchy for KafkaLens.

Backend failures are wrapped into typed errors so the controller state
machines can react to them. Every error here is recoverable by a user retry.
"""

from __future__ import annotations

from typing import Any


class KafkaLensError(Exception):
    """Base exception for all KafkaLens errors."""


# =============================================================================
# Backend errors
# =============================================================================


class BackendError(KafkaLensError):
    """Raw failure reported by the backend command runner.

    Mirrors the ``{"errorType": ..., "message": ...}`` payload the backend
    process writes on failure.
    """

    def __init__(self, error_type: str, message: str) -> None:
        super().__init__(f"{error_type}: {message}")
        self.error_type = error_type
        self.message = message

    @classmethod
    def from_payload(cls, payload: Any, fallback: str = "") -> BackendError:
        """Build from a decoded error payload, tolerating unexpected shapes."""
        if isinstance(payload, dict):
            return cls(
                str(payload.get("errorType") or "Backend error"),
                str(payload.get("message") or fallback),
            )
        return cls("Backend error", fallback or str(payload))


class BackendUnavailable(KafkaLensError):
    """A start/stop/query dispatch failed before acknowledgment."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command} failed: {message}")
        self.command = command
        self.message = message


class ConsumerUnavailable(BackendUnavailable):
    """The backend cannot create the consumption process."""


class TransientPollFailure(KafkaLensError):
    """A single consumer status poll failed."""

    def __init__(self, cluster_id: str, topic_name: str, message: str) -> None:
        super().__init__(f"Status poll for {cluster_id}/{topic_name} failed: {message}")
        self.cluster_id = cluster_id
        self.topic_name = topic_name
        self.message = message


# =============================================================================
# Local errors
# =============================================================================


class TemplateError(KafkaLensError):
    """Query template cannot be executed."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class StaleResult(KafkaLensError):  # noqa: N818
    """Signals a response that was discarded because it is out of date.

    Not an error condition: raised and caught internally only.
    """


class InvalidTransitionError(KafkaLensError):
    """Consumer lifecycle operation is not allowed in the current state."""

    def __init__(self, operation: str, state: Any) -> None:
        state_name = getattr(state, "value", state)
        super().__init__(f"Cannot {operation} consumer while {state_name}")
        self.operation = operation
        self.state = state


class InvalidTriggerError(KafkaLensError):
    """Query trigger was used after its topic view identity changed."""


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(KafkaLensError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""


__all__ = [
    "BackendError",
    "BackendUnavailable",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSaveError",
    "ConsumerUnavailable",
    "InvalidTransitionError",
    "InvalidTriggerError",
    "KafkaLensError",
    "StaleResult",
    "TemplateError",
    "TransientPollFailure",
]
