"""Command runner for the KafkaLens backend process.

The consumption engine lives in a separate backend executable. Every command
is one invocation::

    kafkalens-backend <command> '<json arguments>'

On success the process prints the JSON result on stdout. On failure it exits
non-zero and prints ``{"errorType": ..., "message": ...}`` on stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
import subprocess
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from kafkalens.errors import BackendError

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str, Mapping[str, Any]], Awaitable[Any]]
"""Async callable ``(command, arguments) -> decoded JSON result``."""


class SubprocessCommandRunner:
    """Runs backend commands as subprocesses off the event loop."""

    def __init__(self, executable: str) -> None:
        self._argv = shlex.split(executable)
        if not self._argv:
            raise ValueError("backend executable must not be empty")

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def _run_sync(self, command: str, arguments: Mapping[str, Any]) -> Any:
        """Run one command synchronously (thread-safe wrapper target)."""
        cmd = [*self._argv, command, json.dumps(dict(arguments))]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, encoding="utf-8", errors="replace"
            )
        except OSError as exc:
            raise BackendError("Backend not available", str(exc)) from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            try:
                payload = json.loads(stderr)
            except json.JSONDecodeError:
                payload = None
            if payload is None:
                raise BackendError(
                    "Backend error",
                    stderr or f"{command} exited with status {result.returncode}",
                )
            raise BackendError.from_payload(payload, fallback=stderr)

        output = (result.stdout or "").strip()
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise BackendError("Invalid backend response", f"{command}: {exc}") from exc

    async def __call__(self, command: str, arguments: Mapping[str, Any]) -> Any:
        logger.debug("Invoking backend command %s", command)
        return await asyncio.to_thread(self._run_sync, command, arguments)


__all__ = [
    "CommandRunner",
    "SubprocessCommandRunner",
]
