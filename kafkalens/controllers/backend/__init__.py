"""Backend command access."""

from kafkalens.controllers.backend.client import BackendClient, Notifier
from kafkalens.controllers.backend.runner import CommandRunner, SubprocessCommandRunner

__all__ = [
    "BackendClient",
    "CommandRunner",
    "Notifier",
    "SubprocessCommandRunner",
]
