"""Keyboard bindings module.

- app: App-level bindings (APP_BINDINGS)
- topic: Topic screen bindings (TOPIC_SCREEN_BINDINGS)
"""

from kafkalens.keyboard.app import APP_BINDINGS
from kafkalens.keyboard.topic import TOPIC_SCREEN_BINDINGS

__all__ = [
    "APP_BINDINGS",
    "TOPIC_SCREEN_BINDINGS",
]
