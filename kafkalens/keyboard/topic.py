"""Topic screen keyboard bindings."""

from textual.binding import Binding

TOPIC_SCREEN_BINDINGS: list[Binding] = [
    Binding("ctrl+r", "run_query", "Run query", priority=True),
    Binding("ctrl+t", "toggle_consumer", "Consume/Stop", priority=True),
    Binding("ctrl+n", "next_page", "More records"),
    Binding("f5", "refresh", "Refresh"),
]

__all__ = [
    "TOPIC_SCREEN_BINDINGS",
]
