"""Utility modules for KafkaLens TUI."""

from kafkalens.utils.query_template import (
    QueryTemplateEngine,
    TemplateResolution,
    placeholders,
    resolve,
)

__all__ = [
    "QueryTemplateEngine",
    "TemplateResolution",
    "placeholders",
    "resolve",
]
