"""Topic screen package."""

from kafkalens.screens.topic.consumer_start_screen import (
    ConsumerStartScreen,
    build_consumer_config,
)
from kafkalens.screens.topic.presenter import (
    TopicPageState,
    TopicSummary,
    TopicViewCoordinator,
    topic_cache_key,
)
from kafkalens.screens.topic.topic_screen import TopicPickerScreen, TopicScreen

__all__ = [
    "ConsumerStartScreen",
    "TopicPageState",
    "TopicPickerScreen",
    "TopicScreen",
    "TopicSummary",
    "TopicViewCoordinator",
    "build_consumer_config",
    "topic_cache_key",
]
