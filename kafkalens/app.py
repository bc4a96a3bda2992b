"""Main application class for KafkaLens TUI."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import App
from textual.binding import Binding

from kafkalens.constants import APP_TITLE, NotificationSeverity
from kafkalens.controllers.backend import (
    BackendClient,
    CommandRunner,
    SubprocessCommandRunner,
)
from kafkalens.keyboard.app import APP_BINDINGS
from kafkalens.models.cache.navigation_cache import NavigationScopedCache
from kafkalens.models.state.config_manager import (
    AppSettings,
    ConfigLoadError,
    ConfigManager,
)
from kafkalens.screens.topic import (
    TopicPickerScreen,
    TopicScreen,
    TopicViewCoordinator,
)

logger = logging.getLogger(__name__)


class KafkaLensApp(App[None]):
    """Main TUI application for KafkaLens.

    Owns the objects that must outlive a single screen: settings, the
    navigation cache and the backend client.
    """

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS

    # Type hint for settings attribute
    settings: AppSettings

    def __init__(
        self,
        cluster_id: str,
        topic_name: str,
        *,
        settings: AppSettings | None = None,
        config_path: Path | None = None,
        runner: CommandRunner | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.cluster_id = cluster_id
        self.topic_name = topic_name
        self.config_path = config_path

        if settings is None:
            self._load_settings()
        else:
            self.settings = settings

        self.navigation_cache = NavigationScopedCache(
            max_entries=self.settings.cache_max_entries or None
        )
        self.backend = BackendClient(
            runner or SubprocessCommandRunner(self.settings.backend_command),
            notifier=self.notify_error,
        )

    def _load_settings(self) -> None:
        """Load application settings from persistent storage."""
        try:
            self.settings = ConfigManager.load(self.config_path)
        except ConfigLoadError as exc:
            # Use defaults if loading fails
            logger.warning("Using default settings: %s", exc)
            self.settings = AppSettings()

    def notify_error(self, title: str, description: str) -> None:
        """Notification channel for backend and query errors."""
        self.notify(description, title=title, severity=NotificationSeverity.ERROR.value)

    def create_topic_screen(self, cluster_id: str, topic_name: str) -> TopicScreen:
        coordinator = TopicViewCoordinator(
            self.backend,
            self.navigation_cache,
            settings=self.settings,
            notifier=self.notify_error,
        )
        return TopicScreen(cluster_id, topic_name, coordinator=coordinator)

    def on_mount(self) -> None:
        self.push_screen(self.create_topic_screen(self.cluster_id, self.topic_name))

    def action_open_topic(self) -> None:
        """Switch the current topic screen to another topic of the cluster."""
        self.push_screen(TopicPickerScreen(self.topic_name), callback=self._on_topic_picked)

    def _on_topic_picked(self, topic_name: str | None) -> None:
        if not topic_name or topic_name == self.topic_name:
            return
        logger.info("Opening topic %s/%s", self.cluster_id, topic_name)
        self.topic_name = topic_name
        self.switch_screen(self.create_topic_screen(self.cluster_id, topic_name))


__all__ = [
    "KafkaLensApp",
]
