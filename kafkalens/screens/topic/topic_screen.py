"""Topic screen - consumer control, query editor and buffered records."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any

from rich.markup import escape
from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches, WrongType
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Static, TextArea
from textual.worker import Worker, WorkerState

from kafkalens.constants.enums import ConsumerState, NotificationSeverity
from kafkalens.errors import InvalidTransitionError, KafkaLensError
from kafkalens.keyboard import TOPIC_SCREEN_BINDINGS
from kafkalens.models.consumer.consumer_status import ConsumerConfig
from kafkalens.screens.topic.config import CONSUMER_STATE_LABELS, RECORD_TABLE_COLUMNS
from kafkalens.screens.topic.consumer_start_screen import ConsumerStartScreen
from kafkalens.screens.topic.presenter import TopicViewCoordinator

logger = logging.getLogger(__name__)


class TopicScreen(Screen[None]):
    """Inspect one topic: start/stop its consumer and query buffered records."""

    BINDINGS = TOPIC_SCREEN_BINDINGS

    DEFAULT_CSS = """
    #topic-header {
        height: auto;
        padding: 0 1;
    }

    #topic-title {
        text-style: bold;
    }

    #topic-subtitle, #consumer-status {
        color: $text-muted;
    }

    #topic-actions {
        height: auto;
        margin: 1 0;
    }

    #topic-actions Button {
        margin-right: 1;
    }

    #query-editor {
        height: 6;
    }

    #records-table {
        height: 1fr;
    }
    """

    def __init__(
        self,
        cluster_id: str,
        topic_name: str,
        *,
        coordinator: TopicViewCoordinator,
    ) -> None:
        super().__init__()
        self.cluster_id = cluster_id
        self.topic_name = topic_name
        self._coordinator = coordinator
        self._remove_listener: Callable[[], None] | None = None

    @property
    def coordinator(self) -> TopicViewCoordinator:
        return self._coordinator

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Static(escape(self.topic_name), id="topic-title"),
            Static(escape(self._coordinator.summary.subtitle()), id="topic-subtitle"),
            Horizontal(
                Button("Consume", id="consumer-toggle", variant="primary"),
                Button("Query", id="run-query"),
                Button("More", id="next-page"),
                Static("", id="consumer-status"),
                id="topic-actions",
            ),
            TextArea(self._coordinator.query_text, id="query-editor"),
            id="topic-header",
        )
        yield DataTable(id="records-table")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#records-table", DataTable)
        table.cursor_type = "row"
        for label, width in RECORD_TABLE_COLUMNS:
            table.add_column(label, width=width)

        self._coordinator.attach(self.cluster_id, self.topic_name)
        with suppress(NoMatches, WrongType):
            editor = self.query_one("#query-editor", TextArea)
            if editor.text != self._coordinator.query_text:
                editor.text = self._coordinator.query_text
        self._remove_listener = self._coordinator.add_listener(self._refresh_view)
        self._refresh_view()
        self.start_worker(self._coordinator.load(), name="topic-load", group="topic-load")

    def on_unmount(self) -> None:
        """Stop polling and drop listeners; cached query text is kept."""
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        self._coordinator.unmount()

    # =========================================================================
    # View refresh
    # =========================================================================

    def _refresh_view(self) -> None:
        if not self.is_mounted:
            return
        coordinator = self._coordinator
        consumer = coordinator.consumer
        with suppress(NoMatches, WrongType):
            self.query_one("#topic-subtitle", Static).update(
                escape(coordinator.summary.subtitle())
            )

            toggle = self.query_one("#consumer-toggle", Button)
            toggle.label = f"{coordinator.consumer_button_label} ({consumer.record_count})"
            toggle.disabled = consumer.is_loading or consumer.state in (
                ConsumerState.STARTING,
                ConsumerState.STOPPING,
            )

            status = CONSUMER_STATE_LABELS.get(consumer.state.value, consumer.state.value)
            if consumer.last_error:
                status = f"{status} - {escape(consumer.last_error)}"
            self.query_one("#consumer-status", Static).update(status)

            records = coordinator.records
            self.query_one("#next-page", Button).disabled = (
                records is None or not records.has_more or records.is_loading
            )
            self._refresh_records_table()

    def _refresh_records_table(self) -> None:
        records = self._coordinator.records
        table = self.query_one("#records-table", DataTable)
        table.loading = records is not None and records.is_loading
        table.clear()
        if records is not None:
            # Payloads are raw data, never markup
            table.add_rows(
                [tuple(Text(cell) for cell in row.as_table_row()) for row in records.rows]
            )

    # =========================================================================
    # Events and actions
    # =========================================================================

    @on(TextArea.Changed, "#query-editor")
    def _on_query_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self._coordinator.query_text:
            self._coordinator.edit_query(text)

    @on(Button.Pressed, "#consumer-toggle")
    def _on_consumer_toggle_pressed(self) -> None:
        self.action_toggle_consumer()

    @on(Button.Pressed, "#run-query")
    def _on_run_query_pressed(self) -> None:
        self.action_run_query()

    @on(Button.Pressed, "#next-page")
    def _on_next_page_pressed(self) -> None:
        self.action_next_page()

    def start_worker(
        self,
        work: Awaitable[Any],
        *,
        name: str,
        group: str,
    ) -> Worker[Any]:
        """Run ``work`` on the event loop without crashing the app on errors."""
        return self.run_worker(work, name=name, group=group, exit_on_error=False)

    def action_run_query(self) -> None:
        # Not exclusive: superseded results are discarded by the records component
        self.start_worker(self._coordinator.run_query(), name="run-query", group="query")

    def action_toggle_consumer(self) -> None:
        """Stop a running consumer, or ask where to start an idle one."""
        if self._coordinator.consumer.state in (ConsumerState.IDLE, ConsumerState.UNAVAILABLE):
            self.app.push_screen(
                ConsumerStartScreen(self.topic_name), callback=self._on_consumer_config
            )
            return
        self._run_toggle(None)

    def _on_consumer_config(self, config: ConsumerConfig | None) -> None:
        if config is None:
            return
        self._run_toggle(config)

    def _run_toggle(self, config: ConsumerConfig | None) -> None:
        self.start_worker(
            self._coordinator.toggle_consumer(config), name="toggle-consumer", group="consumer"
        )

    def action_next_page(self) -> None:
        self.start_worker(self._coordinator.fetch_next_page(), name="next-page", group="query")

    def action_refresh(self) -> None:
        self.start_worker(self._coordinator.load(), name="topic-load", group="topic-load")

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Log worker failures; backend errors were already shown to the user."""
        if event.state is not WorkerState.ERROR:
            return
        error = event.worker.error
        if isinstance(error, InvalidTransitionError):
            self.app.notify(str(error), severity=NotificationSeverity.WARNING.value)
        elif isinstance(error, KafkaLensError):
            logger.debug("Worker '%s' failed: %s", event.worker.name, error)
        else:
            logger.error("Worker '%s' error: %s", event.worker.name, error)


class TopicPickerScreen(ModalScreen[str | None]):
    """Prompt for the name of another topic on the same cluster."""

    DEFAULT_CSS = """
    TopicPickerScreen {
        align: center middle;
    }

    #topic-picker {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $surface;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, current_topic: str = "") -> None:
        super().__init__()
        self._current_topic = current_topic

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Open topic"),
            Input(value=self._current_topic, placeholder="topic name", id="topic-input"),
            id="topic-picker",
        )

    @on(Input.Submitted, "#topic-input")
    def _on_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.dismiss(value or None)

    def action_cancel(self) -> None:
        self.dismiss(None)


__all__ = [
    "TopicPickerScreen",
    "TopicScreen",
]
