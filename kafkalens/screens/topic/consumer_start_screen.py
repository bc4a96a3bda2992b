"""Modal asking where a new consumer should start reading."""

from __future__ import annotations

from contextlib import suppress

from pydantic import ValidationError
from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Button, Input, RadioButton, RadioSet, Static

from kafkalens.constants.enums import ConsumeFrom
from kafkalens.models.consumer.consumer_status import ConsumerConfig

# RadioSet order
CONSUME_FROM_OPTIONS: list[tuple[ConsumeFrom, str]] = [
    (ConsumeFrom.BEGINNING, "Beginning"),
    (ConsumeFrom.END, "End"),
    (ConsumeFrom.TIMESTAMP, "Timestamp"),
]


def build_consumer_config(consume_from: ConsumeFrom, timestamp_text: str = "") -> ConsumerConfig:
    """Build the start request settings from the modal's inputs.

    Raises:
        ValueError: Timestamp mode without a valid non-negative epoch in ms.
    """
    if consume_from is not ConsumeFrom.TIMESTAMP:
        return ConsumerConfig(consume_from=consume_from)

    text = timestamp_text.strip()
    if not text:
        raise ValueError("Enter a timestamp in epoch milliseconds")
    try:
        return ConsumerConfig(consume_from=consume_from, timestamp_ms=int(text))
    except (ValueError, ValidationError) as exc:
        raise ValueError(f"Invalid timestamp: {text}") from exc


class ConsumerStartScreen(ModalScreen[ConsumerConfig | None]):
    """Pick the start position before consuming a topic."""

    DEFAULT_CSS = """
    ConsumerStartScreen {
        align: center middle;
    }

    #consumer-start {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $surface;
    }

    #consumer-start-error {
        color: $error;
    }

    #consumer-start-actions {
        height: auto;
        margin-top: 1;
    }

    #consumer-start-actions Button {
        margin-right: 1;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, topic_name: str) -> None:
        super().__init__()
        self._topic_name = topic_name
        self._consume_from = ConsumeFrom.BEGINNING

    @property
    def consume_from(self) -> ConsumeFrom:
        return self._consume_from

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(f"Consume {escape(self._topic_name)} from"),
            RadioSet(
                *(
                    RadioButton(label, value=index == 0, id=f"from-{option.value.lower()}")
                    for index, (option, label) in enumerate(CONSUME_FROM_OPTIONS)
                ),
                id="consume-from",
            ),
            Input(placeholder="epoch milliseconds", type="integer", id="consumer-timestamp"),
            Static("", id="consumer-start-error"),
            Horizontal(
                Button("Start", id="consumer-start-confirm", variant="primary"),
                Button("Cancel", id="consumer-start-cancel"),
                id="consumer-start-actions",
            ),
            id="consumer-start",
        )

    def on_mount(self) -> None:
        self._sync_timestamp_input()

    @on(RadioSet.Changed, "#consume-from")
    def _on_consume_from_changed(self, event: RadioSet.Changed) -> None:
        if 0 <= event.index < len(CONSUME_FROM_OPTIONS):
            self._consume_from = CONSUME_FROM_OPTIONS[event.index][0]
        self._show_error("")
        self._sync_timestamp_input()

    def _sync_timestamp_input(self) -> None:
        with suppress(NoMatches):
            self.query_one("#consumer-timestamp", Input).disabled = (
                self._consume_from is not ConsumeFrom.TIMESTAMP
            )

    def _show_error(self, message: str) -> None:
        with suppress(NoMatches):
            self.query_one("#consumer-start-error", Static).update(escape(message))

    @on(Button.Pressed, "#consumer-start-confirm")
    @on(Input.Submitted, "#consumer-timestamp")
    def _on_confirm(self) -> None:
        timestamp = self.query_one("#consumer-timestamp", Input).value
        try:
            config = build_consumer_config(self._consume_from, timestamp)
        except ValueError as exc:
            self._show_error(str(exc))
            return
        self.dismiss(config)

    @on(Button.Pressed, "#consumer-start-cancel")
    def _on_cancel_pressed(self) -> None:
        self.action_cancel()

    def action_cancel(self) -> None:
        self.dismiss(None)


__all__ = [
    "CONSUME_FROM_OPTIONS",
    "ConsumerStartScreen",
    "build_consumer_config",
]
