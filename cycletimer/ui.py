"""Textual-based UI for the cycle timer."""

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.suggester import SuggestFromList
from textual.widgets import Button, DataTable, Digits, Footer, Input, Label, Static

from .clock import Countdown, CountdownClock, countdown
from .errors import ValidationError
from .forms import MAX_MINUTES, MIN_MINUTES, TASK_SUGGESTIONS, validate_new_cycle
from .store import Cycle, CycleStatus, CycleStore

STATUS_LABELS = {
    CycleStatus.ACTIVE: "In progress",
    CycleStatus.FINISHED: "Finished",
    CycleStatus.INTERRUPTED: "Interrupted",
}


def history_row(cycle: Cycle) -> tuple:
    """Columns shown for a cycle in the history table."""
    started = cycle.started_at.astimezone().strftime("%H:%M:%S")
    return (cycle.task, f"{cycle.minutes_amount} min", started, STATUS_LABELS[cycle.status])


class CycleTimerApp(App):
    """Focus cycle timer application."""

    CSS_PATH = "cycletimer.tcss"
    TITLE = "Cycle Timer"

    BINDINGS = [
        Binding("ctrl+s", "start", "Start"),
        Binding("escape", "interrupt", "Interrupt", priority=True),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: Optional[CycleStore] = None) -> None:
        super().__init__()
        self.store = store or CycleStore()
        self.cycle_clock: Optional[CountdownClock] = None
        self._unsubscribe = None
        self.form_errors: dict = {}

    def compose(self) -> ComposeResult:
        with Container(id="main"):
            with Vertical(id="form"):
                with Horizontal(classes="field"):
                    yield Label("I will work on", classes="prompt")
                    yield Input(
                        placeholder="Give your project a name",
                        id="task",
                        suggester=SuggestFromList(TASK_SUGGESTIONS, case_sensitive=False),
                    )
                yield Static("", id="task-error", classes="error")
                with Horizontal(classes="field"):
                    yield Label("for", classes="prompt")
                    yield Input(
                        placeholder=f"{MIN_MINUTES}-{MAX_MINUTES}",
                        id="minutes",
                        type="integer",
                    )
                    yield Label("minutes.", classes="prompt")
                yield Static("", id="minutes-error", classes="error")
            yield Digits("00:00", id="countdown")
            with Horizontal(id="actions"):
                yield Button("Start", id="start", variant="success")
                yield Button("Interrupt", id="interrupt", variant="error")
            yield DataTable(id="history", cursor_type="row", zebra_stripes=True)
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#history", DataTable)
        table.add_columns("Task", "Minutes", "Started", "Status")
        self.cycle_clock = CountdownClock(
            self.store,
            schedule=lambda interval, callback: self.set_interval(interval, callback),
            on_tick=self._on_tick,
        )
        self._unsubscribe = self.store.subscribe(self.refresh_view)
        self.refresh_view()

    def on_unmount(self) -> None:
        self.release_store()

    def release_store(self) -> None:
        """Stop observing the store and release the tick."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.cycle_clock is not None:
            self.cycle_clock.close()

    def _on_tick(self, current: Countdown) -> None:
        self._show_countdown(current)

    def refresh_view(self) -> None:
        """Redraw everything derived from the store."""
        current = countdown(self.store)
        self._show_countdown(current)

        active = current.is_active
        self.query_one("#task", Input).disabled = active
        self.query_one("#minutes", Input).disabled = active
        self.query_one("#start", Button).display = not active
        self.query_one("#interrupt", Button).display = active

        table = self.query_one("#history", DataTable)
        table.clear()
        for cycle in self.store.history:
            table.add_row(*history_row(cycle), key=cycle.id)

    def _show_countdown(self, current: Countdown) -> None:
        self.query_one("#countdown", Digits).update(current.display)
        self.sub_title = current.title or ""

    def _show_errors(self, error: Optional[ValidationError]) -> None:
        self.form_errors = dict(error.errors) if error is not None else {}
        for field, widget_id in (("task", "#task-error"), ("minutes_amount", "#minutes-error")):
            message = error.for_field(field) if error is not None else None
            self.query_one(widget_id, Static).update(message or "")

    def submit(self) -> Optional[str]:
        """Start a cycle from the form fields.

        Returns:
            The new cycle id, or None when the form is invalid or a cycle
            is already running.
        """
        if self.store.active_cycle is not None:
            return None
        task_input = self.query_one("#task", Input)
        minutes_input = self.query_one("#minutes", Input)
        try:
            form = validate_new_cycle(
                {"task": task_input.value, "minutes_amount": minutes_input.value.strip()}
            )
        except ValidationError as exc:
            self._show_errors(exc)
            return None

        self._show_errors(None)
        cycle_id = self.store.create_cycle(form.task, form.minutes_amount)
        task_input.value = ""
        minutes_input.value = ""
        return cycle_id

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "start":
            self.submit()
        elif event.button.id == "interrupt":
            self.store.interrupt_active()

    def action_start(self) -> None:
        """Start a cycle from the form."""
        self.submit()

    def action_interrupt(self) -> None:
        """Interrupt the running cycle."""
        self.store.interrupt_active()


def run_ui(store: CycleStore) -> None:
    """Run the cycle timer UI on the given store."""
    app = CycleTimerApp(store)
    try:
        app.run()
    finally:
        app.release_store()
