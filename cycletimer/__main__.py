"""Entry point for python -m cycletimer."""

import sys
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from .config import Settings, parse_settings
from .log import configure_logging, get_logger
from .store import CycleStore
from .ui import STATUS_LABELS, run_ui

logger = get_logger(__name__)


def render_summary(store: CycleStore) -> Table:
    """Build the history table printed when the app exits."""
    table = Table(title="Cycles this session", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Task", style="bold")
    table.add_column("Minutes", justify="right")
    table.add_column("Started")
    table.add_column("Status")

    styles = {"Finished": "green", "Interrupted": "red", "In progress": "yellow"}
    for number, cycle in enumerate(store.history, start=1):
        status = STATUS_LABELS[cycle.status]
        table.add_row(
            str(number),
            cycle.task,
            str(cycle.minutes_amount),
            cycle.started_at.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            f"[{styles[status]}]{status}[/]",
        )
    return table


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    settings: Settings = parse_settings(argv)
    configure_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        format_json=settings.json_logs,
    )

    store = CycleStore()
    logger.info("app_started")

    try:
        run_ui(store)
    except KeyboardInterrupt:
        pass

    # Anything still running when the user quits counts as interrupted.
    store.interrupt_active()
    logger.info("app_stopped", cycles=len(store.history))

    if settings.show_summary and store.history:
        Console().print(render_summary(store))

    return 0


if __name__ == "__main__":
    sys.exit(main())
