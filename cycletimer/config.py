"""Runtime settings collected from the command line."""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    """Options for one run of the application."""

    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    json_logs: bool = False
    show_summary: bool = True


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cycletimer",
        description="Terminal focus cycle timer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  ctrl+s   Start a cycle with the task and minutes entered
  escape   Interrupt the running cycle
  ctrl+q   Quit

Examples:
  cycletimer                          # Log to the Textual devtools console
  cycletimer --log-file cycles.log    # Write logs to a file
  cycletimer --log-level INFO --json-logs --log-file cycles.jsonl
""",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write logs to PATH instead of the devtools console",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render log records as JSON",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Don't print the cycle history on exit",
    )
    return parser


def parse_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Parse command line arguments into settings."""
    args = build_parser().parse_args(argv)
    return Settings(
        log_level=args.log_level,
        log_file=args.log_file,
        json_logs=args.json_logs,
        show_summary=not args.no_summary,
    )
