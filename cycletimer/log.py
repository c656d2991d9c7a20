"""Structured logging setup.

Log records go through structlog and end up in stdlib logging. The terminal
is owned by the Textual UI, so records are routed either to a file or to the
Textual devtools console, never to stdout.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

import structlog
from textual.logging import TextualHandler


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    format_json: bool = False,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Write records to this file instead of the devtools console.
        format_json: Render records as JSON instead of key=value text.
    """
    log_level = getattr(logging, level.upper())

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = TextualHandler()

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        format="%(message)s",
        force=True,
    )

    processors: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger (typically ``get_logger(__name__)``)."""
    return structlog.get_logger(name)
