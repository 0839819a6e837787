"""Logging configuration for the CLI."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbosity: int = 0, level: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        verbosity: Verbosity level (0-3)
        level: Explicit log level name, used when verbosity is 0
    """
    # Map verbosity to log level
    if verbosity == 0 and level:
        log_level = logging.getLevelName(level.upper())
        if not isinstance(log_level, int):
            log_level = logging.WARNING
    else:
        log_level = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG,
        }.get(verbosity, logging.DEBUG)

    # Remove all existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbosity > 2,
    )
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root_logger.addHandler(console_handler)

    logging.getLogger("content_search").setLevel(log_level)

    # Suppress some noisy loggers
    if verbosity < 3:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging configured (level: {logging.getLevelName(log_level)})")
