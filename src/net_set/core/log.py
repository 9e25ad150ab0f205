"""Logging setup — rich console output for the net_set logger tree."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "net_set"

_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def setup_logging(verbosity: int = 0, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger; -v is INFO, -vv is DEBUG."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)])

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            rich_tracebacks=True,
            show_path=False,
            console=console or Console(stderr=True),
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    logger.propagate = False
    return logger
