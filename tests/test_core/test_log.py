"""Tests for logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from net_set.core.log import setup_logging


def test_levels_follow_verbosity():
    assert setup_logging(0).level == logging.WARNING
    assert setup_logging(1).level == logging.INFO
    assert setup_logging(5).level == logging.DEBUG


def test_single_rich_handler():
    setup_logging()
    logger = setup_logging(console=Console(record=True))
    handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
    assert logger.propagate is False
