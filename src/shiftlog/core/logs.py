"""Logging setup for the shiftlog CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging"]

_ROOT_LOGGER = "shiftlog"


def configure_logging(level: str | int = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the ``shiftlog`` logger.

    Library modules only call ``logging.getLogger(__name__)``; nothing is configured
    until a front end calls this. Repeated calls replace the previous handler.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.WARNING
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
