"""Logging setup for the takeflow CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from takeflow.config.models import LoggingSettings


def configure_logging(settings: LoggingSettings, *, verbose: bool = False) -> None:
    """Install a Rich handler on the ``takeflow`` logger tree.

    Args:
        settings: Logging section of the loaded configuration.
        verbose: Force DEBUG output regardless of the configured level.
    """
    level = logging.DEBUG if verbose else logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger("takeflow")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
