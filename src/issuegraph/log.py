from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "issuegraph"


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Calling it again replaces the handler instead of stacking another one.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        level = resolved

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True, highlight=False),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
