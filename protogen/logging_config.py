"""Logging setup shared by every protogen module.

Log records go to stderr through rich, so generated source written to
stdout stays clean.
"""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "protogen"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger in the ``protogen`` hierarchy.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger whose records propagate to the handler installed by
        ``setup_logging``.
    """
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str] = logging.WARNING, console: Optional[Console] = None
) -> logging.Logger:
    """Install a rich handler on the package logger.

    Calling it again only changes the level.

    Args:
        level: Logging level name or number.
        console: Console to log to, defaults to one on stderr.

    Returns:
        The package logger.
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
