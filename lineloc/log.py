"""Logging helpers for lineloc."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGING_INITIALIZED = False

_LEVELS = {"info": logging.INFO, "verbose": logging.DEBUG, "debug": logging.DEBUG}


def configure_logging(verbosity: str = "info", console: Console = None) -> None:
    """
    Configure the root logger with a single rich handler.

    Args:
        verbosity: Logging verbosity (info, verbose, debug)
        console: Optional console to log to (defaults to stderr)
    """
    global _LOGGING_INITIALIZED

    level = _LEVELS.get(verbosity.lower(), logging.INFO)
    root = logging.getLogger()

    if not _LOGGING_INITIALIZED:
        root.handlers.clear()
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        _LOGGING_INITIALIZED = True

    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)

    # Keep server chatter down unless debugging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING if level > logging.DEBUG else level)
