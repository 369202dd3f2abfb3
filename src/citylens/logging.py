"""Logging setup for the citylens CLI.

Library modules only create loggers (``logging.getLogger("citylens.<area>")``);
handlers are installed here, once, by the CLI entry point.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that are chatty at INFO/DEBUG.
_NOISY_LOGGERS = ("LiteLLM", "litellm", "httpx", "httpcore")


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Install a RichHandler on the ``citylens`` logger.

    Args:
        verbose: DEBUG level when True, WARNING otherwise.
        console: Console to log to (defaults to stderr).
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("citylens")
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
