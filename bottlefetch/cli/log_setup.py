"""Root logger configuration for CLI runs."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(
    level_name: str = "INFO",
    *,
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> None:
    """Route all logging through a stderr ``RichHandler``.

    ``--debug``/``--verbose`` lower the level to DEBUG; ``--quiet`` raises
    it to WARNING. Calling again replaces the previous configuration.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    if debug or verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=debug,
                rich_tracebacks=debug,
            )
        ],
        force=True,
    )
    # Connection-level chatter from requests/urllib3 only at --debug.
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)
