"""``bottlefetch tag`` — print the platform tag used to select bottles."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from bottlefetch.config import config
from bottlefetch.core.errors import UnsupportedPlatformError
from bottlefetch.core.platform_tag import current_platform_tag

console = Console()


def tag_cmd() -> None:
    """Print this host's bottle tag (or the configured override)."""
    try:
        tag = current_platform_tag(config.platform_tag)
    except UnsupportedPlatformError as exc:
        console.print(f"[bold red]Unsupported platform:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    console.print(tag)
