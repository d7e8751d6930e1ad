"""``bottlefetch cache`` — list the bottles in the cache."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from bottlefetch.config import config
from bottlefetch.core.cache import BottleCache

console = Console()


def cache_cmd(
    cache_dir: Path = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Bottle cache directory (default: $BOTTLEFETCH_CACHE_DIR).",
    ),
    name: str = typer.Option(None, "--name", "-n", help="Only show bottles for this package."),
) -> None:
    """List cached bottles with their version, tag, rebuild and size."""
    cache = BottleCache(cache_dir or config.cache_dir)
    entries = [
        (parsed, path) for parsed, path in cache.entries()
        if name is None or parsed.name == name
    ]

    if not entries:
        console.print(f"[dim]No bottles cached in {cache.cache_dir}.[/dim]")
        return

    table = Table(title=f"Cached bottles ({cache.cache_dir})")
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    table.add_column("Tag")
    table.add_column("Rebuild", justify="right")
    table.add_column("Size", justify="right")
    for parsed, path in entries:
        table.add_row(
            parsed.name,
            parsed.version,
            parsed.tag,
            str(parsed.rebuild),
            f"{path.stat().st_size:,}",
        )
    console.print(table)
