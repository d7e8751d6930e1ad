"""Main Typer application — imports and registers all CLI commands.

Entry point: ``bottlefetch`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from bottlefetch.cli.commands.cache_cmd import cache_cmd
from bottlefetch.cli.commands.install import install_cmd
from bottlefetch.cli.commands.tag import tag_cmd

app = typer.Typer(
    name="bottlefetch",
    help="bottlefetch: fetch and verify prebuilt bottles from JSON manifests.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="install", help="Fetch, verify and cache bottles from manifests.")(install_cmd)
app.command(name="tag", help="Print the platform tag used to select bottles.")(tag_cmd)
app.command(name="cache", help="List cached bottles.")(cache_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
