"""``bottlefetch install SOURCE...`` — fetch and verify bottles from manifests.

Each SOURCE is a manifest file, a manifest URL, or a bare package name.
The bottle for the current platform is fetched for the package and each
dependency, verified, and stored in the cache; the verified packages are
then handed to the installer in the order given.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bottlefetch.cli.log_setup import configure_logging
from bottlefetch.config import config as default_config
from bottlefetch.core.orchestrator import Pipeline
from bottlefetch.models.run import PipelineResult, RunFlags

console = Console()


def install_cmd(
    sources: list[str] = typer.Argument(
        ...,
        help="Manifest file, manifest URL, or package name (one or more).",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Install even if already installed; skip keg-only and migration checks.",
    ),
    keep_tmp: bool = typer.Option(
        False,
        "--keep-tmp",
        help="Retain the temporary files created during installation.",
    ),
    display_times: bool = typer.Option(
        False,
        "--display-times",
        envvar="BOTTLEFETCH_DISPLAY_INSTALL_TIMES",
        help="Print install times for each package at the end of the run.",
    ),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Stop at the first source that fails instead of continuing.",
    ),
    cache_dir: Path = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Bottle cache directory (default: $BOTTLEFETCH_CACHE_DIR).",
    ),
    platform_tag: str = typer.Option(
        None,
        "--platform-tag",
        "-t",
        help="Select bottles for this tag instead of the host's.",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print warnings and errors."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print detailed progress."),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print debugging information."),
) -> None:
    """Fetch, verify and cache the bottles described by one or more manifests."""
    configure_logging(
        default_config.log_level,
        quiet=quiet,
        verbose=verbose,
        debug=debug or default_config.debug,
    )

    settings = default_config
    if cache_dir is not None:
        settings = settings.model_copy(update={"cache_dir": cache_dir})

    flags = RunFlags(
        force=force,
        keep_tmp=keep_tmp,
        display_times=display_times,
        debug=debug,
        quiet=quiet,
        verbose=verbose,
        fail_fast=fail_fast,
    )

    pipeline = Pipeline(config=settings, platform_tag=platform_tag)
    try:
        result = pipeline.run(sources, flags)
    finally:
        pipeline.http.close()

    _print_result(result, flags)
    if not result.ok:
        raise typer.Exit(code=1)


def _print_result(result: PipelineResult, flags: RunFlags) -> None:
    if result.packages and not flags.quiet:
        table = Table(title="Verified bottles")
        table.add_column("Package", style="cyan")
        table.add_column("Version", style="green")
        table.add_column("Tag")
        table.add_column("Bottle")
        table.add_column("Dependencies", justify="right")
        for package in result.packages:
            table.add_row(
                package.name,
                package.version,
                package.platform_tag,
                str(package.bottle_path),
                str(len(package.dependency_paths)),
            )
        console.print(table)

    for name in result.skipped:
        console.print(f"[yellow]Skipped:[/yellow] {escape(name)} is already installed")

    for failure in result.failures:
        what = f" ({escape(failure.package)})" if failure.package else ""
        console.print(f"[bold red]{failure.error_kind}:[/bold red] {escape(failure.source)}{what}")
        console.print(f"  [red]{escape(failure.message)}[/red]")

    for failure in result.install_failures:
        console.print(f"[bold red]Cannot install {escape(failure.package)}:[/bold red] {escape(failure.message)}")

    if flags.display_times and result.install_times:
        times = Table(title="Install times")
        times.add_column("Package", style="cyan")
        times.add_column("Seconds", justify="right")
        for name, seconds in result.install_times.items():
            times.add_row(name, f"{seconds:.2f}")
        console.print(times)
