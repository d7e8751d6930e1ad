"""bottlefetch CLI — Typer-based command-line interface.

Provides the ``bottlefetch`` command with subcommands for fetching bottles
from manifests, printing the platform tag, and listing the cache.

All output uses Rich for formatted terminal display.
"""
