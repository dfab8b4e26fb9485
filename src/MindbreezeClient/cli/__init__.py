"""CLI package for MindbreezeClient."""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from MindbreezeClient.cli.runner import CommandRunner
from MindbreezeClient.cli.ui import cli


def main() -> None:
    """Run the CLI; entry point of the ``mindbreeze`` console script."""
    cli()
