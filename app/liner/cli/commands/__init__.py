"""CLI commands for liner.

This package contains all subcommand implementations.
"""

from liner.cli.commands import import_, jettison, ship

__all__ = ["import_", "jettison", "ship"]
