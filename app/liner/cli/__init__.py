"""CLI package for liner.

This package contains the Typer application and all subcommands.
"""

from liner.cli.main import app

__all__ = ["app"]
