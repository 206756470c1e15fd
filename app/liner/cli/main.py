"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import sys
from typing import Annotated

import typer

from liner import __version__
from liner.cli.commands import import_, jettison, ship
from liner.models.args import ShipArgs
from liner.utils.logging_setup import setup_logging

# Create main Typer app
app = typer.Typer(
    name="cargo-liner",
    help="Keep globally installed Cargo packages in sync with a configuration file.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cargo-liner version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """cargo-liner - Keep globally installed Cargo packages in sync.

    Declare the packages you want in $CARGO_HOME/liner.toml and let
    cargo-liner install, update and uninstall them. Runs 'ship' when no
    command is given.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbose=verbose, quiet=quiet)

    if ctx.invoked_subcommand is None:
        ship.run_ship(ShipArgs(), ship.get_verbosity(ctx))


# Register commands
app.add_typer(ship.app, name="ship")
app.add_typer(jettison.app, name="jettison")
app.add_typer(import_.app, name="import")


def strip_cargo_subcommand(argv: list[str]) -> list[str]:
    """Drop the ``liner`` argument Cargo inserts when running ``cargo liner``."""
    if argv and argv[0] == "liner":
        return argv[1:]
    return argv


def run() -> None:
    """Console script entry point, usable directly or as ``cargo liner``."""
    app(args=strip_cargo_subcommand(sys.argv[1:]), prog_name="cargo liner")


if __name__ == "__main__":
    run()
