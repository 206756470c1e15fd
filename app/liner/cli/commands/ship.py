"""Ship command implementation.

Installs or updates every configured package that needs it. This is the
default command when none is given.
"""

import logging
from typing import Annotated

import typer
from semantic_version import Version

from liner import PACKAGE_NAME
from liner.cli.display import (
    create_install_report_table,
    create_version_check_table,
    print_results_summary,
)
from liner.core.config import EnvironmentParseError, require_config, self_update, update_others
from liner.core.env import ship_env_args
from liner.core.executor import PartialActionFailure, install_all
from liner.core.ledger import require_ledger
from liner.core.merge import merge_ship_args
from liner.core.reconcile import decide, effective_skip_check
from liner.models.args import ShipArgs
from liner.models.package import BinstallChoice
from liner.operators.cargo import CargoOperator
from liner.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Install or update the configured packages.",
    invoke_without_command=True,
)


def get_verbosity(ctx: typer.Context) -> int:
    """Verbosity passed on to Cargo, from the global options."""
    obj = ctx.obj or {}
    if obj.get("verbose"):
        return 1
    if obj.get("quiet"):
        return -1
    return 0


def flag_layer(value: bool | None) -> bool | None:
    """Map a command-line flag to its layer value; an absent flag is unset."""
    return True if value else None


def require_cargo(operator: CargoOperator) -> None:
    """Exit with an error when the Cargo executable cannot be found.

    Raises:
        typer.Exit: If Cargo is not available.
    """
    if not operator.is_available():
        print_error(f"Cargo executable not found: {operator.cargo}")
        print_info("Install Rust with rustup, or point the CARGO variable at cargo.")
        raise typer.Exit(code=1)


def run_ship(cli_args: ShipArgs, verbosity: int = 0) -> None:
    """Run the ship pipeline: load, merge, check versions, install, report.

    Args:
        cli_args: Settings given on the command line.
        verbosity: Verbosity passed on to Cargo.

    Raises:
        typer.Exit: On configuration errors or failed installations.
    """
    config = require_config(None, PACKAGE_NAME)

    try:
        env_args = ship_env_args()
    except EnvironmentParseError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    args = merge_ship_args(config.ship_defaults, env_args, cli_args)
    if args.no_self and args.only_self:
        print_error("--no-self and --only-self cannot be used together.")
        raise typer.Exit(code=1)

    config = self_update(config, not args.no_self, PACKAGE_NAME)
    config = update_others(config, not args.only_self, PACKAGE_NAME)
    packages = config.packages
    operator = CargoOperator(dry_run=args.dry_run, verbosity=verbosity)

    if not packages:
        print_info("No package to install: none was configured and self was skipped.")
        return

    require_cargo(operator)

    if args.skip_check:
        # The ledger is not read at all in this mode.
        installed_versions: dict[str, Version] = {}
        latest_versions: dict[str, Version] = {}
    else:
        installed_versions = require_ledger().name_versions()
        print_info("Fetching latest package versions...")
        latest_versions, errors = operator.search_latest_all(
            name for name, entry in packages.items() if not effective_skip_check(entry)
        )
        for name, error in errors.items():
            print_warning(f"Could not determine the latest version of {name!r}: {error}")
        console.print(create_version_check_table(packages, installed_versions, latest_versions))

    decisions = decide(packages, installed_versions, latest_versions, skip_check=args.skip_check)
    logger.debug("Decisions: %s", decisions)

    try:
        report = install_all(packages, decisions, args, operator, installed_versions)
    except PartialActionFailure as e:
        console.print(create_install_report_table(e.report, installed_versions, latest_versions))
        print_error(str(e))
        print_info("Use 'cargo liner ship --no-fail-fast' to continue on with other packages.")
        raise typer.Exit(code=1) from e

    if not report.results:
        print_success("All packages are up to date.")
        return

    console.print(create_install_report_table(report, installed_versions, latest_versions))
    if args.dry_run:
        print_warning("This is a dry run, so this report is simulated.")
    print_results_summary(report)

    if report.has_failures:
        print_error("Failed to install or update some of the configured packages.")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def ship(
    ctx: typer.Context,
    no_self: Annotated[
        bool | None,
        typer.Option("--no-self", help="Do not install or update cargo-liner itself."),
    ] = None,
    only_self: Annotated[
        bool | None,
        typer.Option("--only-self", help="Only install or update cargo-liner itself."),
    ] = None,
    skip_check: Annotated[
        bool | None,
        typer.Option(
            "--skip-check",
            help="Install every package without checking installed and latest versions.",
        ),
    ] = None,
    no_fail_fast: Annotated[
        bool | None,
        typer.Option("--no-fail-fast", help="Continue with other packages when one fails."),
    ] = None,
    force: Annotated[
        bool | None,
        typer.Option("--force", help="Force reinstallation of every package."),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option("--dry-run", help="Show what would be done without making changes."),
    ] = None,
    binstall: Annotated[
        BinstallChoice | None,
        typer.Option(
            "--binstall",
            help="Use cargo-binstall: auto, always or never.",
            case_sensitive=False,
        ),
    ] = None,
) -> None:
    """Install or update the configured packages.

    Settings not given here are taken from CARGO_LINER_SHIP_* environment
    variables, then from the [defaults.ship] table of the configuration file.

    Examples:
        cargo liner ship --dry-run        # Preview installs and updates
        cargo liner ship --no-fail-fast   # Keep going after a failure
        cargo liner ship --only-self      # Only update cargo-liner
    """
    if ctx.invoked_subcommand is not None:
        return

    cli_args = ShipArgs(
        no_self=flag_layer(no_self),
        only_self=flag_layer(only_self),
        skip_check=flag_layer(skip_check),
        no_fail_fast=flag_layer(no_fail_fast),
        force=flag_layer(force),
        dry_run=flag_layer(dry_run),
        binstall=binstall,
    )
    run_ship(cli_args, get_verbosity(ctx))
