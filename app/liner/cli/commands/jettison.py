"""Jettison command implementation.

Uninstalls the installed packages that are no longer configured.
"""

from typing import Annotated

import typer

from liner import PACKAGE_NAME
from liner.cli.commands.ship import flag_layer, get_verbosity, require_cargo
from liner.cli.display import (
    create_install_report_table,
    create_uninstall_table,
    print_results_summary,
)
from liner.core.config import require_config
from liner.core.env import jettison_env_args
from liner.core.executor import PartialActionFailure, uninstall_all
from liner.core.ledger import require_ledger
from liner.core.merge import merge_jettison_args
from liner.core.reconcile import decide_removals
from liner.models.args import JettisonArgs
from liner.operators.cargo import CargoOperator
from liner.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Uninstall packages that are not configured.",
    invoke_without_command=True,
)


def _confirm_uninstall(count: int) -> bool:
    """Prompt user to confirm the uninstallation.

    Args:
        count: Number of packages to uninstall.

    Returns:
        True if user confirms, False otherwise.
    """
    return typer.confirm(f"\nUninstall {count} package(s)?", default=True)


@app.callback(invoke_without_command=True)
def jettison(
    ctx: typer.Context,
    no_confirm: Annotated[
        bool | None,
        typer.Option("--no-confirm", "-y", help="Skip confirmation prompt and proceed."),
    ] = None,
    no_fail_fast: Annotated[
        bool | None,
        typer.Option("--no-fail-fast", help="Continue with other packages when one fails."),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option("--dry-run", help="Show what would be done without making changes."),
    ] = None,
) -> None:
    """Uninstall packages that are not configured.

    Every package installed with Cargo but missing from the configuration
    file is uninstalled, except cargo-liner itself.

    Examples:
        cargo liner jettison --dry-run    # Preview removals
        cargo liner jettison -y           # Uninstall without confirmation
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(None, PACKAGE_NAME)
    cli_args = JettisonArgs(
        no_confirm=flag_layer(no_confirm),
        no_fail_fast=flag_layer(no_fail_fast),
        dry_run=flag_layer(dry_run),
    )
    args = merge_jettison_args(config.jettison_defaults, jettison_env_args(), cli_args)

    ledger = require_ledger()
    installed_versions = ledger.name_versions()
    to_uninstall = decide_removals(ledger.names(), config.packages, PACKAGE_NAME)

    if not to_uninstall:
        print_success("No package to uninstall: all installed packages are configured.")
        return

    operator = CargoOperator(dry_run=args.dry_run, verbosity=get_verbosity(ctx))
    require_cargo(operator)

    console.print(create_uninstall_table(to_uninstall, installed_versions))

    if args.dry_run:
        print_warning("This is a dry run, nothing will be uninstalled.")
    elif not args.no_confirm and not _confirm_uninstall(len(to_uninstall)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    try:
        report = uninstall_all(to_uninstall, args, operator)
    except PartialActionFailure as e:
        console.print(create_install_report_table(e.report, installed_versions, {}))
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_results_summary(report)

    if report.has_failures:
        print_error("Some package failed to uninstall.")
        raise typer.Exit(code=1)
