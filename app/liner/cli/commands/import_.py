"""Import command implementation.

Creates a liner.toml file from the packages Cargo has installed.
"""

from typing import Annotated

import typer

from liner import PACKAGE_NAME
from liner.core.config import ConfigError, config_exists, save_config
from liner.core.ledger import require_ledger
from liner.core.paths import get_config_path
from liner.models.requirement import RequirementPolicy
from liner.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Import the installed packages into a new configuration file.",
    invoke_without_command=True,
)


def _select_policy(exact: bool, compatible: bool, patch: bool) -> RequirementPolicy:
    """Pick the requirement policy from the mutually exclusive flags.

    Raises:
        typer.Exit: If more than one flag is set.
    """
    chosen = [
        policy
        for policy, flag in (
            (RequirementPolicy.EXACT, exact),
            (RequirementPolicy.COMPATIBLE, compatible),
            (RequirementPolicy.PATCH, patch),
        )
        if flag
    ]
    if len(chosen) > 1:
        print_error("--exact, --compatible and --patch are mutually exclusive.")
        raise typer.Exit(code=1)
    return chosen[0] if chosen else RequirementPolicy.STAR


@app.callback(invoke_without_command=True)
def import_config(
    ctx: typer.Context,
    exact: Annotated[
        bool,
        typer.Option("--exact", "-e", help="Pin the exact installed versions (=x.y.z)."),
    ] = False,
    compatible: Annotated[
        bool,
        typer.Option("--compatible", "-c", help="Allow compatible updates (^x.y.z)."),
    ] = False,
    patch: Annotated[
        bool,
        typer.Option("--patch", "-p", help="Allow patch updates only (~x.y.z)."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing configuration file."),
    ] = False,
    keep_self: Annotated[
        bool,
        typer.Option("--keep-self", help="Keep cargo-liner itself in the configuration."),
    ] = False,
    keep_local: Annotated[
        bool,
        typer.Option("--keep-local", help="Keep packages installed from a local path."),
    ] = False,
) -> None:
    """Import the installed packages into a new configuration file.

    Without a policy flag, every package gets the "*" requirement.

    Examples:
        cargo liner import                # Any version of each package
        cargo liner import --compatible   # Caret requirements
        cargo liner import --force        # Replace the existing file
    """
    if ctx.invoked_subcommand is not None:
        return

    policy = _select_policy(exact, compatible, patch)
    path = get_config_path()

    if config_exists(path):
        if not force:
            print_error("Configuration file already exists, use -f/--force to overwrite.")
            raise typer.Exit(code=1)
        print_warning("Configuration file will be overwritten.")

    print_info("Importing Cargo installed crates as a new configuration file...")
    ledger = require_ledger()
    config = ledger.into_config(policy, PACKAGE_NAME, keep_self=keep_self, keep_local=keep_local)

    try:
        saved_path = save_config(config, path, overwrite=force)
    except ConfigError as e:
        print_error(f"Failed to save the configuration file: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Configuration created: {saved_path} ({len(config.packages)} package(s))")
