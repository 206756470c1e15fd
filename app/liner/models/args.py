"""Argument models for the reconciliation commands.

Each command has two shapes of the same settings:

- a *partial* pydantic model where every field is optional, one instance per
  source layer (command line, environment, configuration file defaults);
- an *effective* frozen dataclass where every field has a concrete value,
  produced by merging the layers (see :mod:`liner.core.merge`).

The field lists below are the single place where the settings are named; a
test checks that both shapes agree with them.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from liner.models.package import BinstallChoice, kebab_case

SHIP_FIELDS: tuple[str, ...] = (
    "no_self",
    "only_self",
    "skip_check",
    "no_fail_fast",
    "force",
    "dry_run",
    "binstall",
)

JETTISON_FIELDS: tuple[str, ...] = (
    "no_confirm",
    "no_fail_fast",
    "dry_run",
)


class ShipArgs(BaseModel):
    """Partial settings of the ship command; None means "not set here"."""

    model_config = ConfigDict(extra="forbid", alias_generator=kebab_case, validate_by_name=True)

    no_self: bool | None = None
    only_self: bool | None = None
    skip_check: bool | None = None
    no_fail_fast: bool | None = None
    force: bool | None = None
    dry_run: bool | None = None
    binstall: BinstallChoice | None = None


class JettisonArgs(BaseModel):
    """Partial settings of the jettison command; None means "not set here"."""

    model_config = ConfigDict(extra="forbid", alias_generator=kebab_case, validate_by_name=True)

    no_confirm: bool | None = None
    no_fail_fast: bool | None = None
    dry_run: bool | None = None


@dataclass(frozen=True, slots=True)
class EffectiveShipArgs:
    """Resolved settings of the ship command.

    Attributes:
        no_self: Do not install or update the tool itself.
        only_self: Only install or update the tool itself.
        skip_check: Install every package without comparing versions.
        no_fail_fast: Keep going after a package fails to install.
        force: Pass --force to the installer.
        dry_run: Only report what would be done.
        binstall: Installation backend selection.
    """

    no_self: bool = False
    only_self: bool = False
    skip_check: bool = False
    no_fail_fast: bool = False
    force: bool = False
    dry_run: bool = False
    binstall: BinstallChoice = BinstallChoice.AUTO


@dataclass(frozen=True, slots=True)
class EffectiveJettisonArgs:
    """Resolved settings of the jettison command."""

    no_confirm: bool = False
    no_fail_fast: bool = False
    dry_run: bool = False
