"""Execution of reconciliation decisions.

Runs the installs, updates and uninstalls through a Cargo operator, one
package at a time in name order, and collects a per-package report. These
functions are shared between the ``ship`` and ``jettison`` CLI commands.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from liner.models.action import (
    Action,
    ActionResult,
    ActionType,
    Decision,
    InstallStatus,
    decision_to_action,
)
from liner.models.package import BinstallChoice, as_detailed

if TYPE_CHECKING:
    from liner.models.args import EffectiveJettisonArgs, EffectiveShipArgs
    from liner.models.package import PackageEntry
    from liner.operators.cargo import CargoOperator

logger = logging.getLogger(__name__)


@dataclass
class InstallReport:
    """Per-package results of an execution run.

    Attributes:
        results: Results in execution order.
    """

    results: list[ActionResult] = field(default_factory=list)

    @property
    def statuses(self) -> dict[str, InstallStatus]:
        """Status per package name."""
        return {result.action.package: result.status for result in self.results}

    @property
    def failed(self) -> list[ActionResult]:
        """Results of the actions that failed."""
        return [result for result in self.results if result.failed]

    @property
    def has_failures(self) -> bool:
        """Check if any action failed."""
        return any(result.failed for result in self.results)


class PartialActionFailure(Exception):
    """Raised when a package action fails and fail-fast is in effect.

    Attributes:
        report: Results gathered up to and including the failure.
    """

    def __init__(self, message: str, report: InstallReport) -> None:
        super().__init__(message)
        self.report = report


def plan_installs(
    decisions: Mapping[str, Decision],
    installed: Iterable[str],
) -> list[Action]:
    """Convert decisions into install and update actions, in name order.

    Args:
        decisions: Reconciliation decision per configured package.
        installed: Names of the installed packages.
    """
    installed_names = set(installed)
    actions: list[Action] = []
    for name in sorted(decisions):
        decision = decisions[name]
        if not decision.requires_install:
            continue
        action = decision_to_action(name, decision, installed=name in installed_names)
        if action is not None:
            actions.append(action)
    return actions


def install_all(
    packages: Mapping[str, PackageEntry],
    decisions: Mapping[str, Decision],
    args: EffectiveShipArgs,
    operator: CargoOperator,
    installed: Iterable[str] = (),
) -> InstallReport:
    """Install or update every package that needs it.

    Fail-fast is in effect unless ``no_fail_fast`` is set globally or on the
    failing package itself.

    Args:
        packages: Configured packages.
        decisions: Reconciliation decision per configured package.
        args: Effective ship settings.
        operator: Operator running Cargo.
        installed: Names of the installed packages, empty when unknown.

    Returns:
        Report of every attempted action.

    Raises:
        PartialActionFailure: If a package fails and fail-fast is in effect.
    """
    installed_names = set(installed)
    report = InstallReport()
    # Detected on the first AUTO package only.
    binstall_found: bool | None = None

    for action in plan_installs(decisions, installed_names):
        entry = as_detailed(packages[action.package])
        verb = "Updating" if action.action_type == ActionType.UPDATE else "Installing"
        logger.info("%s %r...", verb, action.package)

        choice = entry.binstall or args.binstall
        if choice is BinstallChoice.AUTO:
            if binstall_found is None:
                binstall_found = operator.binstall_available(installed_names)
            use_binstall = binstall_found
        else:
            use_binstall = choice is BinstallChoice.ALWAYS

        result = operator.install(action, entry, force=args.force, use_binstall=use_binstall)
        report.results.append(result)

        if result.failed:
            logger.error(
                "Failed to %s %r: %s", action.action_type.value, action.package, result.error
            )
            if not (args.no_fail_fast or entry.no_fail_fast):
                raise PartialActionFailure(
                    f"Failed to {action.action_type.value} {action.package!r}: {result.error}",
                    report,
                )

    return report


def uninstall_all(
    names: Iterable[str],
    args: EffectiveJettisonArgs,
    operator: CargoOperator,
) -> InstallReport:
    """Uninstall the given packages in name order.

    Args:
        names: Packages to uninstall.
        args: Effective jettison settings.
        operator: Operator running Cargo.

    Returns:
        Report of every attempted action.

    Raises:
        PartialActionFailure: If a package fails and fail-fast is in effect.
    """
    report = InstallReport()

    for name in sorted(names):
        action = decision_to_action(name, Decision.needs_uninstall())
        if action is None:
            continue
        logger.info("Uninstalling %r...", name)
        result = operator.uninstall(action)
        report.results.append(result)

        if result.failed:
            logger.error("Failed to uninstall %r: %s", name, result.error)
            if not args.no_fail_fast:
                raise PartialActionFailure(f"Failed to uninstall {name!r}: {result.error}", report)

    return report
