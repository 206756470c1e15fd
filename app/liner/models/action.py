"""Decision and action models for package operations.

This module defines the per-package outcome of reconciliation, the actions
derived from it, and their execution results.
"""

from dataclasses import dataclass
from enum import Enum

from semantic_version import Version


class DecisionType(Enum):
    """Outcome of comparing one desired package with the installed state.

    Attributes:
        NEEDS_INSTALL: Not installed, or exempt from version checks.
        NEEDS_UPDATE: Installed, but a newer version is available.
        UP_TO_DATE: Installed and at least as new as the latest version.
        SKIPPED: Installed, but the latest version could not be determined.
        NEEDS_UNINSTALL: Installed but no longer configured.
    """

    NEEDS_INSTALL = "needs_install"
    NEEDS_UPDATE = "needs_update"
    UP_TO_DATE = "up_to_date"
    SKIPPED = "skipped"
    NEEDS_UNINSTALL = "needs_uninstall"


@dataclass(frozen=True, slots=True)
class Decision:
    """Reconciliation decision for a single package.

    Attributes:
        decision_type: What should happen to the package.
        old: Installed version, set for NEEDS_UPDATE.
        new: Latest version, set for NEEDS_UPDATE.
        reason: Explanation, set for SKIPPED.
    """

    decision_type: DecisionType
    old: Version | None = None
    new: Version | None = None
    reason: str | None = None

    @classmethod
    def needs_install(cls) -> "Decision":
        return cls(DecisionType.NEEDS_INSTALL)

    @classmethod
    def needs_update(cls, old: Version, new: Version) -> "Decision":
        return cls(DecisionType.NEEDS_UPDATE, old=old, new=new)

    @classmethod
    def up_to_date(cls) -> "Decision":
        return cls(DecisionType.UP_TO_DATE)

    @classmethod
    def skipped(cls, reason: str) -> "Decision":
        return cls(DecisionType.SKIPPED, reason=reason)

    @classmethod
    def needs_uninstall(cls) -> "Decision":
        return cls(DecisionType.NEEDS_UNINSTALL)

    @property
    def requires_install(self) -> bool:
        """Check if the package must go through the installer."""
        return self.decision_type in (DecisionType.NEEDS_INSTALL, DecisionType.NEEDS_UPDATE)


class ActionType(Enum):
    """Type of package action.

    Attributes:
        INSTALL: Install a package that is missing or exempt from checks.
        UPDATE: Reinstall a package at a newer version.
        UNINSTALL: Remove a package that is no longer configured.
    """

    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"


@dataclass(frozen=True, slots=True)
class Action:
    """A single package action to be executed.

    Attributes:
        action_type: The type of action.
        package: Name of the package to operate on.
        reason: Optional explanation for why this action is being taken.
    """

    action_type: ActionType
    package: str
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


class InstallStatus(Enum):
    """Final status of one package in an install report."""

    INSTALLED = "installed"
    UPDATED = "updated"
    UNINSTALLED = "uninstalled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a package action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success

    @property
    def status(self) -> InstallStatus:
        """Status shown in reports."""
        if self.failed:
            return InstallStatus.FAILED
        if self.action.action_type == ActionType.UPDATE:
            return InstallStatus.UPDATED
        if self.action.action_type == ActionType.UNINSTALL:
            return InstallStatus.UNINSTALLED
        return InstallStatus.INSTALLED


def decision_to_action(package: str, decision: Decision, installed: bool = False) -> Action | None:
    """Convert a reconciliation decision into an action.

    Args:
        package: Name of the package the decision is about.
        decision: The reconciliation decision.
        installed: Whether some version of the package is already installed.
            An exempt package that is installed gets reinstalled as an update.

    Returns:
        The action to execute, or None when nothing needs to be done.
    """
    match decision.decision_type:
        case DecisionType.NEEDS_INSTALL:
            action_type = ActionType.UPDATE if installed else ActionType.INSTALL
            return Action(action_type, package)
        case DecisionType.NEEDS_UPDATE:
            return Action(ActionType.UPDATE, package, reason=f"{decision.old} -> {decision.new}")
        case DecisionType.NEEDS_UNINSTALL:
            return Action(ActionType.UNINSTALL, package, reason="not configured")
        case _:
            return None
