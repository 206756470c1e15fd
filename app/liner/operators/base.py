"""Abstract base class for package operators.

This module defines the Operator interface the executor drives.
"""

from abc import ABC, abstractmethod

from liner.models.action import Action, ActionResult
from liner.models.package import DetailedPackage


class Operator(ABC):
    """Abstract base class for package operators.

    Operators run the external tool that installs and uninstalls packages,
    one package at a time.

    Attributes:
        dry_run: If True, only simulate actions without executing them.
        verbosity: Negative for quiet, positive for verbose tool output.
    """

    def __init__(self, dry_run: bool = False, verbosity: int = 0) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
            verbosity: Negative for quiet, positive for verbose tool output.
        """
        self._dry_run = dry_run
        self._verbosity = verbosity

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    @property
    def verbosity(self) -> int:
        """Verbosity passed on to the underlying tool."""
        return self._verbosity

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool can be run."""

    @abstractmethod
    def install(
        self,
        action: Action,
        entry: DetailedPackage,
        *,
        force: bool = False,
        use_binstall: bool = False,
    ) -> ActionResult:
        """Install or update a single package.

        Args:
            action: The install or update action.
            entry: Installation options of the package.
            force: Overwrite an existing installation.
            use_binstall: Fetch a prebuilt binary instead of building.

        Returns:
            Result of the action.
        """

    @abstractmethod
    def uninstall(self, action: Action) -> ActionResult:
        """Uninstall a single package.

        Args:
            action: The uninstall action.

        Returns:
            Result of the action.
        """
