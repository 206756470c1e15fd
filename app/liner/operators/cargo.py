"""Cargo package operator implementation.

Installs packages with ``cargo install`` or ``cargo binstall``, uninstalls
them with ``cargo uninstall`` and looks up their latest published versions
with ``cargo search``.

The Cargo executable is taken from the ``CARGO`` environment variable, which
Cargo sets when it runs an external subcommand such as ``cargo liner``.
"""

import logging
import re
import subprocess
from collections.abc import Iterable

from semantic_version import Version

from liner.core.paths import get_cargo_command
from liner.models.action import Action, ActionResult
from liner.models.package import DetailedPackage
from liner.operators.base import Operator
from liner.utils.shell import command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)

BINSTALL_PACKAGE = "cargo-binstall"


class CargoError(Exception):
    """Raised when Cargo cannot be run or returns unusable output."""


class CargoOperator(Operator):
    """Operator for packages installed through Cargo.

    Attributes:
        dry_run: If True, ``cargo install`` is not run at all and
            ``cargo binstall`` is run with ``--dry-run``.
        verbosity: Negative for quiet, positive for verbose Cargo output.
    """

    # Timeout for cargo search and cargo binstall -V
    _SEARCH_TIMEOUT: float = 60.0

    @property
    def cargo(self) -> str:
        """Cargo executable to run."""
        return get_cargo_command()

    def is_available(self) -> bool:
        """Check if the Cargo executable can be found."""
        return command_exists(self.cargo)

    def _verbosity_args(self) -> list[str]:
        if self.verbosity > 0:
            return ["-" + "v" * self.verbosity]
        if self.verbosity < 0:
            return ["-q"]
        return []

    def _binstall_log_level(self) -> str:
        if self.verbosity <= -3:
            return "off"
        return {-2: "error", -1: "warn", 0: "info", 1: "info", 2: "debug"}.get(
            self.verbosity, "trace"
        )

    def build_install_args(
        self, name: str, entry: DetailedPackage, *, force: bool = False
    ) -> list[str]:
        """Build the ``cargo install`` command line for a package.

        Args:
            name: Package name.
            entry: Installation options.
            force: Pass --force even when the entry doesn't ask for it.

        Returns:
            Full command line, starting with the Cargo executable.
        """
        args = [self.cargo, *self._verbosity_args(), "install", "--version", str(entry.version)]

        if not entry.default_features:
            args.append("--no-default-features")
        if entry.all_features:
            args.append("--all-features")
        if entry.features:
            args.extend(["--features", ",".join(entry.features)])

        for option, value in (
            ("--index", entry.index),
            ("--registry", entry.registry),
            ("--git", entry.git),
            ("--branch", entry.branch),
            ("--tag", entry.tag),
            ("--rev", entry.rev),
            ("--path", entry.path),
        ):
            if value is not None:
                args.extend([option, value])

        for binary in entry.bins:
            args.extend(["--bin", binary])
        if entry.all_bins:
            args.append("--bins")
        for example in entry.examples:
            args.extend(["--example", example])
        if entry.all_examples:
            args.append("--examples")

        if entry.ignore_rust_version:
            args.append("--ignore-rust-version")
        if force or entry.force:
            args.append("--force")
        if entry.frozen:
            args.append("--frozen")
        if entry.locked:
            args.append("--locked")
        if entry.offline:
            args.append("--offline")

        # Extra arguments go last, right before the package name.
        args.extend(entry.extra_arguments)
        args.extend(["--", name])
        return args

    def build_binstall_args(
        self, name: str, entry: DetailedPackage, *, force: bool = False
    ) -> list[str]:
        """Build the ``cargo binstall`` command line for a package.

        Only the options binstall understands are passed on.
        """
        args = [
            self.cargo,
            "binstall",
            "--disable-telemetry",
            "--no-confirm",
            "--log-level",
            self._binstall_log_level(),
            "--version",
            str(entry.version),
        ]

        for option, value in (
            ("--index", entry.index),
            ("--registry", entry.registry),
            ("--git", entry.git),
        ):
            if value is not None:
                args.extend([option, value])

        if force or entry.force:
            args.append("--force")
        if self.dry_run:
            args.append("--dry-run")
        if entry.locked:
            args.append("--locked")

        args.extend(entry.extra_arguments)
        args.extend(["--", name])
        return args

    def install(
        self,
        action: Action,
        entry: DetailedPackage,
        *,
        force: bool = False,
        use_binstall: bool = False,
    ) -> ActionResult:
        """Install or update a package with cargo install or cargo binstall.

        Args:
            action: The install or update action.
            entry: Installation options of the package.
            force: Pass --force to the installer.
            use_binstall: Use cargo binstall instead of cargo install.

        Returns:
            Result of the action.
        """
        if use_binstall:
            args = self.build_binstall_args(action.package, entry, force=force)
            logger.debug("Using cargo-binstall as the installation method")
        else:
            args = self.build_install_args(action.package, entry, force=force)
            logger.debug("Using cargo install as the installation method")

        logger.debug("Running %s", " ".join(args))

        if self.dry_run and not use_binstall:
            logger.warning("Dry run: would have run `cargo install` for %r", action.package)
            return ActionResult(action=action, success=True, message="Dry run")

        return self._run(action, args, entry.environment)

    def uninstall(self, action: Action) -> ActionResult:
        """Uninstall a package with cargo uninstall.

        Args:
            action: The uninstall action.

        Returns:
            Result of the action.
        """
        args = [self.cargo, *self._verbosity_args(), "uninstall", "--", action.package]
        logger.debug("Running %s", " ".join(args))

        if self.dry_run:
            logger.warning("Dry run: would have run `cargo uninstall` for %r", action.package)
            return ActionResult(action=action, success=True, message="Dry run")

        return self._run(action, args, None)

    def _run(self, action: Action, args: list[str], env: dict[str, str] | None) -> ActionResult:
        try:
            returncode = run_interactive(args, env=env)
        except OSError as e:
            return ActionResult(action=action, success=False, error=f"Failed to execute Cargo: {e}")

        if returncode != 0:
            return ActionResult(
                action=action,
                success=False,
                error=f"Cargo process finished unsuccessfully: exit code {returncode}",
            )
        message = "Dry run" if self.dry_run else "Operation completed"
        return ActionResult(action=action, success=True, message=message)

    def binstall_available(self, installed: Iterable[str]) -> bool:
        """Heuristically determine whether cargo-binstall can be used.

        Looks for it among the installed packages when they are known, and
        asks ``cargo binstall -V`` otherwise.

        Args:
            installed: Names of the installed packages, empty when unknown.
        """
        installed_names = set(installed)
        if installed_names:
            available = BINSTALL_PACKAGE in installed_names
        else:
            available = self._binstall_version() is not None

        logger.debug("Considering cargo-binstall as %savailable", "" if available else "not ")
        return available

    def _binstall_version(self) -> Version | None:
        try:
            result = run_command([self.cargo, "binstall", "-V"], timeout=self._SEARCH_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("cargo-binstall detection failed: %s", e)
            return None

        if not result.success:
            return None
        try:
            return Version(result.stdout.strip())
        except ValueError:
            logger.debug("cargo binstall -V returned %r", result.stdout)
            return None

    def search_latest(self, name: str) -> Version:
        """Look up the latest published version of a package.

        Args:
            name: Exact package name.

        Returns:
            The latest version on the registry.

        Raises:
            CargoError: If the search fails or the package is not found.
        """
        args = [self.cargo, "--color=never", "search", "--limit=1", "--", name]
        logger.debug("Running %s", " ".join(args))

        try:
            result = run_command(args, timeout=self._SEARCH_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CargoError(f"Failed to run cargo search for {name!r}: {e}") from e

        if not result.success:
            stderr = result.stderr.strip() or f"exit code {result.returncode}"
            raise CargoError(f"Search for {name!r} failed: {stderr}")

        return parse_search_output(name, result.stdout)

    def search_latest_all(self, names: Iterable[str]) -> tuple[dict[str, Version], dict[str, str]]:
        """Look up the latest versions of several packages.

        A failed lookup does not stop the others.

        Returns:
            Latest version per found package, and error message per failed one.
        """
        versions: dict[str, Version] = {}
        errors: dict[str, str] = {}
        for name in sorted(names):
            try:
                versions[name] = self.search_latest(name)
            except CargoError as e:
                logger.debug("Version lookup failed: %s", e)
                errors[name] = str(e)
        return versions, errors


def parse_search_output(name: str, stdout: str) -> Version:
    """Extract the version of an exact match from ``cargo search`` output.

    The first line must read like ``name = "1.2.3"    # description``.

    Raises:
        CargoError: If no line matches the package or the version is invalid.
    """
    lines = stdout.splitlines()
    if not lines:
        raise CargoError(f"Package {name!r} not found by cargo search")

    match = re.match(rf'^{re.escape(name)}\s=\s"([0-9a-zA-Z.+-]+)"\s+#.*', lines[0])
    if match is None:
        raise CargoError(f"Package {name!r} not found by cargo search")

    try:
        return Version(match.group(1))
    except ValueError as e:
        raise CargoError(f"Invalid version {match.group(1)!r} received for {name!r}") from e
