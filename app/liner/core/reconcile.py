"""Reconciliation of the configured packages with the installed ones.

Decides per package whether it must be installed, updated, left alone or
uninstalled. Nothing here performs I/O: installed and latest versions are
gathered by the caller and passed in.
"""

from collections.abc import Iterable, Mapping

from semantic_version import Version

from liner.models.action import Decision
from liner.models.package import DetailedPackage, PackageEntry

LATEST_UNKNOWN = "latest version unknown"


def effective_skip_check(entry: PackageEntry) -> bool:
    """Check if a package is exempt from the version check.

    Packages pinned to a local path or a git source are always reinstalled,
    as their version on a registry says nothing about them.
    """
    if not isinstance(entry, DetailedPackage):
        return False
    return entry.skip_check or entry.has_pinned_source


def decide(
    packages: Mapping[str, PackageEntry],
    installed_versions: Mapping[str, Version],
    latest_versions: Mapping[str, Version],
    skip_check: bool = False,
) -> dict[str, Decision]:
    """Decide what to do with each configured package.

    Args:
        packages: Configured packages.
        installed_versions: Installed version per package name.
        latest_versions: Latest available version per package name.
        skip_check: Treat every package as exempt from the version check.

    Returns:
        One decision per configured package, ordered by name.
    """
    decisions: dict[str, Decision] = {}

    for name in sorted(packages):
        installed = installed_versions.get(name)
        latest = latest_versions.get(name)

        if skip_check or effective_skip_check(packages[name]) or installed is None:
            decisions[name] = Decision.needs_install()
        elif latest is None:
            decisions[name] = Decision.skipped(LATEST_UNKNOWN)
        elif installed < latest:
            decisions[name] = Decision.needs_update(installed, latest)
        else:
            decisions[name] = Decision.up_to_date()

    return decisions


def decide_removals(
    installed_names: Iterable[str],
    desired_names: Iterable[str],
    self_name: str,
) -> set[str]:
    """Find the installed packages that are no longer configured.

    This tool itself is never selected for removal.
    """
    return set(installed_names) - set(desired_names) - {self_name}
