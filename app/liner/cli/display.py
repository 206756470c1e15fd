"""Shared Rich display functions for version checks and reports.

Provides the table builders and summary printers used by the ship and
jettison commands.
"""

from collections.abc import Iterable, Mapping

from rich.table import Table
from semantic_version import Version

from liner.core.executor import InstallReport
from liner.models.action import InstallStatus
from liner.utils.formatting import (
    ERR_ICON,
    NEW_ICON,
    NONE_ICON,
    OK_ICON,
    TODO_ICON,
    UNKNOWN_ICON,
    console,
    print_success,
)


def _status_table(title: str) -> Table:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Old version", style="muted")
    table.add_column("New version")
    table.add_column("Status", width=6, justify="center")
    return table


def create_version_check_table(
    names: Iterable[str],
    installed_versions: Mapping[str, Version],
    latest_versions: Mapping[str, Version],
) -> Table:
    """Create a table showing whether each package needs an update.

    A missing old version means "not installed"; a missing new version means
    the latest version was not fetched.

    Args:
        names: Configured package names.
        installed_versions: Installed version per package name.
        latest_versions: Latest available version per package name.

    Returns:
        Rich Table with one row per package.
    """
    table = _status_table("Version check")

    for name in sorted(names):
        old = installed_versions.get(name)
        new = latest_versions.get(name)
        up_to_date = old is not None and new is not None and old >= new

        if new is None:
            new_text = f"[muted]{UNKNOWN_ICON}[/muted]"
        elif up_to_date:
            new_text = f"[muted]{NONE_ICON}[/muted]"
        else:
            new_text = f"[added]{new}[/added]"

        table.add_row(
            name,
            str(old) if old is not None else NONE_ICON,
            new_text,
            f"[success]{OK_ICON}[/success]" if up_to_date else f"[info]{TODO_ICON}[/info]",
        )

    return table


def create_install_report_table(
    report: InstallReport,
    installed_versions: Mapping[str, Version],
    latest_versions: Mapping[str, Version],
) -> Table:
    """Create a table of the final status of each attempted package.

    Args:
        report: Execution report.
        installed_versions: Version installed before the run, per package.
        latest_versions: Latest version fetched, per package.

    Returns:
        Rich Table with one row per attempted package.
    """
    table = _status_table("Installation report")

    icons = {
        InstallStatus.INSTALLED: f"[added]{NEW_ICON}[/added]",
        InstallStatus.UPDATED: f"[success]{OK_ICON}[/success]",
        InstallStatus.UNINSTALLED: f"[removed]{OK_ICON}[/removed]",
        InstallStatus.FAILED: f"[error]{ERR_ICON}[/error]",
    }

    for name, status in sorted(report.statuses.items()):
        old = installed_versions.get(name)
        new = latest_versions.get(name)
        table.add_row(
            name,
            str(old) if old is not None else NONE_ICON,
            str(new) if new is not None else UNKNOWN_ICON,
            icons[status],
        )

    return table


def create_uninstall_table(
    names: Iterable[str], installed_versions: Mapping[str, Version]
) -> Table:
    """Create a table of the packages about to be uninstalled."""
    table = Table(
        title="Packages to uninstall",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Version", style="muted")

    for name in sorted(names):
        version = installed_versions.get(name)
        table.add_row(f"[removed]{name}[/removed]", str(version) if version else UNKNOWN_ICON)

    return table


def print_results_summary(report: InstallReport) -> None:
    """Print a summary of action results.

    Shows a success message when all actions succeed, or a count of
    succeeded/failed actions when there are failures.

    Args:
        report: Execution report.
    """
    fail_count = len(report.failed)
    success_count = len(report.results) - fail_count

    if fail_count == 0:
        print_success(f"All {success_count} action(s) completed successfully.")
    else:
        console.print(
            f"\n[success]{success_count} succeeded[/success], [error]{fail_count} failed[/error]"
        )
