"""Fixtures shared by the CLI command tests."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from semantic_version import Version

from liner.models.action import Action, ActionResult
from liner.operators.cargo import CargoOperator


@dataclass
class FakeCargo:
    """Mocks standing in for every Cargo invocation of CargoOperator.

    Attributes:
        latest: Versions reported by the search; other names fail to be found.
        failing: Packages whose install or uninstall fails.
        searched: Names passed to the last search.
        available: Mock of the Cargo executable lookup, True by default.
    """

    latest: dict[str, Version] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    searched: list[str] | None = None
    search: MagicMock = field(default_factory=MagicMock)
    install: MagicMock = field(default_factory=MagicMock)
    uninstall: MagicMock = field(default_factory=MagicMock)
    binstall_available: MagicMock = field(default_factory=MagicMock)
    available: MagicMock = field(default_factory=MagicMock)

    def result(self, action: Action, *args: object, **kwargs: object) -> ActionResult:
        if action.package in self.failing:
            return ActionResult(action=action, success=False, error="exit code 101")
        return ActionResult(action=action, success=True, message="Operation completed")

    def search_all(self, names: Iterable[str]) -> tuple[dict[str, Version], dict[str, str]]:
        self.searched = sorted(names)
        versions = {n: self.latest[n] for n in self.searched if n in self.latest}
        errors = {n: "not found" for n in self.searched if n not in self.latest}
        return versions, errors

    def installed_packages(self) -> list[str]:
        return [c.args[0].package for c in self.install.call_args_list]

    def uninstalled_packages(self) -> list[str]:
        return [c.args[0].package for c in self.uninstall.call_args_list]


@pytest.fixture
def write_config(cargo_home: Path) -> Callable[[str], Path]:
    """Write liner.toml into the temporary Cargo home."""

    def _write(content: str) -> Path:
        path = cargo_home / "liner.toml"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def write_ledger(cargo_home: Path) -> Callable[[str], Path]:
    """Write .crates.toml into the temporary Cargo home."""

    def _write(content: str) -> Path:
        path = cargo_home / ".crates.toml"
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def cargo() -> Iterator[FakeCargo]:
    """Replace every Cargo invocation of CargoOperator with mocks."""
    fake = FakeCargo()
    with (
        patch.object(CargoOperator, "search_latest_all", side_effect=fake.search_all) as search,
        patch.object(CargoOperator, "install", side_effect=fake.result) as install,
        patch.object(CargoOperator, "uninstall", side_effect=fake.result) as uninstall,
        patch.object(CargoOperator, "binstall_available", return_value=False) as binstall,
        patch.object(CargoOperator, "is_available", return_value=True) as available,
    ):
        fake.search = search
        fake.install = install
        fake.uninstall = uninstall
        fake.binstall_available = binstall
        fake.available = available
        yield fake
