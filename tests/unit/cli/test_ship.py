"""Unit tests for the ship command.

Tests for the CLI ship command covering settings layers, version checks,
installation and failure handling.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from semantic_version import Version
from typer.testing import CliRunner

from liner.cli.main import app
from liner.models.action import ActionType

if TYPE_CHECKING:
    from tests.unit.cli.conftest import FakeCargo

runner = CliRunner()

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"

LEDGER = f"""[v1]
"bat 0.24.0 ({REGISTRY})" = ["bat"]
"cargo-liner 0.7.0 ({REGISTRY})" = ["cargo-liner"]
"ripgrep 14.1.0 ({REGISTRY})" = ["rg"]
"""

CONFIG = """[packages]
bat = "*"
ripgrep = { version = "14", locked = true }
"""

UP_TO_DATE = {
    "bat": Version("0.24.0"),
    "cargo-liner": Version("0.7.0"),
    "ripgrep": Version("14.1.0"),
}


@pytest.fixture
def setup_files(
    write_config: Callable[[str], Path], write_ledger: Callable[[str], Path]
) -> None:
    """Write the default configuration and ledger."""
    write_config(CONFIG)
    write_ledger(LEDGER)


class TestShipHelp:
    """Tests for ship command help."""

    def test_ship_help(self) -> None:
        result = runner.invoke(app, ["ship", "--help"])
        assert result.exit_code == 0
        assert "--no-fail-fast" in result.output
        assert "--binstall" in result.output


@pytest.mark.usefixtures("setup_files")
class TestShipVersionCheck:
    """Tests for the version check and the resulting installs."""

    def test_all_up_to_date(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE)

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 0, result.output
        assert "All packages are up to date." in result.output
        assert cargo.searched == ["bat", "cargo-liner", "ripgrep"]
        cargo.install.assert_not_called()

    def test_update_available(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, bat=Version("0.25.0"))

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 0, result.output
        assert cargo.installed_packages() == ["bat"]
        action, entry = cargo.install.call_args.args
        assert action.action_type is ActionType.UPDATE
        assert str(entry.version) == "*"
        assert "completed successfully" in result.output

    def test_missing_package_installed(
        self, cargo: FakeCargo, write_config: Callable[[str], Path]
    ) -> None:
        write_config(CONFIG + 'just = "1"\n')
        cargo.latest.update(UP_TO_DATE, just=Version("1.25.0"))

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 0, result.output
        assert cargo.installed_packages() == ["just"]
        assert cargo.install.call_args.args[0].action_type is ActionType.INSTALL

    def test_unknown_latest_is_skipped(self, cargo: FakeCargo) -> None:
        """A failed lookup warns and leaves the package alone."""
        cargo.latest.update(UP_TO_DATE)
        del cargo.latest["bat"]

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 0, result.output
        assert "Warning" in result.output
        cargo.install.assert_not_called()

    def test_pinned_source_not_searched(
        self, cargo: FakeCargo, write_config: Callable[[str], Path]
    ) -> None:
        write_config(CONFIG + 'tool = { git = "https://example.com/tool.git" }\n')
        cargo.latest.update(UP_TO_DATE)

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 0, result.output
        assert "tool" not in (cargo.searched or [])
        assert cargo.installed_packages() == ["tool"]

    def test_default_command_is_ship(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, bat=Version("0.25.0"))

        result = runner.invoke(app, [])

        assert result.exit_code == 0, result.output
        assert cargo.installed_packages() == ["bat"]


@pytest.mark.usefixtures("setup_files")
class TestShipFlags:
    """Tests for ship command flags and settings layers."""

    def test_no_self(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE)
        result = runner.invoke(app, ["ship", "--no-self"])
        assert result.exit_code == 0, result.output
        assert cargo.searched == ["bat", "ripgrep"]

    def test_only_self(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, **{"cargo-liner": Version("0.8.0")})
        result = runner.invoke(app, ["ship", "--only-self"])
        assert result.exit_code == 0, result.output
        assert cargo.searched == ["cargo-liner"]
        assert cargo.installed_packages() == ["cargo-liner"]

    def test_no_self_and_only_self_conflict(self, cargo: FakeCargo) -> None:
        result = runner.invoke(app, ["ship", "--no-self", "--only-self"])
        assert result.exit_code == 1
        cargo.search.assert_not_called()

    def test_skip_check_installs_everything(
        self, cargo: FakeCargo, cargo_home: Path
    ) -> None:
        """Without version checks the ledger is not needed."""
        (cargo_home / ".crates.toml").unlink()

        result = runner.invoke(app, ["ship", "--skip-check"])

        assert result.exit_code == 0, result.output
        cargo.search.assert_not_called()
        assert cargo.installed_packages() == ["bat", "cargo-liner", "ripgrep"]

    def test_skip_check_detects_binstall_once(self, cargo: FakeCargo) -> None:
        result = runner.invoke(app, ["ship", "--skip-check"])
        assert result.exit_code == 0, result.output
        cargo.binstall_available.assert_called_once_with(set())

    def test_force_passed(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, bat=Version("0.25.0"))
        result = runner.invoke(app, ["ship", "--force"])
        assert result.exit_code == 0, result.output
        assert cargo.install.call_args.kwargs["force"] is True

    def test_binstall_option(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, bat=Version("0.25.0"))
        result = runner.invoke(app, ["ship", "--binstall", "always"])
        assert result.exit_code == 0, result.output
        assert cargo.install.call_args.kwargs["use_binstall"] is True
        cargo.binstall_available.assert_not_called()

    def test_dry_run(self, cargo: FakeCargo) -> None:
        cargo.latest.update(UP_TO_DATE, bat=Version("0.25.0"))
        result = runner.invoke(app, ["ship", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "dry run" in result.output

    def test_env_layer(self, cargo: FakeCargo) -> None:
        with patch.dict(os.environ, {"CARGO_LINER_SHIP_SKIP_CHECK": "true"}):
            result = runner.invoke(app, ["ship"])
        assert result.exit_code == 0, result.output
        cargo.search.assert_not_called()

    def test_invalid_env_value(self, cargo: FakeCargo) -> None:
        with patch.dict(os.environ, {"CARGO_LINER_SHIP_DRY_RUN": "yes"}):
            result = runner.invoke(app, ["ship"])
        assert result.exit_code == 1
        assert "CARGO_LINER_SHIP_DRY_RUN" in result.output
        cargo.install.assert_not_called()

    def test_config_defaults_layer(
        self, cargo: FakeCargo, write_config: Callable[[str], Path]
    ) -> None:
        write_config(CONFIG + "\n[defaults.ship]\nno-self = true\n")
        cargo.latest.update(UP_TO_DATE)
        result = runner.invoke(app, ["ship"])
        assert result.exit_code == 0, result.output
        assert cargo.searched == ["bat", "ripgrep"]

    def test_env_overrides_config_defaults(
        self, cargo: FakeCargo, write_config: Callable[[str], Path]
    ) -> None:
        write_config(CONFIG + "\n[defaults.ship]\nno-self = true\n")
        cargo.latest.update(UP_TO_DATE)
        with patch.dict(os.environ, {"CARGO_LINER_SHIP_NO_SELF": "false"}):
            result = runner.invoke(app, ["ship"])
        assert result.exit_code == 0, result.output
        assert cargo.searched == ["bat", "cargo-liner", "ripgrep"]


@pytest.mark.usefixtures("setup_files")
class TestShipFailures:
    """Tests for installation failures."""

    def test_fail_fast(self, cargo: FakeCargo) -> None:
        cargo.latest.update(bat=Version("0.25.0"), ripgrep=Version("14.2.0"))
        cargo.latest["cargo-liner"] = Version("0.7.0")
        cargo.failing.add("bat")

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 1
        assert cargo.installed_packages() == ["bat"]
        assert "--no-fail-fast" in result.output

    def test_no_fail_fast(self, cargo: FakeCargo) -> None:
        cargo.latest.update(bat=Version("0.25.0"), ripgrep=Version("14.2.0"))
        cargo.latest["cargo-liner"] = Version("0.7.0")
        cargo.failing.add("bat")

        result = runner.invoke(app, ["ship", "--no-fail-fast"])

        assert result.exit_code == 1
        assert cargo.installed_packages() == ["bat", "ripgrep"]
        assert "1 succeeded" in result.output

    def test_missing_config(self, cargo: FakeCargo, cargo_home: Path) -> None:
        (cargo_home / "liner.toml").unlink()
        result = runner.invoke(app, ["ship"])
        assert result.exit_code == 1
        assert "import" in result.output

    def test_invalid_config(
        self, cargo: FakeCargo, write_config: Callable[[str], Path]
    ) -> None:
        write_config('[packages]\nbat = { version = "1", featurs = [] }\n')
        result = runner.invoke(app, ["ship"])
        assert result.exit_code == 1

    def test_missing_ledger(self, cargo: FakeCargo, cargo_home: Path) -> None:
        (cargo_home / ".crates.toml").unlink()
        result = runner.invoke(app, ["ship"])
        assert result.exit_code == 1
        assert "CARGO_HOME" in result.output

    def test_cargo_not_found(self, cargo: FakeCargo) -> None:
        cargo.available.return_value = False

        result = runner.invoke(app, ["ship"])

        assert result.exit_code == 1
        assert "Cargo executable not found" in result.output
        cargo.search.assert_not_called()
        cargo.install.assert_not_called()
