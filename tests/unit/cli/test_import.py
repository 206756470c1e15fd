"""Unit tests for the import command."""

import tomllib
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from liner.cli.main import app

runner = CliRunner()

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"

LEDGER = f"""[v1]
"bat 0.24.0 ({REGISTRY})" = ["bat"]
"cargo-liner 0.7.0 ({REGISTRY})" = ["cargo-liner"]
"local-tool 0.1.0 (path+file:///home/me/local-tool)" = ["local-tool"]
"""


def _read_packages(cargo_home: Path) -> dict:
    return tomllib.loads((cargo_home / "liner.toml").read_text())["packages"]


@pytest.fixture(autouse=True)
def ledger(write_ledger: Callable[[str], Path]) -> Path:
    return write_ledger(LEDGER)


class TestImport:
    """Tests for the import command."""

    def test_default_star(self, cargo_home: Path) -> None:
        result = runner.invoke(app, ["import"])

        assert result.exit_code == 0, result.output
        assert _read_packages(cargo_home) == {"bat": "*"}
        assert "package(s)" in result.output

    @pytest.mark.parametrize(
        ("flag", "expected"),
        [
            ("--exact", "=0.24.0"),
            ("-e", "=0.24.0"),
            ("--compatible", "^0.24.0"),
            ("-c", "^0.24.0"),
            ("--patch", "~0.24.0"),
            ("-p", "~0.24.0"),
        ],
    )
    def test_policy_flags(self, cargo_home: Path, flag: str, expected: str) -> None:
        result = runner.invoke(app, ["import", flag])
        assert result.exit_code == 0, result.output
        assert _read_packages(cargo_home)["bat"] == expected

    def test_policy_flags_exclusive(self, cargo_home: Path) -> None:
        result = runner.invoke(app, ["import", "--exact", "--patch"])
        assert result.exit_code == 1
        assert not (cargo_home / "liner.toml").exists()

    def test_keep_self_and_local(self, cargo_home: Path) -> None:
        result = runner.invoke(app, ["import", "--keep-self", "--keep-local"])
        assert result.exit_code == 0, result.output
        assert list(_read_packages(cargo_home)) == ["bat", "cargo-liner", "local-tool"]

    def test_existing_config_refused(self, cargo_home: Path) -> None:
        (cargo_home / "liner.toml").write_text("[packages]\nold = \"*\"\n")

        result = runner.invoke(app, ["import"])

        assert result.exit_code == 1
        assert "--force" in result.output
        assert _read_packages(cargo_home) == {"old": "*"}

    def test_force_overwrites(self, cargo_home: Path) -> None:
        (cargo_home / "liner.toml").write_text("[packages]\nold = \"*\"\n")

        result = runner.invoke(app, ["import", "--force"])

        assert result.exit_code == 0, result.output
        assert "overwritten" in result.output
        assert _read_packages(cargo_home) == {"bat": "*"}

    def test_missing_ledger(self, cargo_home: Path, ledger: Path) -> None:
        ledger.unlink()
        result = runner.invoke(app, ["import"])
        assert result.exit_code == 1
        assert not (cargo_home / "liner.toml").exists()
