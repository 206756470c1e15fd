"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from liner.utils.shell import CommandResult, command_exists, run_command, run_interactive


class TestRunCommand:
    """Tests for run_command function."""

    @patch("liner.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured stdout, stderr and exit code."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["cargo", "search", "bat"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        assert not result.success
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["timeout"] == 60.0

    @patch("liner.utils.shell.subprocess.run")
    def test_passes_timeout(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["cargo"], timeout=5.0)

        assert mock_run.call_args.kwargs["timeout"] == 5.0

    @patch("liner.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(["cargo"], 1.0)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["cargo"], timeout=1.0)


class TestRunInteractive:
    """Tests for run_interactive function."""

    @patch("liner.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        """run_interactive returns the subprocess exit code."""
        mock_run.return_value = MagicMock(returncode=101)

        assert run_interactive(["cargo", "install", "bat"]) == 101

    @patch("liner.utils.shell.subprocess.run")
    def test_does_not_capture_output(self, mock_run: MagicMock) -> None:
        """run_interactive lets Cargo's progress output reach the terminal."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["cargo", "install", "bat"])

        call_kwargs = mock_run.call_args.kwargs
        assert "capture_output" not in call_kwargs
        assert "stdout" not in call_kwargs
        assert "stderr" not in call_kwargs

    @patch("liner.utils.shell.subprocess.run")
    def test_merges_env(self, mock_run: MagicMock) -> None:
        """Package environment variables are added to the current environment."""
        mock_run.return_value = MagicMock(returncode=0)

        with patch.dict("os.environ", {"PATH": "/usr/bin"}):
            run_interactive(["cargo"], env={"RUSTFLAGS": "-C target-cpu=native"})

        call_env = mock_run.call_args.kwargs["env"]
        assert call_env["RUSTFLAGS"] == "-C target-cpu=native"
        assert call_env["PATH"] == "/usr/bin"

    @patch("liner.utils.shell.subprocess.run")
    def test_no_env_inherits(self, mock_run: MagicMock) -> None:
        """Without extra variables the environment is inherited as is."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["cargo"], env={})

        assert mock_run.call_args.kwargs["env"] is None

    def test_raises_file_not_found(self) -> None:
        """run_interactive raises FileNotFoundError for missing commands."""
        with pytest.raises(FileNotFoundError):
            run_interactive(["nonexistent_command_xyz_12345"])


class TestCommandExists:
    """Tests for command_exists function."""

    def test_found(self) -> None:
        with patch("liner.utils.shell.shutil.which", return_value="/usr/bin/cargo"):
            assert command_exists("cargo") is True

    def test_missing(self) -> None:
        with patch("liner.utils.shell.shutil.which", return_value=None):
            assert command_exists("cargo") is False
