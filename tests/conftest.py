"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


@pytest.fixture
def cargo_home(tmp_path: Path) -> Iterator[Path]:
    """Point CARGO_HOME at a temporary directory and clear liner variables."""
    home = tmp_path / "cargo"
    home.mkdir()
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("CARGO_LINER_") and key != "CARGO"
    }
    env["CARGO_HOME"] = str(home)
    with patch.dict(os.environ, env, clear=True):
        yield home


@pytest.fixture
def sample_ledger() -> str:
    """Sample .crates.toml content."""
    return f"""[v1]
"bat 0.24.0 ({REGISTRY})" = ["bat"]
"cargo-liner 0.7.0 ({REGISTRY})" = ["cargo-liner"]
"ripgrep 14.1.0 ({REGISTRY})" = ["rg"]
"local-tool 0.1.0 (path+file:///home/user/local-tool)" = ["local-tool"]
"""


@pytest.fixture
def sample_config() -> str:
    """Sample liner.toml content."""
    return """[packages]
bat = "0.24"
ripgrep = { version = "14", features = ["pcre2"], locked = true }
"""
