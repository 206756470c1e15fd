"""Cargo home path management for liner.

Both the user configuration and Cargo's ledger of installed packages live in
the Cargo home directory:

- Config: $CARGO_HOME/liner.toml
- Ledger: $CARGO_HOME/.crates.toml

CARGO_HOME defaults to ~/.cargo.
"""

import os
from pathlib import Path

CONFIG_FILE_NAME = "liner.toml"
LEDGER_FILE_NAME = ".crates.toml"


def get_cargo_home() -> Path:
    """Get the Cargo home directory, respecting the CARGO_HOME override.

    Returns:
        Path to $CARGO_HOME, or ~/.cargo when unset or empty.
    """
    base = os.environ.get("CARGO_HOME")
    if base:
        return Path(base)
    return Path.home() / ".cargo"


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to $CARGO_HOME/liner.toml.
    """
    return get_cargo_home() / CONFIG_FILE_NAME


def get_ledger_path() -> Path:
    """Get the path of Cargo's installed packages ledger.

    Returns:
        Path to $CARGO_HOME/.crates.toml.
    """
    return get_cargo_home() / LEDGER_FILE_NAME


def get_cargo_command() -> str:
    """Get the Cargo executable to run, respecting the CARGO override."""
    return os.environ.get("CARGO") or "cargo"
