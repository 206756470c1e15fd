"""User configuration file I/O and transformations.

This module provides functions for loading and saving the liner.toml file
in TOML format with validation using Pydantic models, along with the two
transformations applied to a loaded configuration before reconciliation.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from liner.core.paths import get_config_path
from liner.models.config import UserConfig
from liner.models.package import PackageEntry, SimplePackage, package_entry_to_toml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration-related errors."""


class ConfigMissingError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed or is invalid."""


class ConfigAlreadyExistsError(ConfigError):
    """Raised when saving without overwrite over an existing file."""


class EnvironmentParseError(ConfigError):
    """Raised when a configuration environment variable has a bad value."""


def load_config(path: Path | None, self_name: str) -> UserConfig:
    """Load and validate the user configuration.

    Self-updating is always enabled on the loaded value.

    Args:
        path: Path to the configuration file. If None, uses the default path.
        self_name: Package name of this tool.

    Returns:
        Validated configuration containing at least the self package.

    Raises:
        ConfigMissingError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax or the content is invalid.
        ConfigError: If the file cannot be read.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigMissingError(f"Configuration not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration: {e}") from e

    try:
        config = UserConfig.model_validate(data, by_alias=True, by_name=False)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid configuration content: {e}") from e

    logger.debug("Loaded %d package(s) from %s", len(config.packages), config_path)
    return self_update(config, True, self_name)


def self_update(config: UserConfig, enabled: bool, self_name: str) -> UserConfig:
    """Enable or disable updating of this tool itself.

    Enabling adds the self package with a ``*`` requirement unless it is
    already configured. Disabling removes it.

    Returns:
        A new configuration; the given one is left untouched.
    """
    packages = dict(config.packages)
    if enabled:
        packages.setdefault(self_name, SimplePackage())
        logger.debug("Self-updating enabled")
    else:
        packages.pop(self_name, None)
        logger.debug("Self-updating disabled")
    return config.model_copy(update={"packages": dict(sorted(packages.items()))})


def update_others(config: UserConfig, enabled: bool, self_name: str) -> UserConfig:
    """Enable or disable updating of the packages other than this tool.

    Disabling keeps only the self package, with a ``*`` requirement when it
    was not configured. This cannot be undone on the returned value.

    Returns:
        A new configuration; the given one is left untouched.
    """
    if enabled:
        return config
    entry: PackageEntry = config.packages.get(self_name, SimplePackage())
    logger.debug("Updating of other packages disabled")
    return config.model_copy(update={"packages": {self_name: entry}})


def config_exists(path: Path | None = None) -> bool:
    """Check if the configuration file exists.

    Args:
        path: Path to check. If None, uses the default path.
    """
    config_path = path or get_config_path()
    return config_path.exists()


def save_config(config: UserConfig, path: Path | None = None, *, overwrite: bool = False) -> Path:
    """Save the configuration in canonical TOML form.

    Without overwrite the file is created exclusively, so an existing file is
    never clobbered. With overwrite the file is replaced atomically by writing
    to a temporary file in the same directory first.

    Args:
        config: The configuration to save.
        path: Destination. If None, uses the default path.
        overwrite: Replace an existing file.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigAlreadyExistsError: If the file exists and overwrite is False.
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    content = tomli_w.dumps(config_to_dict(config))

    if not overwrite:
        try:
            with open(config_path, "xb") as f:
                f.write(content.encode())
        except FileExistsError as e:
            raise ConfigAlreadyExistsError(f"Configuration already exists: {config_path}") from e
        except OSError as e:
            raise ConfigError(f"Failed to write configuration: {e}") from e
        return config_path

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(content.encode())
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path


def config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Convert a configuration to a dictionary suitable for TOML serialization.

    Packages are written in name order; empty defaults tables are omitted.
    """
    data: dict[str, Any] = {
        "packages": {
            name: package_entry_to_toml(config.packages[name]) for name in sorted(config.packages)
        },
    }

    if config.defaults is not None:
        defaults: dict[str, Any] = {}
        for command, section in (
            ("ship", config.defaults.ship),
            ("jettison", config.defaults.jettison),
        ):
            values = section.model_dump(by_alias=True, exclude_none=True, mode="json")
            if values:
                defaults[command] = values
        if defaults:
            data["defaults"] = defaults

    return data


def require_config(config_path: Path | None, self_name: str) -> UserConfig:
    """Load the configuration or exit with a helpful error message.

    Args:
        config_path: Optional custom configuration path.
        self_name: Package name of this tool.

    Returns:
        Loaded and validated configuration.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    import typer

    from liner.utils.formatting import print_error, print_info

    path = config_path or get_config_path()
    try:
        return load_config(path, self_name)
    except ConfigMissingError as e:
        print_error(f"Configuration not found: {path}")
        print_info("Run 'cargo liner import' to create one from the installed packages.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e
