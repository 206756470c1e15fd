"""User configuration models.

This module defines the Pydantic models representing the liner.toml file
that describes the desired set of installed packages:

    [packages]
    cargo-liner = "*"
    bat = "0.24"

    [defaults.ship]
    no-fail-fast = true
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from liner.models.args import JettisonArgs, ShipArgs
from liner.models.package import PackageEntry, parse_package_entry


class DefaultsSection(BaseModel):
    """Per-command defaults stored in the configuration file.

    These form the lowest-precedence layer above the builtin defaults.

    Attributes:
        ship: Defaults for the ship command.
        jettison: Defaults for the jettison command.
    """

    model_config = ConfigDict(extra="forbid")

    ship: ShipArgs = Field(default_factory=ShipArgs, description="Defaults for ship")
    jettison: JettisonArgs = Field(
        default_factory=JettisonArgs, description="Defaults for jettison"
    )


class UserConfig(BaseModel):
    """Desired state: the packages that should be installed.

    Unknown top-level sections are ignored so that newer files still load.
    Packages are kept ordered by name.

    Attributes:
        packages: Package name to entry mapping.
        defaults: Optional per-command defaults.
    """

    model_config = ConfigDict(extra="ignore")

    packages: Annotated[dict[str, PackageEntry], Field(description="Configured packages")]
    defaults: Annotated[DefaultsSection | None, Field(description="Command defaults")] = None

    @field_validator("packages", mode="before")
    @classmethod
    def _parse_packages(cls, value: Any) -> dict[str, PackageEntry]:
        if not isinstance(value, dict):
            msg = "packages must be a table"
            raise ValueError(msg)
        for name in value:
            if not name:
                msg = "package name cannot be empty"
                raise ValueError(msg)
        return {name: parse_package_entry(value[name]) for name in sorted(value)}

    @property
    def ship_defaults(self) -> ShipArgs:
        """Ship defaults from the file, empty when the section is absent."""
        return self.defaults.ship if self.defaults else ShipArgs()

    @property
    def jettison_defaults(self) -> JettisonArgs:
        """Jettison defaults from the file, empty when the section is absent."""
        return self.defaults.jettison if self.defaults else JettisonArgs()
