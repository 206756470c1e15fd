"""Installed package identity models.

Cargo records every installed package in ``.crates.toml`` under a key of the
form ``"name version (kind+url)"``, for example::

    "ripgrep 14.1.0 (registry+https://github.com/rust-lang/crates.io-index)"
"""

from dataclasses import dataclass
from enum import Enum

from semantic_version import Version


class SourceKind(str, Enum):
    """Where an installed package was fetched from."""

    GIT = "git"
    PATH = "path"
    REGISTRY = "registry"
    SPARSE = "sparse"


@dataclass(frozen=True, slots=True, order=True)
class Source:
    """Source of an installed package.

    Attributes:
        kind: Kind of source.
        url: URL of the source, kept exactly as written in the ledger.
    """

    kind: SourceKind
    url: str

    def __str__(self) -> str:
        return f"({self.kind.value}+{self.url})"


@dataclass(frozen=True, slots=True, order=True)
class PackageIdentity:
    """Unique identity of an installed package.

    Identities order by name, then version, then source.

    Attributes:
        name: Package name.
        version: Installed version.
        source: Where the package was installed from.
    """

    name: str
    version: Version
    source: Source

    @property
    def is_local(self) -> bool:
        """Check if the package was installed from a local path."""
        return self.source.kind is SourceKind.PATH

    def __str__(self) -> str:
        return f"{self.name} {self.version} {self.source}"
