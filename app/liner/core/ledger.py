"""Reading Cargo's ledger of installed packages.

Cargo keeps track of the packages installed with ``cargo install`` in
``$CARGO_HOME/.crates.toml``::

    [v1]
    "bat 0.24.0 (registry+https://github.com/rust-lang/crates.io-index)" = ["bat"]
    "foo 0.1.0 (path+file:///home/me/foo)" = ["foo"]

The file is only ever read: Cargo owns it.
"""

import logging
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import AnyUrl, TypeAdapter, ValidationError
from semantic_version import Version

from liner.core.paths import get_ledger_path
from liner.models.config import UserConfig
from liner.models.identity import PackageIdentity, Source, SourceKind
from liner.models.package import PackageEntry, SimplePackage
from liner.models.requirement import RequirementPolicy, convert

logger = logging.getLogger(__name__)

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class LedgerError(Exception):
    """Base exception for ledger-related errors."""


class LedgerNotFoundError(LedgerError):
    """Raised when the ledger file is not found."""


class LedgerParseError(LedgerError):
    """Raised when the ledger or one of its keys cannot be parsed."""


class MissingFieldError(LedgerParseError):
    """Raised when a key lacks its name, version or source."""


class InvalidVersionError(LedgerParseError):
    """Raised when a key's version is not a strict semantic version."""


class InvalidSourceError(LedgerParseError):
    """Raised when a key's source is not a recognised ``(kind+url)``."""


def parse_identity(key: str) -> PackageIdentity:
    """Parse a ledger key into a package identity.

    Args:
        key: Key such as ``"bat 0.24.0 (registry+https://example.com/index)"``.

    Returns:
        The parsed identity.

    Raises:
        MissingFieldError: If the name, version or source is missing.
        InvalidVersionError: If the version is not a valid semantic version.
        InvalidSourceError: If the source is malformed or of an unknown kind.
    """
    parts = key.split(" ", 2)
    if len(parts) < 3:
        missing = ("name", "version", "source")[len(parts)]
        raise MissingFieldError(f"Missing {missing} in {key!r}")

    name, version_text, source_text = parts
    if not name:
        raise MissingFieldError(f"Missing name in {key!r}")

    try:
        version = Version(version_text)
    except ValueError as e:
        raise InvalidVersionError(f"Invalid version {version_text!r} in {key!r}: {e}") from e

    return PackageIdentity(name=name, version=version, source=_parse_source(source_text, key))


def _parse_source(text: str, key: str) -> Source:
    if not (text.startswith("(") and text.endswith(")")):
        raise InvalidSourceError(f"Source must be parenthesised in {key!r}")

    kind_text, plus, url = text[1:-1].partition("+")
    if not plus:
        raise InvalidSourceError(f"Source must be of the form (kind+url) in {key!r}")

    try:
        kind = SourceKind(kind_text)
    except ValueError as e:
        raise InvalidSourceError(f"Unknown source kind {kind_text!r} in {key!r}") from e

    try:
        _URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        raise InvalidSourceError(f"Invalid source URL {url!r} in {key!r}") from e

    return Source(kind=kind, url=url)


def render_identity(identity: PackageIdentity) -> str:
    """Render an identity back into its ledger key form."""
    return str(identity)


@dataclass(frozen=True)
class InstalledLedger:
    """Installed packages and the binaries each one provides.

    Attributes:
        packages: Identity to binary names, ordered by identity.
    """

    packages: Mapping[PackageIdentity, tuple[str, ...]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[PackageIdentity]:
        return iter(sorted(self.packages))

    def __len__(self) -> int:
        return len(self.packages)

    def name_versions(self) -> dict[str, Version]:
        """Map each installed package name to its version.

        When a name is installed under several identities, the greatest
        identity wins.
        """
        return {identity.name: identity.version for identity in self}

    def names(self) -> set[str]:
        """Names of all installed packages."""
        return {identity.name for identity in self.packages}

    def into_config(
        self,
        policy: RequirementPolicy,
        self_name: str,
        *,
        keep_self: bool = False,
        keep_local: bool = False,
    ) -> UserConfig:
        """Convert the installed packages into a user configuration.

        Args:
            policy: How strictly installed versions become requirements.
            self_name: Package name of this tool.
            keep_self: Keep the entry for this tool.
            keep_local: Keep packages installed from a local path.

        Returns:
            Configuration with one simple entry per kept package.
        """
        packages: dict[str, PackageEntry] = {}
        for identity in self:
            if identity.name == self_name and not keep_self:
                continue
            if identity.is_local and not keep_local:
                logger.debug("Skipping locally installed package %s", identity)
                continue
            packages[identity.name] = SimplePackage(version=convert(identity.version, policy))
        return UserConfig(packages=packages)


def load_ledger(path: Path | None = None) -> InstalledLedger:
    """Load and parse the ledger file.

    Every key is parsed independently, but a single bad key fails the whole
    load.

    Args:
        path: Path to the ledger. If None, uses the default ledger path.

    Returns:
        The installed packages.

    Raises:
        LedgerNotFoundError: If the ledger file doesn't exist.
        LedgerParseError: If the TOML or any key is invalid.
        LedgerError: If the file cannot be read.
    """
    ledger_path = path or get_ledger_path()

    if not ledger_path.exists():
        raise LedgerNotFoundError(f"Ledger not found: {ledger_path}")

    try:
        with open(ledger_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise LedgerParseError(f"Invalid TOML syntax in {ledger_path}: {e}") from e
    except OSError as e:
        raise LedgerError(f"Failed to read ledger: {e}") from e

    table = data.get("v1")
    if not isinstance(table, dict):
        raise LedgerParseError(f"Missing [v1] table in {ledger_path}")

    packages: dict[PackageIdentity, tuple[str, ...]] = {}
    for key, bins in table.items():
        try:
            identity = parse_identity(key)
        except LedgerParseError as e:
            raise type(e)(f"{ledger_path}: {e}") from e
        if not isinstance(bins, list) or not all(isinstance(b, str) for b in bins):
            raise LedgerParseError(f"{ledger_path}: binaries of {key!r} must be a list of strings")
        packages[identity] = tuple(bins)

    logger.debug("Loaded %d installed package(s) from %s", len(packages), ledger_path)
    return InstalledLedger(packages=packages)


def require_ledger(ledger_path: Path | None = None) -> InstalledLedger:
    """Load the ledger or exit with a helpful error message.

    Args:
        ledger_path: Optional custom ledger path.

    Returns:
        The installed packages.

    Raises:
        typer.Exit: If the ledger cannot be loaded.
    """
    import typer

    from liner.utils.formatting import print_error, print_info

    path = ledger_path or get_ledger_path()
    try:
        return load_ledger(path)
    except LedgerNotFoundError as e:
        print_error(f"Cargo's ledger of installed packages not found: {path}")
        print_info("Check that CARGO_HOME points to your Cargo installation.")
        raise typer.Exit(code=1) from e
    except LedgerError as e:
        print_error(f"Failed to parse Cargo's .crates.toml file: {e}")
        raise typer.Exit(code=1) from e
