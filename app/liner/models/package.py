"""Package entry models for the declarative configuration.

A package is configured either with a bare requirement string (simple form)
or with a table of installation options (detailed form):

    [packages]
    bat = "0.24"
    ripgrep = { version = "14", features = ["pcre2"], locked = true }
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
)

from liner.models.requirement import VersionReq


class BinstallChoice(str, Enum):
    """Installation backend selection.

    Attributes:
        AUTO: Use cargo-binstall when it is installed, cargo install otherwise.
        ALWAYS: Always use cargo-binstall.
        NEVER: Always use cargo install.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def _to_version_req(value: object) -> VersionReq:
    if isinstance(value, VersionReq):
        return value
    if isinstance(value, str):
        return VersionReq.parse(value)
    msg = f"version requirement must be a string, got {type(value).__name__}"
    raise ValueError(msg)


# Requirement parsed from and serialized to its canonical string form.
VersionRequirement = Annotated[
    VersionReq,
    PlainValidator(_to_version_req),
    PlainSerializer(str, return_type=str),
]


def kebab_case(name: str) -> str:
    """Map a Python field name to its TOML key (``all_features`` -> ``all-features``)."""
    return name.replace("_", "-")


class SimplePackage(BaseModel):
    """Simple form: only a SemVer requirement string.

    Attributes:
        version: Requirement the installed version must satisfy.
    """

    model_config = ConfigDict(extra="forbid")

    version: VersionRequirement = VersionReq.STAR


class DetailedPackage(BaseModel):
    """Detailed form: a requirement plus installation options.

    ``all-features`` and ``features`` are independent toggles and may both be
    set. Unknown keys are rejected so that typos are reported.
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=kebab_case,
        validate_by_name=True,
    )

    version: VersionRequirement = VersionReq.STAR

    # Features
    default_features: bool = True
    all_features: bool = False
    features: list[str] = Field(default_factory=list)

    # Source overrides
    index: str | None = None
    registry: str | None = None
    git: str | None = None
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None
    path: str | None = None

    # Target selection
    bins: list[str] = Field(default_factory=list)
    all_bins: bool = False
    examples: list[str] = Field(default_factory=list)
    all_examples: bool = False

    # Cargo install flags
    force: bool = False
    ignore_rust_version: bool = False
    frozen: bool = False
    locked: bool = False
    offline: bool = False
    extra_arguments: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)

    # Per-package overrides of the ship command's behavior
    skip_check: bool = False
    no_fail_fast: bool = False
    binstall: BinstallChoice | None = None

    @property
    def has_pinned_source(self) -> bool:
        """Check if a local path or git source makes version checks meaningless."""
        return any(
            value is not None
            for value in (self.path, self.git, self.branch, self.tag, self.rev)
        )


# A configured package: simple or detailed form.
PackageEntry = SimplePackage | DetailedPackage


def parse_package_entry(value: object) -> PackageEntry:
    """Build a package entry from a raw TOML value, choosing the form by shape.

    Args:
        value: A requirement string, a table of options, or an existing entry.

    Returns:
        SimplePackage for a string, DetailedPackage for a table.

    Raises:
        ValueError: If the value is neither a string nor a table.
    """
    if isinstance(value, SimplePackage | DetailedPackage):
        return value
    if isinstance(value, str):
        return SimplePackage(version=_to_version_req(value))
    if isinstance(value, dict):
        return DetailedPackage.model_validate(value, by_alias=True, by_name=False)
    msg = f"package must be a requirement string or a table, got {type(value).__name__}"
    raise ValueError(msg)


def as_detailed(entry: PackageEntry) -> DetailedPackage:
    """Expand any entry to the detailed form, filling in default options."""
    if isinstance(entry, DetailedPackage):
        return entry
    return DetailedPackage(version=entry.version)


def package_entry_to_toml(entry: PackageEntry) -> str | dict[str, Any]:
    """Convert a package entry to a value suitable for TOML serialization.

    Simple entries become their canonical requirement string; detailed entries
    become a table of the requirement and every non-default option.
    """
    if isinstance(entry, SimplePackage):
        return str(entry.version)

    data = entry.model_dump(by_alias=True, exclude_defaults=True, mode="json")
    data.pop("version", None)
    return {"version": str(entry.version), **data}
