"""Version requirements following Cargo's SemVer rules.

This module defines the VersionReq type used for every requirement found in
the configuration file, along with the conversion of a concrete installed
version into a requirement under a chosen strictness policy.

Concrete versions are represented by :class:`semantic_version.Version`, and
matching goes through :class:`semantic_version.NpmSpec`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import ClassVar

from semantic_version import NpmSpec, Version


class Op(str, Enum):
    """Comparison operator of a single requirement comparator."""

    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


class RequirementPolicy(str, Enum):
    """Strictness used when turning a concrete version into a requirement.

    Attributes:
        STAR: Any version at all.
        EXACT: Only the given version.
        COMPATIBLE: Caret semantics: same major, or same minor under 0.x.
        PATCH: Tilde semantics: same major.minor, newer patches allowed.
    """

    STAR = "star"
    EXACT = "exact"
    COMPATIBLE = "compatible"
    PATCH = "patch"


_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_COMPARATOR_RE = re.compile(
    rf"""
    ^\s*
    (?P<op>=|>=|>|<=|<|~|\^)?\s*
    (?P<major>\d+|[*xX])
    (?:\.(?P<minor>\d+|[*xX]))?
    (?:\.(?P<patch>\d+|[*xX]))?
    (?:-(?P<pre>{_IDENT}))?
    (?:\+(?P<build>{_IDENT}))?
    \s*$
    """,
    re.VERBOSE,
)
_WILDCARDS = frozenset({"*", "x", "X"})


@dataclass(frozen=True, slots=True)
class Comparator:
    """One operator applied to a possibly partial version core.

    Attributes:
        op: Comparison operator.
        major: Major component, always present.
        minor: Minor component, None when omitted.
        patch: Patch component, None when omitted.
        pre: Dot-separated pre-release identifiers, empty when absent.
        build: Dot-separated build metadata, kept for display only.
    """

    op: Op
    major: int
    minor: int | None = None
    patch: int | None = None
    pre: str = ""
    build: str = ""

    def __str__(self) -> str:
        if self.build:
            return f"{self.range_text}+{self.build}"
        return self.range_text

    @property
    def range_text(self) -> str:
        """Canonical form without build metadata, which never affects matching."""
        if self.op is Op.WILDCARD:
            core = str(self.major) if self.minor is None else f"{self.major}.{self.minor}"
            return f"{core}.*"

        text = f"{self.op.value}{self.major}"
        if self.minor is not None:
            text += f".{self.minor}"
            if self.patch is not None:
                text += f".{self.patch}"
                if self.pre:
                    text += f"-{self.pre}"
        return text


@dataclass(frozen=True, slots=True)
class VersionReq:
    """A SemVer requirement: all comparators must match.

    The empty requirement is the universal ``*`` requirement, available as
    :attr:`VersionReq.STAR`.

    Example:
        >>> req = VersionReq.parse("1.2")
        >>> str(req)
        '^1.2'
        >>> req.matches(Version("1.9.0"))
        True
    """

    STAR: ClassVar[VersionReq]

    comparators: tuple[Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        """Parse a requirement string.

        Args:
            text: Requirement such as ``"1.2.3"``, ``"=1.0"``, ``"~1.2"``,
                ``"1.*"``, ``">=1.2, <1.5"`` or ``"*"``.

        Returns:
            The parsed requirement.

        Raises:
            ValueError: If the string is not a valid requirement.
        """
        if not text.strip():
            msg = "Version requirement cannot be empty"
            raise ValueError(msg)

        comparators: list[Comparator] = []
        for part in text.split(","):
            comparator = _parse_comparator(part, text)
            if comparator is not None:
                comparators.append(comparator)
        return cls(tuple(comparators))

    def matches(self, version: Version) -> bool:
        """Check whether a concrete version satisfies the requirement.

        A pre-release version only matches if one of the comparators names
        the same major.minor.patch with a pre-release of its own.
        """
        return _npm_spec(self).match(version)

    def __str__(self) -> str:
        if not self.comparators:
            return "*"
        return ", ".join(str(comparator) for comparator in self.comparators)


VersionReq.STAR = VersionReq()


def _parse_comparator(part: str, whole: str) -> Comparator | None:
    """Parse one comma-separated comparator; None means "matches anything"."""
    match = _COMPARATOR_RE.match(part)
    if match is None:
        msg = f"Invalid version requirement: {whole!r}"
        raise ValueError(msg)

    op_text = match.group("op")
    pre = match.group("pre") or ""
    build = match.group("build") or ""
    components = [match.group("major"), match.group("minor"), match.group("patch")]

    wildcard_at = next(
        (i for i, value in enumerate(components) if value is not None and value in _WILDCARDS),
        None,
    )
    if wildcard_at is not None:
        trailing = [value for value in components[wildcard_at:] if value is not None]
        if any(value not in _WILDCARDS for value in trailing) or pre or build:
            msg = f"Unexpected characters after wildcard in {whole!r}"
            raise ValueError(msg)
        components = components[:wildcard_at] + [None] * (3 - wildcard_at)
        if wildcard_at == 0:
            if op_text not in (None, "="):
                msg = f"Wildcard major version cannot have an operator in {whole!r}"
                raise ValueError(msg)
            return None

    major = int(match.group("major"))
    minor, patch = (int(value) if value is not None else None for value in components[1:])

    if (pre or build) and patch is None:
        msg = f"Pre-release and build metadata need a full version in {whole!r}"
        raise ValueError(msg)

    if wildcard_at is not None and op_text in (None, "="):
        op = Op.WILDCARD
    elif op_text is None:
        op = Op.CARET
    else:
        op = Op(op_text)

    return Comparator(op=op, major=major, minor=minor, patch=patch, pre=pre, build=build)


@lru_cache(maxsize=None)
def _npm_spec(req: VersionReq) -> NpmSpec:
    """Build the matcher of a requirement from its canonical comparators.

    Once bare versions are spelled as carets, npm ranges give the same
    answers as Cargo, including the pre-release rule.
    """
    if not req.comparators:
        return NpmSpec("*")
    return NpmSpec(" ".join(comparator.range_text for comparator in req.comparators))


def convert(version: Version, policy: RequirementPolicy) -> VersionReq:
    """Turn a concrete version into a requirement using the given policy.

    Pre-release and build metadata of the version are kept in the anchor.
    STAR drops the anchor, so it follows the usual pre-release rule and does
    not match a pre-release version.

    Args:
        version: The installed version.
        policy: Strictness to apply.

    Returns:
        ``*`` for STAR, otherwise a single ``=``, ``^`` or ``~`` comparator.
    """
    if policy is RequirementPolicy.STAR:
        return VersionReq.STAR

    op = {
        RequirementPolicy.EXACT: Op.EXACT,
        RequirementPolicy.COMPATIBLE: Op.CARET,
        RequirementPolicy.PATCH: Op.TILDE,
    }[policy]
    return VersionReq(
        (
            Comparator(
                op=op,
                major=version.major,
                minor=version.minor,
                patch=version.patch,
                pre=".".join(version.prerelease),
                build=".".join(version.build),
            ),
        )
    )
