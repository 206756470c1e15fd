"""Data models for liner."""

from liner.models.action import (
    Action,
    ActionResult,
    ActionType,
    Decision,
    DecisionType,
    InstallStatus,
)
from liner.models.args import (
    JETTISON_FIELDS,
    SHIP_FIELDS,
    EffectiveJettisonArgs,
    EffectiveShipArgs,
    JettisonArgs,
    ShipArgs,
)
from liner.models.config import DefaultsSection, UserConfig
from liner.models.identity import PackageIdentity, Source, SourceKind
from liner.models.package import (
    BinstallChoice,
    DetailedPackage,
    PackageEntry,
    SimplePackage,
)
from liner.models.requirement import RequirementPolicy, VersionReq, convert

__all__ = [
    "JETTISON_FIELDS",
    "SHIP_FIELDS",
    "Action",
    "ActionResult",
    "ActionType",
    "BinstallChoice",
    "Decision",
    "DecisionType",
    "DefaultsSection",
    "DetailedPackage",
    "EffectiveJettisonArgs",
    "EffectiveShipArgs",
    "InstallStatus",
    "JettisonArgs",
    "PackageEntry",
    "PackageIdentity",
    "RequirementPolicy",
    "ShipArgs",
    "SimplePackage",
    "Source",
    "SourceKind",
    "UserConfig",
    "VersionReq",
    "convert",
]
