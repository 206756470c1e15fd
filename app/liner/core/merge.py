"""Merging of command settings from every configuration source.

Each setting is resolved independently with the precedence
command line > environment > configuration file > builtin default.
"""

import logging
from typing import TypeVar

from liner.models.args import (
    JETTISON_FIELDS,
    SHIP_FIELDS,
    EffectiveJettisonArgs,
    EffectiveShipArgs,
    JettisonArgs,
    ShipArgs,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def coalesce(*layers: T | None) -> T | None:
    """Return the first value that is not None, or None when all are."""
    for value in layers:
        if value is not None:
            return value
    return None


def merge_ship_args(file_defaults: ShipArgs, env: ShipArgs, cli: ShipArgs) -> EffectiveShipArgs:
    """Resolve the ship settings from their three layers.

    Args:
        file_defaults: ``[defaults.ship]`` from the configuration file.
        env: Settings read from the environment.
        cli: Settings given on the command line.

    Returns:
        Settings where every field has a value.
    """
    builtin = EffectiveShipArgs()
    values = {
        field: coalesce(
            getattr(cli, field),
            getattr(env, field),
            getattr(file_defaults, field),
            getattr(builtin, field),
        )
        for field in SHIP_FIELDS
    }
    merged = EffectiveShipArgs(**values)
    logger.debug("Effective ship settings: %s", merged)
    return merged


def merge_jettison_args(
    file_defaults: JettisonArgs,
    env: JettisonArgs,
    cli: JettisonArgs,
) -> EffectiveJettisonArgs:
    """Resolve the jettison settings from their three layers.

    Args:
        file_defaults: ``[defaults.jettison]`` from the configuration file.
        env: Settings read from the environment.
        cli: Settings given on the command line.

    Returns:
        Settings where every field has a value.
    """
    builtin = EffectiveJettisonArgs()
    values = {
        field: coalesce(
            getattr(cli, field),
            getattr(env, field),
            getattr(file_defaults, field),
            getattr(builtin, field),
        )
        for field in JETTISON_FIELDS
    }
    merged = EffectiveJettisonArgs(**values)
    logger.debug("Effective jettison settings: %s", merged)
    return merged
