"""Command settings read from environment variables.

Every ship setting can be given as ``CARGO_LINER_SHIP_<FIELD>``, for example
``CARGO_LINER_SHIP_NO_FAIL_FAST=true``. Flags accept exactly ``true`` or
``false``; ``CARGO_LINER_SHIP_BINSTALL`` accepts ``auto``, ``always`` or
``never``.
"""

import os
from collections.abc import Mapping

from liner.core.config import EnvironmentParseError
from liner.models.args import SHIP_FIELDS, JettisonArgs, ShipArgs
from liner.models.package import BinstallChoice

ENV_PREFIX = "CARGO_LINER"
SHIP_ENV_PREFIX = f"{ENV_PREFIX}_SHIP"

_FLAG_VALUES = {"true": True, "false": False}


def ship_var_name(field: str) -> str:
    """Environment variable of a ship setting (``dry_run`` -> ``CARGO_LINER_SHIP_DRY_RUN``)."""
    return f"{SHIP_ENV_PREFIX}_{field.upper()}"


def _parse_flag(name: str, value: str) -> bool:
    try:
        return _FLAG_VALUES[value]
    except KeyError:
        msg = f"{name} must be 'true' or 'false', got {value!r}"
        raise EnvironmentParseError(msg) from None


def _parse_binstall(name: str, value: str) -> BinstallChoice:
    try:
        return BinstallChoice(value)
    except ValueError:
        choices = ", ".join(repr(choice.value) for choice in BinstallChoice)
        msg = f"{name} must be one of {choices}, got {value!r}"
        raise EnvironmentParseError(msg) from None


def ship_env_args(environ: Mapping[str, str] | None = None) -> ShipArgs:
    """Read the ship settings layer from the environment.

    Args:
        environ: Variables to read. If None, uses the process environment.

    Returns:
        Partial settings; variables that are absent stay unset.

    Raises:
        EnvironmentParseError: If a variable has an unsupported value.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    for field in SHIP_FIELDS:
        name = ship_var_name(field)
        raw = env.get(name)
        if raw is None:
            continue
        if field == "binstall":
            values[field] = _parse_binstall(name, raw)
        else:
            values[field] = _parse_flag(name, raw)
    return ShipArgs.model_validate(values)


def jettison_env_args(environ: Mapping[str, str] | None = None) -> JettisonArgs:
    """Read the jettison settings layer from the environment.

    No variables are defined for jettison, so the layer is always empty.
    """
    return JettisonArgs()
