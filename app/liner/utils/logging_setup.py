"""Logging setup for the command-line entry point.

Every module logs through ``logger = logging.getLogger(__name__)``; this
module attaches a single Rich handler writing to stderr.
"""

import logging

from rich.logging import RichHandler

from liner.utils.formatting import err_console


def resolve_level(verbose: bool, quiet: bool) -> int:
    """Map the global verbosity flags to a logging level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the ``liner`` logger for the whole process.

    Args:
        verbose: Log debug details.
        quiet: Only log errors.
    """
    handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("liner")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(resolve_level(verbose, quiet))
    logger.propagate = False
