"""Utility modules for liner.

This module exports commonly used utility functions.
"""

from liner.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from liner.utils.shell import CommandResult, command_exists, run_command, run_interactive

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_interactive",
]
