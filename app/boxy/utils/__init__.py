"""Utility modules for boxy.

This module exports commonly used utility functions.
"""

from boxy.utils.formatting import (
    console,
    create_bookmark_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from boxy.utils.shell import CommandResult, command_exists, run_command, sudo_cached

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_bookmark_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "sudo_cached",
]
