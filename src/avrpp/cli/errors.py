"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the avrpp command.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from avrpp.errors import AvrppError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # A sentence could not be transpiled
    INVALID_ARGS = 2     # Invalid arguments or unreadable/unwritable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for the CLI.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Transpile")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, AvrppError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        # Input is not UTF-8 text
        click.echo(f"Error: input is not valid UTF-8: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        # Missing input, permission denied, unwritable output directory
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
