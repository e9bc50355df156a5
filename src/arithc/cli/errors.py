"""
CLI Error Handling
==================

Single place where compiler exceptions become diagnostics and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes for the arithc command."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Lex, parse, evaluation or emulation error
    INVALID_ARGS = 2     # Wrong argument count, bad option, unwritable output
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception on stderr and exit with the matching code.

    Syntax errors are printed as-is: their text is already the input line
    followed by the caret line. Nothing is written to stdout.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always
    """
    from arithc.errors import ArithError, ArithSyntaxError

    if isinstance(error, ArithSyntaxError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, ArithError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, OSError):
        # Output file could not be written
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
