"""Error handling for CLI commands."""

import sys
import traceback

import click

from agency_finance.cli.utils.formatters import format_error, format_warning
from agency_finance.exceptions import (
    FinanceEngineError,
    LedgerWriteError,
    NotFoundError,
    ValidationError,
)


class ConfigurationError(FinanceEngineError):
    """Error related to configuration issues, such as a missing snapshot path."""

    pass


def _echo_hint(error: FinanceEngineError) -> None:
    if error.recovery_hint:
        click.echo(format_warning(f"Hint: {error.recovery_hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error and choose an exit code.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-5 for engine errors, 130 for cancellation, 255 otherwise)
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        _echo_hint(error)
        return 1

    elif isinstance(error, NotFoundError):
        click.echo(format_error(f"Not Found: {error.message}"))
        _echo_hint(error)
        return 2

    elif isinstance(error, ValidationError):
        click.echo(format_error(f"Validation Error: {error.message}"))
        _echo_hint(error)
        return 3

    elif isinstance(error, LedgerWriteError):
        click.echo(format_error(f"Ledger Error: {error.message}"))
        _echo_hint(error)
        return 4

    elif isinstance(error, FinanceEngineError):
        click.echo(format_error(f"Error: {error.message}"))
        _echo_hint(error)
        return 5

    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(traceback.format_exc())
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager that turns exceptions into messages and exit codes.

    Example:
        @click.command()
        def my_command():
            with with_error_handling(debug):
                ...
    """

    class ErrorHandler:
        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False

    return ErrorHandler(debug)
