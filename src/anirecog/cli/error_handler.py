"""
CLI error reporting

Every command catches its exceptions and hands them to ``handle_cli_error``,
which turns them into one user-facing message and a process exit code.
Package errors (an unreadable library, a broken relations document, an
invalid configuration) are expected and logged quietly; anything else is
logged with its traceback.
"""

from __future__ import annotations

import logging
import sys

from anirecog.cli.json_formatter import write_json_output
from anirecog.shared.errors import (
    AniRecogError,
    CliError,
    DomainError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130

# First match wins; CliError and KeyboardInterrupt are handled before.
_MESSAGE_PREFIXES: tuple[tuple[type[BaseException], str], ...] = (
    (DomainError, "Invalid data"),
    (AniRecogError, "Application error"),
    (OSError, "File system error"),
    (ValueError, "Data processing error"),
    (KeyError, "Data processing error"),
    (TypeError, "Data processing error"),
)


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Report a failed command and choose its exit code.

    Args:
        error: What the command raised
        command: Name of the failed command
        json_output: Report through the JSON envelope on stdout instead
            of a line on stderr

    Returns:
        Exit code for the process
    """
    cli_error = to_cli_error(error, command)

    if isinstance(error, KeyboardInterrupt):
        logger.warning("%s interrupted", command)
    elif isinstance(error, AniRecogError):
        logger.debug("%s failed: %s", command, cli_error.message, extra={"error": error.to_dict()})
    else:
        logger.error("%s failed: %s", command, cli_error.message, exc_info=error)

    if json_output:
        write_json_output(False, command, errors=[cli_error.message])
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code


def to_cli_error(error: BaseException, command: str) -> CliError:
    """Wrap any exception into a CliError carrying the message to show."""
    if isinstance(error, CliError):
        return error

    if isinstance(error, KeyboardInterrupt):
        return create_cli_error("Command interrupted by user", command, exit_code=EXIT_INTERRUPTED)

    detail = error.message if isinstance(error, AniRecogError) else str(error)
    prefix = next(
        (prefix for error_type, prefix in _MESSAGE_PREFIXES if isinstance(error, error_type)),
        "Unexpected error",
    )
    original = error if isinstance(error, Exception) else None
    return create_cli_error(f"{prefix}: {detail}", command, original_error=original)
