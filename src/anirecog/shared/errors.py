"""Errors raised by anirecog.

Failing to recognize a title is not an error: the engine reports it with
ANIME_ID_UNKNOWN. The exceptions below are raised only when an input cannot
be loaded at all (a library snapshot, a relations document, a
configuration file) or when a CLI command fails.

Every error carries an ErrorCode, a message and an ErrorContext, and keeps
the exception it was raised from in ``original_error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, Union

ContextValue = Union[str, int, float, bool]

# Context fields left out of logs and serialized errors
MASKED_CONTEXT_FIELDS: tuple[str, ...] = ("user_id",)


class ErrorCode(str, Enum):
    """Error codes for the anirecog package."""

    # File system
    FILE_READ_ERROR = "FILE_READ_ERROR"

    # Recognition data
    RELATIONS_LOAD_FAILED = "RELATIONS_LOAD_FAILED"
    LIBRARY_LOAD_FAILED = "LIBRARY_LOAD_FAILED"

    # Configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # CLI
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"


def _to_context_value(key: str, value: Any) -> ContextValue:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    msg = f"Context value {key!r} has unsupported type {type(value).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True)
class ErrorContext:
    """Where and during which operation an error happened.

    ``additional_data`` only holds str, int, float and bool values, so a
    context can always be logged as JSON. Paths, enums and decimals are
    converted on creation; any other type raises TypeError.

    Attributes:
        file_path: File being read when the error happened
        operation: Operation that failed, e.g. "read_relations"
        user_id: Caller identity, never written to logs
        additional_data: Extra primitive values
    """

    file_path: str | None = None
    operation: str | None = None
    user_id: str | None = None
    additional_data: dict[str, ContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is None:
            return
        if not isinstance(self.additional_data, dict):
            msg = f"additional_data must be a dict, got {type(self.additional_data).__name__}"
            raise TypeError(msg)
        converted = {key: _to_context_value(key, value) for key, value in self.additional_data.items()}
        object.__setattr__(self, "additional_data", converted)

    def safe_dict(self, *, mask_keys: tuple[str, ...] = MASKED_CONTEXT_FIELDS) -> dict[str, Any]:
        """The context as a dict, without unset or masked fields.

        Example:
            >>> ErrorContext(user_id="12345", file_path="/test").safe_dict()
            {'file_path': '/test', 'additional_data': {}}
        """
        fields = {"file_path": self.file_path, "operation": self.operation, "user_id": self.user_id}
        data: dict[str, Any] = {
            name: value for name, value in fields.items() if value is not None and name not in mask_keys
        }
        data["additional_data"] = dict(self.additional_data or {}) if "additional_data" not in mask_keys else {}
        return data


class AniRecogError(Exception):
    """Base class of every anirecog error.

    Args:
        code: What went wrong
        message: Human-readable description
        context: Where it went wrong
        original_error: Exception this error was raised from
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form of the error, with masked context."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(AniRecogError):
    """Recognition data is unusable, e.g. an unreadable relations table."""


class ApplicationError(AniRecogError):
    """The composing layers failed: configuration or the CLI."""


class RelationsLoadError(DomainError):
    """A relations document cannot be parsed at all.

    A single malformed rule never raises this error; the relations reader
    logs and skips it.
    """


class LibraryLoadError(DomainError):
    """A library snapshot cannot be read or validated."""


class CliError(ApplicationError):
    """A CLI command failed; ``exit_code`` is what the process returns."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        command: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        exit_code: int = 1,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        super().__init__(code, message, context, original_error)


def create_relations_load_error(
    message: str,
    *,
    source: str | None = None,
    original_error: Exception | None = None,
) -> RelationsLoadError:
    """RelationsLoadError for a document read from ``source``."""
    context = ErrorContext(file_path=source, operation="read_relations")
    return RelationsLoadError(ErrorCode.RELATIONS_LOAD_FAILED, message, context, original_error)


def create_cli_error(
    message: str,
    command: str,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    context = ErrorContext(operation=command, additional_data={"command": command})
    return CliError(ErrorCode.CLI_COMMAND_FAILED, message, command, context, original_error, exit_code)


def create_config_error(
    message: str,
    config_key: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """ApplicationError for an unreadable or invalid configuration."""
    context = ErrorContext(
        operation="config_validation",
        additional_data={"config_key": config_key} if config_key else None,
    )
    return ApplicationError(ErrorCode.CONFIGURATION_ERROR, message, context, original_error)


__all__ = [
    "AniRecogError",
    "ApplicationError",
    "CliError",
    "DomainError",
    "ErrorCode",
    "ErrorContext",
    "LibraryLoadError",
    "RelationsLoadError",
    "create_cli_error",
    "create_config_error",
    "create_relations_load_error",
]
