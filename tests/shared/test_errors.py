"""Tests for the error hierarchy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pytest

from anirecog.shared.errors import (
    AniRecogError,
    ApplicationError,
    CliError,
    DomainError,
    ErrorCode,
    ErrorContext,
    LibraryLoadError,
    RelationsLoadError,
    create_cli_error,
    create_config_error,
    create_relations_load_error,
)


class _Color(Enum):
    RED = "red"


class TestErrorContext:
    def test_additional_data_is_coerced(self):
        context = ErrorContext(additional_data={"path": Path("/tmp/x"), "color": _Color.RED, "count": 3})
        assert context.additional_data == {"path": "/tmp/x", "color": "red", "count": 3}

    def test_unconvertible_value_rejected(self):
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_safe_dict_masks_user_id(self):
        context = ErrorContext(user_id="12345", file_path="/test", operation="load")
        assert context.safe_dict() == {"file_path": "/test", "operation": "load", "additional_data": {}}


class TestAniRecogError:
    def test_str_and_dict(self):
        original = ValueError("boom")
        error = AniRecogError(
            ErrorCode.LIBRARY_LOAD_FAILED,
            "Bad input",
            ErrorContext(operation="parse"),
            original_error=original,
        )

        assert str(error) == "LIBRARY_LOAD_FAILED: Bad input"
        assert error.to_dict() == {
            "code": "LIBRARY_LOAD_FAILED",
            "message": "Bad input",
            "context": {"operation": "parse", "additional_data": {}},
            "original_error": "boom",
        }

    def test_hierarchy(self):
        assert issubclass(RelationsLoadError, DomainError)
        assert issubclass(LibraryLoadError, DomainError)
        assert issubclass(CliError, ApplicationError)
        assert issubclass(DomainError, AniRecogError)


class TestErrorFactories:
    def test_relations_load_error(self):
        original = OSError("missing")
        error = create_relations_load_error("Cannot read", source="rel.txt", original_error=original)

        assert isinstance(error, RelationsLoadError)
        assert error.code == ErrorCode.RELATIONS_LOAD_FAILED
        assert error.context.file_path == "rel.txt"
        assert error.original_error is original

    def test_cli_error(self):
        error = create_cli_error("Failed", "identify", exit_code=3)

        assert error.command == "identify"
        assert error.exit_code == 3
        assert error.context.additional_data == {"command": "identify"}

    def test_config_error(self):
        error = create_config_error("Invalid", config_key="config.toml")

        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert error.context.additional_data == {"config_key": "config.toml"}
