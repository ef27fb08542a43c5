"""
JSON envelope of the anirecog CLI

With ``--json`` every command, successful or not, prints exactly one
envelope on stdout:

    {"command": ..., "data": ..., "errors": [...], "success": ..., "timestamp": ...}
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any

import orjson


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
) -> bytes:
    """
    Build the JSON envelope of a command.

    An envelope carrying errors is never successful.

    Example:
        >>> output = format_json_output(True, "search", data={"results": []})
        >>> orjson.loads(output)["success"]
        True
    """
    errors = list(errors or [])
    envelope = {
        "command": command,
        "data": data,
        "errors": errors,
        "success": success and not errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return orjson.dumps(envelope, option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2)


def write_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
) -> None:
    """Print the envelope of a command on stdout."""
    sys.stdout.write(format_json_output(success, command, data, errors).decode("utf-8") + "\n")
