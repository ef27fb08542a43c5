"""Relations configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RelationsSettings(BaseModel):
    """Where the sequel relations document lives and which ids it uses.

    ``service_index`` selects the id column of "1|2|3" rules.
    """

    path: Path | None = Field(default=None, description="Relations document path")
    service_index: int = Field(default=0, ge=0, description="Id column of the rules")
