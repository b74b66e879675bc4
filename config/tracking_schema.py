"""File change tracking configuration schema.

Per-concern named groups, following observation_schema.py:
- exclusion: path markers for session artifacts that are never tracked
- tool_kinds: message part type tags recognized as file tools
- storage: database location
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_EXCLUDED_MARKERS = ["claude-sessions", "Application Support"]


class ExclusionConfig(BaseModel):
    """Substring markers identifying transient agent-runtime paths."""

    markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_MARKERS),
        description="A path containing any of these markers is a session artifact",
    )

    @field_validator("markers")
    @classmethod
    def normalize_markers(cls, v: list[str]) -> list[str]:
        result: list[str] = []
        for marker in v:
            if not marker or not marker.strip():
                raise ValueError("Exclusion markers must be non-empty strings")
            if marker not in result:
                result.append(marker)
        return result


class ToolKindConfig(BaseModel):
    """Part type tags emitted by the agent runtime for each file tool."""

    write: str = "tool-Write"
    edit: str = "tool-Edit"
    patch: str = "tool-Patch"
    rename: str = "tool-Rename"
    move: str = "tool-Move"
    delete: str = "tool-Delete"

    @model_validator(mode="after")
    def check_distinct(self) -> ToolKindConfig:
        tags = [self.write, self.edit, self.patch, self.rename, self.move, self.delete]
        if len(set(tags)) != len(tags):
            raise ValueError(f"Tool kind tags must be distinct: {tags}")
        return self


class StorageConfig(BaseModel):
    """Where change records are persisted."""

    db_path: Path | None = Field(None, description="SQLite file (None = ~/.changetrail/changetrail.db)")


class TrackingSettings(BaseModel):
    """Top-level file change tracking configuration."""

    enabled: bool = Field(True, description="Disable to turn batch tracking into a no-op")
    exclusion: ExclusionConfig = Field(default_factory=ExclusionConfig)
    tool_kinds: ToolKindConfig = Field(default_factory=ToolKindConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
