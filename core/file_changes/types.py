"""Types shared by the file change tracking pipeline.

- Message / MessagePart / ToolInput: the agent runtime's message log, validated with pydantic
- OperationType / ChangeSource: closed vocabularies for persisted records
- FileState: per-path scratch state of one reconciliation batch (never persisted)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.file_changes.errors import InvalidChangeError
from storage.models import NewFileChange

logger = logging.getLogger(__name__)


class OperationType(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RENAME = "rename"


class ChangeSource(StrEnum):
    TOOL_WRITE = "tool-write"
    TOOL_EDIT = "tool-edit"
    TOOL_PATCH = "tool-patch"
    TOOL_RENAME = "tool-rename"
    TOOL_DELETE = "tool-delete"
    MANUAL = "manual"
    FILE_WATCHER = "file-watcher"


# ============================================================================
# Agent runtime message log
# ============================================================================


class ToolInput(BaseModel):
    """Tool call arguments. Both snake_case and camelCase keys are accepted."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    file_path: str | None = Field(None, validation_alias=AliasChoices("file_path", "filePath"))
    path: str | None = None
    old_string: str | None = Field(None, validation_alias=AliasChoices("old_string", "oldString"))
    new_string: str | None = Field(None, validation_alias=AliasChoices("new_string", "newString"))
    content: str | None = None
    move_path: str | None = Field(None, validation_alias=AliasChoices("move_path", "movePath"))

    def resolved_path(self) -> str | None:
        return self.file_path or self.path or None


class MessagePart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    input: ToolInput | None = None


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    parts: list[MessagePart] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def drop_malformed_parts(cls, v: Any) -> list[Any]:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("parts must be a list")
        kept: list[Any] = []
        for raw in v:
            if isinstance(raw, MessagePart):
                kept.append(raw)
                continue
            try:
                kept.append(MessagePart.model_validate(raw))
            except ValidationError as e:
                logger.debug(f"[Message] Skipping malformed part: {e.error_count()} validation errors")
        return kept


# ============================================================================
# Batch scratch state
# ============================================================================


@dataclass
class FileState:
    """Net state of one path across a batch.

    original_content is the first observed pre-image, None when the path was
    created in this batch. current_content is None after a delete.
    """

    original_content: str | None
    current_content: str | None
    operation_type: OperationType
    source: ChangeSource
    old_file_path: str | None = None


def has_net_effect(
    operation_type: str,
    old_content: str | None,
    new_content: str | None,
) -> bool:
    """A change with identical before/after content is a no-op, except for deletes and renames."""
    if operation_type in (OperationType.DELETE, OperationType.RENAME):
        return True
    return (old_content or "") != (new_content or "")


def check_change_invariants(change: NewFileChange) -> None:
    """Raise InvalidChangeError if a record is structurally inconsistent."""
    if not change.project_id:
        raise InvalidChangeError("project_id is required")
    if not change.file_path:
        raise InvalidChangeError("file_path is required")
    try:
        op = OperationType(change.operation_type)
    except ValueError as e:
        raise InvalidChangeError(f"Invalid operation type: {change.operation_type!r}") from e

    if op == OperationType.CREATE:
        if change.old_content is not None:
            raise InvalidChangeError(f"create of {change.file_path} must not carry old_content")
        if change.new_content is None:
            raise InvalidChangeError(f"create of {change.file_path} requires new_content")
    if op == OperationType.DELETE and change.new_content is not None:
        raise InvalidChangeError(f"delete of {change.file_path} must not carry new_content")
    if op == OperationType.RENAME:
        if not change.old_file_path:
            raise InvalidChangeError(f"rename to {change.file_path} requires old_file_path")
    elif change.old_file_path is not None:
        raise InvalidChangeError(f"old_file_path is only valid for rename, got {op}")
