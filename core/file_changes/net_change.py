"""Net-change filter: batch FileStates → persistable change records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from core.file_changes.types import FileState, OperationType, has_net_effect
from storage.models import NewFileChange


def finalize_changes(
    states: Mapping[str, FileState],
    *,
    project_id: str,
    chat_id: str | None = None,
    sub_chat_id: str | None = None,
    worktree_path: str | None = None,
    session_id: str | None = None,
    timestamp: datetime | None = None,
) -> list[NewFileChange]:
    """Drop states whose content did not change and convert the rest, in batch order."""
    changes: list[NewFileChange] = []
    for file_path, state in states.items():
        if not has_net_effect(state.operation_type, state.original_content, state.current_content):
            continue
        op = state.operation_type
        changes.append(
            NewFileChange(
                chat_id=chat_id,
                sub_chat_id=sub_chat_id,
                project_id=project_id,
                operation_type=str(op),
                file_path=file_path,
                old_file_path=state.old_file_path if op == OperationType.RENAME else None,
                old_content=None if op == OperationType.CREATE else state.original_content,
                new_content=None if op == OperationType.DELETE else state.current_content,
                worktree_path=worktree_path,
                timestamp=timestamp,
                source=str(state.source),
                session_id=session_id,
            )
        )
    return changes
