"""File change tracker: the service boundary collaborators call.

Batch path (track_file_changes_from_messages):
    messages → ingest_tool_events → reconcile → finalize_changes → one transaction

Direct path (track_file_change and the create/update/delete/rename helpers):
    one fully-formed record, no reconciliation

The batch path never raises: the file mutations already happened on disk and a
lost audit record must not fail the chat turn. The direct path propagates.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any

from config.tracking_loader import load_tracking_settings
from config.tracking_schema import TrackingSettings
from core.file_changes.errors import MissingParentError, PersistenceError
from core.file_changes.events import PathExclusion, ingest_tool_events
from core.file_changes.net_change import finalize_changes
from core.file_changes.reconciler import reconcile
from core.file_changes.types import Message, OperationType, check_change_invariants, has_net_effect
from storage.container import StorageContainer
from storage.contracts import FileChangeRepo, WorkspaceRepo
from storage.models import ChatRow, FileChangeRow, NewFileChange, SubChatRow
from storage.runtime import build_storage_container

logger = logging.getLogger(__name__)

MessageLike = Message | Mapping[str, Any]


class FileChangeTracker:
    """Records agent file mutations per chat and per project workspace."""

    def __init__(
        self,
        workspace_repo: WorkspaceRepo,
        file_change_repo: FileChangeRepo,
        settings: TrackingSettings | None = None,
    ):
        self.workspace_repo = workspace_repo
        self.file_change_repo = file_change_repo
        self.settings = settings or TrackingSettings()
        self.is_excluded = PathExclusion(self.settings.exclusion.markers)

    def close(self) -> None:
        self.file_change_repo.close()
        self.workspace_repo.close()

    # ==================== batch path ====================

    def track_file_changes_from_messages(
        self,
        chat_id: str,
        sub_chat_id: str | None,
        messages: Iterable[MessageLike],
        session_id: str | None = None,
    ) -> list[FileChangeRow]:
        """Reconcile one saved message list into net change records.

        Returns the records written; an empty list when nothing changed or
        when the batch had to be dropped.
        """
        if not self.settings.enabled:
            return []

        try:
            chat = self._require_chat(chat_id)
        except MissingParentError as e:
            logger.warning(f"[FileChangeTracker] {e}, skipping batch")
            return []
        except sqlite3.Error as e:
            logger.error(f"[FileChangeTracker] Failed to load chat {chat_id}, skipping batch: {e}")
            return []

        events = ingest_tool_events(
            messages,
            is_excluded=self.is_excluded,
            tool_kinds=self.settings.tool_kinds,
        )
        states = reconcile(events)
        changes = finalize_changes(
            states,
            project_id=chat.project_id,
            chat_id=chat_id,
            sub_chat_id=sub_chat_id,
            worktree_path=chat.worktree_path or None,
            session_id=session_id or None,
        )
        if not changes:
            return []

        try:
            rows = self.file_change_repo.insert_many(changes)
        except sqlite3.Error as e:
            logger.error(f"[FileChangeTracker] Failed to insert {len(changes)} file changes for chat {chat_id}: {e}")
            return []

        logger.info(f"[FileChangeTracker] Tracked {len(rows)} file changes for chat {chat_id}")
        return rows

    def save_sub_chat_messages(
        self,
        sub_chat_id: str,
        messages: Sequence[MessageLike] | str,
    ) -> list[FileChangeRow]:
        """Persist a sub-chat's message log, then track the changes it implies.

        A missing sub-chat is the caller's error and raises; tracking failures
        after the save are absorbed by the batch path.
        """
        payload = messages if isinstance(messages, str) else json.dumps(
            [m.model_dump(mode="json") if isinstance(m, Message) else m for m in messages],
            ensure_ascii=False,
        )
        sub_chat = self.workspace_repo.update_sub_chat_messages(sub_chat_id, payload)
        if sub_chat is None:
            raise MissingParentError("Sub-chat", sub_chat_id)

        parsed = self._load_messages(sub_chat)
        return self.track_file_changes_from_messages(
            sub_chat.chat_id,
            sub_chat.id,
            parsed,
            session_id=sub_chat.session_id,
        )

    # ==================== direct path ====================

    def track_file_change(self, change: NewFileChange) -> FileChangeRow | None:
        """Insert one externally observed change (manual edit, file watcher).

        Raises InvalidChangeError for inconsistent records, MissingParentError
        when the project does not exist, PersistenceError when the store
        rejects the write. Returns None for a change with no net effect.
        """
        check_change_invariants(change)
        if not has_net_effect(change.operation_type, change.old_content, change.new_content):
            logger.debug(f"[FileChangeTracker] Ignoring no-op {change.operation_type} of {change.file_path}")
            return None
        try:
            project = self.workspace_repo.get_project(change.project_id)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load project {change.project_id}: {e}") from e
        if project is None:
            raise MissingParentError("Project", change.project_id)
        try:
            return self.file_change_repo.insert(change)
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to insert file change for {change.file_path}: {e}") from e

    def track_file_create(self, change: NewFileChange) -> FileChangeRow | None:
        return self.track_file_change(replace(change, operation_type=OperationType.CREATE.value))

    def track_file_update(self, change: NewFileChange) -> FileChangeRow | None:
        return self.track_file_change(replace(change, operation_type=OperationType.UPDATE.value))

    def track_file_delete(self, change: NewFileChange) -> FileChangeRow | None:
        return self.track_file_change(replace(change, operation_type=OperationType.DELETE.value))

    def track_file_rename(self, change: NewFileChange) -> FileChangeRow | None:
        return self.track_file_change(replace(change, operation_type=OperationType.RENAME.value))

    # ==================== queries ====================

    def get_current_chat_changes(self, chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self.file_change_repo.list_for_chat(chat_id, limit=limit)

    def get_sub_chat_changes(self, sub_chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self.file_change_repo.list_for_sub_chat(sub_chat_id, limit=limit)

    def get_workspace_changes(self, project_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self.file_change_repo.list_for_project(project_id, limit=limit)

    def get_workspace_changes_from_chat(self, chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        chat = self.workspace_repo.get_chat(chat_id)
        if chat is None:
            return []
        return self.get_workspace_changes(chat.project_id, limit=limit)

    # ==================== helpers ====================

    def _require_chat(self, chat_id: str) -> ChatRow:
        chat = self.workspace_repo.get_chat(chat_id)
        if chat is None:
            raise MissingParentError("Chat", chat_id)
        return chat

    @staticmethod
    def _load_messages(sub_chat: SubChatRow) -> list[Any]:
        try:
            parsed = json.loads(sub_chat.messages)
        except json.JSONDecodeError as e:
            logger.warning(f"[FileChangeTracker] Sub-chat {sub_chat.id} messages are not JSON: {e}")
            return []
        if not isinstance(parsed, list):
            logger.warning(f"[FileChangeTracker] Sub-chat {sub_chat.id} messages are not a list")
            return []
        return parsed


def build_file_change_tracker(
    *,
    settings: TrackingSettings | None = None,
    container: StorageContainer | None = None,
    workspace_root: str | Path | None = None,
) -> FileChangeTracker:
    """Wire a tracker from three-tier config and the runtime storage container."""
    if settings is None:
        settings = load_tracking_settings(workspace_root=workspace_root)
    if container is None:
        container = build_storage_container(settings=settings)
    return FileChangeTracker(
        workspace_repo=container.workspace_repo(),
        file_change_repo=container.file_change_repo(),
        settings=settings,
    )
