"""Storage repository interfaces."""

from __future__ import annotations

from typing import Protocol

from storage.models import ChatRow, FileChangeRow, NewFileChange, ProjectRow, SubChatRow


class WorkspaceRepo(Protocol):
    """Persistence contract for projects, chats and sub-chats."""

    def close(self) -> None:
        """Release owned resources."""

    def create_project(self, name: str, path: str, project_id: str | None = None) -> ProjectRow:
        """Insert a project."""

    def get_project(self, project_id: str) -> ProjectRow | None:
        """Load a project by id."""

    def delete_project(self, project_id: str) -> bool:
        """Delete a project and everything below it."""

    def create_chat(
        self,
        project_id: str,
        name: str | None = None,
        worktree_path: str | None = None,
        chat_id: str | None = None,
    ) -> ChatRow:
        """Insert a chat under a project."""

    def get_chat(self, chat_id: str) -> ChatRow | None:
        """Load a chat by id."""

    def delete_chat(self, chat_id: str) -> bool:
        """Delete a chat and everything below it."""

    def create_sub_chat(
        self,
        chat_id: str,
        name: str | None = None,
        session_id: str | None = None,
        sub_chat_id: str | None = None,
    ) -> SubChatRow:
        """Insert a sub-chat under a chat."""

    def get_sub_chat(self, sub_chat_id: str) -> SubChatRow | None:
        """Load a sub-chat by id."""

    def update_sub_chat_messages(self, sub_chat_id: str, messages: str) -> SubChatRow | None:
        """Replace the persisted message log of a sub-chat."""

    def delete_sub_chat(self, sub_chat_id: str) -> bool:
        """Delete a sub-chat and its change records."""


class FileChangeRepo(Protocol):
    """Persistence contract for file change records."""

    def close(self) -> None:
        """Release owned resources."""

    def insert(self, change: NewFileChange) -> FileChangeRow:
        """Insert one record."""

    def insert_many(self, changes: list[NewFileChange]) -> list[FileChangeRow]:
        """Insert records as one atomic unit."""

    def list_for_chat(self, chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        """Records of one chat in insertion order."""

    def list_for_sub_chat(self, sub_chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        """Records of one sub-chat in insertion order."""

    def list_for_project(self, project_id: str, limit: int | None = None) -> list[FileChangeRow]:
        """Records of every chat under a project in insertion order."""
