"""Shared storage domain models — provider-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ProjectRow:
    id: str
    name: str
    path: str
    created_at: datetime


@dataclass
class ChatRow:
    id: str
    project_id: str
    name: str | None
    worktree_path: str | None
    created_at: datetime


@dataclass
class SubChatRow:
    id: str
    chat_id: str
    name: str | None
    session_id: str | None
    messages: str
    created_at: datetime
    updated_at: datetime


@dataclass
class NewFileChange:
    """A change record that has not been persisted yet."""

    project_id: str
    operation_type: str
    file_path: str
    chat_id: str | None = None
    sub_chat_id: str | None = None
    old_file_path: str | None = None
    old_content: str | None = None
    new_content: str | None = None
    worktree_path: str | None = None
    timestamp: datetime | None = None
    source: str | None = None
    session_id: str | None = None


@dataclass
class FileChangeRow:
    id: str
    chat_id: str | None
    sub_chat_id: str | None
    project_id: str
    operation_type: str
    file_path: str
    old_file_path: str | None
    old_content: str | None
    new_content: str | None
    worktree_path: str | None
    timestamp: datetime
    source: str | None
    session_id: str | None
