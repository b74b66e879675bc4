"""SQLite repository for projects, chats and sub-chats."""

from __future__ import annotations

import sqlite3
import time
import uuid
from pathlib import Path

from storage.models import ChatRow, ProjectRow, SubChatRow
from storage.providers.sqlite._schema import connect, ensure_workspace_tables, from_epoch


class SQLiteWorkspaceRepo:
    """Owner entities that file change records hang off."""

    def __init__(self, db_path: str | Path | None = None, conn: sqlite3.Connection | None = None) -> None:
        self._own_conn = conn is None
        self._conn = conn if conn is not None else connect(db_path)
        ensure_workspace_tables(self._conn)

    def close(self) -> None:
        if self._own_conn:
            self._conn.close()

    # ==================== projects ====================

    def create_project(self, name: str, path: str, project_id: str | None = None) -> ProjectRow:
        row = ProjectRow(
            id=project_id or str(uuid.uuid4()),
            name=name,
            path=path,
            created_at=from_epoch(time.time()),
        )
        with self._conn:
            self._conn.execute(
                "INSERT INTO projects (id, name, path, created_at) VALUES (?, ?, ?, ?)",
                (row.id, row.name, row.path, row.created_at.timestamp()),
            )
        return row

    def get_project(self, project_id: str) -> ProjectRow | None:
        row = self._conn.execute(
            "SELECT id, name, path, created_at FROM projects WHERE id = ?",
            (project_id,),
        ).fetchone()
        if not row:
            return None
        return ProjectRow(id=row[0], name=row[1], path=row[2], created_at=from_epoch(row[3]))

    def delete_project(self, project_id: str) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
        return cursor.rowcount > 0

    # ==================== chats ====================

    def create_chat(
        self,
        project_id: str,
        name: str | None = None,
        worktree_path: str | None = None,
        chat_id: str | None = None,
    ) -> ChatRow:
        row = ChatRow(
            id=chat_id or str(uuid.uuid4()),
            project_id=project_id,
            name=name,
            worktree_path=worktree_path,
            created_at=from_epoch(time.time()),
        )
        with self._conn:
            self._conn.execute(
                "INSERT INTO chats (id, name, project_id, worktree_path, created_at) VALUES (?, ?, ?, ?, ?)",
                (row.id, row.name, row.project_id, row.worktree_path, row.created_at.timestamp()),
            )
        return row

    def get_chat(self, chat_id: str) -> ChatRow | None:
        row = self._conn.execute(
            "SELECT id, project_id, name, worktree_path, created_at FROM chats WHERE id = ?",
            (chat_id,),
        ).fetchone()
        if not row:
            return None
        return ChatRow(
            id=row[0],
            project_id=row[1],
            name=row[2],
            worktree_path=row[3],
            created_at=from_epoch(row[4]),
        )

    def delete_chat(self, chat_id: str) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM chats WHERE id = ?", (chat_id,))
        return cursor.rowcount > 0

    # ==================== sub-chats ====================

    def create_sub_chat(
        self,
        chat_id: str,
        name: str | None = None,
        session_id: str | None = None,
        sub_chat_id: str | None = None,
    ) -> SubChatRow:
        now = from_epoch(time.time())
        row = SubChatRow(
            id=sub_chat_id or str(uuid.uuid4()),
            chat_id=chat_id,
            name=name,
            session_id=session_id,
            messages="[]",
            created_at=now,
            updated_at=now,
        )
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO sub_chats (id, name, chat_id, session_id, messages, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (row.id, row.name, row.chat_id, row.session_id, row.messages, now.timestamp(), now.timestamp()),
            )
        return row

    def get_sub_chat(self, sub_chat_id: str) -> SubChatRow | None:
        row = self._conn.execute(
            """
            SELECT id, chat_id, name, session_id, messages, created_at, updated_at
            FROM sub_chats
            WHERE id = ?
            """,
            (sub_chat_id,),
        ).fetchone()
        if not row:
            return None
        return SubChatRow(
            id=row[0],
            chat_id=row[1],
            name=row[2],
            session_id=row[3],
            messages=row[4],
            created_at=from_epoch(row[5]),
            updated_at=from_epoch(row[6]),
        )

    def update_sub_chat_messages(self, sub_chat_id: str, messages: str) -> SubChatRow | None:
        with self._conn:
            cursor = self._conn.execute(
                "UPDATE sub_chats SET messages = ?, updated_at = ? WHERE id = ?",
                (messages, time.time(), sub_chat_id),
            )
        if cursor.rowcount == 0:
            return None
        return self.get_sub_chat(sub_chat_id)

    def delete_sub_chat(self, sub_chat_id: str) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM sub_chats WHERE id = ?", (sub_chat_id,))
        return cursor.rowcount > 0
