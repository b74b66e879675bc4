"""SQLite repository for file_changes persistence."""

from __future__ import annotations

import sqlite3
import time
import uuid
from pathlib import Path

from storage.models import FileChangeRow, NewFileChange
from storage.providers.sqlite._schema import connect, ensure_file_changes_table, from_epoch, to_epoch

_COLUMNS = (
    "id, chat_id, sub_chat_id, project_id, operation_type, file_path, old_file_path, "
    "old_content, new_content, worktree_path, timestamp, source, session_id"
)


class SQLiteFileChangeRepo:
    """Repository boundary for the file_changes table.

    Records are append-only: there is no update path, and rows disappear only
    through ON DELETE CASCADE from their chat, sub-chat or project.
    """

    def __init__(self, db_path: str | Path | None = None, conn: sqlite3.Connection | None = None) -> None:
        self._own_conn = conn is None
        self._conn = conn if conn is not None else connect(db_path)
        ensure_file_changes_table(self._conn)

    def close(self) -> None:
        if self._own_conn:
            self._conn.close()

    def insert(self, change: NewFileChange) -> FileChangeRow:
        return self.insert_many([change])[0]

    def insert_many(self, changes: list[NewFileChange]) -> list[FileChangeRow]:
        if not changes:
            return []
        now = time.time()
        params = [self._to_params(change, now) for change in changes]
        # @@@batch-atomic - one transaction per batch; any failing row rolls the whole batch back.
        with self._conn:
            self._conn.executemany(
                f"INSERT INTO file_changes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                params,
            )
        return [self._params_to_row(p) for p in params]

    def list_for_chat(self, chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self._select("chat_id", chat_id, limit)

    def list_for_sub_chat(self, sub_chat_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self._select("sub_chat_id", sub_chat_id, limit)

    def list_for_project(self, project_id: str, limit: int | None = None) -> list[FileChangeRow]:
        return self._select("project_id", project_id, limit)

    def _select(self, column: str, value: str, limit: int | None) -> list[FileChangeRow]:
        # column is always one of the literals above, never caller input
        sql = f"SELECT {_COLUMNS} FROM file_changes WHERE {column} = ? ORDER BY rowid ASC"
        args: tuple = (value,)
        if limit is not None:
            sql += " LIMIT ?"
            args = (value, limit)
        rows = self._conn.execute(sql, args).fetchall()
        return [self._params_to_row(row) for row in rows]

    @staticmethod
    def _to_params(change: NewFileChange, now: float) -> tuple:
        return (
            str(uuid.uuid4()),
            change.chat_id,
            change.sub_chat_id,
            change.project_id,
            change.operation_type,
            change.file_path,
            change.old_file_path,
            change.old_content,
            change.new_content,
            change.worktree_path,
            to_epoch(change.timestamp) if change.timestamp else now,
            change.source,
            change.session_id,
        )

    @staticmethod
    def _params_to_row(row: tuple | sqlite3.Row) -> FileChangeRow:
        return FileChangeRow(
            id=row[0],
            chat_id=row[1],
            sub_chat_id=row[2],
            project_id=row[3],
            operation_type=row[4],
            file_path=row[5],
            old_file_path=row[6],
            old_content=row[7],
            new_content=row[8],
            worktree_path=row[9],
            timestamp=from_epoch(row[10]),
            source=row[11],
            session_id=row[12],
        )
