"""Shared connection and DDL helpers for the SQLite repos."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".changetrail" / "changetrail.db"


def connect(db_path: str | Path | None) -> sqlite3.Connection:
    path = Path(db_path) if db_path is not None else DEFAULT_DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=10, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL")
    # @@@fk-per-connection - sqlite only enforces FKs (and cascades) when enabled on each connection.
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def ensure_workspace_tables(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS projects (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            path TEXT NOT NULL UNIQUE,
            created_at REAL NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS chats (
            id TEXT PRIMARY KEY,
            name TEXT,
            project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            worktree_path TEXT,
            created_at REAL NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS sub_chats (
            id TEXT PRIMARY KEY,
            name TEXT,
            chat_id TEXT NOT NULL REFERENCES chats(id) ON DELETE CASCADE,
            session_id TEXT,
            messages TEXT NOT NULL DEFAULT '[]',
            created_at REAL NOT NULL,
            updated_at REAL NOT NULL
        )
        """
    )
    conn.commit()


def ensure_file_changes_table(conn: sqlite3.Connection) -> None:
    ensure_workspace_tables(conn)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS file_changes (
            id TEXT PRIMARY KEY,
            chat_id TEXT REFERENCES chats(id) ON DELETE CASCADE,
            sub_chat_id TEXT REFERENCES sub_chats(id) ON DELETE CASCADE,
            project_id TEXT NOT NULL REFERENCES projects(id) ON DELETE CASCADE,
            operation_type TEXT NOT NULL,
            file_path TEXT NOT NULL,
            old_file_path TEXT,
            old_content TEXT,
            new_content TEXT,
            worktree_path TEXT,
            timestamp REAL NOT NULL,
            source TEXT,
            session_id TEXT
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_file_changes_chat ON file_changes(chat_id)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_file_changes_sub_chat ON file_changes(sub_chat_id)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_file_changes_project ON file_changes(project_id)")
    conn.commit()


def to_epoch(value: datetime) -> float:
    return value.timestamp()


def from_epoch(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)
