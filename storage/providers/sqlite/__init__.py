"""SQLite storage provider implementations."""

from .file_change_repo import SQLiteFileChangeRepo
from .workspace_repo import SQLiteWorkspaceRepo

__all__ = [
    "SQLiteFileChangeRepo",
    "SQLiteWorkspaceRepo",
]
